"""Contact details journey.

Collects a name and preferred contact method, a postal address when the
user asks to be contacted by post, a date of birth and any support needs.
"""

from __future__ import annotations

from formflow.models.field import FormStepConfig, TranslationKeys, parse_fields
from formflow.models.flow import JourneyFlow, StepConfig, StepRoute
from formflow.journeys.registry import JourneyDefinition

SLUG = "contact-details"
BASE_PATH = "/journeys/contact-details/cases/:caseReference/steps"

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = r"^\+?[0-9 ]{10,15}$"
POSTCODE_PATTERN = r"^[A-Za-z]{1,2}[0-9][A-Za-z0-9]? ?[0-9][A-Za-z]{2}$"


def _wants_post(answers, step_data) -> bool:
    return (step_data or answers).get("contactMethod") == "post"


def _before_date_of_birth(answers) -> str:
    return "enter-address" if answers.get("contactMethod") == "post" else "enter-user-details"


USER_DETAILS_FIELDS = parse_fields([
    {"name": "firstName", "type": "text", "required": True, "maxLength": 50},
    {"name": "lastName", "type": "text", "required": True, "maxLength": 50},
    {
        "name": "contactMethod",
        "type": "radio",
        "required": True,
        "options": [
            {
                "value": "email",
                "translationKey": "contactMethod.email",
                "subFields": {
                    "emailAddress": {
                        "name": "emailAddress",
                        "type": "text",
                        "required": True,
                        "pattern": EMAIL_PATTERN,
                        "maxLength": 254,
                    },
                },
            },
            {
                "value": "phone",
                "translationKey": "contactMethod.phone",
                "subFields": {
                    "phoneNumber": {
                        "name": "phoneNumber",
                        "type": "text",
                        "required": True,
                        "pattern": PHONE_PATTERN,
                        "attributes": {"autocomplete": "tel"},
                    },
                },
            },
            {"value": "post", "translationKey": "contactMethod.post"},
        ],
    },
])

ADDRESS_FIELDS = parse_fields([
    {"name": "addressLine1", "type": "text", "required": True, "maxLength": 100},
    {"name": "town", "type": "text", "required": True, "maxLength": 60},
    {"name": "postcode", "type": "text", "required": True, "pattern": POSTCODE_PATTERN, "classes": "govuk-input--width-10"},
])

DATE_OF_BIRTH_FIELDS = parse_fields([
    {"name": "dateOfBirth", "type": "date", "required": True, "noFutureDate": True},
])

SUPPORT_NEEDS_FIELDS = parse_fields([
    {
        "name": "supportNeeds",
        "type": "checkbox",
        "required": True,
        "options": [
            {"value": "none", "translationKey": "supportNeeds.none"},
            {"value": "hearing", "translationKey": "supportNeeds.hearing"},
            {
                "value": "other",
                "translationKey": "supportNeeds.other",
                "subFields": {
                    "otherDetails": {
                        "name": "otherDetails",
                        "type": "character-count",
                        "required": True,
                        "maxLength": 500,
                    },
                },
            },
        ],
        "validate": lambda value, form, all_data: (
            "errors.supportNeeds.exclusive" if "none" in value and len(value) > 1 else None
        ),
    },
])


def contact_details_journey() -> JourneyDefinition:
    flow = JourneyFlow(
        journey_name="contactDetails",
        base_path=BASE_PATH,
        step_order=[
            "enter-user-details",
            "enter-address",
            "date-of-birth",
            "support-needs",
            "check-answers",
            "application-submitted",
        ],
        steps={
            "enter-user-details": StepConfig(
                routes=[StepRoute(next_step="enter-address", condition=_wants_post)],
                default_next="date-of-birth",
            ),
            "enter-address": StepConfig(
                default_next="date-of-birth",
                previous_step="enter-user-details",
                dependencies=["enter-user-details"],
            ),
            "date-of-birth": StepConfig(
                previous_step=_before_date_of_birth,
                dependencies=["enter-user-details"],
            ),
            "support-needs": StepConfig(dependencies=["date-of-birth"]),
            "check-answers": StepConfig(dependencies=["support-needs"]),
            "application-submitted": StepConfig(dependencies=["check-answers"]),
        },
    )
    steps = {
        "enter-user-details": FormStepConfig(
            step_name="enter-user-details", journey=SLUG, fields=USER_DETAILS_FIELDS,
        ),
        "enter-address": FormStepConfig(
            step_name="enter-address", journey=SLUG, fields=ADDRESS_FIELDS,
        ),
        "date-of-birth": FormStepConfig(
            step_name="date-of-birth", journey=SLUG, fields=DATE_OF_BIRTH_FIELDS,
        ),
        "support-needs": FormStepConfig(
            step_name="support-needs", journey=SLUG, fields=SUPPORT_NEEDS_FIELDS,
        ),
        "check-answers": FormStepConfig(
            step_name="check-answers",
            journey=SLUG,
            fields=[],
            translation_keys=TranslationKeys(page_title="pageTitle", content="content"),
            show_cancel_button=True,
            show_summary=True,
        ),
        "application-submitted": FormStepConfig(
            step_name="application-submitted",
            journey=SLUG,
            fields=[],
            translation_keys=TranslationKeys(page_title="pageTitle", content="content"),
        ),
    }
    return JourneyDefinition(slug=SLUG, flow=flow, steps=steps)


__all__ = ["SLUG", "BASE_PATH", "contact_details_journey"]
