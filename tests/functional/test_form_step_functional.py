"""Functional tests for step orchestration and check-your-answers rows."""

from __future__ import annotations

import pytest

from formflow.journeys.contact_details import contact_details_journey
from formflow.logic.form_step import FormStep
from formflow.logic.repository_records import MemoryStore
from formflow.logic.summary_rows import build_summary_rows, format_date_answer
from formflow.logic.translation import Translator
from formflow.models.field import FormStepConfig, parse_fields
from formflow.models.flow import JourneyFlow

PLAIN = Translator({}, "en", log_missing=False)


def _single_step(fields) -> FormStep:
    flow = JourneyFlow(journey_name="extras", step_order=["choose", "done"], base_path="/extras/:caseReference")
    config = FormStepConfig(step_name="choose", journey="extras", fields=parse_fields(fields))
    return FormStep(config, flow, MemoryStore("extras"))


@pytest.fixture
def optional_checkbox() -> FormStep:
    return _single_step([
        {
            "name": "extras",
            "type": "checkbox",
            "options": [
                {"value": "a"},
                {"value": "b", "subFields": {"bDetails": {"name": "bDetails", "type": "text", "required": True}}},
            ],
        }
    ])


@pytest.fixture
def optional_radio() -> FormStep:
    return _single_step([
        {
            "name": "contact",
            "type": "radio",
            "options": [
                {"value": "email", "subFields": {"address": {"name": "address", "type": "text", "required": True}}},
                {"value": "none"},
            ],
        }
    ])


def test_unticking_every_box_releases_its_sub_fields(optional_checkbox):
    first = optional_checkbox.submit("c1", {"extras": ["b"], "extras.bDetails": "x"}, PLAIN)
    assert first.status == 303

    second = optional_checkbox.submit("c1", {}, PLAIN)
    assert second.status == 303
    assert second.redirect_url == "/extras/c1/done"
    assert optional_checkbox.store.load("c1").data == {"choose": {"extras": []}}


def test_blank_optional_radio_releases_its_sub_fields(optional_radio):
    assert optional_radio.submit("c1", {"contact": "email", "contact.address": "a@b.co"}, PLAIN).status == 303
    assert optional_radio.submit("c1", {}, PLAIN).status == 303
    assert optional_radio.store.load("c1").data == {"choose": {"contact": ""}}


def test_live_sub_field_still_blocks(optional_checkbox):
    outcome = optional_checkbox.submit("c1", {"extras": "b"}, PLAIN)
    assert outcome.status == 400
    assert outcome.content["errors"] == {"extras.bDetails": "This field is required"}
    assert optional_checkbox.store.load("c1").version == 0


def test_format_date_answer():
    t = Translator({"date": {"monthNames": {"3": "Mawrth"}}}, "cy")
    assert format_date_answer({"day": "27", "month": "3", "year": "1985"}, t) == "27 Mawrth 1985"
    assert format_date_answer({"day": "31", "month": "2", "year": "1985"}, PLAIN) == "31/2/1985"


def test_summary_rows_follow_step_order_and_sub_fields():
    journey = contact_details_journey()
    data = {
        "support-needs": {"supportNeeds": ["hearing", "other"], "supportNeeds.otherDetails": "Large print"},
        "enter-user-details": {
            "firstName": "Ann",
            "lastName": "",
            "contactMethod": "email",
            "contactMethod.emailAddress": "ann@example.com",
        },
        "date-of-birth": {"dateOfBirth": {"day": "27", "month": "3", "year": "1985"}},
    }
    resources = {
        "firstNameLabel": "First name",
        "contactMethodLabel": "How should we contact you?",
        "emailAddressLabel": "Email address",
        "dateOfBirthLabel": "Date of birth",
        "supportNeedsLabel": "Select all that apply",
        "otherDetailsLabel": "Tell us what support you need",
        "contactMethod": {"email": "Email"},
        "supportNeeds": {"hearing": "Hearing support", "other": "Something else"},
        "date": {"monthNames": {"3": "March"}},
        "change": "Change",
    }
    t = Translator(resources, "en", log_missing=False)

    rows = build_summary_rows(journey.flow, journey.steps, "c9", data, lambda _step: t, language="cy")

    assert [(r["key"]["text"], r["value"]["text"]) for r in rows] == [
        ("First name", "Ann"),
        ("How should we contact you?", "Email"),
        ("Email address", "ann@example.com"),
        ("Date of birth", "27 March 1985"),
        ("Select all that apply", "Hearing support, Something else"),
        ("Tell us what support you need", "Large print"),
    ]
    action = rows[0]["actions"]["items"][0]
    assert action["href"] == "/journeys/contact-details/cases/c9/steps/enter-user-details?lang=cy"
    assert action["visuallyHiddenText"] == "first name"
    assert rows[-1]["actions"]["items"][0]["href"].endswith("/steps/support-needs?lang=cy")


def test_summary_rows_skip_unanswered_steps():
    journey = contact_details_journey()
    assert build_summary_rows(journey.flow, journey.steps, "c9", {}, lambda _step: PLAIN) == []
