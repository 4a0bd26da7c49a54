"""Page view model for one form step."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from formflow.models.errors import ErrorMap, error_messages
from formflow.models.field import FormStepConfig
from formflow.logic.error_summary import build_error_summary
from formflow.logic.field_translation import translate_fields
from formflow.logic.field_values import build_field_values
from formflow.logic.translation import get_translation


def build_form_content(
    step: FormStepConfig,
    t: Any,
    data: Optional[Mapping[str, Any]] = None,
    errors: Optional[ErrorMap] = None,
) -> Dict[str, Any]:
    """Assemble fields, values, titles and button labels for a step.

    `data` is either the saved step answers or the rejected submission being
    re-displayed; `errors` is the ErrorMap from validation, if any.
    """
    data = data or {}
    errors = errors or {}
    field_values = build_field_values(step.fields, data)
    title = get_translation(t, "title") or get_translation(t, "question")
    keys = step.translation_keys
    summary = build_error_summary(errors, step.fields, t)

    return {
        "step": step.step_name,
        "field_values": field_values,
        "fields": translate_fields(step.fields, t, field_values, errors, has_title=bool(title)),
        "title": title,
        "page_title": get_translation(t, keys.page_title) if keys and keys.page_title else None,
        "content": get_translation(t, keys.content) if keys and keys.content else None,
        "buttons": {
            "continue": get_translation(t, "buttons.continue", "Continue"),
            "save_for_later": get_translation(t, "buttons.saveForLater", "Save for later"),
            "cancel": get_translation(t, "buttons.cancel", "Cancel") if step.show_cancel_button else None,
        },
        "back": get_translation(t, "back", "Back"),
        "service_name": get_translation(t, "serviceName"),
        "errors": error_messages(errors),
        "error_summary": summary.model_dump() if summary else None,
    }


__all__ = ["build_form_content"]
