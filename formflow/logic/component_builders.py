"""Renderer-agnostic component configuration per field kind.

Produces the `{component, component_type}` pair consumed by the template
layer. `component` is a plain attribute bag (id, name, label, hint, error,
value, classes, attributes, and for choice fields a list of items).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from formflow.models.field import FieldDefinition
from formflow.models.field_kind import ComponentType, FieldKind, assert_never
from formflow.logic.field_values import empty_date, normalize_checkbox_value


def _fieldset_legend(label: str, is_first_field: bool) -> Dict[str, Any]:
    return {
        "legend": {
            "text": label,
            "isPageHeading": is_first_field,
            "classes": "govuk-fieldset__legend--l" if is_first_field else "",
        }
    }


def _choice_items(
    options: List[Dict[str, Any]],
    is_checked,
) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    for option in options:
        item: Dict[str, Any] = {
            "value": option["value"],
            "text": option["text"],
            "checked": is_checked(option["value"]),
        }
        if option.get("conditional_html"):
            item["conditional"] = {"html": option["conditional_html"]}
        items.append(item)
    return items


def build_component_config(
    field: FieldDefinition,
    path: str,
    label: str,
    hint: Optional[str],
    value: Any,
    options: Optional[List[Dict[str, Any]]],
    error_text: Optional[str],
    is_first_field: bool,
    t: Any = None,
) -> Dict[str, Any]:
    """Return `{"component": {...}, "component_type": "<type>"}` for one field.

    `options` are already-translated `{value, text, conditional_html?}` dicts.
    """
    component: Dict[str, Any] = {
        "id": path,
        "name": path,
        "label": {"text": label},
        "hint": {"text": hint} if hint else None,
        "errorMessage": {"text": error_text} if error_text else None,
        "classes": field.classes or ("govuk-!-width-three-quarters" if field.kind is FieldKind.TEXT else None),
        "attributes": dict(field.attributes),
    }
    if field.label_classes:
        component["label"]["classes"] = field.label_classes

    if field.kind is FieldKind.TEXT:
        component["value"] = value or ""
        component_type = ComponentType.INPUT
    elif field.kind is FieldKind.TEXTAREA:
        component["value"] = value or ""
        component["rows"] = field.attributes.get("rows", 5)
        component["maxlength"] = field.max_length
        component_type = ComponentType.TEXTAREA
    elif field.kind is FieldKind.CHARACTER_COUNT:
        component["value"] = value or ""
        component["rows"] = field.attributes.get("rows", 5)
        component["maxlength"] = field.max_length
        component["label"] = {"text": label, "isPageHeading": is_first_field}
        if field.max_length and t is not None:
            messages = t("characterCount", return_objects=True)
            if isinstance(messages, dict):
                for key in ("charactersUnderLimitText", "charactersAtLimitText", "charactersOverLimitText"):
                    if key in messages:
                        component[key] = messages[key]
        component_type = ComponentType.CHARACTER_COUNT
    elif field.kind is FieldKind.RADIO:
        selected = value or ""
        component["fieldset"] = _fieldset_legend(label, is_first_field)
        component["items"] = _choice_items(options or [], lambda v: selected == v)
        component_type = ComponentType.RADIOS
    elif field.kind is FieldKind.CHECKBOX:
        selected_values = normalize_checkbox_value(value)
        component["fieldset"] = _fieldset_legend(label, is_first_field)
        component["items"] = _choice_items(options or [], lambda v: v in selected_values)
        component_type = ComponentType.CHECKBOXES
    elif field.kind is FieldKind.DATE:
        date = value if isinstance(value, dict) else empty_date()
        component["namePrefix"] = path
        component["idPrefix"] = path
        component["fieldset"] = _fieldset_legend(label, is_first_field)
        component["items"] = [
            {
                "name": part,
                "label": t(f"date.{part}", default=part.capitalize()) if t is not None else part.capitalize(),
                "value": date.get(part) or "",
                "classes": "govuk-input--width-4" if part == "year" else "govuk-input--width-2",
                "attributes": {"maxlength": 4 if part == "year" else 2, "inputmode": "numeric"},
            }
            for part in ("day", "month", "year")
        ]
        component_type = ComponentType.DATE_INPUT
    else:
        assert_never(field.kind)

    return {"component": component, "component_type": component_type.value}


__all__ = ["build_component_config"]
