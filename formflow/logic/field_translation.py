"""Label, hint and option-text resolution for field views.

Label precedence: literal label, function label (called with flattened
translations), declared translation key, `<name>Label`, the field name.
Hint precedence: literal hint, declared translation key, `<name>Hint`.
Option text precedence: literal text, option label, translation key, value.
A lookup that echoes its key counts as not found.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from formflow.models.errors import ErrorMap
from formflow.models.field import FieldDefinition, FieldOption
from formflow.logic.component_builders import build_component_config
from formflow.logic.conditional_fields import build_conditional_content
from formflow.logic.field_values import field_value
from formflow.logic.resolvable import resolve
from formflow.logic.sub_fields_renderer import build_sub_fields_html
from formflow.logic.translation import get_translation

logger = logging.getLogger(__name__)


def _flattened(t: Any) -> Dict[str, Any]:
    flattened = getattr(t, "flattened", None)
    return flattened() if callable(flattened) else {}


def resolve_label(field: FieldDefinition, t: Any, flat: Optional[Dict[str, Any]] = None) -> str:
    if isinstance(field.label, str) and field.label:
        return field.label
    if callable(field.label):
        label = resolve(field.label, flat if flat is not None else _flattened(t), fallback=None, rule=f"{field.name}.label")
        if label:
            return label
    if field.translation_key and field.translation_key.label:
        label = get_translation(t, field.translation_key.label)
        if label:
            return label
    return get_translation(t, f"{field.name}Label") or field.name


def resolve_hint(field: FieldDefinition, t: Any) -> Optional[str]:
    if field.hint:
        return field.hint
    if field.translation_key and field.translation_key.hint:
        hint = get_translation(t, field.translation_key.hint)
        if hint:
            return hint
    return get_translation(t, f"{field.name}Hint")


def resolve_option_text(option: FieldOption, t: Any, flat: Optional[Dict[str, Any]] = None) -> str:
    if option.text:
        return option.text
    if option.label is not None:
        text = resolve(option.label, flat if flat is not None else _flattened(t), fallback=None, rule=f"option.{option.value}.label")
        if text:
            return text
    if option.translation_key:
        text = get_translation(t, option.translation_key)
        if text:
            return text
    return option.value


def translate_fields(
    fields: Iterable[FieldDefinition],
    t: Any,
    values: Mapping[str, Any],
    errors: Optional[ErrorMap] = None,
    has_title: bool = False,
    parent_path: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Build one view dict per field with resolved text and component config.

    Choice options that declare sub-fields carry their rendered markup in
    `conditional.html`; otherwise an option's conditional text is used.
    """
    errors = errors or {}
    flat = _flattened(t)
    views: List[Dict[str, Any]] = []
    for index, field in enumerate(fields):
        path = f"{parent_path}.{field.name}" if parent_path else field.name
        label = resolve_label(field, t, flat)
        hint = resolve_hint(field, t)
        value = values[path] if path in values else field_value(field, path, values)

        options: List[Dict[str, Any]] = []
        for option in field.options or []:
            text = resolve_option_text(option, t, flat)
            conditional_html: Optional[str] = None
            if option.sub_fields:
                sub_views = translate_fields(option.sub_fields.values(), t, values, errors, True, path)
                conditional_html = build_sub_fields_html(sub_views) or None
            elif option.conditional_text:
                conditional_html = build_conditional_content(option.conditional_text, flat)
            options.append({"value": option.value, "text": text, "conditional_html": conditional_html})

        error = errors.get(path)
        built = build_component_config(
            field,
            path,
            label,
            hint,
            value,
            options,
            error.message if error else None,
            is_first_field=(index == 0 and not has_title and parent_path is None),
            t=t,
        )
        views.append(
            {
                "name": field.name,
                "path": path,
                "kind": field.kind.value,
                "label": label,
                "hint": hint,
                "error_message": error.message if error else None,
                "options": [{"value": o["value"], "text": o["text"]} for o in options],
                "component": built["component"],
                "component_type": built["component_type"],
            }
        )
    return views


__all__ = ["resolve_label", "resolve_hint", "resolve_option_text", "translate_fields"]
