"""Conditional visibility of nested sub-fields.

Decides, from current answers, which options of a radio/checkbox field are
selected and therefore which of their sub-fields are live (rendered and
validated). Also owns the dotted field-path convention for nested fields.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Set, Union

from formflow.models.field import FieldDefinition
from formflow.models.field_kind import FieldKind
from formflow.logic.field_values import iter_field_paths, normalize_checkbox_value
from formflow.logic.resolvable import resolve


def is_option_selected(value: Any, option_value: str, kind: FieldKind | str | None) -> bool:
    """Return True when `option_value` is selected in `value`.

    radio: strict equality; checkbox: membership in the normalized list.
    Any other kind is never selected.
    """
    if kind == FieldKind.RADIO:
        return value == option_value
    if kind == FieldKind.CHECKBOX:
        return option_value in normalize_checkbox_value(value)
    return False


def get_sub_fields_for_option(
    field: FieldDefinition, option_value: str, value: Any
) -> Optional[Dict[str, FieldDefinition]]:
    """Return the sub-fields of one option when that option is selected."""
    if field.kind not in (FieldKind.RADIO, FieldKind.CHECKBOX) or not field.options:
        return None
    option = next((opt for opt in field.options if opt.value == option_value), None)
    if option is None or not option.sub_fields:
        return None
    if not is_option_selected(value, option_value, field.kind):
        return None
    return dict(option.sub_fields)


def get_visible_sub_fields(field: FieldDefinition, value: Any) -> Dict[str, FieldDefinition]:
    """Merge the sub-fields of every selected option.

    When two selected options declare a sub-field with the same key, the
    later option in declaration order wins.
    """
    visible: Dict[str, FieldDefinition] = {}
    if field.kind not in (FieldKind.RADIO, FieldKind.CHECKBOX) or not field.options:
        return visible
    for option in field.options:
        if option.sub_fields and option.value and is_option_selected(value, option.value, field.kind):
            visible.update(option.sub_fields)
    return visible


def should_validate_field(
    field: FieldDefinition,
    parent_name: Optional[str],
    parent_option_value: Optional[str],
    form_data: Mapping[str, Any],
    all_form_data: Mapping[str, Any],
    parent_kind: FieldKind | str | None = None,
) -> bool:
    """Return True when `field` is live.

    Top-level fields are always live. For nested fields the parent's value is
    taken from the journey-wide answers first and the current submission
    second; selection is then re-checked against the parent's kind. Without a
    known parent kind both radio and checkbox selection are accepted.
    """
    if not parent_name or not parent_option_value:
        return True
    parent_value = all_form_data.get(parent_name) or form_data.get(parent_name)
    if parent_kind is not None:
        return is_option_selected(parent_value, parent_option_value, parent_kind)
    return is_option_selected(parent_value, parent_option_value, FieldKind.RADIO) or is_option_selected(
        parent_value, parent_option_value, FieldKind.CHECKBOX
    )


def live_field_paths(
    fields: Iterable[FieldDefinition],
    data: Mapping[str, Any],
    parent_path: Optional[str] = None,
) -> Set[str]:
    """Return the paths of every top-level field and every live sub-field."""
    live: Set[str] = set()
    for field in fields:
        path = get_nested_field_name(parent_path, field.name) if parent_path else field.name
        live.add(path)
        for option in field.options or []:
            if option.sub_fields and is_option_selected(data.get(path), option.value, field.kind):
                live |= live_field_paths(option.sub_fields.values(), data, path)
    return live


def drop_hidden_sub_fields(data: Mapping[str, Any], fields: Iterable[FieldDefinition]) -> Dict[str, Any]:
    """Return a copy of `data` without answers to sub-fields that are not live.

    Switching to another option discards whatever was entered under the
    option left behind. Keys that are not field paths are kept.
    """
    fields = list(fields)
    hidden = {path for path, _field in iter_field_paths(fields)} - live_field_paths(fields, data)
    return {key: value for key, value in data.items() if key not in hidden}


def build_conditional_content(
    conditional_text: Union[str, Callable[[Dict[str, Any]], str], None],
    translations: Dict[str, Any],
) -> Optional[str]:
    """Resolve an option's conditional text (literal or function of translations)."""
    if not conditional_text:
        return None
    return resolve(conditional_text, translations, fallback=None, rule="conditional_text")


def get_nested_field_name(parent_field_name: str, sub_field_name: str) -> str:
    return f"{parent_field_name}.{sub_field_name}"


def parse_nested_field_name(nested_field_name: str) -> Optional[Dict[str, str]]:
    """Split `parent.child` into its parts; None for zero or several dots."""
    parts = nested_field_name.split(".")
    if len(parts) != 2:
        return None
    return {"parent_field_name": parts[0], "sub_field_name": parts[1]}


__all__ = [
    "is_option_selected",
    "get_sub_fields_for_option",
    "get_visible_sub_fields",
    "should_validate_field",
    "live_field_paths",
    "drop_hidden_sub_fields",
    "build_conditional_content",
    "get_nested_field_name",
    "parse_nested_field_name",
]
