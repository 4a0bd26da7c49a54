"""Normalization of raw submitted values into canonical per-kind shapes.

- checkbox: list of strings
- date: {"day", "month", "year"} strings
- text kinds and radio: the raw value (string) or "" when absent
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from formflow.models.field import FieldDefinition
from formflow.models.field_kind import FieldKind
from formflow.models.errors import DATE_PARTS


def normalize_checkbox_value(value: Any) -> List[str]:
    """Return a checkbox value as a list of strings.

    Some transports encode indexed form fields (`name[0]=a&name[1]=b`) as a
    list of objects with numeric keys, e.g. `[{"0": "a", "1": "b"}]`; every
    string-valued property of every object in such a list is extracted.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        if value and isinstance(value[0], dict):
            flattened: List[str] = []
            for item in value:
                if isinstance(item, dict):
                    flattened.extend(v for v in item.values() if isinstance(v, str))
            return flattened
        return list(value)
    return []


def empty_date() -> Dict[str, str]:
    return {part: "" for part in DATE_PARTS}


def resolve_date_value(data: Mapping[str, Any], path: str) -> Dict[str, str]:
    """Resolve the structured date for `path` from saved or submitted data.

    Tries an already-structured value, then discrete `<path>-day/-month/-year`
    keys, then falls back to all-empty parts.
    """
    saved = data.get(path)
    if isinstance(saved, Mapping):
        return {part: str(saved.get(part) or "") for part in DATE_PARTS}
    if any(data.get(f"{path}-{part}") for part in DATE_PARTS):
        return {part: str(data.get(f"{path}-{part}") or "") for part in DATE_PARTS}
    return empty_date()


def field_value(field: FieldDefinition, path: str, data: Mapping[str, Any]) -> Any:
    """Return the canonical value of one field at `path`."""
    if field.kind is FieldKind.CHECKBOX:
        return normalize_checkbox_value(data.get(path))
    if field.kind is FieldKind.DATE:
        return resolve_date_value(data, path)
    value = data.get(path)
    return "" if value is None else value


def iter_field_paths(fields: Iterable[FieldDefinition], parent: str | None = None):
    """Yield (path, field) for every field in the tree.

    Sub-fields are yielded after their parent, in option order, whether or
    not the owning option is selected.
    """
    for field in fields:
        path = f"{parent}.{field.name}" if parent else field.name
        yield path, field
        for option in field.options or []:
            if option.sub_fields:
                yield from iter_field_paths(option.sub_fields.values(), path)


def build_field_values(fields: Iterable[FieldDefinition], saved: Mapping[str, Any] | None) -> Dict[str, Any]:
    """Build the canonical value map for every field path, sub-fields included."""
    saved = saved or {}
    return {path: field_value(field, path, saved) for path, field in iter_field_paths(fields)}


def normalize_checkbox_fields(body: Mapping[str, Any], fields: Iterable[FieldDefinition]) -> Dict[str, Any]:
    """Return a copy of `body` with every present checkbox value normalized to a list."""
    normalized = dict(body)
    for path, field in iter_field_paths(fields):
        if field.kind is FieldKind.CHECKBOX and path in normalized:
            normalized[path] = normalize_checkbox_value(normalized[path])
    return normalized


def with_empty_answers(body: Mapping[str, Any], fields: Iterable[FieldDefinition]) -> Dict[str, Any]:
    """Return a copy of `body` where every omitted field path holds its empty value.

    An unticked checkbox group or an unanswered radio is absent from a form
    post; it becomes `[]` or `""` so earlier answers cannot stand in for it.
    Dates are left alone since their parts arrive as `<path>-day` etc.
    """
    filled = dict(body)
    for path, field in iter_field_paths(fields):
        if path in filled or field.kind is FieldKind.DATE:
            continue
        filled[path] = [] if field.kind is FieldKind.CHECKBOX else ""
    return filled


def process_field_data(body: Mapping[str, Any], fields: Iterable[FieldDefinition]) -> Dict[str, Any]:
    """Return a copy of `body` ready for persistence.

    Checkbox values become lists and date parts are consolidated under the
    field path with trimmed parts (`<path>-day` etc. are removed).
    """
    processed = dict(body)
    for path, field in iter_field_paths(fields):
        if field.kind is FieldKind.CHECKBOX:
            if processed.get(path):
                processed[path] = normalize_checkbox_value(processed[path])
        elif field.kind is FieldKind.DATE:
            date = resolve_date_value(processed, path)
            processed[path] = {part: date[part].strip() for part in DATE_PARTS}
            for part in DATE_PARTS:
                processed.pop(f"{path}-{part}", None)
    return processed


__all__ = [
    "normalize_checkbox_value",
    "empty_date",
    "resolve_date_value",
    "field_value",
    "iter_field_paths",
    "build_field_values",
    "normalize_checkbox_fields",
    "with_empty_answers",
    "process_field_data",
]
