"""Aggregated error summary with per-field anchors."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from formflow.models.errors import ErrorMap, ErrorSummary, ErrorSummaryItem
from formflow.models.field import FieldDefinition
from formflow.models.field_kind import FieldKind
from formflow.logic.field_values import iter_field_paths
from formflow.logic.translation import get_translation

DEFAULT_SUMMARY_TITLE = "There is a problem"


def error_anchor(path: str, field: Optional[FieldDefinition], erroneous_parts=None) -> str:
    """Return the element id a summary link should target.

    Date fields anchor to the first erroneous part, or the day input when no
    part is singled out; every other kind anchors to the field path.
    """
    if field is not None and field.kind is FieldKind.DATE:
        part = erroneous_parts[0] if erroneous_parts else "day"
        return f"{path}-{part}"
    return path


def build_error_summary(
    errors: ErrorMap,
    fields: Iterable[FieldDefinition],
    t: Any = None,
) -> Optional[ErrorSummary]:
    if not errors:
        return None
    by_path = dict(iter_field_paths(fields))
    items = [
        ErrorSummaryItem(
            text=error.message,
            href=f"#{error_anchor(path, by_path.get(path), error.erroneous_parts)}",
        )
        for path, error in errors.items()
    ]
    title = get_translation(t, "errors.title") or DEFAULT_SUMMARY_TITLE
    return ErrorSummary(title_text=title, error_list=items)


__all__ = ["DEFAULT_SUMMARY_TITLE", "error_anchor", "build_error_summary"]
