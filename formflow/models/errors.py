"""Validation error value types.

An ErrorMap maps a field path (`parent.child` for sub-fields) to a
`FieldError`. Date fields may name the erroneous parts so that summary links
can anchor to the exact input.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

DatePart = Literal["day", "month", "year"]
DATE_PARTS: tuple[DatePart, ...] = ("day", "month", "year")


class FieldError(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    erroneous_parts: Optional[List[DatePart]] = None


ErrorMap = Dict[str, FieldError]


class ErrorSummaryItem(BaseModel):
    text: str
    href: str


class ErrorSummary(BaseModel):
    title_text: str
    error_list: List[ErrorSummaryItem]


def error_messages(errors: ErrorMap) -> Dict[str, str]:
    """Flatten an ErrorMap to path -> message for templates."""
    return {path: err.message for path, err in errors.items()}


__all__ = [
    "DatePart",
    "DATE_PARTS",
    "FieldError",
    "ErrorMap",
    "ErrorSummaryItem",
    "ErrorSummary",
    "error_messages",
]
