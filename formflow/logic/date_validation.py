"""Date validation for day/month/year form fields.

Checks run in a fixed order and the first failure is reported:
required parts, per-part format and range (day, month, year), calendar
validity, then the no-future-date restriction.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Any, Callable, List, Mapping, Optional

from formflow.models.errors import DATE_PARTS, DatePart, FieldError

DEFAULT_DATE_ERROR_MESSAGE = "Enter a valid date"

_DEFAULT_MESSAGES = {
    "errors.date.required": "Enter a date",
    "errors.date.missingOne": "The date must include a {{missingField}}",
    "errors.date.missingTwo": "The date must include a {{first}} and a {{second}}",
    "errors.date.notRealDate": DEFAULT_DATE_ERROR_MESSAGE,
    "errors.date.futureDate": "The date must be in the past",
}

# maxLength, min, max, no leading zero
_PART_CONSTRAINTS = {
    "day": (2, 1, 31, False),
    "month": (2, 1, 12, False),
    "year": (4, 1, 9999, True),
}

_DIGITS = re.compile(r"^[0-9]+$")
_DAYS_IN_MONTH = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

Translate = Callable[..., Any]


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(month: int, year: int) -> int:
    """Days in `month` of `year`; 0 for a month outside 1-12."""
    if month < 1 or month > 12:
        return 0
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def _message(key: str, translate: Optional[Translate], **params: str) -> str:
    if translate is not None:
        translated = translate(key, **params) if params else translate(key)
        if isinstance(translated, str) and translated != key:
            return translated
    template = _DEFAULT_MESSAGES.get(key, DEFAULT_DATE_ERROR_MESSAGE)
    for name, value in params.items():
        template = template.replace("{{" + name + "}}", value)
    return template


def _missing_parts_message(missing: List[DatePart], translate: Optional[Translate]) -> str:
    if len(missing) == 1:
        return _message("errors.date.missingOne", translate, missingField=missing[0])
    if len(missing) == 2:
        return _message("errors.date.missingTwo", translate, first=missing[0], second=missing[1])
    return _message("errors.date.required", translate)


def _part_is_invalid(part: DatePart, value: str) -> bool:
    if not value:
        return False
    max_len, low, high, no_leading_zero = _PART_CONSTRAINTS[part]
    if not _DIGITS.match(value) or len(value) > max_len or (no_leading_zero and value.startswith("0")):
        return True
    return not low <= int(value) <= high


def validate_date_field(
    day: str,
    month: str,
    year: str,
    required: bool,
    translate: Optional[Translate] = None,
    no_future_date: bool = False,
    translations: Optional[Mapping[str, Any]] = None,
    today: Optional[dt.date] = None,
) -> Optional[FieldError]:
    """Validate a date entered as three parts; return None when valid.

    `translations` may carry a `dateFutureDate` message which takes priority
    over `translate` for the future-date failure only.
    """
    values = {"day": (day or "").strip(), "month": (month or "").strip(), "year": (year or "").strip()}
    missing: List[DatePart] = [part for part in DATE_PARTS if not values[part]]

    if len(missing) == len(DATE_PARTS) and not required:
        return None
    if required and missing:
        return FieldError(message=_missing_parts_message(missing, translate), erroneous_parts=missing)

    for part in DATE_PARTS:
        if _part_is_invalid(part, values[part]):
            return FieldError(message=_message("errors.date.notRealDate", translate), erroneous_parts=[part])

    if missing:
        return None

    d, m, y = int(values["day"]), int(values["month"]), int(values["year"])
    if d > days_in_month(m, y):
        return FieldError(message=_message("errors.date.notRealDate", translate))

    if no_future_date and dt.date(y, m, d) >= (today or dt.date.today()):
        override = (translations or {}).get("dateFutureDate")
        message = override if isinstance(override, str) and override else _message("errors.date.futureDate", translate)
        return FieldError(message=message)

    return None


def get_date_translation_key(nested_key: str) -> Optional[str]:
    """Map a nested date error key to its flat translation key."""
    return {
        "required": "dateRequired",
        "missingOne": "dateMissingOne",
        "missingTwo": "dateMissingTwo",
        "futureDate": "dateFutureDate",
    }.get(nested_key)


__all__ = [
    "DEFAULT_DATE_ERROR_MESSAGE",
    "is_leap_year",
    "days_in_month",
    "validate_date_field",
    "get_date_translation_key",
]
