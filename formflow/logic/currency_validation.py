"""Currency amount validation usable as a field `validate` hook.

Returns None when valid, otherwise an error token `<prefix>.<reason>` that
each step resolves to its own message.
"""

from __future__ import annotations

import re
from typing import Any, Optional

_AMOUNT = re.compile(r"^(\d{1,10})\.(\d{2})$")


def validate_currency_amount(
    value: Any,
    error_prefix: str,
    max_amount: float = 1_000_000_000,
    min_amount: float = 0,
) -> Optional[str]:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        # empty values are left to the required rule
        return None
    normalized = trimmed.replace(",", "")
    try:
        numeric = float(normalized)
    except ValueError:
        numeric = None
    if numeric is not None:
        if numeric < min_amount:
            return f"{error_prefix}.negativeAmount"
        if numeric > max_amount:
            return f"{error_prefix}.largeAmount"
    if not _AMOUNT.match(normalized):
        return f"{error_prefix}.format"
    return None


def currency_rule(error_prefix: str, max_amount: float = 1_000_000_000, min_amount: float = 0):
    """Build a `validate` hook bound to one error prefix."""

    def _validate(value: Any, _form_data: dict, _all_data: dict) -> Optional[str]:
        return validate_currency_amount(value, error_prefix, max_amount, min_amount)

    return _validate


__all__ = ["validate_currency_amount", "currency_rule"]
