"""FieldKind enumeration for the closed set of form field kinds.

Each kind dictates which field attributes are meaningful, which validation
rules apply and which renderer component the field maps to.
"""

from __future__ import annotations

from enum import Enum
from typing import NoReturn


class FieldKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    CHARACTER_COUNT = "character-count"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"


class ComponentType(str, Enum):
    INPUT = "input"
    TEXTAREA = "textarea"
    CHARACTER_COUNT = "characterCount"
    RADIOS = "radios"
    CHECKBOXES = "checkboxes"
    DATE_INPUT = "dateInput"


TEXT_KINDS = frozenset({FieldKind.TEXT, FieldKind.TEXTAREA, FieldKind.CHARACTER_COUNT})
CHOICE_KINDS = frozenset({FieldKind.RADIO, FieldKind.CHECKBOX})


def assert_never(kind: object) -> NoReturn:
    """Exhaustiveness guard for `match` statements over FieldKind."""
    raise ValueError(f"unhandled field kind: {kind!r}")


__all__ = ["FieldKind", "ComponentType", "TEXT_KINDS", "CHOICE_KINDS", "assert_never"]
