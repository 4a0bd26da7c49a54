"""Domain exceptions raised across the engine boundary.

Validation outcomes and navigation results are returned as data; only the
conditions below are raised, and the HTTP layer maps each to problem+json.
"""

from __future__ import annotations


class FormflowError(Exception):
    """Base class for errors raised by the engine and its stores."""


class UnknownJourneyError(FormflowError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"unknown journey: {slug}")
        self.slug = slug


class UnknownStepError(FormflowError):
    def __init__(self, step: str) -> None:
        super().__init__(f"unknown step: {step}")
        self.step = step


class NavigationDeadEnd(FormflowError):
    """No next step could be resolved; indicates a flow configuration defect."""

    def __init__(self, step: str) -> None:
        super().__init__(f"unable to determine next step after {step}")
        self.step = step


class StoreError(FormflowError):
    """A record could not be loaded or saved."""


class VersionConflictError(StoreError):
    def __init__(self, case_ref: str, expected: int, actual: int) -> None:
        super().__init__(f"version conflict for {case_ref}: expected {expected}, stored {actual}")
        self.case_ref = case_ref
        self.expected = expected
        self.actual = actual


__all__ = [
    "FormflowError",
    "UnknownJourneyError",
    "UnknownStepError",
    "NavigationDeadEnd",
    "StoreError",
    "VersionConflictError",
]
