"""Central error mapping for domain exceptions.

Single source of truth for mapping exception classes to problem+json codes,
titles and HTTP statuses. Handlers look classes up here instead of
hardcoding strings or numbers; the most specific class wins.
"""

from __future__ import annotations

from formflow.exceptions import (
    NavigationDeadEnd,
    StoreError,
    UnknownJourneyError,
    UnknownStepError,
    VersionConflictError,
)

DOMAIN_ERROR_MAP = {
    UnknownJourneyError: {"code": "STEP_NOT_FOUND", "status": 404, "title": "Not Found"},
    UnknownStepError: {"code": "STEP_NOT_FOUND", "status": 404, "title": "Not Found"},
    NavigationDeadEnd: {"code": "NAVIGATION_DEAD_END", "status": 500, "title": "Internal Server Error"},
    VersionConflictError: {"code": "STORE_VERSION_CONFLICT", "status": 409, "title": "Conflict"},
    StoreError: {"code": "STORE_UNAVAILABLE", "status": 503, "title": "Service Unavailable"},
}

DEFAULT_ERROR = {"code": "INTERNAL_ERROR", "status": 500, "title": "Internal Server Error"}


def mapping_for(exc: BaseException) -> dict:
    for cls in type(exc).__mro__:
        if cls in DOMAIN_ERROR_MAP:
            return DOMAIN_ERROR_MAP[cls]
    return DEFAULT_ERROR


__all__ = ["DOMAIN_ERROR_MAP", "DEFAULT_ERROR", "mapping_for"]
