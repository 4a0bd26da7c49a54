"""Resolution of value-or-function attributes.

Field and step attributes such as `required`, `label` and `previous_step` are
either a literal or a synchronous function supplied by journey authors. This
module is the single place where such functions are invoked: a function that
raises is logged and degraded to the caller's fallback, never propagated.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve(value: Union[T, Callable[..., T]], *args: Any, fallback: T, rule: str = "rule") -> T:
    """Return `value`, or `value(*args)` when it is callable.

    A raising callable yields `fallback`. `rule` names the attribute in logs.
    """
    if not callable(value):
        return value
    try:
        return value(*args)
    except Exception:
        logger.error("rule_evaluation_failed rule=%s fallback=%r", rule, fallback, exc_info=True)
        return fallback


def call_rule(fn: Callable[..., Any], *args: Any, rule: str = "rule") -> tuple[bool, Any]:
    """Invoke a custom rule function inside the failure boundary.

    Returns (True, result) on success and (False, None) when the function
    raised, so callers can treat the rule as inert.
    """
    try:
        return True, fn(*args)
    except Exception:
        logger.error("rule_evaluation_failed rule=%s", rule, exc_info=True)
        return False, None


__all__ = ["resolve", "call_rule"]
