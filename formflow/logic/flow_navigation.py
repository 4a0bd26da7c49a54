"""Step flow navigation over a condition-guarded step graph.

Route conditions and `previous_step` functions are untrusted: a raising
function is logged and treated as not matching.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from formflow.models.flow import JourneyFlow
from formflow.logic.resolvable import call_rule

logger = logging.getLogger(__name__)

CASE_REFERENCE_PLACEHOLDER = ":caseReference"


def _condition_holds(route, form_data: Mapping[str, Any], step_data: Mapping[str, Any], rule: str) -> bool:
    if route.condition is None:
        return True
    ok, result = call_rule(route.condition, dict(form_data), dict(step_data), rule=rule)
    return ok and bool(result)


def get_next_step(
    current_step: str,
    flow: JourneyFlow,
    form_data: Mapping[str, Any],
    current_step_data: Optional[Mapping[str, Any]] = None,
) -> Optional[str]:
    """Return the step after `current_step`, or None at the end of the journey.

    The first route with no condition (or a true one) wins, then
    `default_next`, then the following entry of `step_order`.
    """
    step_data = current_step_data or {}
    config = flow.config_for(current_step)
    if config is not None:
        for route in config.routes:
            if _condition_holds(route, form_data, step_data, rule=f"{current_step}->{route.next_step}"):
                return route.next_step
        if config.default_next:
            return config.default_next

    order = flow.step_order
    if current_step in order:
        index = order.index(current_step)
        if index < len(order) - 1:
            return order[index + 1]
    return None


def get_previous_step(
    current_step: str,
    flow: JourneyFlow,
    form_data: Optional[Mapping[str, Any]] = None,
) -> Optional[str]:
    """Return the step that led to `current_step` for these answers.

    An explicit `previous_step` wins. Otherwise every step's routes are
    searched in declaration order for an edge into `current_step` whose
    condition holds (or a matching `default_next`), before falling back to
    the preceding entry of `step_order`.
    """
    form_data = form_data or {}
    config = flow.config_for(current_step)
    if config is not None and config.previous_step:
        if callable(config.previous_step):
            ok, result = call_rule(config.previous_step, dict(form_data), rule=f"{current_step}.previous_step")
            return result if ok and result else None
        return config.previous_step

    for name, candidate in flow.steps.items():
        for route in candidate.routes:
            if route.next_step == current_step and _condition_holds(
                route, form_data, {}, rule=f"{name}->{route.next_step}"
            ):
                return name
        if candidate.default_next == current_step:
            return name

    order = flow.step_order
    if current_step in order:
        index = order.index(current_step)
        if index > 0:
            return order[index - 1]
    return None


def get_step_url(step_name: str, flow: JourneyFlow, case_reference: Optional[str] = None) -> str:
    base_path = flow.base_path or ""
    if case_reference and CASE_REFERENCE_PLACEHOLDER in base_path:
        base_path = base_path.replace(CASE_REFERENCE_PLACEHOLDER, case_reference)
    return f"{base_path}/{step_name}"


def _is_answered(value: Any) -> bool:
    # An empty step record still counts: the step was submitted.
    return value is not None and value is not False and value != ""


def check_step_dependencies(step_name: str, flow: JourneyFlow, form_data: Mapping[str, Any]) -> Optional[str]:
    """Return the first declared dependency of `step_name` not yet answered."""
    config = flow.config_for(step_name)
    if config is None:
        return None
    for dependency in config.dependencies:
        if not _is_answered(form_data.get(dependency)):
            return dependency
    return None


class StepNavigator:
    """URL-level navigation bound to one journey flow."""

    def __init__(self, flow: JourneyFlow) -> None:
        self.flow = flow

    def next_step_url(
        self,
        current_step: str,
        form_data: Mapping[str, Any],
        case_reference: Optional[str] = None,
        current_step_data: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        next_step = get_next_step(current_step, self.flow, form_data, current_step_data)
        return get_step_url(next_step, self.flow, case_reference) if next_step else None

    def back_url(
        self,
        current_step: str,
        form_data: Mapping[str, Any],
        case_reference: Optional[str] = None,
    ) -> Optional[str]:
        previous = get_previous_step(current_step, self.flow, form_data)
        return get_step_url(previous, self.flow, case_reference) if previous else None

    def step_url(self, step_name: str, case_reference: Optional[str] = None) -> str:
        return get_step_url(step_name, self.flow, case_reference)

    def unmet_dependency(self, step_name: str, form_data: Mapping[str, Any]) -> Optional[str]:
        missing = check_step_dependencies(step_name, self.flow, form_data)
        if missing:
            logger.debug("step_dependency_unmet step=%s dependency=%s", step_name, missing)
        return missing


__all__ = [
    "CASE_REFERENCE_PLACEHOLDER",
    "get_next_step",
    "get_previous_step",
    "get_step_url",
    "check_step_dependencies",
    "StepNavigator",
]
