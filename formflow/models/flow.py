"""Step graph models for journey navigation.

A `JourneyFlow` maps step identifiers to `StepConfig`s and carries a flat
`step_order` used as the fallback for steps without explicit routing. The
graph is built once at startup and passed to navigators explicitly.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# (all answers, just-submitted step data) -> bool
RouteCondition = Callable[[Dict[str, Any], Dict[str, Any]], bool]
# (all answers) -> step name | None
PreviousStepFn = Callable[[Dict[str, Any]], Optional[str]]


class StepRoute(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    next_step: str
    condition: Optional[RouteCondition] = None


class StepConfig(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    routes: List[StepRoute] = Field(default_factory=list)
    default_next: Optional[str] = None
    previous_step: Optional[Union[str, PreviousStepFn]] = None
    dependencies: List[str] = Field(default_factory=list)


class JourneyFlow(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    journey_name: str
    step_order: List[str]
    steps: Dict[str, StepConfig] = Field(default_factory=dict)
    base_path: str = ""

    @model_validator(mode="after")
    def _targets_are_known(self) -> "JourneyFlow":
        known = set(self.step_order) | set(self.steps)
        if len(set(self.step_order)) != len(self.step_order):
            raise ValueError("step_order contains duplicate steps")
        for name, cfg in self.steps.items():
            targets = [r.next_step for r in cfg.routes]
            if cfg.default_next:
                targets.append(cfg.default_next)
            if isinstance(cfg.previous_step, str):
                targets.append(cfg.previous_step)
            unknown = [t for t in targets if t not in known]
            if unknown:
                raise ValueError(f"step {name!r} routes to unknown steps {unknown}")
        return self

    def config_for(self, step_name: str) -> Optional[StepConfig]:
        return self.steps.get(step_name)

    def has_step(self, step_name: str) -> bool:
        return step_name in self.steps or step_name in self.step_order


__all__ = ["RouteCondition", "PreviousStepFn", "StepRoute", "StepConfig", "JourneyFlow"]
