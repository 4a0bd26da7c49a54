"""Journey definitions and the process-wide registry.

A journey pairs a step graph with the field configuration of each step.
Definitions are built once at startup and passed to the app explicitly.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from pydantic import BaseModel, ConfigDict, model_validator

from formflow.exceptions import UnknownJourneyError, UnknownStepError
from formflow.models.field import FormStepConfig
from formflow.models.flow import JourneyFlow
from formflow.logic.field_values import iter_field_paths

logger = logging.getLogger(__name__)


class JourneyDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    slug: str
    flow: JourneyFlow
    steps: Dict[str, FormStepConfig]

    @model_validator(mode="after")
    def _steps_are_in_flow(self) -> "JourneyDefinition":
        unknown = [name for name in self.steps if not self.flow.has_step(name)]
        if unknown:
            raise ValueError(f"journey {self.slug!r} declares steps missing from its flow: {unknown}")
        return self

    def step_config(self, step_name: str) -> FormStepConfig:
        try:
            return self.steps[step_name]
        except KeyError:
            raise UnknownStepError(step_name) from None

    def field_owners(self) -> Dict[str, str]:
        """Map every field path to the step that asks it."""
        owners: Dict[str, str] = {}
        for step_name, config in self.steps.items():
            for path, _field in iter_field_paths(config.fields):
                owners.setdefault(path, step_name)
        return owners


class JourneyRegistry:
    def __init__(self, journeys: Iterable[JourneyDefinition] = ()) -> None:
        self._journeys: Dict[str, JourneyDefinition] = {}
        for journey in journeys:
            self.register(journey)

    def register(self, journey: JourneyDefinition) -> None:
        if journey.slug in self._journeys:
            raise ValueError(f"journey {journey.slug!r} is already registered")
        self._journeys[journey.slug] = journey
        logger.info("journey_registered slug=%s steps=%d", journey.slug, len(journey.steps))

    def get(self, slug: str) -> JourneyDefinition:
        try:
            return self._journeys[slug]
        except KeyError:
            raise UnknownJourneyError(slug) from None

    def slugs(self) -> List[str]:
        return sorted(self._journeys)


def default_registry() -> JourneyRegistry:
    from formflow.journeys.contact_details import contact_details_journey

    return JourneyRegistry([contact_details_journey()])


__all__ = ["JourneyDefinition", "JourneyRegistry", "default_registry"]
