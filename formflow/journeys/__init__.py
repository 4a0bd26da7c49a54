"""Bundled journeys and the registry that serves them."""

from formflow.journeys.registry import JourneyDefinition, JourneyRegistry, default_registry

__all__ = ["JourneyDefinition", "JourneyRegistry", "default_registry"]
