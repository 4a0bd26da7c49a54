"""Orchestration of one form step: render, validate, persist, navigate."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from formflow.exceptions import NavigationDeadEnd
from formflow.models.field import FormStepConfig
from formflow.models.flow import JourneyFlow
from formflow.logic.conditional_fields import drop_hidden_sub_fields
from formflow.logic.field_values import normalize_checkbox_fields, process_field_data, with_empty_answers
from formflow.logic.flow_navigation import StepNavigator
from formflow.logic.form_content import build_form_content
from formflow.logic.repository_records import JourneyStore, flatten_answers
from formflow.logic.summary_rows import build_summary_rows
from formflow.logic.validation import get_translation_errors, validate_form

logger = logging.getLogger(__name__)

DASHBOARD_URL = "/dashboard"
SAVE_FOR_LATER = "saveForLater"


class StepOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: int
    redirect_url: Optional[str] = None
    content: Optional[Dict[str, Any]] = None


def known_answers(step_data: Mapping[str, Any]) -> Dict[str, Any]:
    """Step-keyed records plus every answer flattened to its field path.

    Used for dependency checks and route conditions, which may name either
    a step or a field.
    """
    answers = flatten_answers(step_data)
    answers.update(step_data)
    return answers


class FormStep:
    def __init__(
        self,
        config: FormStepConfig,
        flow: JourneyFlow,
        store: JourneyStore,
        dashboard_url: str = DASHBOARD_URL,
        field_owners: Optional[Mapping[str, str]] = None,
        steps: Optional[Mapping[str, FormStepConfig]] = None,
    ) -> None:
        self.config = config
        self.flow = flow
        self.store = store
        self.navigator = StepNavigator(flow)
        self.dashboard_url = dashboard_url
        self.field_owners = dict(field_owners or {})
        self.steps = dict(steps or {})

    @property
    def name(self) -> str:
        return self.config.step_name

    def dependency_redirect(self, case_ref: str) -> Optional[str]:
        """Return the URL to send the user to when a prerequisite is unanswered."""
        record = self.store.load(case_ref)
        missing = self.navigator.unmet_dependency(self.name, known_answers(record.data))
        if not missing:
            return None
        return self.navigator.step_url(self.owning_step(missing), case_ref)

    def owning_step(self, dependency: str) -> str:
        """Resolve a dependency name to the step that answers it."""
        if self.flow.has_step(dependency):
            return dependency
        return self.field_owners.get(dependency, dependency)

    def render(
        self,
        case_ref: str,
        t: Any,
        translator_for: Optional[Callable[[str], Any]] = None,
        language: Optional[str] = None,
    ) -> StepOutcome:
        record = self.store.load(case_ref)
        content = build_form_content(self.config, t, record.data.get(self.name) or {})
        content["back_url"] = self.navigator.back_url(self.name, flatten_answers(record.data), case_ref)
        if self.config.show_summary:
            content["summary_rows"] = build_summary_rows(
                self.flow, self.steps, case_ref, record.data, translator_for or (lambda _step: t), language,
            )
        return StepOutcome(status=200, content=content)

    def submit(self, case_ref: str, body: Mapping[str, Any], t: Any) -> StepOutcome:
        fields = self.config.fields
        action = body.get("action")
        submitted = with_empty_answers(normalize_checkbox_fields(body, fields), fields)
        record = self.store.load(case_ref)
        all_data = {**flatten_answers(record.data), **submitted}

        messages = get_translation_errors(t, fields)
        errors = validate_form(fields, submitted, all_data, messages, t)
        if errors:
            logger.info("step_rejected step=%s case_ref=%s errors=%s", self.name, case_ref, len(errors))
            content = build_form_content(self.config, t, submitted, errors)
            content["back_url"] = self.navigator.back_url(self.name, flatten_answers(record.data), case_ref)
            return StepOutcome(status=400, content=content)

        step_data = self._persistable(drop_hidden_sub_fields(process_field_data(submitted, fields), fields))
        saved = self.store.save(case_ref, record.version, {self.name: step_data}, replace=True)
        logger.info("step_saved step=%s case_ref=%s version=%s", self.name, case_ref, saved.version)

        if action == SAVE_FOR_LATER:
            return StepOutcome(status=303, redirect_url=self.dashboard_url)

        next_url = self.navigator.next_step_url(self.name, known_answers(saved.data), case_ref, step_data)
        if next_url is None:
            logger.error("navigation_dead_end step=%s journey=%s", self.name, self.flow.journey_name)
            raise NavigationDeadEnd(self.name)
        return StepOutcome(status=303, redirect_url=next_url)

    def _persistable(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data.pop("action", None)
        return data


__all__ = ["DASHBOARD_URL", "SAVE_FOR_LATER", "StepOutcome", "known_answers", "FormStep"]
