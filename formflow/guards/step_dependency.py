"""Step dependency guard.

Sends users who reach a step before answering its prerequisites back to the
step that asks them, whether they arrived by link or by typing the URL.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi.responses import RedirectResponse

from formflow.logic.form_step import FormStep

logger = logging.getLogger(__name__)


def dependency_guard(form_step: FormStep, case_ref: str) -> Optional[RedirectResponse]:
    """Return a 303 redirect when `form_step` has an unmet dependency."""
    target = form_step.dependency_redirect(case_ref)
    if target is None:
        return None
    logger.info("step_dependency_redirect step=%s case_ref=%s location=%s", form_step.name, case_ref, target)
    return RedirectResponse(target, status_code=303)


__all__ = ["dependency_guard"]
