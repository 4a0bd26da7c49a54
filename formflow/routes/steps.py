"""Journey step endpoints.

Implements:
- GET  /journeys/{slug}/cases/{case_ref}/steps/{step}
  - Returns the step's page view model, or 303 to an unmet dependency
- POST /journeys/{slug}/cases/{case_ref}/steps/{step}
  - Validates the submission (form-encoded or JSON); 303 to the next step,
    or 400 with field errors and the error summary
- POST /journeys/{slug}/cases/{case_ref}/reference
  - Generates a case reference for the journey
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse

from formflow.config import is_production
from formflow.guards.step_dependency import dependency_guard
from formflow.http.language import request_language
from formflow.logic.form_step import FormStep
from formflow.logic.translation import Translator

router = APIRouter()
logger = logging.getLogger(__name__)

STEP_PATH = "/journeys/{slug}/cases/{case_ref}/steps/{step}"


def _form_step(request: Request, slug: str, step: str) -> FormStep:
    journey = request.app.state.registry.get(slug)
    return FormStep(
        journey.step_config(step),
        journey.flow,
        request.app.state.stores[slug],
        field_owners=journey.field_owners(),
        steps=journey.steps,
    )


def _translator(request: Request, step: str) -> Translator:
    config = request.app.state.config
    return Translator.for_step(
        config.i18n.locales_dir,
        request_language(request),
        step,
        log_missing=not is_production(config),
        fallback_language=config.i18n.default_language,
    )


async def _read_body(request: Request) -> Dict[str, Any]:
    """Return the submission as a dict; repeated form keys become lists."""
    content_type = (request.headers.get("content-type") or "").split(";", 1)[0].strip().lower()
    if content_type == "application/json":
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPException(status_code=400, detail="Request body is not valid JSON") from None
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        return body
    form = await request.form()
    body: Dict[str, Any] = {}
    for key in form.keys():
        values = [v for v in form.getlist(key) if isinstance(v, str)]
        body[key] = values if len(values) > 1 else (values[0] if values else "")
    return body


@router.get(STEP_PATH, summary="Render a journey step")
def get_step(slug: str, case_ref: str, step: str, request: Request):
    form_step = _form_step(request, slug, step)
    redirect = dependency_guard(form_step, case_ref)
    if redirect is not None:
        return redirect
    # Change links keep an explicit ?lang= choice
    language = request_language(request) if request.query_params.get("lang") else None
    outcome = form_step.render(
        case_ref,
        _translator(request, step),
        translator_for=lambda name: _translator(request, name),
        language=language,
    )
    return JSONResponse(outcome.content, status_code=outcome.status)


@router.post(STEP_PATH, summary="Submit a journey step")
async def post_step(slug: str, case_ref: str, step: str, request: Request):
    form_step = _form_step(request, slug, step)
    redirect = dependency_guard(form_step, case_ref)
    if redirect is not None:
        return redirect
    body = await _read_body(request)
    outcome = form_step.submit(case_ref, body, _translator(request, step))
    if outcome.redirect_url:
        return RedirectResponse(outcome.redirect_url, status_code=outcome.status)
    return JSONResponse(outcome.content, status_code=outcome.status)


@router.post("/journeys/{slug}/cases/{case_ref}/reference", summary="Generate a case reference")
def create_reference(slug: str, case_ref: str, request: Request):
    request.app.state.registry.get(slug)
    reference = request.app.state.stores[slug].generate_reference(slug, case_ref)
    return {"reference": reference}


__all__ = ["router", "STEP_PATH"]
