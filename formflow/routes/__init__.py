"""APIRouter registration for formflow."""

from __future__ import annotations

from fastapi import APIRouter

from formflow.routes.health import router as health_router
from formflow.routes.steps import router as steps_router

api_router = APIRouter()
api_router.include_router(steps_router, tags=["Steps"])
api_router.include_router(health_router, tags=["Health"])

__all__ = ["api_router"]
