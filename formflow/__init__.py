"""FastAPI application package init for the formflow service.

This package exposes a small FastAPI application factory used to serve
multi-step citizen-facing forms. It wires only cross-cutting middleware
(request-id) and mounts the journey routers. Engine logic lives in
`formflow/logic/` and route handlers in `formflow/routes/`.
"""

from __future__ import annotations

from formflow.main import create_app

__all__ = ["create_app"]
