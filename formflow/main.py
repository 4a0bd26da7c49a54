from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from formflow.config import AppConfig, load_config
from formflow.db.base import get_engine
from formflow.db.schema import ensure_schema
from formflow.exceptions import FormflowError
from formflow.http.problem import (
    handle_domain_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from formflow.http.request_id import RequestIdMiddleware
from formflow.journeys.registry import JourneyRegistry, default_registry
from formflow.logging_setup import configure_logging
from formflow.logic.repository_records import JourneyStore, MemoryStore, SqlStore
from formflow.routes import api_router

logger = logging.getLogger(__name__)


def build_stores(config: AppConfig, registry: JourneyRegistry) -> Dict[str, JourneyStore]:
    """Create one store per registered journey for the configured backend."""
    store_cfg = config.store
    options = {
        "strict_versions": store_cfg.strict_versions,
        "reference_prefixes": store_cfg.reference_prefixes,
        "default_reference_prefix": store_cfg.default_reference_prefix,
    }
    if store_cfg.backend == "sql":
        engine = get_engine(config.database.dsn, config.database.ssl_required)
        ensure_schema(engine)
        return {slug: SqlStore(engine, slug, **options) for slug in registry.slugs()}
    return {slug: MemoryStore(slug, **options) for slug in registry.slugs()}


def create_app(config: Optional[AppConfig] = None, registry: Optional[JourneyRegistry] = None) -> FastAPI:
    config = config or load_config()
    # Configure global logging before app instantiation so all modules emit
    configure_logging(config.environment)
    registry = registry or default_registry()

    app = FastAPI(title="formflow")
    app.state.config = config
    app.state.registry = registry
    app.state.stores = build_stores(config, registry)

    app.add_exception_handler(FormflowError, handle_domain_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)
    logger.info(
        "app_created environment=%s store=%s journeys=%s",
        config.environment,
        config.store.backend,
        ",".join(registry.slugs()),
    )
    return app


__all__ = ["create_app", "build_stores"]
