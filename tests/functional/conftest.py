"""Functional test bootstrap for formflow.

Points the app at a file-backed SQLite database shared across the process so
SQL-store tests see persisted rows across connections. Engine logic tests
need no database; HTTP tests build a fresh app (and fresh memory stores) per
test through the `client` fixture.
"""

from __future__ import annotations

import os
import pathlib
from typing import Any, Dict

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

# Use a file-backed SQLite DB to ensure persistence across connections
os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
os.environ["FORMFLOW_ENV"] = "test"

from fastapi.testclient import TestClient  # noqa: E402

from formflow.config import AppConfig, DatabaseConfig, StoreConfig  # noqa: E402
from formflow.db.base import get_engine  # noqa: E402
from formflow.db.schema import ensure_schema  # noqa: E402
from formflow.logic.translation import Translator  # noqa: E402
from formflow.main import create_app  # noqa: E402


def make_config(backend: str = "memory", strict_versions: bool = False) -> AppConfig:
    return AppConfig(
        environment="test",
        database=DatabaseConfig(dsn=os.environ["TEST_DATABASE_URL"]),
        store=StoreConfig(backend=backend, strict_versions=strict_versions),
    )


@pytest.fixture(scope="session")
def sql_engine():
    engine = get_engine(os.environ["TEST_DATABASE_URL"])
    ensure_schema(engine)
    return engine


@pytest.fixture
def clean_sql(sql_engine):
    from sqlalchemy import text

    with sql_engine.begin() as conn:
        conn.execute(text("DELETE FROM journey_record"))
    return sql_engine


@pytest.fixture
def app_factory():
    """Build an app over fresh memory stores, optionally with a custom registry."""

    def _build(registry=None, **config_kwargs):
        return create_app(make_config(**config_kwargs), registry)

    return _build


@pytest.fixture
def client(app_factory) -> TestClient:
    return TestClient(app_factory(), follow_redirects=False)


@pytest.fixture
def sql_client(clean_sql) -> TestClient:
    app = create_app(make_config(backend="sql"))
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def translator() -> Translator:
    resources: Dict[str, Any] = {
        "title": "Your details",
        "firstNameLabel": "First name",
        "firstNameHint": "As shown on your passport",
        "contactMethod": {"email": "Email", "phone": "Phone"},
        "buttons": {"continue": "Continue"},
        "date": {"day": "Day", "month": "Month", "year": "Year"},
        "characterCount": {
            "charactersUnderLimitText": {"one": "1 left", "other": "%{count} left"},
            "charactersAtLimitText": "None left",
        },
        "errors": {
            "title": "Check your answers",
            "firstName": "Enter your first name",
            "date": {"missingOne": "The date must include a {{missingField}}"},
        },
    }
    return Translator(resources, "en", log_missing=False)
