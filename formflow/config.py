"""Configuration utilities for the formflow service.

This module loads application configuration with the following rules:
- Primary source: `formflow_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator, model_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("formflow_config.json")
DEFAULT_LOCALES_DIR = Path(__file__).resolve().parent / "locales"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str
    ssl_required: bool = Field(default=False)

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class StoreConfig(BaseModel):
    backend: str = "memory"  # one of: memory, sql
    strict_versions: bool = False
    reference_prefixes: Dict[str, str] = Field(default_factory=lambda: {"possession-claim": "PCR"})
    default_reference_prefix: str = "REF"

    @field_validator("backend")
    @classmethod
    def backend_must_be_allowed(cls, v: str) -> str:
        allowed = {"memory", "sql"}
        if v not in allowed:
            raise ValueError(f"store.backend must be one of {sorted(allowed)}")
        return v


class I18nConfig(BaseModel):
    locales_dir: str = str(DEFAULT_LOCALES_DIR)
    default_language: str = "en"
    supported_languages: List[str] = Field(default_factory=lambda: ["en", "cy"])

    @model_validator(mode="after")
    def default_must_be_supported(self) -> "I18nConfig":
        if self.default_language not in self.supported_languages:
            raise ValueError("i18n.default_language must be one of i18n.supported_languages")
        return self


class AppConfig(BaseModel):
    environment: str = "development"
    database: DatabaseConfig
    store: StoreConfig = Field(default_factory=StoreConfig)
    i18n: I18nConfig = Field(default_factory=I18nConfig)

    @field_validator("environment")
    @classmethod
    def environment_must_be_known(cls, v: str) -> str:
        allowed = {"development", "test", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {sorted(allowed)}")
        return v


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover - defensive
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _truthy(text: object) -> bool:
    return str(text).strip().lower() == "true"


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) formflow_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    environment = (_env("FORMFLOW_ENV") or _read_config_file("environment") or _base("environment", "development")).strip()

    # Database
    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or "sqlite+pysqlite:///:memory:"
    )
    ssl_required_text = _env("DATABASE_SSL_REQUIRED") or _read_config_file("database.ssl.required") or _base("database.ssl_required", "false")

    # Store
    backend = (_env("FORMFLOW_STORE_BACKEND") or _read_config_file("store.backend") or _base("store.backend", "memory")).strip()
    strict_text = _env("FORMFLOW_STRICT_VERSIONS") or _read_config_file("store.strict_versions") or _base("store.strict_versions", "false")
    prefixes = base.get("store", {}).get("reference_prefixes") if isinstance(base.get("store"), dict) else None

    # i18n
    locales_dir = _env("FORMFLOW_LOCALES_DIR") or _read_config_file("i18n.locales_dir") or _base("i18n.locales_dir", str(DEFAULT_LOCALES_DIR))
    default_language = (_env("FORMFLOW_DEFAULT_LANGUAGE") or _base("i18n.default_language", "en")).strip()

    try:
        store_kwargs: dict = {"backend": backend, "strict_versions": _truthy(strict_text)}
        if isinstance(prefixes, dict):
            store_kwargs["reference_prefixes"] = {str(k): str(v) for k, v in prefixes.items()}
        cfg = AppConfig(
            environment=environment,
            database=DatabaseConfig(dsn=dsn, ssl_required=_truthy(ssl_required_text)),
            store=StoreConfig(**store_kwargs),
            i18n=I18nConfig(locales_dir=locales_dir, default_language=default_language),
        )
        return cfg
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


def is_production(config: AppConfig) -> bool:
    return config.environment == "production"


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "StoreConfig",
    "I18nConfig",
    "load_config",
    "is_production",
]
