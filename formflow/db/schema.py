"""DDL bootstrap for the versioned journey record table.

Intended for local development and CI; production environments should
manage the table through the platform's migration mechanism.
"""

from __future__ import annotations

import logging

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

JOURNEY_RECORD_DDL = """
CREATE TABLE IF NOT EXISTS journey_record (
    slug VARCHAR(100) NOT NULL,
    case_ref VARCHAR(100) NOT NULL,
    data_json TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (slug, case_ref)
)
"""


def ensure_schema(engine: Engine) -> None:
    with engine.begin() as conn:
        conn.execute(sql_text(JOURNEY_RECORD_DDL))
    logger.info("db_schema_ready table=journey_record dialect=%s", engine.dialect.name)


__all__ = ["JOURNEY_RECORD_DDL", "ensure_schema"]
