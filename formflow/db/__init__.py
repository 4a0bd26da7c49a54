"""Database bootstrap utilities for formflow.

Exposes engine construction and the DDL bootstrap for the journey record
table. The DB layer does not leak ORM models into route handlers.
"""

from formflow.db.base import dispose_engine, get_engine
from formflow.db.schema import ensure_schema

__all__ = [
    "get_engine",
    "dispose_engine",
    "ensure_schema",
]
