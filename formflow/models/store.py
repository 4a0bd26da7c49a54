"""Versioned record types exchanged with journey stores."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class VersionedRecord(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict)
    version: int = Field(default=0, ge=0)


__all__ = ["VersionedRecord"]
