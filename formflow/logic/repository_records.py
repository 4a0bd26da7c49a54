"""Versioned journey record stores.

Each store keeps one `VersionedRecord` per case for a single journey. The
record's `data` maps step names to that step's answers. `save` merges the
patch one level deep (or, with `replace`, swaps whole step records) and
bumps the version by one.

Load-merge-save is not guarded against concurrent writers for the same case
unless `strict_versions` is enabled, in which case a save whose version does
not match the stored one raises `VersionConflictError`.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
import time
from typing import Any, Dict, Mapping, Optional, Protocol

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from formflow.exceptions import StoreError, VersionConflictError
from formflow.models.store import VersionedRecord

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PREFIX = "REF"


def merge_one_level(old: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge `patch` into a copy of `old`, exactly one level deep.

    When both values at a key are dicts they are merged key by key;
    otherwise the patch value replaces the old one wholesale.
    """
    merged = dict(old)
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def apply_patch(old: Mapping[str, Any], patch: Mapping[str, Any], replace: bool = False) -> Dict[str, Any]:
    """Combine a stored record with a patch.

    With `replace` each top-level patch value replaces the stored one
    wholesale; otherwise the two are merged one level deep.
    """
    if replace:
        return {**old, **patch}
    return merge_one_level(old, patch)


def build_reference(prefix: str, case_ref: str, now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{prefix}-{stamp}-{case_ref}"


class JourneyStore(Protocol):
    slug: str

    def load(self, case_ref: str) -> VersionedRecord: ...

    def save(self, case_ref: str, version: int, patch: Mapping[str, Any], replace: bool = False) -> VersionedRecord: ...

    def generate_reference(self, slug: str, case_ref: str) -> str: ...

    def ping(self) -> bool: ...


class _ReferenceMixin:
    reference_prefixes: Dict[str, str]
    default_reference_prefix: str

    def generate_reference(self, slug: str, case_ref: str) -> str:
        prefix = self.reference_prefixes.get(slug, self.default_reference_prefix)
        reference = build_reference(prefix, case_ref)
        logger.info("reference_generated slug=%s case_ref=%s reference=%s", slug, case_ref, reference)
        return reference


class MemoryStore(_ReferenceMixin):
    """Process-local store; records are lost on restart."""

    def __init__(
        self,
        slug: str,
        strict_versions: bool = False,
        reference_prefixes: Optional[Mapping[str, str]] = None,
        default_reference_prefix: str = DEFAULT_REFERENCE_PREFIX,
    ) -> None:
        self.slug = slug
        self.strict_versions = strict_versions
        self.reference_prefixes = dict(reference_prefixes or {})
        self.default_reference_prefix = default_reference_prefix
        self._records: Dict[str, VersionedRecord] = {}
        self._lock = threading.Lock()

    def load(self, case_ref: str) -> VersionedRecord:
        with self._lock:
            record = self._records.get(case_ref)
            if record is None:
                return VersionedRecord()
            return VersionedRecord(data=copy.deepcopy(record.data), version=record.version)

    def save(self, case_ref: str, version: int, patch: Mapping[str, Any], replace: bool = False) -> VersionedRecord:
        with self._lock:
            current = self._records.get(case_ref) or VersionedRecord()
            if self.strict_versions and version != current.version:
                logger.warning(
                    "store_version_conflict slug=%s case_ref=%s expected=%s actual=%s",
                    self.slug, case_ref, version, current.version,
                )
                raise VersionConflictError(case_ref, version, current.version)
            record = VersionedRecord(
                data=apply_patch(current.data, copy.deepcopy(dict(patch)), replace),
                version=version + 1,
            )
            self._records[case_ref] = record
            logger.info("record_saved slug=%s case_ref=%s version=%s", self.slug, case_ref, record.version)
            return VersionedRecord(data=copy.deepcopy(record.data), version=record.version)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def ping(self) -> bool:
        return True


class SqlStore(_ReferenceMixin):
    """Store backed by the `journey_record` table via SQLAlchemy Core."""

    def __init__(
        self,
        engine: Engine,
        slug: str,
        strict_versions: bool = False,
        reference_prefixes: Optional[Mapping[str, str]] = None,
        default_reference_prefix: str = DEFAULT_REFERENCE_PREFIX,
    ) -> None:
        self.engine = engine
        self.slug = slug
        self.strict_versions = strict_versions
        self.reference_prefixes = dict(reference_prefixes or {})
        self.default_reference_prefix = default_reference_prefix

    def _select(self, conn, case_ref: str) -> Optional[VersionedRecord]:
        row = conn.execute(
            sql_text("SELECT data_json, version FROM journey_record WHERE slug = :slug AND case_ref = :ref"),
            {"slug": self.slug, "ref": case_ref},
        ).fetchone()
        if row is None:
            return None
        return VersionedRecord(data=json.loads(row[0] or "{}"), version=int(row[1]))

    def load(self, case_ref: str) -> VersionedRecord:
        try:
            with self.engine.connect() as conn:
                record = self._select(conn, case_ref)
        except SQLAlchemyError as exc:
            logger.error("record_load_failed slug=%s case_ref=%s", self.slug, case_ref, exc_info=True)
            raise StoreError(f"unable to load record {case_ref}") from exc
        return record or VersionedRecord()

    def save(self, case_ref: str, version: int, patch: Mapping[str, Any], replace: bool = False) -> VersionedRecord:
        try:
            with self.engine.begin() as conn:
                current = self._select(conn, case_ref)
                stored_version = current.version if current else 0
                if self.strict_versions and version != stored_version:
                    logger.warning(
                        "store_version_conflict slug=%s case_ref=%s expected=%s actual=%s",
                        self.slug, case_ref, version, stored_version,
                    )
                    raise VersionConflictError(case_ref, version, stored_version)
                data = apply_patch(current.data if current else {}, patch, replace)
                params = {
                    "slug": self.slug,
                    "ref": case_ref,
                    "data": json.dumps(data),
                    "version": version + 1,
                }
                if current is None:
                    conn.execute(
                        sql_text(
                            "INSERT INTO journey_record (slug, case_ref, data_json, version) "
                            "VALUES (:slug, :ref, :data, :version)"
                        ),
                        params,
                    )
                else:
                    conn.execute(
                        sql_text(
                            "UPDATE journey_record SET data_json = :data, version = :version "
                            "WHERE slug = :slug AND case_ref = :ref"
                        ),
                        params,
                    )
        except SQLAlchemyError as exc:
            logger.error("record_save_failed slug=%s case_ref=%s", self.slug, case_ref, exc_info=True)
            raise StoreError(f"unable to save record {case_ref}") from exc
        logger.info("record_saved slug=%s case_ref=%s version=%s", self.slug, case_ref, version + 1)
        return VersionedRecord(data=data, version=version + 1)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.error("store_ping_failed slug=%s", self.slug, exc_info=True)
            return False


def flatten_answers(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge every step's answers into one map; later steps win on clashes."""
    flat: Dict[str, Any] = {}
    for step_data in data.values():
        if isinstance(step_data, Mapping):
            flat.update(step_data)
    return flat


__all__ = [
    "DEFAULT_REFERENCE_PREFIX",
    "merge_one_level",
    "apply_patch",
    "build_reference",
    "flatten_answers",
    "JourneyStore",
    "MemoryStore",
    "SqlStore",
]
