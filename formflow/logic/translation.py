"""Translation provider for step content and error messages.

Resources are nested JSON dicts stored as `<locales_dir>/<lang>/<ns>.json`.
Lookups follow the i18next conventions the form definitions are written
against: dot-separated keys, `{{name}}` interpolation, `return_objects` for
sub-trees, and returning the key itself when nothing is found.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

_INTERPOLATION = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def step_namespace(step_name: str) -> str:
    """Return the camelCase namespace for a kebab-case step name."""
    parts = step_name.split("-")
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def _deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in source.items():
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def load_translations(locales_dir: str | Path, language: str, namespaces: Iterable[str]) -> Dict[str, Any]:
    """Load and merge namespaces for one language, later namespaces winning.

    Missing namespaces are skipped; unreadable files are logged and skipped.
    """
    merged: Dict[str, Any] = {}
    root = Path(locales_dir) / language
    for ns in namespaces:
        path = root / f"{ns}.json"
        if not path.exists():
            logger.debug("translation_namespace_missing lang=%s ns=%s", language, ns)
            continue
        try:
            _deep_merge(merged, json.loads(path.read_text(encoding="utf-8")))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.error("translation_namespace_unreadable path=%s", path, exc_info=True)
    return merged


def flatten_translations(tree: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested resources to dotted keys; top-level keys are kept too.

    Both `errors` (the sub-tree) and `errors.title` are present in the result
    so label functions can address either form.
    """
    flat: Dict[str, Any] = {}
    for key, value in tree.items():
        dotted = f"{prefix}{key}"
        flat[dotted] = value
        if isinstance(value, Mapping):
            flat.update(flatten_translations(value, f"{dotted}."))
    return flat


class Translator:
    """Callable lookup over merged resources for a single language."""

    def __init__(self, resources: Mapping[str, Any] | None = None, language: str = "en", log_missing: bool = True) -> None:
        self.resources: Dict[str, Any] = dict(resources or {})
        self.language = language
        self.log_missing = log_missing

    @classmethod
    def for_step(
        cls,
        locales_dir: str | Path,
        language: str,
        step_name: str | None = None,
        log_missing: bool = True,
        fallback_language: str | None = "en",
    ) -> "Translator":
        """Load `common` plus the step namespace, over the fallback language."""
        namespaces = ["common"] + ([step_namespace(step_name)] if step_name else [])
        resources: Dict[str, Any] = {}
        if fallback_language and fallback_language != language:
            resources = load_translations(locales_dir, fallback_language, namespaces)
        _deep_merge(resources, load_translations(locales_dir, language, namespaces))
        return cls(resources, language, log_missing)

    def _lookup(self, key: str) -> Any:
        cur: Any = self.resources
        for part in key.split("."):
            if not isinstance(cur, Mapping) or part not in cur:
                return None
            cur = cur[part]
        return cur

    def __call__(
        self,
        key: str,
        default: Optional[str] = None,
        return_objects: bool = False,
        **params: Any,
    ) -> Any:
        found = self._lookup(key)
        if isinstance(found, Mapping):
            if return_objects:
                return dict(found)
            found = None
        if found is None:
            if self.log_missing:
                logger.debug("translation_missing lang=%s key=%s", self.language, key)
            return default if default is not None else key
        text = str(found)
        if params:
            text = _INTERPOLATION.sub(lambda m: str(params.get(m.group(1), m.group(0))), text)
        return text

    def exists(self, key: str) -> bool:
        return self._lookup(key) is not None

    def flattened(self) -> Dict[str, Any]:
        return flatten_translations(self.resources)


def get_translation(t: Any, key: str, fallback: Optional[str] = None) -> Optional[str]:
    """Translate `key`, treating an echoed key (or a non-string) as not found."""
    if t is None:
        return fallback
    translated = t(key)
    if not isinstance(translated, str) or translated == key:
        return fallback
    return translated


__all__ = [
    "step_namespace",
    "load_translations",
    "flatten_translations",
    "Translator",
    "get_translation",
]
