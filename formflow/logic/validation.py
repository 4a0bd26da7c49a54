"""Validation engine for form submissions.

Walks the field tree (live sub-fields included) and produces an ErrorMap
keyed by field path. For each field the first failing rule wins:

- text kinds: required, pattern, max length, `validator`, `validate`
- checkbox:   required, `validator`, `validate`
- radio:      required
- date:       the date validator's own order, then `validator`, `validate`

Custom rule functions are untrusted: one that raises is logged and treated
as not having fired. Validation never mutates the submitted data.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from formflow.models.errors import DATE_PARTS, ErrorMap, FieldError
from formflow.models.field import FieldDefinition
from formflow.models.field_kind import TEXT_KINDS, FieldKind, assert_never
from formflow.logic.conditional_fields import should_validate_field
from formflow.logic.date_validation import validate_date_field
from formflow.logic.field_values import iter_field_paths, normalize_checkbox_value, resolve_date_value
from formflow.logic.resolvable import call_rule, resolve

logger = logging.getLogger(__name__)

REQUIRED = "required"
PATTERN = "pattern"
MAX_LENGTH = "maxLength"
INVALID = "invalid"

# Global default-by-category keys in the translations map
_GLOBAL_KEYS = {
    REQUIRED: "defaultRequired",
    PATTERN: "defaultInvalid",
    MAX_LENGTH: "defaultMaxLength",
    INVALID: "defaultInvalid",
}

Translate = Callable[..., Any]


def _generic_message(category: str, field: FieldDefinition) -> str:
    if category == REQUIRED:
        if field.kind is FieldKind.RADIO:
            return "Select an option"
        if field.kind is FieldKind.CHECKBOX:
            return "Select at least one option"
        return "This field is required"
    if category == MAX_LENGTH:
        return f"Must be {field.max_length} characters or fewer"
    if category == PATTERN:
        return "Invalid format"
    return "Enter a valid value"


def resolve_error_message(
    category: str,
    path: str,
    field: FieldDefinition,
    translations: Mapping[str, Any],
) -> str:
    """Pick the message for a failed rule.

    Precedence: translated per-field message (a string, or a per-category
    dict, keyed by field path), the field's `error_message`, the global
    default for the category, then a generic string.
    """
    per_field = translations.get(path)
    if isinstance(per_field, Mapping):
        per_field = per_field.get(category)
    if isinstance(per_field, str) and per_field:
        return per_field
    if field.error_message:
        return field.error_message
    default = translations.get(_GLOBAL_KEYS[category])
    if isinstance(default, str) and default:
        return default
    return _generic_message(category, field)


def resolve_error_token(token: str, translations: Mapping[str, Any], translate: Optional[Translate]) -> str:
    """Turn an error token returned by a custom rule into display text."""
    mapped = translations.get(token)
    if isinstance(mapped, str) and mapped:
        return mapped
    if translate is not None:
        translated = translate(token)
        if isinstance(translated, str) and translated != token:
            return translated
    return token


def _text_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _checkbox_missing(raw: Any) -> bool:
    if isinstance(raw, str):
        return not raw.strip()
    return not normalize_checkbox_value(raw)


class _FormValidator:
    """Per-call validation state; never shared between requests."""

    def __init__(
        self,
        body: Mapping[str, Any],
        all_data: Mapping[str, Any],
        translations: Mapping[str, Any],
        translate: Optional[Translate],
        fields: Iterable[FieldDefinition],
    ) -> None:
        self.body = body
        self.all_data = all_data
        self.translations = translations
        self.translate = translate
        self.form_data = self._normalized_form_data(fields)
        self.errors: ErrorMap = {}

    def _normalized_form_data(self, fields: Iterable[FieldDefinition]) -> Dict[str, Any]:
        data = dict(self.body)
        for path, field in iter_field_paths(fields):
            if field.kind is FieldKind.CHECKBOX and path in data:
                data[path] = normalize_checkbox_value(data[path])
            elif field.kind is FieldKind.DATE:
                data[path] = resolve_date_value(self.body, path)
        return data

    def fail(self, path: str, error: FieldError) -> None:
        if path not in self.errors:
            self.errors[path] = error

    def fail_with(self, category: str, path: str, field: FieldDefinition) -> None:
        self.fail(path, FieldError(message=resolve_error_message(category, path, field, self.translations)))

    def run_hooks(self, path: str, field: FieldDefinition, value: Any) -> None:
        if field.validator is not None:
            ok, result = call_rule(field.validator, value, self.form_data, self.all_data, rule=f"{path}.validator")
            if ok and result is not True and result is not None:
                if isinstance(result, str) and result:
                    self.fail(path, FieldError(message=resolve_error_token(result, self.translations, self.translate)))
                elif result is False:
                    self.fail_with(INVALID, path, field)
        if field.validate_ is not None:
            ok, result = call_rule(field.validate_, value, self.form_data, self.all_data, rule=f"{path}.validate")
            if ok and isinstance(result, str) and result:
                self.fail(path, FieldError(message=resolve_error_token(result, self.translations, self.translate)))

    def validate_field(
        self,
        field: FieldDefinition,
        parent_name: Optional[str] = None,
        parent_option_value: Optional[str] = None,
        parent_kind: Optional[FieldKind] = None,
    ) -> None:
        if not should_validate_field(field, parent_name, parent_option_value, self.form_data, self.all_data, parent_kind):
            return
        path = f"{parent_name}.{field.name}" if parent_name else field.name
        required = bool(resolve(field.required, self.form_data, self.all_data, fallback=False, rule=f"{path}.required"))

        if field.kind is FieldKind.DATE:
            self._validate_date(path, field, required)
        elif field.kind is FieldKind.CHECKBOX:
            self._validate_checkbox(path, field, required)
        elif field.kind is FieldKind.RADIO:
            if required and not _text_value(self.body.get(path)):
                self.fail_with(REQUIRED, path, field)
        elif field.kind in TEXT_KINDS:
            self._validate_text(path, field, required)
        else:
            assert_never(field.kind)

        for option in field.options or []:
            for sub in (option.sub_fields or {}).values():
                self.validate_field(sub, path, option.value, field.kind)

    def _validate_date(self, path: str, field: FieldDefinition, required: bool) -> None:
        date = self.form_data[path]
        error = validate_date_field(
            date["day"],
            date["month"],
            date["year"],
            required,
            self.translate,
            field.no_future_date,
            self.translations,
        )
        if error is not None:
            self.fail(path, error)
            return
        if any(date[part].strip() for part in DATE_PARTS):
            self.run_hooks(path, field, date)

    def _validate_checkbox(self, path: str, field: FieldDefinition, required: bool) -> None:
        raw = self.body.get(path)
        if _checkbox_missing(raw):
            if required:
                self.fail_with(REQUIRED, path, field)
            return
        self.run_hooks(path, field, normalize_checkbox_value(raw))

    def _validate_text(self, path: str, field: FieldDefinition, required: bool) -> None:
        value = _text_value(self.body.get(path))
        if not value:
            if required:
                self.fail_with(REQUIRED, path, field)
            return
        if field.pattern:
            try:
                matched = re.search(field.pattern, value) is not None
            except re.error:
                logger.error("pattern_invalid field=%s pattern=%r", path, field.pattern, exc_info=True)
                matched = True
            if not matched:
                self.fail_with(PATTERN, path, field)
        if field.max_length is not None and len(value) > field.max_length:
            self.fail_with(MAX_LENGTH, path, field)
        self.run_hooks(path, field, value)


def validate_form(
    fields: Iterable[FieldDefinition],
    body: Mapping[str, Any],
    all_data: Optional[Mapping[str, Any]] = None,
    translations: Optional[Mapping[str, Any]] = None,
    translate: Optional[Translate] = None,
) -> ErrorMap:
    """Validate a submission against `fields` and return the ErrorMap.

    `body` is the raw submission keyed by field path (dates may arrive as
    `<path>-day/-month/-year`); `all_data` holds the answers known across the
    whole journey; `translations` maps field paths and `default*` keys to
    messages.
    """
    fields = list(fields)
    validator = _FormValidator(body, all_data or {}, translations or {}, translate, fields)
    for field in fields:
        validator.validate_field(field)
    if validator.errors:
        logger.info("form_validated fields=%d errors=%s", len(fields), sorted(validator.errors))
    return validator.errors


def get_translation_errors(t: Optional[Translate], fields: Iterable[FieldDefinition]) -> Dict[str, Any]:
    """Collect `errors.<path>` messages for every field path.

    A string applies to every rule of the field; an object supplies one
    message per rule category (`required`, `pattern`, `maxLength`, `invalid`).
    """
    messages: Dict[str, Any] = {}
    if t is None:
        return messages
    for path, _field in iter_field_paths(fields):
        key = f"errors.{path}"
        found = t(key, return_objects=True)
        if isinstance(found, Mapping) or (isinstance(found, str) and found and found != key):
            messages[path] = found
    return messages


__all__ = [
    "REQUIRED",
    "PATTERN",
    "MAX_LENGTH",
    "INVALID",
    "resolve_error_message",
    "resolve_error_token",
    "validate_form",
    "get_translation_errors",
]
