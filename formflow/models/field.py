"""Pydantic models for the recursive form field schema.

A `FieldDefinition` may declare options, and each option may carry a map of
nested `FieldDefinition`s (its sub-fields) that are live only while the
option is selected. Definitions are usually authored as camelCase dicts
(`maxLength`, `subFields`, `noFutureDate`, `type`) and parsed once at startup;
the parsed tree is read-only for the life of the process.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from formflow.models.field_kind import CHOICE_KINDS, FieldKind

logger = logging.getLogger(__name__)

# (form_data, all_data) -> bool
RequiredFn = Callable[[Dict[str, Any], Dict[str, Any]], bool]
# (value, form_data, all_data) -> True | error token
ValidatorFn = Callable[[Any, Dict[str, Any], Dict[str, Any]], Union[bool, str]]
# (value, form_data, all_data) -> error token | None
ValidateFn = Callable[[Any, Dict[str, Any], Dict[str, Any]], Optional[str]]
# flattened translations -> text
TextFn = Callable[[Dict[str, Any]], str]


class _SchemaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        arbitrary_types_allowed=True,
    )


class FieldTranslationKey(_SchemaModel):
    label: Optional[str] = None
    hint: Optional[str] = None


class FieldOption(_SchemaModel):
    value: str
    text: Optional[str] = None
    translation_key: Optional[str] = None
    label: Optional[Union[str, TextFn]] = None
    conditional_text: Optional[Union[str, TextFn]] = None
    sub_fields: Optional[Dict[str, "FieldDefinition"]] = None

    @model_validator(mode="after")
    def _sub_field_keys_match_names(self) -> "FieldOption":
        for key, sub in (self.sub_fields or {}).items():
            if key != sub.name:
                raise ValueError(f"subFields key {key!r} does not match field name {sub.name!r}")
        return self


class FieldDefinition(_SchemaModel):
    name: str = Field(min_length=1)
    kind: FieldKind = Field(alias="type")
    required: Union[bool, RequiredFn] = False
    pattern: Optional[str] = None
    max_length: Optional[int] = Field(default=None, gt=0)
    error_message: Optional[str] = None
    label: Optional[Union[str, TextFn]] = None
    label_classes: Optional[str] = None
    hint: Optional[str] = None
    translation_key: Optional[FieldTranslationKey] = None
    options: Optional[List[FieldOption]] = None
    classes: Optional[str] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)
    validator: Optional[ValidatorFn] = None
    validate_: Optional[ValidateFn] = Field(default=None, alias="validate")
    no_future_date: bool = False

    @model_validator(mode="after")
    def _kind_attributes(self) -> "FieldDefinition":
        if "." in self.name:
            raise ValueError("field name must not contain '.'; nesting is expressed through subFields")
        if self.options and self.kind not in CHOICE_KINDS:
            raise ValueError(f"options are only meaningful for radio/checkbox fields, not {self.kind.value}")
        if self.no_future_date and self.kind is not FieldKind.DATE:
            raise ValueError("noFutureDate is only meaningful for date fields")
        return self


class TranslationKeys(_SchemaModel):
    page_title: Optional[str] = None
    content: Optional[str] = None


class FormStepConfig(_SchemaModel):
    step_name: str
    journey: str
    fields: List[FieldDefinition]
    translation_keys: Optional[TranslationKeys] = None
    show_cancel_button: bool = False
    show_summary: bool = False


FieldOption.model_rebuild()
FieldDefinition.model_rebuild()


def validate_field_config(config: Any) -> Tuple[bool, Union[FieldDefinition, ValidationError]]:
    """Parse a raw (dict) field definition.

    Returns (True, model) on success and (False, errors) otherwise. Never
    raises for invalid input; the caller decides whether to fail startup.
    """
    try:
        return True, FieldDefinition.model_validate(config)
    except ValidationError as exc:
        logger.warning("field_config_invalid errors=%s", exc.error_count())
        return False, exc


def parse_fields(configs: List[Any]) -> List[FieldDefinition]:
    """Parse a list of raw field definitions, raising on the first invalid one."""
    return [c if isinstance(c, FieldDefinition) else FieldDefinition.model_validate(c) for c in configs]


__all__ = [
    "FieldDefinition",
    "FieldOption",
    "FieldTranslationKey",
    "FormStepConfig",
    "TranslationKeys",
    "validate_field_config",
    "parse_fields",
]
