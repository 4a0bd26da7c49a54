"""Functional tests for the field schema models and journey flow models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from formflow.models.field import FieldDefinition, FormStepConfig, parse_fields, validate_field_config
from formflow.models.field_kind import FieldKind
from formflow.models.flow import JourneyFlow, StepConfig, StepRoute


def test_camel_case_definition_parses_into_recursive_tree():
    field = FieldDefinition.model_validate(
        {
            "name": "contactMethod",
            "type": "radio",
            "required": True,
            "options": [
                {
                    "value": "email",
                    "subFields": {
                        "emailAddress": {"name": "emailAddress", "type": "text", "maxLength": 254},
                    },
                },
            ],
        }
    )
    assert field.kind is FieldKind.RADIO
    sub = field.options[0].sub_fields["emailAddress"]
    assert sub.max_length == 254
    assert sub.kind is FieldKind.TEXT


def test_unknown_kind_is_rejected():
    ok, result = validate_field_config({"name": "x", "type": "slider"})
    assert ok is False
    assert isinstance(result, ValidationError)


def test_unknown_attribute_is_rejected():
    with pytest.raises(ValidationError):
        FieldDefinition.model_validate({"name": "x", "type": "text", "colour": "red"})


def test_options_only_allowed_on_choice_kinds():
    with pytest.raises(ValidationError):
        FieldDefinition.model_validate({"name": "x", "type": "text", "options": [{"value": "a"}]})


def test_no_future_date_only_allowed_on_dates():
    with pytest.raises(ValidationError):
        FieldDefinition.model_validate({"name": "x", "type": "text", "noFutureDate": True})


def test_dotted_names_are_rejected():
    with pytest.raises(ValidationError):
        FieldDefinition.model_validate({"name": "a.b", "type": "text"})


def test_sub_field_key_must_match_name():
    with pytest.raises(ValidationError):
        FieldDefinition.model_validate(
            {
                "name": "parent",
                "type": "radio",
                "options": [{"value": "a", "subFields": {"child": {"name": "other", "type": "text"}}}],
            }
        )


def test_function_valued_attributes_are_kept():
    def required(form, all_data):
        return form.get("other") == "yes"

    field = FieldDefinition.model_validate(
        {"name": "x", "type": "text", "required": required, "validate": lambda v, f, a: None}
    )
    assert field.required is required
    assert callable(field.validate_)


def test_parse_fields_accepts_models_and_dicts():
    model = FieldDefinition(name="a", kind=FieldKind.TEXT)
    fields = parse_fields([model, {"name": "b", "type": "checkbox"}])
    assert [f.name for f in fields] == ["a", "b"]


def test_form_step_config_accepts_snake_and_camel_names():
    step = FormStepConfig.model_validate({"stepName": "s", "journey": "j", "fields": [], "showCancelButton": True})
    assert step.step_name == "s"
    assert step.show_cancel_button is True


def test_flow_rejects_routes_to_unknown_steps():
    with pytest.raises(ValidationError):
        JourneyFlow(
            journey_name="j",
            step_order=["a", "b"],
            steps={"a": StepConfig(routes=[StepRoute(next_step="missing")])},
        )


def test_flow_rejects_duplicate_step_order_entries():
    with pytest.raises(ValidationError):
        JourneyFlow(journey_name="j", step_order=["a", "a"])
