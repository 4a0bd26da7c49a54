"""Functional tests for the validation engine."""

from __future__ import annotations

import logging

import pytest

from formflow.models.field import parse_fields
from formflow.logic.currency_validation import currency_rule, validate_currency_amount
from formflow.logic.validation import get_translation_errors, validate_form


def _messages(errors):
    return {path: error.message for path, error in errors.items()}


def test_required_blank_text_gets_default_message():
    fields = parse_fields([{"name": "age", "type": "text", "required": True}])
    assert _messages(validate_form(fields, {"age": ""})) == {"age": "This field is required"}
    assert _messages(validate_form(fields, {})) == {"age": "This field is required"}


def test_required_uses_field_error_message():
    fields = parse_fields([{"name": "age", "type": "text", "required": True, "errorMessage": "Enter your age"}])
    assert _messages(validate_form(fields, {"age": ""})) == {"age": "Enter your age"}


def test_whitespace_only_text_is_missing():
    fields = parse_fields([{"name": "age", "type": "text", "required": True}])
    assert "age" in validate_form(fields, {"age": "   "})


def test_message_precedence_per_category():
    fields = parse_fields([
        {"name": "code", "type": "text", "required": True, "pattern": r"^\d+$", "errorMessage": "Fallback"},
    ])
    translations = {"code": {"pattern": "Digits only"}, "defaultRequired": "Global required"}
    assert validate_form(fields, {"code": "abc"}, translations=translations)["code"].message == "Digits only"
    # no per-field required entry, so the field literal wins over the global default
    assert validate_form(fields, {"code": ""}, translations=translations)["code"].message == "Fallback"


def test_global_default_then_generic_string():
    fields = parse_fields([{"name": "code", "type": "text", "maxLength": 3}])
    assert validate_form(fields, {"code": "abcd"}, translations={"defaultMaxLength": "Too long"})["code"].message == "Too long"
    assert validate_form(fields, {"code": "abcd"})["code"].message == "Must be 3 characters or fewer"


def test_first_failure_wins():
    calls = []

    def validator(value, form, all_data):
        calls.append(value)
        return "never shown"

    fields = parse_fields([
        {"name": "code", "type": "text", "pattern": r"^\d+$", "maxLength": 2, "validator": validator},
    ])
    errors = validate_form(fields, {"code": "abcdef"})
    assert errors["code"].message == "Invalid format"
    assert calls == ["abcdef"]


def test_pattern_is_not_applied_to_empty_optional_values():
    fields = parse_fields([{"name": "code", "type": "text", "pattern": r"^\d+$"}])
    assert validate_form(fields, {"code": ""}) == {}


def test_validator_and_validate_hooks():
    fields = parse_fields([
        {"name": "a", "type": "text", "validator": lambda v, f, d: True if v == "ok" else "errors.a.bad"},
        {"name": "b", "type": "text", "validate": lambda v, f, d: None if v == f.get("a") else "Must match a"},
        {"name": "c", "type": "text", "validator": lambda v, f, d: False},
    ])
    errors = validate_form(
        fields,
        {"a": "nope", "b": "other", "c": "x"},
        translations={"errors.a.bad": "A is bad"},
    )
    assert _messages(errors) == {"a": "A is bad", "b": "Must match a", "c": "Enter a valid value"}


def test_error_tokens_resolve_through_translator(translator):
    fields = parse_fields([{"name": "a", "type": "text", "validate": lambda v, f, d: "errors.firstName"}])
    assert validate_form(fields, {"a": "x"}, translate=translator)["a"].message == "Enter your first name"


def test_raising_rules_are_inert(caplog):
    def boom(*_args):
        raise RuntimeError("broken rule")

    fields = parse_fields([
        {"name": "a", "type": "text", "required": boom},
        {"name": "b", "type": "text", "validator": boom, "validate": boom},
    ])
    with caplog.at_level(logging.ERROR, logger="formflow.logic.resolvable"):
        errors = validate_form(fields, {"a": "", "b": "value"})
    assert errors == {}
    assert "rule_evaluation_failed" in caplog.text


def test_required_function_sees_current_and_journey_answers():
    fields = parse_fields([
        {
            "name": "reason",
            "type": "text",
            "required": lambda form, all_data: all_data.get("claimType") == "other" or form.get("flag") == "y",
        },
    ])
    assert "reason" in validate_form(fields, {"reason": ""}, all_data={"claimType": "other"})
    assert "reason" in validate_form(fields, {"reason": "", "flag": "y"})
    assert validate_form(fields, {"reason": ""}, all_data={"claimType": "rent"}) == {}


def test_checkbox_missing_and_present():
    fields = parse_fields([
        {"name": "needs", "type": "checkbox", "required": True, "options": [{"value": "a"}, {"value": "b"}]},
    ])
    assert validate_form(fields, {"needs": []})["needs"].message == "Select at least one option"
    assert "needs" in validate_form(fields, {"needs": " "})
    assert validate_form(fields, {"needs": "a"}) == {}


def test_checkbox_hooks_receive_normalized_list():
    seen = []
    fields = parse_fields([
        {"name": "needs", "type": "checkbox", "options": [{"value": "a"}], "validate": lambda v, f, d: seen.append(v)},
    ])
    validate_form(fields, {"needs": "a"})
    assert seen == [["a"]]


def test_radio_accepts_any_submitted_string():
    fields = parse_fields([{"name": "r", "type": "radio", "required": True, "options": [{"value": "yes"}]}])
    assert validate_form(fields, {"r": "not-an-option"}) == {}
    assert validate_form(fields, {})["r"].message == "Select an option"


CONTACT = parse_fields([
    {
        "name": "contactMethod",
        "type": "radio",
        "required": True,
        "options": [
            {
                "value": "email",
                "subFields": {
                    "emailAddress": {"name": "emailAddress", "type": "text", "required": True, "pattern": r"@"},
                },
            },
            {"value": "post"},
        ],
    },
])


def test_live_sub_field_is_validated_at_its_path():
    errors = validate_form(CONTACT, {"contactMethod": "email", "contactMethod.emailAddress": ""})
    assert set(errors) == {"contactMethod.emailAddress"}


def test_hidden_sub_field_never_blocks():
    assert validate_form(CONTACT, {"contactMethod": "post", "contactMethod.emailAddress": ""}) == {}


def test_journey_answers_decide_sub_field_liveness():
    errors = validate_form(CONTACT, {"contactMethod": "post"}, all_data={"contactMethod": "email"})
    assert set(errors) == {"contactMethod.emailAddress"}


def test_checkbox_sub_fields_follow_membership():
    fields = parse_fields([
        {
            "name": "needs",
            "type": "checkbox",
            "options": [
                {"value": "a"},
                {"value": "other", "subFields": {"details": {"name": "details", "type": "textarea", "required": True}}},
            ],
        },
    ])
    assert set(validate_form(fields, {"needs": ["a", "other"]})) == {"needs.details"}
    assert validate_form(fields, {"needs": ["a"]}) == {}


def test_date_field_errors_carry_parts():
    fields = parse_fields([{"name": "dob", "type": "date", "required": True}])
    errors = validate_form(fields, {"dob-day": "1", "dob-year": "2000"})
    assert errors["dob"].erroneous_parts == ["month"]


def test_date_hooks_run_only_for_valid_dates():
    seen = []
    fields = parse_fields([
        {"name": "dob", "type": "date", "validate": lambda v, f, d: seen.append(v)},
    ])
    validate_form(fields, {})
    validate_form(fields, {"dob-day": "99", "dob-month": "1", "dob-year": "2000"})
    validate_form(fields, {"dob": {"day": "1", "month": "2", "year": "2000"}})
    assert seen == [{"day": "1", "month": "2", "year": "2000"}]


def test_validation_is_pure_and_repeatable():
    body = {"contactMethod": "email", "contactMethod.emailAddress": "bad"}
    snapshot = dict(body)
    first = validate_form(CONTACT, body)
    second = validate_form(CONTACT, body)
    assert first == second
    assert body == snapshot


def test_translation_errors_are_collected_per_path():
    fields = parse_fields([{"name": "firstName", "type": "text"}, {"name": "lastName", "type": "text"}])
    t = lambda key, **kw: {"errors.firstName": "Enter your first name"}.get(key, key)  # noqa: E731
    assert get_translation_errors(t, fields) == {"firstName": "Enter your first name"}
    assert get_translation_errors(None, fields) == {}


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1,234.56", None),
        ("0.00", None),
        ("", None),
        (None, None),
        ("-1.00", "errors.rent.negativeAmount"),
        ("1000000000.01", "errors.rent.largeAmount"),
        ("12.5", "errors.rent.format"),
        ("abc", "errors.rent.format"),
    ],
)
def test_currency_amounts(value, expected):
    assert validate_currency_amount(value, "errors.rent") == expected


def test_currency_rule_as_validate_hook():
    fields = parse_fields([{"name": "rent", "type": "text", "validate": currency_rule("errors.rent")}])
    errors = validate_form(fields, {"rent": "12"}, translations={"errors.rent.format": "Enter an amount like 100.00"})
    assert errors["rent"].message == "Enter an amount like 100.00"
