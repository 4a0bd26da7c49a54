"""Functional tests for the translation provider and locale resources."""

from __future__ import annotations

import json

from formflow.config import DEFAULT_LOCALES_DIR
from formflow.logic.translation import (
    Translator,
    flatten_translations,
    get_translation,
    load_translations,
    step_namespace,
)


def test_step_namespace_is_camel_case():
    assert step_namespace("enter-user-details") == "enterUserDetails"
    assert step_namespace("summary") == "summary"


def test_lookup_interpolation_and_missing_keys(translator):
    assert translator("errors.firstName") == "Enter your first name"
    assert translator("errors.date.missingOne", missingField="day") == "The date must include a day"
    assert translator("nope.missing") == "nope.missing"
    assert translator("nope.missing", default="Fallback") == "Fallback"


def test_objects_only_when_requested(translator):
    assert translator("characterCount") == "characterCount"
    assert translator("characterCount", return_objects=True)["charactersAtLimitText"] == "None left"


def test_get_translation_treats_echoed_key_as_missing(translator):
    assert get_translation(translator, "firstNameLabel") == "First name"
    assert get_translation(translator, "lastNameLabel") is None
    assert get_translation(translator, "lastNameLabel", "Last name") == "Last name"
    assert get_translation(None, "anything", "x") == "x"


def test_flatten_keeps_subtrees_and_dotted_keys():
    flat = flatten_translations({"errors": {"title": "T", "date": {"required": "R"}}})
    assert flat["errors.title"] == "T"
    assert flat["errors.date.required"] == "R"
    assert flat["errors"]["title"] == "T"


def test_namespaces_merge_left_to_right(tmp_path):
    (tmp_path / "en").mkdir()
    (tmp_path / "en" / "common.json").write_text(json.dumps({"title": "Common", "back": "Back"}), encoding="utf-8")
    (tmp_path / "en" / "myStep.json").write_text(json.dumps({"title": "Step"}), encoding="utf-8")
    (tmp_path / "en" / "broken.json").write_text("{not json", encoding="utf-8")
    merged = load_translations(tmp_path, "en", ["common", "myStep", "broken", "absent"])
    assert merged == {"title": "Step", "back": "Back"}


def test_for_step_overlays_requested_language_on_fallback():
    t = Translator.for_step(DEFAULT_LOCALES_DIR, "cy", "enter-user-details", log_missing=False)
    assert t("buttons.continue") == "Parhau"
    assert t("firstNameLabel") == "Enw cyntaf"
    # only present in the English namespace
    assert t("phoneNumberHint") == "For international numbers include the country code"


def test_bundled_locales_cover_the_same_common_keys():
    en = flatten_translations(load_translations(DEFAULT_LOCALES_DIR, "en", ["common"]))
    cy = flatten_translations(load_translations(DEFAULT_LOCALES_DIR, "cy", ["common"]))
    assert set(en) == set(cy)
