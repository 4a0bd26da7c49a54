"""Check-your-answers rows.

One row per answered field across the journey, in step order: the field's
label, its answer as display text and a change link back to the step that
asked it. Live sub-fields follow their parent field.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional
from urllib.parse import quote

from formflow.models.errors import DATE_PARTS
from formflow.models.field import FieldDefinition, FormStepConfig
from formflow.models.field_kind import FieldKind
from formflow.models.flow import JourneyFlow
from formflow.logic.conditional_fields import get_nested_field_name, is_option_selected
from formflow.logic.field_translation import resolve_label, resolve_option_text
from formflow.logic.field_values import normalize_checkbox_value
from formflow.logic.flow_navigation import get_step_url
from formflow.logic.translation import get_translation

logger = logging.getLogger(__name__)

TranslatorFactory = Callable[[str], Any]


def format_date_answer(value: Mapping[str, Any], t: Any) -> str:
    """`27 March 1985` for a real date, `27/3/1985` for anything else."""
    day, month, year = (str(value.get(part) or "").strip() for part in DATE_PARTS)
    try:
        date = dt.date(int(year), int(month), int(day))
    except ValueError:
        return f"{day}/{month}/{year}"
    month_name = get_translation(t, f"date.monthNames.{date.month}") or date.strftime("%B")
    return f"{date.day} {month_name} {date.year}"


def _has_answer(value: Any) -> bool:
    if value is None or value == "" or value == []:
        return False
    if isinstance(value, Mapping):
        return any(str(value.get(part) or "").strip() for part in DATE_PARTS)
    return True


def format_answer(field: FieldDefinition, value: Any, t: Any) -> str:
    if field.kind is FieldKind.DATE and isinstance(value, Mapping):
        return format_date_answer(value, t)
    if field.kind in (FieldKind.RADIO, FieldKind.CHECKBOX):
        chosen = [
            resolve_option_text(option, t)
            for option in field.options or []
            if is_option_selected(value, option.value, field.kind)
        ]
        if chosen:
            return ", ".join(chosen)
        return ", ".join(normalize_checkbox_value(value))
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _field_rows(
    fields: Iterable[FieldDefinition],
    step_data: Mapping[str, Any],
    t: Any,
    change_href: str,
    parent_path: Optional[str] = None,
) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for field in fields:
        path = get_nested_field_name(parent_path, field.name) if parent_path else field.name
        value = step_data.get(path)
        if not _has_answer(value):
            continue
        label = resolve_label(field, t)
        rows.append({
            "key": {"text": label},
            "value": {"text": format_answer(field, value, t)},
            "actions": {
                "items": [{
                    "href": change_href,
                    "text": get_translation(t, "change", "Change"),
                    "visuallyHiddenText": label.lower(),
                }],
            },
        })
        for option in field.options or []:
            if option.sub_fields and is_option_selected(value, option.value, field.kind):
                rows.extend(_field_rows(option.sub_fields.values(), step_data, t, change_href, path))
    return rows


def build_summary_rows(
    flow: JourneyFlow,
    steps: Mapping[str, FormStepConfig],
    case_ref: str,
    data: Mapping[str, Any],
    translator_for: TranslatorFactory,
    language: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Build summary rows for every answered step of a journey.

    `data` is the case record (step name -> answers); `translator_for`
    returns the translator for a step's namespace. Change links carry
    `?lang=` when a language is given.
    """
    rows: List[Dict[str, Any]] = []
    for step_name in flow.step_order:
        config = steps.get(step_name)
        step_data = data.get(step_name)
        if config is None or not config.fields or not isinstance(step_data, Mapping) or not step_data:
            continue
        change_href = get_step_url(step_name, flow, case_ref)
        if language:
            change_href = f"{change_href}?lang={quote(language)}"
        rows.extend(_field_rows(config.fields, step_data, translator_for(step_name), change_href))
    logger.debug("summary_built case_ref=%s rows=%d", case_ref, len(rows))
    return rows


__all__ = ["format_date_answer", "format_answer", "build_summary_rows"]
