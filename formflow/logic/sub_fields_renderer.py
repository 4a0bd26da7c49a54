"""Markup for nested sub-fields placed inside choice-item conditional reveals.

Sub-field views are rendered with Jinja2 so that escaping is handled by the
template engine. A rendering failure is logged and yields an empty string so
the parent field still renders.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

logger = logging.getLogger(__name__)

SUB_FIELDS_TEMPLATE = "components/sub_fields.html"

jinja_env = Environment(
    loader=PackageLoader("formflow", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def build_sub_fields_html(sub_field_views: List[Dict[str, Any]], env: Optional[Environment] = None) -> str:
    """Render the given sub-field views; empty string when there is nothing to show."""
    renderable = [view for view in sub_field_views if view.get("component") and view.get("component_type")]
    if not renderable:
        return ""
    try:
        template = (env or jinja_env).get_template(SUB_FIELDS_TEMPLATE)
        return template.render(sub_fields=renderable).strip()
    except TemplateError:
        logger.error("sub_fields_render_failed count=%d", len(renderable), exc_info=True)
        return ""


__all__ = ["build_sub_fields_html", "jinja_env", "SUB_FIELDS_TEMPLATE"]
