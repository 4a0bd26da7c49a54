"""Request language negotiation.

`?lang=` wins over the Accept-Language header; anything unsupported falls
back to the configured default language.
"""

from __future__ import annotations

from typing import Iterable, Optional

from fastapi import Request


def _primary_tags(accept_language: str) -> list[str]:
    ranked = []
    for index, entry in enumerate(accept_language.split(",")):
        tag, _, params = entry.strip().partition(";")
        if not tag:
            continue
        quality = 1.0
        if params.strip().startswith("q="):
            try:
                quality = float(params.strip()[2:])
            except ValueError:
                quality = 0.0
        ranked.append((-quality, index, tag.split("-")[0].lower()))
    return [tag for _, _, tag in sorted(ranked)]


def negotiate_language(
    query_lang: Optional[str],
    accept_language: Optional[str],
    supported: Iterable[str],
    default: str,
) -> str:
    supported = list(supported)
    if query_lang and query_lang.lower() in supported:
        return query_lang.lower()
    for tag in _primary_tags(accept_language or ""):
        if tag in supported:
            return tag
    return default


def request_language(request: Request) -> str:
    i18n = request.app.state.config.i18n
    return negotiate_language(
        request.query_params.get("lang"),
        request.headers.get("accept-language"),
        i18n.supported_languages,
        i18n.default_language,
    )


__all__ = ["negotiate_language", "request_language"]
