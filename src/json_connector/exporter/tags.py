"""Render a host's free-form tag string into a record fragment."""

from __future__ import annotations

_JSON_STARTS = ("{", "[", '"')


def format_host_tags(tags: str | None) -> str:
    """Return the ``"host_tags":...,`` fragment for *tags*, or ``""``.

    Tags that already look like JSON (first character ``{``, ``[`` or
    ``"``) are spliced in verbatim. Anything else is wrapped in quotes as
    is; it is not escaped.
    """
    if not tags:
        return ""
    if tags.startswith(_JSON_STARTS):
        return f'"host_tags":{tags},'
    # TODO: decide whether operator-supplied plain tags should be escaped;
    # today a quote or backslash in them produces invalid JSON.
    return f'"host_tags":"{tags}",'
