"""
Common helpers shared by routes and handlers.
"""

from typing import Any, Iterable

_REQUEST_SECTIONS = {"body", "query", "path", "header", "cookie"}


def field_name(loc: Iterable[Any]) -> str:
    """Dotted field path from a pydantic error location, without the request section."""
    parts = [str(p) for p in loc]
    if parts and parts[0] in _REQUEST_SECTIONS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def format_field_errors(errors: Iterable[dict]) -> list[dict[str, str]]:
    """pydantic error dicts -> [{field, message}], one entry per failing field."""
    out: list[dict[str, str]] = []
    seen: set[str] = set()
    for err in errors:
        field = field_name(err.get("loc", ()))
        if field in seen:
            continue
        seen.add(field)
        message = str(err.get("msg", "Invalid value"))
        # pydantic prefixes messages raised from validators.
        message = message.removeprefix("Value error, ")
        out.append({"field": field, "message": message})
    return out
