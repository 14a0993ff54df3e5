"""Render pydantic validation errors as short, caller-facing messages.

Messages name the offending field in quotes followed by the reason, e.g.
``"name" is required``.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence


def _field_name(loc: Sequence[Any]) -> str:
    for part in reversed(tuple(loc)):
        if isinstance(part, str):
            return part
    return "value"


def format_validation_error(error: Mapping[str, Any]) -> str:
    """Format one pydantic error dict."""
    field = _field_name(error.get("loc", ()))
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f'"{field}" is required'
    if kind == "string_too_short":
        if ctx.get("min_length") == 1:
            return f'"{field}" is not allowed to be empty'
        return f'"{field}" length must be at least {ctx.get("min_length")} characters long'
    if kind == "string_too_long":
        return (
            f'"{field}" length must be less than or equal to '
            f'{ctx.get("max_length")} characters long'
        )
    if kind == "string_type":
        return f'"{field}" must be a string'
    if kind in ("int_parsing", "int_type", "int_from_float"):
        return f'"{field}" must be a valid integer'
    if kind in ("greater_than_equal", "less_than_equal"):
        bound = ctx.get("ge", ctx.get("le"))
        relation = "greater" if kind == "greater_than_equal" else "less"
        return f'"{field}" must be {relation} than or equal to {bound}'

    msg = str(error.get("msg", "is invalid"))
    return f'"{field}" {msg[:1].lower()}{msg[1:]}'


def first_validation_message(errors: Sequence[Mapping[str, Any]]) -> str:
    """Message for the first error of a failed validation."""
    if not errors:
        return '"value" is invalid'
    return format_validation_error(errors[0])


__all__ = ["first_validation_message", "format_validation_error"]
