"""Argument narrowing for command and query payloads.

Payloads arrive as untyped JSON-like values.  Handlers call these
helpers first thing so that a bad payload fails with a
``MissingRequiredArg``/``InvalidArg`` naming the offending field before
any transaction is built.
"""
from __future__ import annotations

from typing import Any

from plate.errors import InvalidArg, MissingRequiredArg


def as_mapping(args: Any) -> dict[str, Any]:
    """Return ``args`` as a dict; ``None`` becomes an empty dict."""
    if args is None:
        return {}
    if not isinstance(args, dict):
        raise InvalidArg("args", f"expected an object, got {type(args).__name__}")
    return args


def require_str(args: Any, field: str, allow_empty: bool = False) -> str:
    value = as_mapping(args).get(field)
    if value is None:
        raise MissingRequiredArg(field)
    if not isinstance(value, str):
        raise InvalidArg(field, f"expected a string, got {type(value).__name__}")
    if not allow_empty and not value.strip():
        raise MissingRequiredArg(field)
    return value


def optional_str(args: Any, field: str, default: str | None = None) -> str | None:
    value = as_mapping(args).get(field)
    if value is None:
        return default
    if not isinstance(value, str):
        raise InvalidArg(field, f"expected a string, got {type(value).__name__}")
    return value


def require_int(
    args: Any,
    field: str,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    value = as_mapping(args).get(field)
    if value is None:
        raise MissingRequiredArg(field)
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArg(field, f"expected an integer, got {type(value).__name__}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArg(field, f"expected an integer, got {value}")
        value = int(value)
    if minimum is not None and value < minimum:
        raise InvalidArg(field, f"must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise InvalidArg(field, f"must be <= {maximum}, got {value}")
    return value


def optional_choice(args: Any, field: str, choices: tuple[str, ...]) -> str | None:
    value = optional_str(args, field)
    if value is not None and value not in choices:
        raise InvalidArg(field, f"expected one of {list(choices)}, got {value!r}")
    return value


def require_choice(args: Any, field: str, choices: tuple[str, ...]) -> str:
    value = require_str(args, field)
    if value not in choices:
        raise InvalidArg(field, f"expected one of {list(choices)}, got {value!r}")
    return value
