"""Helpers for reading untyped TOML tables.

Used at the config boundary, where values come straight out of ``tomllib``.
"""

from __future__ import annotations

import shlex
from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripped.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_command(table: Mapping[str, object], key: str) -> tuple[str, ...] | None:
    """Get a command line given either as a shell-like string or a list.

    ``"gem build"`` and ``["gem", "build"]`` are equivalent. Raises
    ValueError for lists holding non-string items or an empty command.
    """
    value = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        parts = shlex.split(value)
    elif isinstance(value, list):
        items = cast(list[object], value)
        if not all(isinstance(item, str) for item in items):
            raise ValueError(f"{key} must be a list of strings")
        parts = [cast(str, item) for item in items]
    else:
        raise ValueError(f"{key} must be a string or a list of strings")

    if not parts:
        raise ValueError(f"{key} must not be empty")
    return tuple(parts)
