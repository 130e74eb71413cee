"""Helpers for reading canonicalized webhook payloads.

Payloads are canonicalized once when an ``Event`` is built: every mapping key
becomes a ``str`` and tuples become lists. Lookups after that point follow a
single path through the tree and treat anything of the wrong shape as absent.
"""

from __future__ import annotations

import collections.abc as cabc
import enum
import typing as typ

Payload = dict[str, typ.Any]


def canonicalize(value: object) -> typ.Any:  # noqa: ANN401 - JSON-like tree
    """Return ``value`` with mapping keys converted to strings.

    Enum keys use their value and other non-string keys use ``str()``, so a
    payload built with symbolic keys reads the same as one decoded from JSON.

    Examples
    --------
    >>> canonicalize({1: {"a": (1, 2)}})
    {'1': {'a': [1, 2]}}

    """
    if isinstance(value, cabc.Mapping):
        return {_key(key): canonicalize(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [canonicalize(item) for item in value]
    return value


def _key(key: object) -> str:
    if isinstance(key, enum.Enum):
        return str(key.value)
    if isinstance(key, str):
        return key
    return str(key)


def dig(data: object, *keys: str | int) -> typ.Any:  # noqa: ANN401 - JSON-like tree
    """Follow ``keys`` through nested mappings and lists.

    Returns ``None`` as soon as a step is missing or the intermediate value
    has the wrong shape.

    Examples
    --------
    >>> dig({"repository": {"owner": {"login": "octo"}}}, "repository", "owner", "login")
    'octo'
    >>> dig({"commits": []}, "commits", 0, "id") is None
    True

    """
    current: object = data
    for key in keys:
        if isinstance(key, int) and isinstance(current, list):
            if not -len(current) <= key < len(current):
                return None
            current = current[key]
        elif isinstance(current, cabc.Mapping):
            current = current.get(key)
        else:
            return None
        if current is None:
            return None
    return current


def text(value: object, default: str | None = None) -> str | None:
    """Return ``value`` as a stripped string, or ``default`` when blank."""
    if value is None or isinstance(value, cabc.Mapping | list):
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    rendered = str(value).strip()
    return rendered or default


def as_mapping(value: object) -> cabc.Mapping[str, typ.Any]:
    """Return ``value`` when it is a mapping, else an empty mapping."""
    if isinstance(value, cabc.Mapping):
        return value
    return {}


def as_list(value: object) -> list[typ.Any]:
    """Return ``value`` when it is a list, else an empty list."""
    if isinstance(value, list):
        return value
    return []


def as_number(value: object) -> int | float | None:
    """Return a numeric payload value, parsing numeric strings.

    Booleans are not treated as numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        for convert in (int, float):
            try:
                return convert(candidate)
            except ValueError:
                continue
    return None


def as_int(value: object, default: int = 0) -> int:
    """Return ``value`` as an integer, or ``default`` when not numeric."""
    number = as_number(value)
    if number is None:
        return default
    return int(number)


def is_truthy(value: object) -> bool:
    """Interpret loose boolean representations found in payloads.

    ``True``, non-zero numbers and the strings ``true``, ``yes``, ``y``,
    ``on`` and ``1`` (in any case) are truthy. Everything else is falsy.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "y", "on", "1"}
    return False
