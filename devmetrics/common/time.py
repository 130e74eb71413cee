"""Time helpers for webhook timestamps and date-valued dimensions."""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def parse_timestamp(value: object) -> dt.datetime:
    """Parse a webhook timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (a trailing ``Z`` is allowed), ``datetime`` and
    ``date`` objects, and integer or float epoch seconds. Naive values are
    taken to be UTC because webhook providers document their timestamps in UTC
    when they omit an offset.

    Raises
    ------
    ValueError
        If ``value`` is empty or cannot be interpreted as a point in time.

    """
    if isinstance(value, bool):
        msg = f"not a timestamp: {value!r}"
        raise ValueError(msg)
    if isinstance(value, dt.datetime):
        parsed = value
    elif isinstance(value, dt.date):
        parsed = dt.datetime(value.year, value.month, value.day)
    elif isinstance(value, int | float):
        try:
            parsed = dt.datetime.fromtimestamp(value, dt.UTC)
        except (OverflowError, OSError) as exc:
            msg = f"epoch seconds out of range: {value!r}"
            raise ValueError(msg) from exc
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        parsed = dt.datetime.fromisoformat(text)
    else:
        msg = f"not a timestamp: {value!r}"
        raise ValueError(msg)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


def format_date(value: object) -> str:
    """Format ``value`` as ``YYYY-MM-DD``.

    Strings are parsed first; a timezone-aware value is rendered in its own
    offset so a commit made late in the evening keeps its local calendar day.
    """
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            return dt.datetime.fromisoformat(text).date().isoformat()
        except ValueError:
            return dt.date.fromisoformat(text).isoformat()
    return parse_timestamp(value).date().isoformat()


def format_timestamp(value: object) -> str:
    """Format ``value`` as an ISO-8601 UTC timestamp."""
    return parse_timestamp(value).isoformat()


def start_of_day(day: str) -> dt.datetime:
    """Return UTC midnight for a ``YYYY-MM-DD`` string."""
    parsed = dt.date.fromisoformat(day)
    return dt.datetime(parsed.year, parsed.month, parsed.day, tzinfo=dt.UTC)


def seconds_between(start: object, end: object) -> int:
    """Return whole seconds from ``start`` to ``end``.

    Raises
    ------
    ValueError
        If either value cannot be parsed.

    """
    return int((parse_timestamp(end) - parse_timestamp(start)).total_seconds())
