"""Event envelopes and the metric records classifiers emit."""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import typing as typ

import msgspec

from devmetrics.common.time import parse_timestamp, utcnow
from devmetrics.errors import EventDecodeError

from .payload import Payload, canonicalize


class Event(msgspec.Struct, kw_only=True, frozen=True):
    """An inbound event envelope.

    ``data`` holds the provider payload with string keys throughout; build
    instances with :func:`build_event` or :func:`decode_event` so that
    invariant holds.
    """

    name: str
    source: str
    data: Payload = msgspec.field(default_factory=dict)
    timestamp: dt.datetime = msgspec.field(default_factory=utcnow)
    id: str | None = None

    @property
    def segments(self) -> tuple[str, ...]:
        """Return the dot-delimited segments of the event name."""
        return tuple(self.name.split("."))

    @property
    def subtype(self) -> str:
        """Return the second name segment, or an empty string."""
        parts = self.segments
        return parts[1] if len(parts) > 1 else ""

    @property
    def action(self) -> str | None:
        """Return the third name segment when present."""
        parts = self.segments
        return parts[2] if len(parts) > 2 and parts[2] else None


class MetricDefinition(msgspec.Struct, kw_only=True, frozen=True):
    """One metric emitted by a classifier.

    Attributes
    ----------
    name
        Metric name in ``source.entity.action[.detail]`` form.
    value
        Count, duration in seconds, or ratio.
    dimensions
        Normalized string-valued grouping attributes.
    timestamp
        Optional override; consumers fall back to the event time when unset.

    """

    name: str
    value: int | float = 1
    dimensions: dict[str, str] = msgspec.field(default_factory=dict)
    timestamp: dt.datetime | None = None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the JSON-ready shape handed to persistence collaborators."""
        payload: dict[str, typ.Any] = {
            "name": self.name,
            "value": self.value,
            "dimensions": dict(self.dimensions),
        }
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp.isoformat()
        return payload


class ClassificationResult(msgspec.Struct, kw_only=True, frozen=True):
    """Metrics produced for a single event."""

    metrics: list[MetricDefinition] = msgspec.field(default_factory=list)

    @property
    def names(self) -> list[str]:
        """Return metric names in emission order."""
        return [metric.name for metric in self.metrics]

    def by_name(self, name: str) -> list[MetricDefinition]:
        """Return every metric called ``name``."""
        return [metric for metric in self.metrics if metric.name == name]

    def first(self, name: str) -> MetricDefinition | None:
        """Return the first metric called ``name`` if any was emitted."""
        return next((metric for metric in self.metrics if metric.name == name), None)


class _EventEnvelope(msgspec.Struct, kw_only=True):
    """Wire shape accepted by :func:`decode_event`."""

    name: str
    source: str | None = None
    data: dict[str, typ.Any] | None = None
    timestamp: str | int | float | None = None
    id: str | int | None = None


def build_event(
    name: str,
    source: str,
    data: cabc.Mapping[typ.Any, typ.Any] | None = None,
    *,
    timestamp: object | None = None,
    event_id: str | None = None,
) -> Event:
    """Build an ``Event`` with a canonicalized payload.

    Parameters
    ----------
    name : str
        Dot-delimited event name such as ``github.push``.
    source : str
        Originating system.
    data : Mapping, optional
        Provider payload; non-string keys are converted to strings.
    timestamp : object, optional
        Event time as a datetime, ISO string or epoch seconds. Defaults to now.
    event_id : str, optional
        Opaque identifier supplied by the ingestion layer.

    Raises
    ------
    EventDecodeError
        If ``name`` or ``source`` is blank or ``timestamp`` cannot be parsed.

    """
    if not name or not name.strip():
        raise EventDecodeError.missing_name()
    if not source or not source.strip():
        raise EventDecodeError.missing_source()

    if timestamp is None:
        occurred_at = utcnow()
    else:
        try:
            occurred_at = parse_timestamp(timestamp)
        except ValueError as exc:
            raise EventDecodeError.invalid_timestamp(timestamp) from exc

    return Event(
        name=name.strip(),
        source=source.strip(),
        data=canonicalize(data) if data is not None else {},
        timestamp=occurred_at,
        id=event_id,
    )


def _from_envelope(envelope: _EventEnvelope) -> Event:
    source = envelope.source
    if source is None:
        source = envelope.name.split(".", 1)[0]
    return build_event(
        envelope.name,
        source,
        envelope.data,
        timestamp=envelope.timestamp,
        event_id=None if envelope.id is None else str(envelope.id),
    )


def _convert_envelope(loaded: object) -> Event:
    try:
        envelope = msgspec.convert(loaded, type=_EventEnvelope)
    except msgspec.ValidationError as exc:
        raise EventDecodeError.invalid_shape(f"invalid event envelope: {exc}") from exc
    return _from_envelope(envelope)


def _decode_json(raw: bytes | str) -> object:
    try:
        return msgspec.json.decode(raw)
    except msgspec.DecodeError as exc:
        raise EventDecodeError.invalid_json(exc) from exc


def decode_event(raw: bytes | str) -> Event:
    """Decode one JSON event envelope.

    When the envelope omits ``source`` the first segment of ``name`` is used.

    Raises
    ------
    EventDecodeError
        If the input is not JSON or does not describe a valid envelope.

    """
    return _convert_envelope(_decode_json(raw))


def decode_events(raw: bytes | str) -> list[Event]:
    """Decode a JSON envelope or a JSON array of envelopes."""
    loaded = _decode_json(raw)
    if isinstance(loaded, list):
        return [_convert_envelope(item) for item in loaded]
    return [_convert_envelope(loaded)]


def encode_metrics(metrics: cabc.Iterable[MetricDefinition]) -> bytes:
    """Encode metric definitions as a JSON array."""
    return msgspec.json.encode([metric.to_dict() for metric in metrics])

