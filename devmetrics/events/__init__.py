"""Event envelopes, metric records and pipeline ports."""

from __future__ import annotations

from .models import (
    ClassificationResult,
    Event,
    MetricDefinition,
    build_event,
    decode_event,
    decode_events,
    encode_metrics,
)
from .ports import EventSource, InMemoryMetricSink, MetricSink

__all__ = [
    "ClassificationResult",
    "Event",
    "EventSource",
    "InMemoryMetricSink",
    "MetricDefinition",
    "MetricSink",
    "build_event",
    "decode_event",
    "decode_events",
    "encode_metrics",
]
