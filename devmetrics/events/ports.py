"""Ports for the collaborators that feed and consume classification.

``EventSource`` supplies already-decoded envelopes and ``MetricSink`` accepts
the emitted metrics. Both are ``runtime_checkable`` so adapters can be checked
with ``isinstance`` when they are wired together.

Usage
-----
>>> sink = InMemoryMetricSink()
>>> isinstance(sink, MetricSink)
True

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from .models import Event, MetricDefinition


@typ.runtime_checkable
class EventSource(typ.Protocol):
    """Protocol for anything that yields event envelopes."""

    def __iter__(self) -> cabc.Iterator[Event]:
        """Yield events in delivery order."""
        ...


@typ.runtime_checkable
class MetricSink(typ.Protocol):
    """Protocol for persisting metrics emitted for one event."""

    def accept(self, event: Event, metrics: cabc.Sequence[MetricDefinition]) -> None:
        """Receive the metrics classified from ``event``.

        Parameters
        ----------
        event
            The event the metrics were derived from.
        metrics
            Metric definitions in emission order; may be empty.

        """
        ...


@dc.dataclass(slots=True)
class InMemoryMetricSink:
    """Sink that keeps every metric in memory, grouped by event."""

    batches: list[tuple[Event, list[MetricDefinition]]] = dc.field(
        default_factory=list
    )

    def accept(self, event: Event, metrics: cabc.Sequence[MetricDefinition]) -> None:
        """Store ``metrics`` alongside ``event``."""
        self.batches.append((event, list(metrics)))

    @property
    def metrics(self) -> list[MetricDefinition]:
        """Return all stored metrics in arrival order."""
        return [metric for _, batch in self.batches for metric in batch]
