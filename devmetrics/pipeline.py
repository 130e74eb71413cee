"""Batch processing: classify a stream of events and hand metrics to a sink.

Usage
-----
>>> from devmetrics.classifiers import build_default_classifier
>>> from devmetrics.events import InMemoryMetricSink, build_event
>>> sink = InMemoryMetricSink()
>>> summary = process_events(
...     [build_event("github.push", "github", {"ref": "refs/heads/main"})],
...     build_default_classifier(),
...     sink,
... )
>>> summary.events_seen
1

"""

from __future__ import annotations

import collections
import dataclasses as dc
import typing as typ

from devmetrics.errors import (
    ErrorCategory,
    EventDecodeError,
    MetricNameError,
    categorize_error,
)
from devmetrics.logging import get_logger, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from devmetrics.classifiers.base import SourceClassifier
    from devmetrics.events.models import Event
    from devmetrics.events.ports import MetricSink

logger = get_logger(__name__)


@dc.dataclass(slots=True)
class ProcessingSummary:
    """Outcome counts for one call to :func:`process_events`.

    Attributes
    ----------
    events_seen
        Events read from the source.
    metrics_emitted
        Metric definitions handed to the sink.
    failures
        Events that could not be classified, keyed by error category.

    """

    events_seen: int = 0
    metrics_emitted: int = 0
    failures: collections.Counter[ErrorCategory] = dc.field(
        default_factory=collections.Counter
    )

    @property
    def failed(self) -> int:
        """Return the number of events that failed classification."""
        return sum(self.failures.values())

    @property
    def succeeded(self) -> int:
        """Return the number of events classified without error."""
        return self.events_seen - self.failed


def process_events(
    source: cabc.Iterable[Event],
    classifier: SourceClassifier,
    sink: MetricSink,
) -> ProcessingSummary:
    """Classify every event from ``source`` and pass the metrics to ``sink``.

    Naming-contract and envelope errors are logged and counted against the
    event that raised them; the rest of the batch is still processed. Any
    other exception propagates.

    Parameters
    ----------
    source
        Events in delivery order; any ``EventSource`` qualifies.
    classifier
        Usually a ``MetricClassifier``.
    sink
        Receives each event's metrics, including empty lists.

    Returns
    -------
    ProcessingSummary
        Counts of events seen, metrics emitted and failures by category.

    """
    summary = ProcessingSummary()
    for event in source:
        summary.events_seen += 1
        try:
            result = classifier.classify(event)
        except (MetricNameError, EventDecodeError) as exc:
            category = categorize_error(exc)
            summary.failures[category] += 1
            log_warning(
                logger,
                "skipping event %s: %s error (%s)",
                event.name,
                category,
                exc,
            )
            continue
        sink.accept(event, result.metrics)
        summary.metrics_emitted += len(result.metrics)
    return summary
