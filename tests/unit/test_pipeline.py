"""Unit tests for batch processing."""

from __future__ import annotations

import typing as typ

import pytest

from devmetrics.classifiers import MetricClassifier
from devmetrics.errors import ErrorCategory, EventDecodeError, MetricNameError
from devmetrics.events import (
    ClassificationResult,
    InMemoryMetricSink,
    MetricDefinition,
    MetricSink,
    build_event,
)
from devmetrics.pipeline import ProcessingSummary, process_events
from tests.helpers.event_builders import PushEventSpec
from tests.helpers.femtologging_capture import WARNING_LEVELS, capture_femto_logs

if typ.TYPE_CHECKING:
    from devmetrics.events import Event


class _ScriptedClassifier:
    """Classifier whose behaviour depends on the event name."""

    def classify(self, event: Event) -> ClassificationResult:
        match event.subtype:
            case "naming":
                raise MetricNameError.unknown_source("svn")
            case "decode":
                raise EventDecodeError.invalid_shape("bad data")
            case "boom":
                msg = "classifier bug"
                raise RuntimeError(msg)
            case _:
                return ClassificationResult(
                    metrics=[MetricDefinition(name="task.item.total")]
                )


class TestProcessEvents:
    """Tests for ``process_events``."""

    def test_default_classifier(self, default_classifier: MetricClassifier) -> None:
        """Every event is classified and handed to the sink."""
        sink = InMemoryMetricSink()
        events = [
            PushEventSpec().build(),
            build_event("gitlab.custom_thing", "gitlab"),
            build_event("sentry.issue.created", "sentry"),
        ]

        summary = process_events(events, default_classifier, sink)

        assert summary.events_seen == 3
        assert summary.failed == 0
        assert summary.succeeded == 3
        assert summary.metrics_emitted == len(sink.metrics) == 6
        assert [event.name for event, _ in sink.batches] == [
            "github.push",
            "gitlab.custom_thing",
            "sentry.issue.created",
        ]

    def test_failures_are_counted(self) -> None:
        """Contract and decode errors skip only the offending event."""
        sink = InMemoryMetricSink()
        events = [
            build_event("task.naming", "task"),
            build_event("task.ok", "task"),
            build_event("task.decode", "task"),
        ]

        with capture_femto_logs("devmetrics.pipeline") as capture:
            summary = process_events(events, _ScriptedClassifier(), sink)
            capture.wait_for_count(2)

        assert summary.failures == {
            ErrorCategory.NAMING_CONTRACT: 1,
            ErrorCategory.INVALID_EVENT: 1,
        }
        assert summary.succeeded == 1
        assert [event.name for event, _ in sink.batches] == ["task.ok"]
        assert all(record.level in WARNING_LEVELS for record in capture.records)
        assert "task.naming" in capture.records[0].message

    def test_unexpected_errors_propagate(self) -> None:
        """Anything other than a contract or decode error is a bug."""
        with pytest.raises(RuntimeError, match="classifier bug"):
            process_events(
                [build_event("task.boom", "task")],
                _ScriptedClassifier(),
                InMemoryMetricSink(),
            )

    def test_empty_results_reach_the_sink(self) -> None:
        """Events without metrics are still delivered."""
        sink = InMemoryMetricSink()
        process_events(
            [build_event("gitlab.custom_thing", "gitlab")], MetricClassifier(), sink
        )

        assert len(sink.batches) == 1
        assert sink.batches[0][1] == []

    def test_summary_defaults(self) -> None:
        """A fresh summary has no failures."""
        summary = ProcessingSummary()

        assert summary.failed == 0
        assert summary.succeeded == 0

    def test_sink_protocol(self) -> None:
        """The in-memory sink satisfies ``MetricSink``."""
        assert isinstance(InMemoryMetricSink(), MetricSink)
