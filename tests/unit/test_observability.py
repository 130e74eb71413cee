"""Unit tests for classification observability events."""

from __future__ import annotations

import datetime as dt

import pytest

from devmetrics.observability import ClassificationEventLogger, ClassificationEventType
from tests.helpers.femtologging_capture import WARNING_LEVELS, capture_femto_logs


class TestClassificationEventLogger:
    """Tests for ``ClassificationEventLogger``."""

    @pytest.fixture
    def event_logger(self) -> ClassificationEventLogger:
        """Return a fresh event logger."""
        return ClassificationEventLogger()

    def test_started(self, event_logger: ClassificationEventLogger) -> None:
        """Starts are logged at DEBUG."""
        with capture_femto_logs("devmetrics.observability") as capture:
            event_logger.log_classification_started(
                event_name="github.push", source="github"
            )
            capture.wait_for_count(1)

        record = capture.records[0]
        assert record.level == "DEBUG"
        assert ClassificationEventType.CLASSIFICATION_STARTED in record.message
        assert "event_name=github.push" in record.message

    def test_completed(self, event_logger: ClassificationEventLogger) -> None:
        """Completions report the metric count and duration."""
        with capture_femto_logs("devmetrics.observability") as capture:
            event_logger.log_classification_completed(
                event_name="github.push",
                source="github",
                metric_count=9,
                duration=dt.timedelta(milliseconds=1500),
            )
            capture.wait_for_count(1)

        message = capture.records[0].message
        assert capture.records[0].level == "INFO"
        assert "metric_count=9" in message
        assert "duration_seconds=1.500" in message

    def test_failed(self, event_logger: ClassificationEventLogger) -> None:
        """Failures are logged at ERROR with the error type."""
        with capture_femto_logs("devmetrics.observability") as capture:
            event_logger.log_classification_failed(
                event_name="github.push",
                source="github",
                error=RuntimeError("boom"),
                duration=dt.timedelta(seconds=0),
            )
            capture.wait_for_count(1)

        message = capture.records[0].message
        assert capture.records[0].level == "ERROR"
        assert "error_type=RuntimeError" in message
        assert "error_message=boom" in message

    def test_partial(self, event_logger: ClassificationEventLogger) -> None:
        """Skipped derived metrics are warnings naming the field."""
        with capture_femto_logs("devmetrics.observability") as capture:
            event_logger.log_classification_partial(
                event_name="github.deployment_status",
                metric="github.ci.lead_time",
                field="deployment.created_at",
                value="yesterday",
            )
            capture.wait_for_count(1)

        message = capture.records[0].message
        assert capture.records[0].level in WARNING_LEVELS
        assert "skipped_metric=github.ci.lead_time" in message
        assert "field=deployment.created_at" in message
        assert "value='yesterday'" in message
