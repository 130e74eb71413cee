"""Emit structured observability events for event classification.

``MetricClassifier`` logs the start and outcome of each classification;
classifiers log a partial event when a payload problem forces them to skip a
derived metric.

Usage
-----
>>> event_logger = ClassificationEventLogger()
>>> event_logger.log_classification_partial(
...     event_name="github.deployment_status",
...     metric="github.ci.lead_time",
...     field="deployment.created_at",
...     value="yesterday",
... )

"""

from __future__ import annotations

import enum
import typing as typ

from devmetrics.logging import get_logger, log_debug, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

logger = get_logger(__name__)


class ClassificationEventType(enum.StrEnum):
    """Structured log event types for classification runs."""

    CLASSIFICATION_STARTED = "classification.started"
    CLASSIFICATION_COMPLETED = "classification.completed"
    CLASSIFICATION_FAILED = "classification.failed"
    CLASSIFICATION_PARTIAL = "classification.partial"


class ClassificationEventLogger:
    """Emit structured classification events via femtologging."""

    def log_classification_started(self, *, event_name: str, source: str) -> None:
        """Log the start of a classification at DEBUG."""
        log_debug(
            logger,
            "[%s] event_name=%s source=%s",
            ClassificationEventType.CLASSIFICATION_STARTED,
            event_name,
            source,
        )

    def log_classification_completed(
        self,
        *,
        event_name: str,
        source: str,
        metric_count: int,
        duration: dt.timedelta,
    ) -> None:
        """Log a finished classification.

        Parameters
        ----------
        event_name
            Dotted name of the classified event.
        source
            Originating system of the event.
        metric_count
            Number of metric definitions emitted.
        duration
            Elapsed classification time.

        Returns
        -------
        None
            This method emits a structured log event and returns ``None``.

        """
        log_info(
            logger,
            "[%s] event_name=%s source=%s metric_count=%d duration_seconds=%.3f",
            ClassificationEventType.CLASSIFICATION_COMPLETED,
            event_name,
            source,
            metric_count,
            duration.total_seconds(),
        )

    def log_classification_failed(
        self,
        *,
        event_name: str,
        source: str,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a classification that raised.

        Parameters
        ----------
        event_name
            Dotted name of the classified event.
        source
            Originating system of the event.
        error
            Raised exception.
        duration
            Elapsed time between start and failure.

        Returns
        -------
        None
            This method emits a structured log event and returns ``None``.

        """
        log_error(
            logger,
            "[%s] event_name=%s source=%s duration_seconds=%.3f "
            "error_type=%s error_message=%s",
            ClassificationEventType.CLASSIFICATION_FAILED,
            event_name,
            source,
            duration.total_seconds(),
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_classification_partial(
        self,
        *,
        event_name: str,
        metric: str,
        field: str,
        value: object,
    ) -> None:
        """Log a derived metric skipped because of a payload problem."""
        log_warning(
            logger,
            "[%s] event_name=%s skipped_metric=%s field=%s value=%r",
            ClassificationEventType.CLASSIFICATION_PARTIAL,
            event_name,
            metric,
            field,
            value,
        )
