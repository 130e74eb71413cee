"""Provider-neutral CI event classification (``ci.*``)."""

from __future__ import annotations

import re
import typing as typ

from devmetrics.events.payload import as_number, text
from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL, safe_token

from .base import BaseClassifier

if typ.TYPE_CHECKING:
    from devmetrics.events.models import ClassificationResult, Event, MetricDefinition

_OPERATION_PATTERN = re.compile(r"^(build|deploy)\.(started|completed|failed)$")
_PAYLOAD_EVENT = "event"


class CiEventClassifier(BaseClassifier):
    """Classify build and deploy events from any CI provider.

    Names may carry the operation and status (``ci.deploy.completed``) or use
    the ``ci.event`` form with ``operation`` and ``status`` in the payload.
    Completed operations report a duration; the payload form also reports
    deploy lead time and failed deploys as incidents.
    """

    source: typ.ClassVar[str] = "ci"

    def classify(self, event: Event) -> ClassificationResult:
        """Return the metrics derived from a CI event."""
        subtype = self.subtype(event)
        dimensions = self.dimension_extractor.extract_ci_dimensions(event)

        if subtype == _PAYLOAD_EVENT:
            operation = text(event.data.get("operation"))
            status = text(event.data.get("status"))
            if operation is not None and status is not None:
                return self.result(
                    self._payload_metrics(
                        event, safe_token(operation), safe_token(status), dimensions
                    )
                )

        if match := _OPERATION_PATTERN.match(subtype):
            operation, status = match.groups()
            metrics = self._operation_metrics(operation, status, dimensions)
            if status == "completed":
                metrics.append(
                    self.create_metric(
                        self.metric_name(operation, "duration"),
                        self.dimension_extractor.extract_ci_duration(event),
                        dimensions,
                    )
                )
            return self.result(metrics)

        return self.result(
            [self.create_metric(self.observed_name(subtype, TOTAL), 1, dimensions)]
        )

    def _operation_metrics(
        self, operation: str, status: str, dimensions: dict[str, str]
    ) -> list[MetricDefinition]:
        return [
            self.create_metric(
                self.observed_name(operation, TOTAL),
                1,
                {**dimensions, dims.STATUS: status},
            ),
            self.create_metric(self.observed_name(operation, status), 1, dimensions),
        ]

    def _payload_metrics(
        self,
        event: Event,
        operation: str,
        status: str,
        dimensions: dict[str, str],
    ) -> list[MetricDefinition]:
        metrics = self._operation_metrics(operation, status, dimensions)
        if status == "completed":
            metrics.append(
                self.create_metric(
                    self.observed_name(operation, "duration"),
                    self.dimension_extractor.extract_ci_duration(event),
                    dimensions,
                )
            )
            if operation == "deploy":
                metrics.append(
                    self.create_metric(
                        self.metric_name("deploy", "completed"), 1, dimensions
                    )
                )
                lead_time = as_number(event.data.get("lead_time"))
                if lead_time is not None:
                    metrics.append(
                        self.create_metric(
                            self.metric_name("deploy", "lead_time"),
                            float(lead_time),
                            dimensions,
                        )
                    )
        if operation == "deploy" and status == "failed":
            metrics.append(
                self.create_metric(
                    self.metric_name("deploy", "incident"), 1, dimensions
                )
            )
        return metrics
