"""Task tracker event classification (``task.*``)."""

from __future__ import annotations

import typing as typ

from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL

from .base import BaseClassifier

if typ.TYPE_CHECKING:
    from devmetrics.events.models import ClassificationResult, Event

TASK_ACTIONS = frozenset({"created", "completed", "moved"})


class TaskEventClassifier(BaseClassifier):
    """Classify ``task.<action>`` events as ``task.item.*`` metrics."""

    source: typ.ClassVar[str] = "task"

    def classify(self, event: Event) -> ClassificationResult:
        """Return the metrics derived from a task event."""
        subtype = self.subtype(event)
        dimensions = self.dimension_extractor.extract_task_dimensions(event)
        if subtype in TASK_ACTIONS:
            return self.result(
                [
                    self.create_metric(
                        self.metric_name("item", TOTAL),
                        1,
                        {**dimensions, dims.ACTION: subtype},
                    ),
                    self.create_metric(
                        self.metric_name("item", subtype), 1, dimensions
                    ),
                ]
            )
        return self.result(
            [self.create_metric(self.observed_name(subtype, TOTAL), 1, dimensions)]
        )
