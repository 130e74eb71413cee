"""GitHub webhook classification."""

from __future__ import annotations

import typing as typ

from devmetrics.classifiers.base import BaseClassifier
from devmetrics.metrics.naming import TOTAL

# Handler modules register themselves on import.
from . import activity, ci, deployment, push, workflow  # noqa: F401
from .registry import get_handler

if typ.TYPE_CHECKING:
    from devmetrics.events.models import ClassificationResult, Event, MetricDefinition


class GithubEventClassifier(BaseClassifier):
    """Classify ``github.<event_type>[.<action>]`` events.

    The second name segment selects a registered handler. Event types without
    one fall back to a single ``github.<event_type>.<action-or-total>``
    counter so every syntactically valid name yields a result.

    Examples
    --------
    >>> from devmetrics.events import build_event
    >>> result = GithubEventClassifier().classify(
    ...     build_event("github.watch.started", "github")
    ... )
    >>> result.names
    ['github.watch.started']

    """

    source: typ.ClassVar[str] = "github"

    def classify(self, event: Event) -> ClassificationResult:
        """Return the metrics derived from a GitHub event."""
        event_type, action = self.event_parts(event)
        handler = get_handler(event_type)
        if handler is None:
            return self.result(self._generic_metrics(event, event_type, action))
        return self.result(handler(self, event, action))

    def _generic_metrics(
        self, event: Event, event_type: str, action: str | None
    ) -> list[MetricDefinition]:
        dimensions = self.dimension_extractor.extract_github_dimensions(event)
        return [
            self.create_metric(
                self.observed_name(event_type, action or TOTAL), 1, dimensions
            )
        ]
