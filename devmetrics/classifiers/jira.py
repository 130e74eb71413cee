"""Jira webhook classification."""

from __future__ import annotations

import re
import typing as typ

from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL

from .base import BaseClassifier

if typ.TYPE_CHECKING:
    from devmetrics.events.models import ClassificationResult, Event, MetricDefinition

_ISSUE_PATTERN = re.compile(r"^issue_(created|updated|resolved|deleted)$")
_SPRINT_PATTERN = re.compile(r"^sprint_(started|closed)$")


class JiraEventClassifier(BaseClassifier):
    """Classify ``jira.issue_<action>`` and ``jira.sprint_<action>`` events.

    Other Jira subtypes produce a single ``jira.<subtype>.total`` counter.
    """

    source: typ.ClassVar[str] = "jira"

    def classify(self, event: Event) -> ClassificationResult:
        """Return the metrics derived from a Jira event."""
        metrics = self.classify_known(event)
        if metrics is None:
            metrics = self.classify_other(event)
        return self.result(metrics)

    def classify_known(self, event: Event) -> list[MetricDefinition] | None:
        """Return issue or sprint metrics, or ``None`` for other subtypes."""
        subtype = self.subtype(event)
        if match := _ISSUE_PATTERN.match(subtype):
            return self._issue_metrics(event, match.group(1))
        if match := _SPRINT_PATTERN.match(subtype):
            dimensions = self.dimension_extractor.extract_jira_dimensions(event)
            return [
                self.create_metric(
                    self.metric_name("sprint", match.group(1)), 1, dimensions
                )
            ]
        return None

    def classify_other(self, event: Event) -> list[MetricDefinition]:
        """Return the catch-all counter for an unrecognised subtype."""
        dimensions = self.dimension_extractor.extract_jira_dimensions(event)
        return [
            self.create_metric(
                self.observed_name(self.subtype(event), TOTAL), 1, dimensions
            )
        ]

    def _issue_metrics(self, event: Event, action: str) -> list[MetricDefinition]:
        dimensions = self.dimension_extractor.extract_jira_dimensions(event)
        with_action = {**dimensions, dims.ACTION: action}
        return [
            self.create_metric(self.metric_name("issue", TOTAL), 1, with_action),
            self.create_metric(self.metric_name("issue", action), 1, dimensions),
            self.create_metric(
                self.metric_name("issue", "by_type"),
                1,
                {
                    **with_action,
                    dims.ISSUE_TYPE: self.dimension_extractor.extract_jira_issue_type(
                        event
                    ),
                },
            ),
        ]


class JiraFallbackClassifier(JiraEventClassifier):
    """Built-in Jira subset used when no Jira classifier is configured.

    Only issue and sprint events are classified; anything else yields an
    empty result.
    """

    def classify_other(self, event: Event) -> list[MetricDefinition]:
        """Return no metrics for unrecognised subtypes."""
        del event
        return []
