"""GitLab webhook classification."""

from __future__ import annotations

import re
import typing as typ

from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL

from .base import BaseClassifier

if typ.TYPE_CHECKING:
    from devmetrics.events.models import ClassificationResult, Event

_MERGE_REQUEST_PATTERN = re.compile(r"^merge_request\.(opened|closed|merged)$")


class GitlabEventClassifier(BaseClassifier):
    """Classify ``gitlab.push`` and ``gitlab.merge_request.<action>`` events."""

    source: typ.ClassVar[str] = "gitlab"

    def classify(self, event: Event) -> ClassificationResult:
        """Return the metrics derived from a GitLab event."""
        subtype = self.subtype(event)
        dimensions = self.dimension_extractor.extract_gitlab_dimensions(event)

        if subtype == "push":
            commits = self.dimension_extractor.extract_gitlab_commit_count(event)
            return self.result(
                [
                    self.create_metric(self.metric_name("push", TOTAL), 1, dimensions),
                    self.create_metric(
                        self.metric_name("push", "commits"), commits, dimensions
                    ),
                ]
            )

        if match := _MERGE_REQUEST_PATTERN.match(subtype):
            action = match.group(1)
            return self.result(
                [
                    self.create_metric(
                        self.metric_name("merge_request", TOTAL),
                        1,
                        {**dimensions, dims.ACTION: action},
                    ),
                    self.create_metric(
                        self.metric_name("merge_request", action), 1, dimensions
                    ),
                ]
            )

        return self.result(
            [self.create_metric(self.observed_name(subtype, TOTAL), 1, dimensions)]
        )
