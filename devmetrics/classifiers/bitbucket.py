"""Bitbucket webhook classification.

Bitbucket names its events ``<resource>:<action>``; unrecognised ones are
counted as ``bitbucket.<resource>_<action>.total``.
"""

from __future__ import annotations

import re
import typing as typ

from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL

from .base import BaseClassifier

if typ.TYPE_CHECKING:
    from devmetrics.events.models import ClassificationResult, Event

_PULLREQUEST_PATTERN = re.compile(r"^pullrequest:(created|approved|merged|rejected)$")


class BitbucketEventClassifier(BaseClassifier):
    """Classify ``bitbucket.repo:push`` and pull request events."""

    source: typ.ClassVar[str] = "bitbucket"

    def classify(self, event: Event) -> ClassificationResult:
        """Return the metrics derived from a Bitbucket event."""
        subtype = self.subtype(event)
        dimensions = self.dimension_extractor.extract_bitbucket_dimensions(event)

        if subtype == "repo:push":
            commits = self.dimension_extractor.extract_bitbucket_commit_count(event)
            return self.result(
                [
                    self.create_metric(self.metric_name("push", TOTAL), 1, dimensions),
                    self.create_metric(
                        self.metric_name("push", "commits"), commits, dimensions
                    ),
                ]
            )

        if match := _PULLREQUEST_PATTERN.match(subtype):
            action = match.group(1)
            return self.result(
                [
                    self.create_metric(
                        self.metric_name("pullrequest", TOTAL),
                        1,
                        {**dimensions, dims.ACTION: action},
                    ),
                    self.create_metric(
                        self.metric_name("pullrequest", action), 1, dimensions
                    ),
                ]
            )

        return self.result(
            [self.create_metric(self.observed_name(subtype, TOTAL), 1, dimensions)]
        )
