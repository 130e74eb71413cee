"""Catch-all classification for events no source claims."""

from __future__ import annotations

import typing as typ

from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL

from .base import BaseClassifier

if typ.TYPE_CHECKING:
    from devmetrics.events.models import ClassificationResult, Event


class GenericEventClassifier(BaseClassifier):
    """Count any event as ``generic.<folded name>.total``.

    Dots in the event name are folded to underscores so the result is still a
    three-segment name.

    Examples
    --------
    >>> from devmetrics.events import build_event
    >>> GenericEventClassifier().classify(
    ...     build_event("sentry.issue.created", "sentry")
    ... ).names
    ['generic.sentry_issue_created.total']

    """

    source: typ.ClassVar[str] = "generic"

    def classify(self, event: Event) -> ClassificationResult:
        """Return a single counter for ``event``."""
        return self.result(
            [
                self.create_metric(
                    self.observed_name(event.name.replace(".", "_"), TOTAL),
                    1,
                    {dims.SOURCE: event.source},
                )
            ]
        )
