"""Shared classifier protocol and helpers."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from devmetrics.common.time import parse_timestamp
from devmetrics.events.models import ClassificationResult, MetricDefinition
from devmetrics.extractors.dimensions import DimensionExtractor
from devmetrics.metrics.naming import DEFAULT_NAMING_RULES, TOTAL, MetricNamingRules
from devmetrics.observability import ClassificationEventLogger

if typ.TYPE_CHECKING:
    import datetime as dt

    from devmetrics.events.models import Event


@typ.runtime_checkable
class SourceClassifier(typ.Protocol):
    """Protocol implemented by every per-source classifier."""

    def classify(self, event: Event) -> ClassificationResult:
        """Return the metrics derived from ``event``."""
        ...


class NullClassifier:
    """Classifier used when a source has no concrete implementation."""

    def classify(self, event: Event) -> ClassificationResult:
        """Return an empty result."""
        del event
        return ClassificationResult()


class BaseClassifier:
    """Common plumbing for per-source classifiers.

    Subclasses set ``source`` and implement :meth:`classify`. Collaborators are
    injected once and never mutated, so instances can be shared across
    threads.

    Parameters
    ----------
    dimension_extractor : DimensionExtractor, optional
        Payload dimension extractor.
    naming_rules : MetricNamingRules, optional
        Naming rules used to build and check metric names.
    event_logger : ClassificationEventLogger, optional
        Receives partial-classification warnings.

    """

    source: typ.ClassVar[str]

    def __init__(
        self,
        dimension_extractor: DimensionExtractor | None = None,
        naming_rules: MetricNamingRules | None = None,
        event_logger: ClassificationEventLogger | None = None,
    ) -> None:
        """Store read-only collaborators."""
        self.dimension_extractor = dimension_extractor or DimensionExtractor()
        self.naming_rules = naming_rules or DEFAULT_NAMING_RULES
        self.event_logger = event_logger or ClassificationEventLogger()

    def classify(self, event: Event) -> ClassificationResult:
        """Return the metrics derived from ``event``."""
        raise NotImplementedError

    def metric_name(
        self,
        entity: str,
        action: str,
        detail: str | None = None,
        *,
        source: str | None = None,
    ) -> str:
        """Build a literal, vocabulary-checked metric name."""
        return self.naming_rules.build(source or self.source, entity, action, detail)

    def observed_name(
        self,
        entity: object,
        action: object,
        detail: object | None = None,
        *,
        source: str | None = None,
    ) -> str:
        """Build a metric name whose segments come from payload data."""
        return self.naming_rules.build_observed(
            source or self.source, entity, action, detail
        )

    def create_metric(
        self,
        name: str,
        value: float = 1,
        dimensions: cabc.Mapping[str, object] | None = None,
        *,
        timestamp: dt.datetime | None = None,
    ) -> MetricDefinition:
        """Return a metric definition with normalized dimensions."""
        return MetricDefinition(
            name=name,
            value=value,
            dimensions=self.naming_rules.normalize_dimensions(dimensions or {}),
            timestamp=timestamp,
        )

    def subtype(self, event: Event) -> str:
        """Return the event name with the source prefix removed."""
        return event.name.removeprefix(f"{self.source}.")

    def event_parts(self, event: Event) -> tuple[str, str | None]:
        """Return the event type and optional action after the prefix."""
        parts = self.subtype(event).split(".")
        action = parts[1] if len(parts) > 1 and parts[1] else None
        return (parts[0], action)

    def action_or_total(self, action: str | None) -> str:
        """Return ``action`` or the ``total`` placeholder."""
        return action or TOTAL

    def duration_between(
        self,
        event: Event,
        *,
        metric: str,
        start_field: str,
        start: object,
        end_field: str,
        end: object,
    ) -> int | None:
        """Return whole seconds between two payload timestamps.

        Returns ``None`` when either value is missing. Unparseable values are
        logged as a partial classification for ``metric`` and also yield
        ``None``.
        """
        if start is None or end is None:
            return None
        parsed: list[dt.datetime] = []
        for field, value in ((start_field, start), (end_field, end)):
            try:
                parsed.append(parse_timestamp(value))
            except ValueError:
                self.event_logger.log_classification_partial(
                    event_name=event.name,
                    metric=metric,
                    field=field,
                    value=value,
                )
                return None
        return int((parsed[1] - parsed[0]).total_seconds())

    @staticmethod
    def result(metrics: cabc.Iterable[MetricDefinition]) -> ClassificationResult:
        """Wrap ``metrics`` in a classification result."""
        return ClassificationResult(metrics=list(metrics))
