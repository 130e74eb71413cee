"""CI events relayed through the GitHub integration (``github.ci.*``)."""

from __future__ import annotations

import typing as typ

from devmetrics.events.payload import as_number
from devmetrics.metrics.naming import TOTAL, UNKNOWN

from .registry import register

if typ.TYPE_CHECKING:
    from devmetrics.events.models import Event, MetricDefinition

    from .classifier import GithubEventClassifier

_GENERIC_STATUS = "generic"


@register("ci")
def classify_ci(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify ``github.ci.build.<status>``, ``github.ci.deploy.<status>``
    and ``github.ci.lead_time``.
    """
    segments = event.segments
    status = segments[3] if len(segments) > 3 and segments[3] else None
    dimensions = classifier.dimension_extractor.extract_github_dimensions(event)

    match action:
        case "build" | "deploy":
            metrics = [
                classifier.create_metric(
                    classifier.metric_name("ci", action, TOTAL), 1, dimensions
                ),
                classifier.create_metric(
                    classifier.observed_name("ci", action, status or UNKNOWN),
                    1,
                    dimensions,
                ),
            ]
            duration = as_number(event.data.get("duration"))
            if duration is not None and duration > 0:
                metrics.append(
                    classifier.create_metric(
                        classifier.metric_name("ci", action, "duration"),
                        duration,
                        dimensions,
                    )
                )
            if action == "deploy" and status == "failed":
                metrics.append(
                    classifier.create_metric(
                        classifier.metric_name("ci", "deploy", "incident"),
                        1,
                        dimensions,
                    )
                )
            return metrics
        case "lead_time":
            value = as_number(event.data.get("value"))
            return [
                classifier.create_metric(
                    classifier.metric_name("ci", "lead_time"),
                    0.0 if value is None else float(value),
                    dimensions,
                )
            ]
        case _:
            return [
                classifier.create_metric(
                    classifier.observed_name(
                        "ci", action or event.subtype, status or _GENERIC_STATUS
                    ),
                    1,
                    dimensions,
                )
            ]
