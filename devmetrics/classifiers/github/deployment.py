"""Deployment handlers and the DORA-facing metrics derived from them."""

from __future__ import annotations

import typing as typ

from devmetrics.events.payload import as_mapping, text
from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL, UNKNOWN

from .registry import register

if typ.TYPE_CHECKING:
    from devmetrics.events.models import Event, MetricDefinition

    from .classifier import GithubEventClassifier

FAILED_STATES = frozenset({"failure", "error"})
FINAL_STATES = FAILED_STATES | {"success"}


@register("deployment")
def classify_deployment(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify a deployment request."""
    del action
    deployment = as_mapping(event.data.get("deployment"))
    dimensions = {
        **classifier.dimension_extractor.extract_github_dimensions(event),
        dims.ENVIRONMENT: text(deployment.get("environment")) or UNKNOWN,
    }
    for dimension, key in (
        (dims.DEPLOYMENT_ID, "id"),
        (dims.REF, "ref"),
        (dims.TASK, "task"),
    ):
        value = text(deployment.get(key))
        if value is not None:
            dimensions[dimension] = value
    return [
        classifier.create_metric(
            classifier.metric_name("deployment", TOTAL), 1, dimensions
        ),
        classifier.create_metric(
            classifier.metric_name("deployment", "environment"), 1, dimensions
        ),
    ]


@register("deployment_status")
def classify_deployment_status(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify a deployment status update.

    Final states feed the CI deploy counters. A successful status also yields
    ``github.ci.lead_time``: the seconds between the deployment being created
    and the status being reported.
    """
    del action
    status = as_mapping(event.data.get("deployment_status"))
    deployment = as_mapping(event.data.get("deployment"))
    environment = (
        text(status.get("environment"))
        or text(deployment.get("environment"))
        or UNKNOWN
    )
    state = text(status.get("state")) or UNKNOWN
    dimensions = {
        **classifier.dimension_extractor.extract_github_dimensions(event),
        dims.ENVIRONMENT: environment,
        dims.STATE: state,
    }

    metrics = [
        classifier.create_metric(
            classifier.metric_name("deployment_status", TOTAL), 1, dimensions
        ),
        classifier.create_metric(
            classifier.observed_name("deployment_status", state), 1, dimensions
        ),
    ]
    if state not in FINAL_STATES:
        return metrics

    metrics.append(
        classifier.create_metric(
            classifier.metric_name("ci", "deploy", TOTAL), 1, dimensions
        )
    )
    if state in FAILED_STATES:
        metrics.extend(
            classifier.create_metric(
                classifier.metric_name("ci", "deploy", detail), 1, dimensions
            )
            for detail in ("failed", "incident")
        )
        return metrics

    metrics.append(
        classifier.create_metric(
            classifier.metric_name("ci", "deploy", "completed"), 1, dimensions
        )
    )
    lead_time = classifier.metric_name("ci", "lead_time")
    seconds = classifier.duration_between(
        event,
        metric=lead_time,
        start_field="deployment.created_at",
        start=deployment.get("created_at"),
        end_field="deployment_status.created_at",
        end=status.get("created_at"),
    )
    if seconds is not None:
        metrics.append(classifier.create_metric(lead_time, seconds, dimensions))
    return metrics
