"""Handlers for collaboration and repository-administration events."""

from __future__ import annotations

import typing as typ

from devmetrics.events.payload import as_mapping, dig, is_truthy, text
from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL, UNKNOWN

from .registry import register

if typ.TYPE_CHECKING:
    from devmetrics.events.models import Event, MetricDefinition

    from .classifier import GithubEventClassifier

REGISTRATION_ACTIONS = frozenset(
    {"created", "publicized", "privatized", "edited", "renamed", "transferred"}
)


def _collaboration_metrics(
    classifier: GithubEventClassifier,
    event: Event,
    entity: str,
    action: str | None,
) -> list[MetricDefinition]:
    base = classifier.dimension_extractor.extract_github_dimensions(event)
    resolved = classifier.action_or_total(action)
    with_action = {**base, dims.ACTION: resolved}
    return [
        classifier.create_metric(
            classifier.metric_name(entity, TOTAL), 1, with_action
        ),
        classifier.create_metric(classifier.observed_name(entity, resolved), 1, base),
        classifier.create_metric(
            classifier.metric_name(entity, "by_author"),
            1,
            {
                **with_action,
                dims.AUTHOR: classifier.dimension_extractor.extract_author(event),
            },
        ),
    ]


@register("pull_request")
def classify_pull_request(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify pull request activity, including merge timing."""
    metrics = _collaboration_metrics(classifier, event, "pull_request", action)
    pull_request = as_mapping(event.data.get("pull_request"))
    if action != "closed" or not is_truthy(pull_request.get("merged")):
        return metrics

    base = classifier.dimension_extractor.extract_github_dimensions(event)
    metrics.append(
        classifier.create_metric(
            classifier.metric_name("pull_request", "merged"), 1, base
        )
    )
    time_to_merge = classifier.metric_name("pull_request", "time_to_merge")
    seconds = classifier.duration_between(
        event,
        metric=time_to_merge,
        start_field="pull_request.created_at",
        start=pull_request.get("created_at"),
        end_field="pull_request.merged_at",
        end=pull_request.get("merged_at"),
    )
    if seconds is not None:
        metrics.append(classifier.create_metric(time_to_merge, seconds, base))
    return metrics


@register("issues")
def classify_issues(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify issue activity, including time to close."""
    metrics = _collaboration_metrics(classifier, event, "issues", action)
    if action != "closed":
        return metrics

    issue = as_mapping(event.data.get("issue"))
    time_to_close = classifier.metric_name("issues", "time_to_close")
    seconds = classifier.duration_between(
        event,
        metric=time_to_close,
        start_field="issue.created_at",
        start=issue.get("created_at"),
        end_field="issue.closed_at",
        end=issue.get("closed_at"),
    )
    if seconds is not None:
        base = classifier.dimension_extractor.extract_github_dimensions(event)
        metrics.append(classifier.create_metric(time_to_close, seconds, base))
    return metrics


@register("check_run", "check_suite")
def classify_check(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify check run and check suite events.

    The counter is always emitted; status and conclusion are attached only
    when the payload carries the check object.
    """
    entity, _ = classifier.event_parts(event)
    dimensions = classifier.dimension_extractor.extract_github_dimensions(event)
    check = event.data.get(entity)
    if check is not None:
        check = as_mapping(check)
        dimensions[dims.STATUS] = text(check.get("status")) or UNKNOWN
        dimensions[dims.CONCLUSION] = text(check.get("conclusion")) or UNKNOWN
    return [
        classifier.create_metric(
            classifier.observed_name(entity, classifier.action_or_total(action)),
            1,
            dimensions,
        )
    ]


@register("create", "delete")
def classify_ref_change(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify branch and tag creation or deletion."""
    del action
    entity, _ = classifier.event_parts(event)
    base = classifier.dimension_extractor.extract_github_dimensions(event)
    ref_type = text(event.data.get("ref_type")) or UNKNOWN
    dimensions = {**base, dims.REF_TYPE: ref_type}
    if ref_type == "branch":
        dimensions[dims.BRANCH] = text(event.data.get("ref")) or UNKNOWN
    return [
        classifier.create_metric(classifier.metric_name(entity, TOTAL), 1, dimensions),
        classifier.create_metric(
            classifier.observed_name(entity, ref_type), 1, dimensions
        ),
    ]


@register("repository")
def classify_repository(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify repository lifecycle events."""
    base = classifier.dimension_extractor.extract_github_dimensions(event)
    resolved = classifier.action_or_total(action)
    with_action = {**base, dims.ACTION: resolved}
    metrics = [
        classifier.create_metric(
            classifier.observed_name("repository", resolved), 1, base
        ),
        classifier.create_metric(
            classifier.metric_name("repository", TOTAL), 1, with_action
        ),
    ]
    if resolved in REGISTRATION_ACTIONS:
        metrics.append(
            classifier.create_metric(
                classifier.metric_name("repository", "registration_event"),
                1,
                {
                    **with_action,
                    dims.AUTHOR: text(dig(event.data, "sender", "login")) or UNKNOWN,
                },
            )
        )
    return metrics


@register("workflow_dispatch")
def classify_workflow_dispatch(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Count manual workflow dispatches."""
    del action
    base = classifier.dimension_extractor.extract_github_dimensions(event)
    workflow = text(event.data.get("workflow"))
    if workflow is not None:
        base[dims.WORKFLOW_NAME] = workflow
    return [
        classifier.create_metric(
            classifier.metric_name("workflow_dispatch", TOTAL), 1, base
        )
    ]
