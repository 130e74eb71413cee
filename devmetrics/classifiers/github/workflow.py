"""GitHub Actions workflow run, job and step classification.

Completed runs feed the ``github.ci.build`` counters. Completed jobs are
inspected by name: jobs mentioning "test" feed ``github.ci.test`` and the
``dora.test`` metrics; jobs mentioning "deploy" feed ``github.ci.deploy`` and
``dora.deployment``. Each recognised step of a completed job gets its own
duration and outcome metrics.
"""

from __future__ import annotations

import typing as typ

from devmetrics.events.payload import as_list, as_mapping, text
from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import TOTAL, UNKNOWN

from .registry import register

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from devmetrics.events.models import Event, MetricDefinition

    from .classifier import GithubEventClassifier

BUILD_STATUS_MAP: dict[str, str] = {"success": "completed", "failure": "failed"}
STEP_TYPES = ("test", "build", "deploy", "check", "install", "publish")
SKIPPED_STEP_MARKERS = ("setup", "post", "initialize", "complete")
FAILED_STEP_CONCLUSIONS = frozenset({"failure", "cancelled", "timed_out"})


@register("workflow_run")
def classify_workflow_run(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify a workflow run and derive CI build metrics on completion."""
    run = as_mapping(event.data.get("workflow_run"))
    resolved = classifier.action_or_total(action)
    conclusion = text(run.get("conclusion"))
    base = classifier.dimension_extractor.extract_github_dimensions(event)
    dimensions = {
        **base,
        dims.WORKFLOW_NAME: text(run.get("name")) or UNKNOWN,
        dims.CONCLUSION: conclusion or UNKNOWN,
        dims.STATUS: text(run.get("status")) or UNKNOWN,
    }

    metrics = [
        classifier.create_metric(
            classifier.metric_name("workflow_run", TOTAL),
            1,
            {**dimensions, dims.ACTION: resolved},
        ),
        classifier.create_metric(
            classifier.observed_name("workflow_run", resolved), 1, dimensions
        ),
        classifier.create_metric(
            classifier.observed_name(
                "workflow_run", "conclusion", conclusion or UNKNOWN
            ),
            1,
            dimensions,
        ),
    ]
    if resolved != "completed":
        return metrics

    mapped = BUILD_STATUS_MAP.get(conclusion or "", conclusion or UNKNOWN)
    metrics.extend(
        [
            classifier.create_metric(
                classifier.metric_name("ci", "build", TOTAL), 1, dimensions
            ),
            classifier.create_metric(
                classifier.observed_name("ci", "build", mapped), 1, dimensions
            ),
        ]
    )
    build_duration = classifier.metric_name("ci", "build", "duration")
    seconds = classifier.duration_between(
        event,
        metric=build_duration,
        start_field="workflow_run.created_at",
        start=run.get("created_at"),
        end_field="workflow_run.updated_at",
        end=run.get("updated_at"),
    )
    if seconds is not None:
        metrics.extend(
            [
                classifier.create_metric(build_duration, seconds, dimensions),
                classifier.create_metric(
                    classifier.metric_name("workflow_run", "duration"),
                    seconds,
                    dimensions,
                ),
            ]
        )
    return metrics


def _job_dimensions(
    base: cabc.Mapping[str, str], job: cabc.Mapping[str, typ.Any]
) -> dict[str, object]:
    dimensions: dict[str, object] = {
        **base,
        dims.JOB_NAME: text(job.get("name")) or UNKNOWN,
        dims.WORKFLOW_NAME: text(job.get("workflow_name")) or UNKNOWN,
        dims.BRANCH: text(job.get("head_branch")) or UNKNOWN,
        dims.RUNNER: text(job.get("runner_name")) or UNKNOWN,
        dims.CONCLUSION: text(job.get("conclusion")) or UNKNOWN,
        dims.STATUS: text(job.get("status")) or UNKNOWN,
    }
    run_attempt = job.get("run_attempt")
    if run_attempt is not None:
        dimensions[dims.RUN_ATTEMPT] = run_attempt
    return dimensions


@register("workflow_job")
def classify_workflow_job(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify a workflow job, its test/deploy role and its steps."""
    job = as_mapping(event.data.get("workflow_job"))
    resolved = classifier.action_or_total(action)
    conclusion = text(job.get("conclusion"))
    base = classifier.dimension_extractor.extract_github_dimensions(event)
    dimensions = _job_dimensions(base, job)

    metrics = [
        classifier.create_metric(
            classifier.metric_name("workflow_job", TOTAL),
            1,
            {**dimensions, dims.ACTION: resolved},
        ),
        classifier.create_metric(
            classifier.observed_name("workflow_job", resolved), 1, dimensions
        ),
    ]
    if conclusion is not None:
        metrics.append(
            classifier.create_metric(
                classifier.observed_name("workflow_job", "conclusion", conclusion),
                1,
                dimensions,
            )
        )
    if resolved != "completed":
        return metrics

    job_duration = classifier.metric_name("workflow_job", "duration")
    seconds = classifier.duration_between(
        event,
        metric=job_duration,
        start_field="workflow_job.started_at",
        start=job.get("started_at"),
        end_field="workflow_job.completed_at",
        end=job.get("completed_at"),
    )
    if seconds is not None:
        metrics.append(classifier.create_metric(job_duration, seconds, dimensions))

    job_name = (text(job.get("name")) or "").lower()
    succeeded = conclusion == "success"
    if "test" in job_name:
        metrics.extend(
            _test_job_metrics(classifier, dimensions, seconds, succeeded=succeeded)
        )
    if "deploy" in job_name:
        metrics.extend(
            _deploy_job_metrics(
                classifier,
                dimensions,
                seconds,
                succeeded=succeeded,
                reason=conclusion or UNKNOWN,
            )
        )
    metrics.extend(_step_metrics(classifier, event, job, dimensions))
    return metrics


def _test_job_metrics(
    classifier: GithubEventClassifier,
    dimensions: cabc.Mapping[str, object],
    seconds: int | None,
    *,
    succeeded: bool,
) -> list[MetricDefinition]:
    metrics: list[MetricDefinition] = []
    if seconds is not None:
        metrics.append(
            classifier.create_metric(
                classifier.metric_name("ci", "test", "duration"), seconds, dimensions
            )
        )
    metrics.extend(
        [
            classifier.create_metric(
                classifier.metric_name("ci", "test", "success"),
                1 if succeeded else 0,
                dimensions,
            ),
            classifier.create_metric(
                classifier.metric_name("test", "run", source="dora"), 1, dimensions
            ),
        ]
    )
    if not succeeded:
        metrics.extend(
            [
                classifier.create_metric(
                    classifier.metric_name("ci", "test", "failed"), 1, dimensions
                ),
                classifier.create_metric(
                    classifier.metric_name("test", "failure", source="dora"),
                    1,
                    dimensions,
                ),
            ]
        )
    return metrics


def _deploy_job_metrics(
    classifier: GithubEventClassifier,
    dimensions: cabc.Mapping[str, object],
    seconds: int | None,
    *,
    succeeded: bool,
    reason: str,
) -> list[MetricDefinition]:
    metrics: list[MetricDefinition] = []
    if seconds is not None:
        metrics.append(
            classifier.create_metric(
                classifier.metric_name("ci", "deploy", "duration"),
                seconds,
                dimensions,
            )
        )
    outcome = "completed" if succeeded else "failed"
    metrics.extend(
        [
            classifier.create_metric(
                classifier.metric_name("ci", "deploy", outcome), 1, dimensions
            ),
            classifier.create_metric(
                classifier.metric_name("deployment", "attempt", source="dora"),
                1,
                dimensions,
            ),
        ]
    )
    if not succeeded:
        metrics.append(
            classifier.create_metric(
                classifier.metric_name("deployment", "failure", source="dora"),
                1,
                {**dimensions, dims.REASON: reason},
            )
        )
    return metrics


def step_type(step_name: str) -> str | None:
    """Return the step category for ``step_name``.

    Housekeeping steps added by the runner (set up, post, initialize,
    complete) are ignored.

    Examples
    --------
    >>> step_type("Run unit tests")
    'test'
    >>> step_type("Set up job") is None
    True

    """
    lowered = step_name.lower()
    if any(marker in lowered for marker in SKIPPED_STEP_MARKERS):
        return None
    return next((kind for kind in STEP_TYPES if kind in lowered), None)


def _step_metrics(
    classifier: GithubEventClassifier,
    event: Event,
    job: cabc.Mapping[str, typ.Any],
    dimensions: cabc.Mapping[str, object],
) -> list[MetricDefinition]:
    metrics: list[MetricDefinition] = []
    for index, raw_step in enumerate(as_list(job.get("steps"))):
        step = as_mapping(raw_step)
        name = text(step.get("name"))
        kind = step_type(name) if name else None
        if kind is None:
            continue
        started_at = step.get("started_at")
        completed_at = step.get("completed_at")
        if started_at is None or completed_at is None:
            continue
        duration_name = classifier.metric_name("workflow_step", kind, "duration")
        seconds = classifier.duration_between(
            event,
            metric=duration_name,
            start_field=f"workflow_job.steps[{index}].started_at",
            start=started_at,
            end_field=f"workflow_job.steps[{index}].completed_at",
            end=completed_at,
        )
        if seconds is None:
            continue
        step_dimensions = {**dimensions, dims.STEP_NAME: name}
        outcome = (
            "failure"
            if text(step.get("conclusion")) in FAILED_STEP_CONCLUSIONS
            else "success"
        )
        metrics.extend(
            [
                classifier.create_metric(duration_name, seconds, step_dimensions),
                classifier.create_metric(
                    classifier.metric_name("workflow_step", kind, outcome),
                    1,
                    step_dimensions,
                ),
            ]
        )
    return metrics
