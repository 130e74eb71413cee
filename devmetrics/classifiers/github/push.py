"""Push event classification.

A push yields fixed counters (total, branch activity, commits, commits by
author), one ``commit_type`` metric per parseable commit message, daily commit
volume grouped by each commit's own timestamp, and file hotspot metrics from
the paths the commits touched.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from devmetrics.common.time import format_date, start_of_day, utcnow
from devmetrics.events.payload import dig, text
from devmetrics.metrics import dimensions as dims
from devmetrics.metrics.naming import NONE, UNKNOWN

from .registry import register

if typ.TYPE_CHECKING:
    import datetime as dt

    from devmetrics.analysis.paths import FileChangeSummary
    from devmetrics.events.models import Event, MetricDefinition

    from .classifier import GithubEventClassifier

_ENTITY = "push"


@register("push")
def classify_push(
    classifier: GithubEventClassifier,
    event: Event,
    action: str | None,
) -> list[MetricDefinition]:
    """Classify a ``github.push`` event."""
    del action
    extractor = classifier.dimension_extractor
    base = extractor.extract_github_dimensions(event)
    commits = extractor.extract_commits(event)
    commit_count = len(commits)
    author = extractor.extract_push_author(event)

    metrics = [
        classifier.create_metric(classifier.metric_name(_ENTITY, "total"), 1, base),
        classifier.create_metric(
            classifier.metric_name(_ENTITY, "branch_activity"),
            1,
            {**base, dims.BRANCH: extractor.extract_branch(event)},
        ),
        classifier.create_metric(
            classifier.metric_name(_ENTITY, "commits"), commit_count, base
        ),
        classifier.create_metric(
            classifier.metric_name(_ENTITY, "by_author"),
            commit_count,
            {**base, dims.AUTHOR: author},
        ),
    ]
    if not commits:
        return metrics

    metrics.extend(_commit_metrics(classifier, event, commits, base, author))
    summary = extractor.extract_file_changes(event)
    if summary is not None:
        metrics.extend(_file_change_metrics(classifier, summary, base))
    return metrics


def _commit_metrics(
    classifier: GithubEventClassifier,
    event: Event,
    commits: cabc.Sequence[cabc.Mapping[str, typ.Any]],
    base: dict[str, str],
    push_author: str,
) -> list[MetricDefinition]:
    extractor = classifier.dimension_extractor
    daily_name = classifier.metric_name("commit_volume", "daily")
    metrics: list[MetricDefinition] = []
    commits_by_date: dict[str, int] = {}
    day_starts: dict[str, dt.datetime] = {}

    for index, commit in enumerate(commits):
        timestamp = commit.get("timestamp")
        if timestamp is not None:
            try:
                commit_date = format_date(timestamp)
                day_starts.setdefault(commit_date, start_of_day(commit_date))
            except ValueError:
                classifier.event_logger.log_classification_partial(
                    event_name=event.name,
                    metric=daily_name,
                    field=f"commits[{index}].timestamp",
                    value=timestamp,
                )
            else:
                commits_by_date[commit_date] = commits_by_date.get(commit_date, 0) + 1

        parts = extractor.extract_conventional_commit_parts(commit)
        if parts.type is None:
            continue
        scope = parts.scope or NONE
        metrics.append(
            classifier.create_metric(
                classifier.metric_name(_ENTITY, "commit_type"),
                1,
                {
                    **base,
                    dims.TYPE: parts.type,
                    dims.SCOPE: scope,
                    dims.CONVENTIONAL: parts.conventional,
                },
            )
        )
        if parts.breaking:
            commit_author = (
                text(dig(commit, "author", "name"))
                or text(dig(commit, "author", "email"))
                or push_author
            )
            metrics.append(
                classifier.create_metric(
                    classifier.metric_name(_ENTITY, "breaking_change"),
                    1,
                    {
                        **base,
                        dims.TYPE: parts.type,
                        dims.SCOPE: scope,
                        dims.AUTHOR: commit_author or UNKNOWN,
                    },
                )
            )

    delivery_date = format_date(utcnow())
    for commit_date, count in commits_by_date.items():
        metrics.append(
            classifier.create_metric(
                daily_name,
                count,
                {
                    **base,
                    dims.DATE: commit_date,
                    dims.COMMIT_DATE: commit_date,
                    dims.DELIVERY_DATE: delivery_date,
                },
                timestamp=day_starts[commit_date],
            )
        )
    return metrics


def _file_change_metrics(
    classifier: GithubEventClassifier,
    summary: FileChangeSummary,
    base: dict[str, str],
) -> list[MetricDefinition]:
    def name(action: str) -> str:
        return classifier.metric_name(_ENTITY, action)

    analysis = summary.analysis
    metrics = [
        classifier.create_metric(name("files_added"), len(summary.added), base),
        classifier.create_metric(name("files_modified"), len(summary.modified), base),
        classifier.create_metric(name("files_removed"), len(summary.removed), base),
    ]

    metrics.extend(
        classifier.create_metric(
            name("directory_changes"), count, {**base, dims.DIRECTORY: directory}
        )
        for directory, count in analysis.directory_counts.items()
    )
    if analysis.top_directory is not None:
        metrics.append(
            classifier.create_metric(
                name("directory_hotspot"),
                analysis.top_directory_count,
                {**base, dims.DIRECTORY: analysis.top_directory},
            )
        )

    metrics.extend(
        classifier.create_metric(
            name("filetype_changes"), count, {**base, dims.FILETYPE: extension}
        )
        for extension, count in analysis.extension_counts.items()
    )
    if analysis.top_extension is not None:
        metrics.append(
            classifier.create_metric(
                name("filetype_hotspot"),
                analysis.top_extension_count,
                {**base, dims.FILETYPE: analysis.top_extension},
            )
        )

    if summary.additions > 0 or summary.deletions > 0:
        metrics.extend(
            [
                classifier.create_metric(
                    name("code_additions"), summary.additions, base
                ),
                classifier.create_metric(
                    name("code_deletions"), summary.deletions, base
                ),
                classifier.create_metric(name("code_churn"), summary.churn, base),
            ]
        )
    return metrics
