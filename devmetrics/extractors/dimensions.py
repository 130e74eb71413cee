"""Dimension extraction from provider payloads.

Every lookup tolerates missing or mistyped fields: absent strings resolve to
``"unknown"``, absent counts to ``0``, and derived values that need data the
payload lacks come back as ``None`` so the caller can skip the metric.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from devmetrics.analysis.commits import (
    DEFAULT_COMMIT_PARSER,
    CommitParts,
    ConventionalCommitParser,
)
from devmetrics.analysis.paths import FileChangeSummary, PathAnalyzer
from devmetrics.common.slug import owner_from_slug
from devmetrics.common.time import seconds_between
from devmetrics.events.payload import as_int, as_list, as_mapping, as_number, dig, text
from devmetrics.logging import get_logger, log_warning
from devmetrics.metrics import dimensions as dims

if typ.TYPE_CHECKING:
    from devmetrics.events.models import Event

logger = get_logger(__name__)

UNKNOWN = dims.UNKNOWN

_HEADS_PREFIX = "refs/heads/"
_TAGS_PREFIX = "refs/tags/"


def _known(value: object) -> str:
    return text(value) or UNKNOWN


def branch_from_ref(ref: object) -> str:
    """Return a branch label for a git ref.

    Examples
    --------
    >>> branch_from_ref("refs/heads/main")
    'main'
    >>> branch_from_ref("refs/tags/v1.2.0")
    'tag:v1.2.0'
    >>> branch_from_ref(None)
    'unknown'

    """
    value = text(ref)
    if value is None:
        return UNKNOWN
    if value.startswith(_HEADS_PREFIX):
        return value.removeprefix(_HEADS_PREFIX) or UNKNOWN
    if value.startswith(_TAGS_PREFIX):
        tag = value.removeprefix(_TAGS_PREFIX)
        return f"tag:{tag}" if tag else UNKNOWN
    return value


class DimensionExtractor:
    """Pull canonical dimensions out of event payloads.

    Parameters
    ----------
    path_analyzer : PathAnalyzer, optional
        Analyzer used to summarise pushed file paths.
    commit_parser : ConventionalCommitParser, optional
        Parser used for commit messages.

    """

    def __init__(
        self,
        path_analyzer: PathAnalyzer | None = None,
        commit_parser: ConventionalCommitParser | None = None,
    ) -> None:
        """Store read-only collaborators."""
        self.path_analyzer = path_analyzer or PathAnalyzer()
        self.commit_parser = commit_parser or DEFAULT_COMMIT_PARSER

    def extract_dimensions(self, event: Event) -> dict[str, str]:
        """Return the base dimensions for ``event`` chosen by its name prefix."""
        prefix = event.name.split(".", 1)[0]
        extractor = {
            "github": self.extract_github_dimensions,
            "jira": self.extract_jira_dimensions,
            "gitlab": self.extract_gitlab_dimensions,
            "bitbucket": self.extract_bitbucket_dimensions,
            "ci": self.extract_ci_dimensions,
            "task": self.extract_task_dimensions,
        }.get(prefix)
        if extractor is None:
            return {dims.SOURCE: event.source}
        return extractor(event)

    def extract_github_dimensions(self, event: Event) -> dict[str, str]:
        """Return repository, organization and source for a GitHub event."""
        return {
            dims.REPOSITORY: self.extract_repository(event),
            dims.ORGANIZATION: self.extract_organization(event),
            dims.SOURCE: event.source,
        }

    def extract_jira_dimensions(self, event: Event) -> dict[str, str]:
        """Return project and source for a Jira event."""
        project = text(dig(event.data, "issue", "fields", "project", "key")) or text(
            dig(event.data, "project", "key")
        )
        return {dims.PROJECT: project or UNKNOWN, dims.SOURCE: event.source}

    def extract_gitlab_dimensions(self, event: Event) -> dict[str, str]:
        """Return project and source for a GitLab event."""
        project = _known(dig(event.data, "project", "path_with_namespace"))
        return {dims.PROJECT: project, dims.SOURCE: event.source}

    def extract_bitbucket_dimensions(self, event: Event) -> dict[str, str]:
        """Return repository and source for a Bitbucket event."""
        return {
            dims.REPOSITORY: self.extract_repository(event),
            dims.SOURCE: event.source,
        }

    def extract_ci_dimensions(self, event: Event) -> dict[str, str]:
        """Return project, provider and source for a generic CI event."""
        return {
            dims.PROJECT: _known(event.data.get("project")),
            dims.PROVIDER: _known(event.data.get("provider")),
            dims.SOURCE: event.source,
        }

    def extract_task_dimensions(self, event: Event) -> dict[str, str]:
        """Return project, task type and source for a task event."""
        return {
            dims.PROJECT: _known(event.data.get("project")),
            dims.TASK_TYPE: _known(event.data.get("type")),
            dims.SOURCE: event.source,
        }

    def extract_repository(self, event: Event) -> str:
        """Return ``repository.full_name`` or ``"unknown"``."""
        return _known(dig(event.data, "repository", "full_name"))

    def extract_organization(self, event: Event) -> str:
        """Return the organization owning the event's repository.

        The first segment of ``repository.full_name`` is preferred; a name
        without a separator falls back to ``repository.owner.login``.
        """
        owner = owner_from_slug(text(dig(event.data, "repository", "full_name")))
        if owner is not None:
            return owner
        login = text(dig(event.data, "repository", "owner", "login"))
        return login or UNKNOWN

    def extract_author(self, event: Event) -> str:
        """Return the acting user for non-push events."""
        for path in (
            ("sender", "login"),
            ("pull_request", "user", "login"),
            ("issue", "user", "login"),
        ):
            value = text(dig(event.data, *path))
            if value is not None:
                return value
        return UNKNOWN

    def extract_push_author(self, event: Event) -> str:
        """Return the author of a push.

        Resolution order: head commit author name, head commit author email,
        pusher name, pusher email.
        """
        for path in (
            ("head_commit", "author", "name"),
            ("head_commit", "author", "email"),
            ("pusher", "name"),
            ("pusher", "email"),
        ):
            value = text(dig(event.data, *path))
            if value is not None:
                return value
        return UNKNOWN

    def extract_branch(self, event: Event) -> str:
        """Return the branch label for the event's ``ref``."""
        return branch_from_ref(event.data.get("ref"))

    def extract_commits(self, event: Event) -> list[cabc.Mapping[str, typ.Any]]:
        """Return the commit objects of a push, skipping malformed entries."""
        return [
            commit
            for commit in as_list(event.data.get("commits"))
            if isinstance(commit, cabc.Mapping)
        ]

    def extract_commit_count(self, event: Event) -> int:
        """Return the number of commits in a push, ``0`` when absent."""
        return len(self.extract_commits(event))

    def extract_conventional_commit_parts(
        self, commit: cabc.Mapping[str, typ.Any]
    ) -> CommitParts:
        """Parse the message of a single commit object."""
        return self.commit_parser.parse(text(commit.get("message")))

    def extract_code_volume(self, event: Event) -> tuple[int, int]:
        """Return summed ``stats.additions`` and ``stats.deletions``."""
        additions = 0
        deletions = 0
        for commit in self.extract_commits(event):
            stats = as_mapping(commit.get("stats"))
            additions += as_int(stats.get("additions"))
            deletions += as_int(stats.get("deletions"))
        return (additions, deletions)

    def extract_file_changes(self, event: Event) -> FileChangeSummary | None:
        """Summarise the files touched by a push.

        Returns ``None`` when the push carries no commits.
        """
        commits = self.extract_commits(event)
        if not commits:
            return None

        added: set[str] = set()
        modified: set[str] = set()
        removed: set[str] = set()
        touched: list[str] = []
        for commit in commits:
            for key, bucket in (
                ("added", added),
                ("modified", modified),
                ("removed", removed),
            ):
                for path in as_list(commit.get(key)):
                    value = text(path)
                    if value is None:
                        continue
                    bucket.add(value)
                    touched.append(value)

        additions, deletions = self.extract_code_volume(event)
        return FileChangeSummary(
            added=frozenset(added),
            modified=frozenset(modified),
            removed=frozenset(removed),
            analysis=self.path_analyzer.analyze(touched),
            additions=additions,
            deletions=deletions,
        )

    def extract_jira_issue_type(self, event: Event) -> str:
        """Return ``issue.fields.issuetype.name`` or ``"unknown"``."""
        return _known(dig(event.data, "issue", "fields", "issuetype", "name"))

    def extract_gitlab_commit_count(self, event: Event) -> int:
        """Return the commit count of a GitLab push.

        Uses the commit list when present, then ``total_commits_count``, then 1.
        """
        commits = event.data.get("commits")
        if isinstance(commits, list):
            return len(commits)
        total = as_number(event.data.get("total_commits_count"))
        if total is not None:
            return int(total)
        return 1

    def extract_bitbucket_commit_count(self, event: Event) -> int:
        """Return the commits summed across ``push.changes``."""
        return sum(
            len(as_list(as_mapping(change).get("commits")))
            for change in as_list(dig(event.data, "push", "changes"))
        )

    def extract_ci_duration(self, event: Event) -> int | float:
        """Return a CI run duration in seconds.

        ``end_time - start_time`` is preferred, then ``duration``, then 0.
        Unparseable timestamps are logged and count as 0.
        """
        start_time = event.data.get("start_time")
        end_time = event.data.get("end_time")
        if start_time is not None and end_time is not None:
            try:
                return seconds_between(start_time, end_time)
            except ValueError:
                log_warning(
                    logger,
                    "unparseable CI timestamps start_time=%r end_time=%r on %s",
                    start_time,
                    end_time,
                    event.name,
                )
                return 0
        duration = as_number(event.data.get("duration"))
        return 0 if duration is None else duration
