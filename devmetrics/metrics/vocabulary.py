"""Registered metric name vocabularies.

Each source owns a closed set of entities, actions and details. The built-in
table covers every literal name the classifiers emit; deployments can widen it
with a YAML 1.2 extension file:

.. code-block:: yaml

    sources:
      github:
        entities: [release]
        actions: [published]

Extending never mutates a vocabulary in place. ``extend`` returns a new one.
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from devmetrics.errors import VocabularyConfigError

YAML_VERSION = (1, 2)

SEGMENT_PATTERN = re.compile(r"^[a-z0-9_]+$")


class SourceVocabulary(msgspec.Struct, kw_only=True, frozen=True):
    """Allowed segments for one metric source."""

    entities: frozenset[str] = frozenset()
    actions: frozenset[str] = frozenset()
    details: frozenset[str] = frozenset()

    def merged(self, other: SourceVocabulary) -> SourceVocabulary:
        """Return the union of this vocabulary and ``other``."""
        return SourceVocabulary(
            entities=self.entities | other.entities,
            actions=self.actions | other.actions,
            details=self.details | other.details,
        )


class SourceExtension(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Additional segments declared for one source in an extension file."""

    entities: list[str] = msgspec.field(default_factory=list)
    actions: list[str] = msgspec.field(default_factory=list)
    details: list[str] = msgspec.field(default_factory=list)


class VocabularyExtension(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Top-level shape of a vocabulary extension file."""

    sources: dict[str, SourceExtension] = msgspec.field(default_factory=dict)


class MetricVocabulary(msgspec.Struct, kw_only=True, frozen=True):
    """Vocabularies for every registered source."""

    sources: dict[str, SourceVocabulary] = msgspec.field(default_factory=dict)

    def source(self, name: str) -> SourceVocabulary | None:
        """Return the vocabulary for ``name`` if the source is registered."""
        return self.sources.get(name)

    @property
    def source_names(self) -> tuple[str, ...]:
        """Return registered source names in sorted order."""
        return tuple(sorted(self.sources))

    def extend(self, extension: VocabularyExtension) -> MetricVocabulary:
        """Return a new vocabulary with ``extension`` merged in."""
        merged = dict(self.sources)
        for name, addition in extension.sources.items():
            extra = SourceVocabulary(
                entities=frozenset(addition.entities),
                actions=frozenset(addition.actions),
                details=frozenset(addition.details),
            )
            current = merged.get(name)
            merged[name] = extra if current is None else current.merged(extra)
        return MetricVocabulary(sources=merged)


def _vocab(
    entities: typ.Iterable[str],
    actions: typ.Iterable[str],
    details: typ.Iterable[str] = (),
) -> SourceVocabulary:
    return SourceVocabulary(
        entities=frozenset(entities),
        actions=frozenset(actions),
        details=frozenset(details),
    )


# Actions, conclusions, deployment states and ref types that GitHub documents
# for the webhooks classified here. Payload-derived segments land in these.
_GITHUB_WEBHOOK_ACTIONS = (
    "opened",
    "edited",
    "closed",
    "reopened",
    "created",
    "deleted",
    "completed",
    "requested",
    "rerequested",
    "requested_action",
    "in_progress",
    "queued",
    "waiting",
    "pending",
    "assigned",
    "unassigned",
    "labeled",
    "unlabeled",
    "synchronize",
    "ready_for_review",
    "converted_to_draft",
    "review_requested",
    "review_request_removed",
    "auto_merge_enabled",
    "auto_merge_disabled",
    "locked",
    "unlocked",
    "pinned",
    "unpinned",
    "transferred",
    "milestoned",
    "demilestoned",
    "archived",
    "unarchived",
    "publicized",
    "privatized",
    "renamed",
    "success",
    "failure",
    "error",
    "inactive",
    "branch",
    "tag",
    "repository",
    "unknown",
)

_GITHUB_CONCLUSIONS = (
    "success",
    "failure",
    "neutral",
    "cancelled",
    "skipped",
    "timed_out",
    "action_required",
    "stale",
    "startup_failure",
    "unknown",
)

_GITHUB = _vocab(
    entities=(
        "push",
        "commit_volume",
        "pull_request",
        "issues",
        "check_run",
        "check_suite",
        "create",
        "delete",
        "deployment",
        "deployment_status",
        "workflow_run",
        "workflow_job",
        "workflow_step",
        "workflow_dispatch",
        "repository",
        "ci",
    ),
    actions=(
        "total",
        "branch_activity",
        "commits",
        "by_author",
        "commit_type",
        "breaking_change",
        "files_added",
        "files_modified",
        "files_removed",
        "directory_changes",
        "directory_hotspot",
        "filetype_changes",
        "filetype_hotspot",
        "code_additions",
        "code_deletions",
        "code_churn",
        "daily",
        "merged",
        "time_to_merge",
        "time_to_close",
        "environment",
        "registration_event",
        "duration",
        "conclusion",
        "lead_time",
        # CI operations under ``github.ci`` and step types under
        # ``github.workflow_step``.
        "build",
        "deploy",
        "test",
        "check",
        "install",
        "publish",
        *_GITHUB_WEBHOOK_ACTIONS,
    ),
    details=(
        "total",
        "started",
        "completed",
        "failed",
        "duration",
        "incident",
        "in_progress",
        "queued",
        *_GITHUB_CONCLUSIONS,
    ),
)

DEFAULT_VOCABULARY = MetricVocabulary(
    sources={
        "github": _GITHUB,
        "dora": _vocab(
            entities=("deployment", "test"),
            actions=("attempt", "failure", "run"),
        ),
        "jira": _vocab(
            entities=("issue", "sprint"),
            actions=(
                "total",
                "created",
                "updated",
                "resolved",
                "deleted",
                "by_type",
                "started",
                "closed",
            ),
        ),
        "gitlab": _vocab(
            entities=("push", "merge_request"),
            actions=("total", "commits", "opened", "closed", "merged"),
        ),
        "bitbucket": _vocab(
            entities=("push", "pullrequest"),
            actions=("total", "commits", "created", "approved", "merged", "rejected"),
        ),
        "ci": _vocab(
            entities=("build", "deploy"),
            actions=(
                "total",
                "started",
                "completed",
                "failed",
                "duration",
                "lead_time",
                "incident",
            ),
        ),
        "task": _vocab(
            entities=("item",),
            actions=("total", "created", "completed", "moved"),
        ),
        "generic": _vocab(entities=(), actions=("total",)),
    }
)


def load_vocabulary_extension(path: Path | str) -> VocabularyExtension:
    """Parse a YAML vocabulary extension file.

    Raises
    ------
    VocabularyConfigError
        If the file cannot be read, is empty, does not match the expected
        shape, or declares a segment that is not a lowercase token.

    """
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise VocabularyConfigError.unreadable(path_obj, exc) from exc

    if loaded is None:
        raise VocabularyConfigError.empty(path_obj)

    try:
        extension = msgspec.convert(loaded, type=VocabularyExtension)
    except msgspec.ValidationError as exc:
        raise VocabularyConfigError.schema(path_obj, exc) from exc

    for source, addition in extension.sources.items():
        tokens = (source, *addition.entities, *addition.actions, *addition.details)
        bad = [token for token in tokens if not SEGMENT_PATTERN.match(token)]
        if bad:
            msg = f"invalid metric name segments for {source!r}: {bad}"
            raise VocabularyConfigError.schema(path_obj, ValueError(msg))
    return extension


def load_vocabulary(
    path: Path | str | None,
    base: MetricVocabulary = DEFAULT_VOCABULARY,
) -> MetricVocabulary:
    """Return ``base`` extended with the file at ``path`` when one is given."""
    if path is None:
        return base
    return base.extend(load_vocabulary_extension(path))


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
