"""Dimension names, categories and value normalization.

Every classifier routes its dimensions through :func:`normalize_dimensions`
so that booleans, dates, timestamps and repository slugs look the same no
matter which source produced them.
"""

from __future__ import annotations

import collections.abc as cabc
import enum
import re
import typing as typ

from devmetrics.common.slug import normalize_repository_slug
from devmetrics.common.time import format_date, format_timestamp
from devmetrics.events.payload import is_truthy

UNKNOWN = "unknown"
NONE = "none"


class DimensionCategory(enum.StrEnum):
    """Groups of related dimension names."""

    SOURCE = "source"
    TIME = "time"
    ACTOR = "actor"
    CONTENT = "content"
    CLASSIFICATION = "classification"
    MEASUREMENT = "measurement"


# Source
REPOSITORY = "repository"
ORGANIZATION = "organization"
SOURCE = "source"
PROJECT = "project"
TEAM = "team"
PROVIDER = "provider"

# Time
DATE = "date"
TIMESTAMP = "timestamp"
WEEK = "week"
MONTH = "month"
QUARTER = "quarter"
COMMIT_DATE = "commit_date"
DELIVERY_DATE = "delivery_date"

# Actor
AUTHOR = "author"
REVIEWER = "reviewer"
ASSIGNEE = "assignee"
COMMITTER = "committer"
REQUESTOR = "requestor"
RUNNER = "runner"

# Content
BRANCH = "branch"
DIRECTORY = "directory"
FILETYPE = "filetype"
ENVIRONMENT = "environment"
COMPONENT = "component"
LABELS = "labels"
REF = "ref"
REF_TYPE = "ref_type"
DEPLOYMENT_ID = "deployment_id"
TASK = "task"
JOB_NAME = "job_name"
WORKFLOW_NAME = "workflow_name"
STEP_NAME = "step_name"
ISSUE_TYPE = "issue_type"
TASK_TYPE = "task_type"

# Classification
TYPE = "type"
SCOPE = "scope"
PRIORITY = "priority"
SEVERITY = "severity"
STATUS = "status"
STATE = "state"
ACTION = "action"
CONCLUSION = "conclusion"
CONVENTIONAL = "conventional"
BREAKING = "breaking"
REASON = "reason"

# Measurement
UNIT = "unit"
AGGREGATION = "aggregation"
INTERVAL = "interval"
BASELINE = "baseline"
RUN_ATTEMPT = "run_attempt"

DIMENSION_CATEGORIES: dict[DimensionCategory, tuple[str, ...]] = {
    DimensionCategory.SOURCE: (
        REPOSITORY,
        ORGANIZATION,
        SOURCE,
        PROJECT,
        TEAM,
        PROVIDER,
    ),
    DimensionCategory.TIME: (
        DATE,
        TIMESTAMP,
        WEEK,
        MONTH,
        QUARTER,
        COMMIT_DATE,
        DELIVERY_DATE,
    ),
    DimensionCategory.ACTOR: (
        AUTHOR,
        REVIEWER,
        ASSIGNEE,
        COMMITTER,
        REQUESTOR,
        RUNNER,
    ),
    DimensionCategory.CONTENT: (
        BRANCH,
        DIRECTORY,
        FILETYPE,
        ENVIRONMENT,
        COMPONENT,
        LABELS,
        REF,
        REF_TYPE,
        DEPLOYMENT_ID,
        TASK,
        JOB_NAME,
        WORKFLOW_NAME,
        STEP_NAME,
        ISSUE_TYPE,
        TASK_TYPE,
    ),
    DimensionCategory.CLASSIFICATION: (
        TYPE,
        SCOPE,
        PRIORITY,
        SEVERITY,
        STATUS,
        STATE,
        ACTION,
        CONCLUSION,
        CONVENTIONAL,
        BREAKING,
        REASON,
    ),
    DimensionCategory.MEASUREMENT: (
        UNIT,
        AGGREGATION,
        INTERVAL,
        BASELINE,
        RUN_ATTEMPT,
    ),
}

ALL_DIMENSIONS: frozenset[str] = frozenset(
    name for names in DIMENSION_CATEGORIES.values() for name in names
)

BOOLEAN_DIMENSIONS = frozenset({CONVENTIONAL, BREAKING})
DATE_DIMENSIONS = frozenset({DATE, COMMIT_DATE, DELIVERY_DATE})
TIMESTAMP_DIMENSIONS = frozenset({TIMESTAMP})

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def dimensions_in_category(category: DimensionCategory | str) -> tuple[str, ...]:
    """Return the dimension names registered for ``category``.

    Unknown categories yield an empty tuple.

    Examples
    --------
    >>> dimensions_in_category("actor")[:2]
    ('author', 'reviewer')

    """
    try:
        key = DimensionCategory(str(category).strip().lower())
    except ValueError:
        return ()
    return DIMENSION_CATEGORIES[key]


def is_valid_dimension(name: str) -> bool:
    """Return whether ``name`` is a registered dimension name."""
    return name in ALL_DIMENSIONS


def normalize_dimension_name(name: object) -> str:
    """Convert camelCase or kebab-case keys to a registered snake_case name.

    Keys whose snake_case form is not registered are returned unchanged.

    Examples
    --------
    >>> normalize_dimension_name("jobName")
    'job_name'
    >>> normalize_dimension_name("customKey")
    'customKey'

    """
    raw = name.value if isinstance(name, enum.Enum) else name
    text = str(raw)
    snake = _ACRONYM_BOUNDARY.sub(r"\1_\2", text)
    snake = _CAMEL_BOUNDARY.sub(r"\1_\2", snake).replace("-", "_").lower()
    return snake if is_valid_dimension(snake) else text


def format_boolean(value: object) -> str:
    """Render a loose boolean as ``"true"`` or ``"false"``."""
    return "true" if is_truthy(value) else "false"


def normalize_dimension_value(dimension: str, value: object) -> str | None:
    """Normalize ``value`` for ``dimension``.

    Returns ``None`` when the value should be dropped: it was ``None`` to
    begin with, or it is a date that cannot be parsed.

    Examples
    --------
    >>> normalize_dimension_value("repository", "my-repo")
    'unknown/my-repo'
    >>> normalize_dimension_value("conventional", 1)
    'true'
    >>> normalize_dimension_value("date", "2025-05-07T23:10:00+02:00")
    '2025-05-07'

    """
    if value is None:
        return None
    if dimension in BOOLEAN_DIMENSIONS or isinstance(value, bool):
        return format_boolean(value)
    if dimension in DATE_DIMENSIONS:
        return _safe_format(format_date, value)
    if dimension in TIMESTAMP_DIMENSIONS:
        return _safe_format(format_timestamp, value)
    if dimension == REPOSITORY:
        return normalize_repository_slug(str(value), sentinel=UNKNOWN)
    return str(value)


def _safe_format(formatter: typ.Callable[[object], str], value: object) -> str | None:
    try:
        return formatter(value)
    except ValueError:
        return None


def normalize_dimensions(
    dimensions: cabc.Mapping[typ.Any, object],
) -> dict[str, str]:
    """Normalize every key and value in ``dimensions``.

    Later keys win when two inputs normalize to the same name.
    """
    normalized: dict[str, str] = {}
    for key, value in dimensions.items():
        name = normalize_dimension_name(key)
        rendered = normalize_dimension_value(name, value)
        if rendered is not None:
            normalized[name] = rendered
    return normalized
