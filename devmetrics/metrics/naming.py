"""Metric naming rules.

Metric names have three or four dot-delimited segments:
``source.entity.action`` or ``source.entity.action.detail``. Literal names are
built with :meth:`MetricNamingRules.build`, which checks every segment against
the registered vocabulary and raises :class:`~devmetrics.errors.MetricNameError`
on a mismatch. Names whose later segments come from payload data (webhook
actions, conclusions, ref types) use :meth:`MetricNamingRules.build_observed`,
which only checks the source and folds the rest into safe tokens.

Example:
>>> rules = MetricNamingRules()
>>> rules.build("github", "push", "total")
'github.push.total'
>>> rules.parse("github.workflow_run.conclusion.success")
MetricNameParts(source='github', entity='workflow_run', action='conclusion', detail='success')

"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ

import msgspec

from devmetrics.errors import MetricNameError
from devmetrics.logging import get_logger, log_warning

from . import dimensions as dims
from .vocabulary import DEFAULT_VOCABULARY, SEGMENT_PATTERN, MetricVocabulary

logger = get_logger(__name__)

UNKNOWN = dims.UNKNOWN
NONE = dims.NONE
TOTAL = "total"

_UNSAFE = re.compile(r"[^a-z0-9_]+")


class MetricNameParts(msgspec.Struct, kw_only=True, frozen=True):
    """Components of a metric name."""

    source: str
    entity: str
    action: str
    detail: str | None = None

    @property
    def name(self) -> str:
        """Return the dotted metric name."""
        segments = [self.source, self.entity, self.action]
        if self.detail is not None:
            segments.append(self.detail)
        return ".".join(segments)


def safe_token(value: object, default: str = UNKNOWN) -> str:
    """Fold ``value`` into a lowercase name segment.

    Runs of characters outside ``[a-z0-9_]`` become a single underscore, so
    dots and whitespace never leak into a metric name.

    Examples
    --------
    >>> safe_token("Timed Out")
    'timed_out'
    >>> safe_token("repo:push")
    'repo_push'
    >>> safe_token("  ")
    'unknown'

    """
    if value is None:
        return default
    token = _UNSAFE.sub("_", str(value).strip().lower()).strip("_")
    return token or default


class MetricNamingRules:
    """Build, validate and parse metric names against a vocabulary.

    Parameters
    ----------
    vocabulary : MetricVocabulary, optional
        Registered sources and segments. Defaults to the built-in table.
    strict : bool, optional
        Raise on vocabulary violations in :meth:`build`. When ``False`` the
        violation is logged at WARNING and a sanitized name is returned.

    """

    def __init__(
        self,
        vocabulary: MetricVocabulary = DEFAULT_VOCABULARY,
        *,
        strict: bool = True,
    ) -> None:
        """Store the vocabulary and strictness flag."""
        self.vocabulary = vocabulary
        self.strict = strict

    def build(
        self,
        source: str,
        entity: str,
        action: str,
        detail: str | None = None,
    ) -> str:
        """Return a vocabulary-checked metric name.

        Raises
        ------
        MetricNameError
            If any segment is malformed or not registered for ``source``
            and the rules are strict.

        """
        try:
            return self._checked(source, entity, action, detail).name
        except MetricNameError as exc:
            if self.strict:
                raise
            fallback = self._sanitized(source, entity, action, detail)
            log_warning(
                logger,
                "metric name %s violates the naming contract (%s): %s",
                fallback,
                exc.reason,
                exc,
            )
            return fallback

    def build_observed(
        self,
        source: str,
        entity: object,
        action: object,
        detail: object | None = None,
    ) -> str:
        """Return a name whose later segments come from payload data.

        Raises
        ------
        MetricNameError
            If ``source`` is not registered and the rules are strict.

        """
        if self.vocabulary.source(source) is None:
            if self.strict:
                raise MetricNameError.unknown_source(source)
            log_warning(logger, "metric source %s is not registered", source)
        return self._sanitized(source, entity, action, detail)

    def parse(self, name: str) -> MetricNameParts | None:
        """Split ``name`` into its components.

        Returns ``None`` when ``name`` does not have three or four lowercase
        token segments. Vocabulary membership is checked by :meth:`is_valid`.
        """
        segments = name.split(".")
        if len(segments) not in {3, 4}:
            return None
        if not all(SEGMENT_PATTERN.match(segment) for segment in segments):
            return None
        return MetricNameParts(
            source=segments[0],
            entity=segments[1],
            action=segments[2],
            detail=segments[3] if len(segments) == 4 else None,
        )

    def is_valid(self, name: str) -> bool:
        """Return whether ``name`` is well formed and fully registered."""
        parts = self.parse(name)
        if parts is None:
            return False
        try:
            self._checked(parts.source, parts.entity, parts.action, parts.detail)
        except MetricNameError:
            return False
        return True

    def valid_metric_mapping(self, old_name: str, new_name: str) -> bool:
        """Return whether ``old_name`` may be migrated to ``new_name``.

        The new name must be valid and both names must share a source.
        """
        if not self.is_valid(new_name):
            return False
        old_parts = self.parse(old_name)
        new_parts = self.parse(new_name)
        if old_parts is None or new_parts is None:
            return False
        return old_parts.source == new_parts.source

    def available_sources(self) -> tuple[str, ...]:
        """Return registered source names."""
        return self.vocabulary.source_names

    def available_entities(self, source: str | None = None) -> tuple[str, ...]:
        """Return registered entities for ``source``, or for every source."""
        return self._segments(source, "entities")

    def available_actions(self, source: str | None = None) -> tuple[str, ...]:
        """Return registered actions for ``source``, or for every source."""
        return self._segments(source, "actions")

    def available_details(self, source: str | None = None) -> tuple[str, ...]:
        """Return registered details for ``source``, or for every source."""
        return self._segments(source, "details")

    def dimension_categories(self) -> tuple[str, ...]:
        """Return the dimension category names."""
        return tuple(str(category) for category in dims.DimensionCategory)

    def dimensions_in_category(self, category: str) -> tuple[str, ...]:
        """Return the dimension names registered for ``category``."""
        return dims.dimensions_in_category(category)

    def normalize_dimension_name(self, name: object) -> str:
        """Return the registered snake_case form of ``name`` when one exists."""
        return dims.normalize_dimension_name(name)

    def normalize_dimension_value(self, dimension: str, value: object) -> str | None:
        """Normalize a single dimension value."""
        return dims.normalize_dimension_value(dimension, value)

    def normalize_dimensions(
        self, dimensions: cabc.Mapping[typ.Any, object]
    ) -> dict[str, str]:
        """Normalize every key and value in ``dimensions``."""
        return dims.normalize_dimensions(dimensions)

    def _checked(
        self,
        source: str,
        entity: str,
        action: str,
        detail: str | None,
    ) -> MetricNameParts:
        segments: list[object] = [source, entity, action]
        if detail is not None:
            segments.append(detail)
        for segment in segments:
            if not isinstance(segment, str) or not SEGMENT_PATTERN.match(segment):
                raise MetricNameError.invalid_segment(segment)

        vocabulary = self.vocabulary.source(source)
        if vocabulary is None:
            raise MetricNameError.unknown_source(source)
        if entity not in vocabulary.entities:
            raise MetricNameError.unknown_segment(source, "entity", entity)
        if action not in vocabulary.actions:
            raise MetricNameError.unknown_segment(source, "action", action)
        if detail is not None and detail not in vocabulary.details:
            raise MetricNameError.unknown_segment(source, "detail", detail)
        return MetricNameParts(
            source=source, entity=entity, action=action, detail=detail
        )

    def _sanitized(
        self,
        source: object,
        entity: object,
        action: object,
        detail: object | None,
    ) -> str:
        segments = [safe_token(source), safe_token(entity), safe_token(action)]
        if detail is not None:
            segments.append(safe_token(detail))
        return ".".join(segments)

    def _segments(self, source: str | None, kind: str) -> tuple[str, ...]:
        if source is not None:
            vocabulary = self.vocabulary.source(source)
            if vocabulary is None:
                return ()
            return tuple(sorted(getattr(vocabulary, kind)))
        collected: set[str] = set()
        for vocabulary in self.vocabulary.sources.values():
            collected.update(getattr(vocabulary, kind))
        return tuple(sorted(collected))


DEFAULT_NAMING_RULES = MetricNamingRules()
