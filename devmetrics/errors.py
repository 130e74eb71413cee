"""Error types shared across the classification pipeline.

Payload problems are never raised out of a classifier; the errors here cover
the three cases that must surface: a classifier building a metric name outside
the registered vocabulary, an event envelope that cannot be decoded, and a
vocabulary extension file that cannot be loaded.
"""

from __future__ import annotations

import enum


class MetricNameReason(enum.StrEnum):
    """Machine-readable reasons for metric naming failures."""

    UNKNOWN_SOURCE = "unknown_source"
    UNKNOWN_ENTITY = "unknown_entity"
    UNKNOWN_ACTION = "unknown_action"
    UNKNOWN_DETAIL = "unknown_detail"
    INVALID_SEGMENT = "invalid_segment"


class MetricNameError(ValueError):
    """Raised when a metric name violates the naming contract."""

    def __init__(
        self,
        message: str,
        reason: MetricNameReason | str | None = None,
    ) -> None:
        """Store a machine-readable reason for programmatic handling."""
        super().__init__(message)
        self.reason = reason

    @classmethod
    def unknown_source(cls, source: str) -> MetricNameError:
        """Create an error for a source with no registered vocabulary."""
        return cls(
            f"unknown metric source: {source!r}",
            reason=MetricNameReason.UNKNOWN_SOURCE,
        )

    @classmethod
    def unknown_segment(cls, source: str, kind: str, value: str) -> MetricNameError:
        """Create an error for an entity, action or detail outside the vocabulary."""
        reason = {
            "entity": MetricNameReason.UNKNOWN_ENTITY,
            "action": MetricNameReason.UNKNOWN_ACTION,
            "detail": MetricNameReason.UNKNOWN_DETAIL,
        }.get(kind, MetricNameReason.INVALID_SEGMENT)
        return cls(
            f"{kind} {value!r} is not registered for source {source!r}",
            reason=reason,
        )

    @classmethod
    def invalid_segment(cls, value: object) -> MetricNameError:
        """Create an error for an empty or dotted name segment."""
        return cls(
            f"metric name segment must be a non-empty token without dots: {value!r}",
            reason=MetricNameReason.INVALID_SEGMENT,
        )


class EventDecodeReason(enum.StrEnum):
    """Machine-readable reasons for envelope decoding failures."""

    INVALID_JSON = "invalid_json"
    MISSING_NAME = "missing_name"
    MISSING_SOURCE = "missing_source"
    INVALID_TIMESTAMP = "invalid_timestamp"
    INVALID_SHAPE = "invalid_shape"


class EventDecodeError(ValueError):
    """Raised when an inbound event envelope cannot be decoded."""

    def __init__(
        self,
        message: str,
        reason: EventDecodeReason | str | None = None,
    ) -> None:
        """Store a machine-readable reason for programmatic handling."""
        super().__init__(message)
        self.reason = reason

    @classmethod
    def invalid_json(cls, exc: Exception) -> EventDecodeError:
        """Create an error for undecodable JSON input."""
        return cls(
            f"event is not valid JSON: {exc}",
            reason=EventDecodeReason.INVALID_JSON,
        )

    @classmethod
    def missing_name(cls) -> EventDecodeError:
        """Create an error for an envelope without a name."""
        return cls(
            "event name must be non-empty",
            reason=EventDecodeReason.MISSING_NAME,
        )

    @classmethod
    def missing_source(cls) -> EventDecodeError:
        """Create an error for an envelope without a source."""
        return cls(
            "event source must be non-empty",
            reason=EventDecodeReason.MISSING_SOURCE,
        )

    @classmethod
    def invalid_timestamp(cls, value: object) -> EventDecodeError:
        """Create an error for an envelope timestamp that cannot be parsed."""
        return cls(
            f"event timestamp is not a valid instant: {value!r}",
            reason=EventDecodeReason.INVALID_TIMESTAMP,
        )

    @classmethod
    def invalid_shape(cls, message: str) -> EventDecodeError:
        """Create an error for an envelope with the wrong structure."""
        return cls(message, reason=EventDecodeReason.INVALID_SHAPE)


class VocabularyConfigReason(enum.StrEnum):
    """Machine-readable reasons for vocabulary extension failures."""

    UNREADABLE = "unreadable"
    EMPTY = "empty"
    SCHEMA = "schema"


class VocabularyConfigError(Exception):
    """Raised when a vocabulary extension file cannot be loaded."""

    def __init__(
        self,
        message: str,
        reason: VocabularyConfigReason | str | None = None,
    ) -> None:
        """Store a machine-readable reason for programmatic handling."""
        super().__init__(message)
        self.reason = reason

    @classmethod
    def unreadable(cls, path: object, exc: Exception) -> VocabularyConfigError:
        """Create an error for a file that cannot be read or parsed."""
        return cls(
            f"failed to parse vocabulary file {path}: {exc}",
            reason=VocabularyConfigReason.UNREADABLE,
        )

    @classmethod
    def empty(cls, path: object) -> VocabularyConfigError:
        """Create an error for an empty vocabulary file."""
        return cls(
            f"vocabulary file {path} is empty",
            reason=VocabularyConfigReason.EMPTY,
        )

    @classmethod
    def schema(cls, path: object, exc: Exception) -> VocabularyConfigError:
        """Create an error for a vocabulary file with the wrong structure."""
        return cls(
            f"vocabulary file {path} failed schema validation: {exc}",
            reason=VocabularyConfigReason.SCHEMA,
        )


class ErrorCategory(enum.StrEnum):
    """Coarse failure categories reported by the processing pipeline."""

    NAMING_CONTRACT = "naming_contract"
    INVALID_EVENT = "invalid_event"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Map ``exc`` to the category used in processing summaries.

    Examples
    --------
    >>> categorize_error(MetricNameError.unknown_source("svn"))
    <ErrorCategory.NAMING_CONTRACT: 'naming_contract'>
    >>> categorize_error(RuntimeError("boom"))
    <ErrorCategory.UNKNOWN: 'unknown'>

    """
    match exc:
        case MetricNameError():
            return ErrorCategory.NAMING_CONTRACT
        case EventDecodeError():
            return ErrorCategory.INVALID_EVENT
        case VocabularyConfigError():
            return ErrorCategory.CONFIGURATION
        case _:
            return ErrorCategory.UNKNOWN
