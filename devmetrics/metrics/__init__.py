"""Metric naming rules, vocabularies and dimension normalization."""

from __future__ import annotations

from .dimensions import (
    DimensionCategory,
    dimensions_in_category,
    format_boolean,
    normalize_dimension_name,
    normalize_dimension_value,
    normalize_dimensions,
)
from .naming import (
    DEFAULT_NAMING_RULES,
    NONE,
    TOTAL,
    UNKNOWN,
    MetricNameParts,
    MetricNamingRules,
    safe_token,
)
from .vocabulary import (
    DEFAULT_VOCABULARY,
    MetricVocabulary,
    SourceVocabulary,
    VocabularyExtension,
    load_vocabulary,
    load_vocabulary_extension,
)

__all__ = [
    "DEFAULT_NAMING_RULES",
    "DEFAULT_VOCABULARY",
    "NONE",
    "TOTAL",
    "UNKNOWN",
    "DimensionCategory",
    "MetricNameParts",
    "MetricNamingRules",
    "MetricVocabulary",
    "SourceVocabulary",
    "VocabularyExtension",
    "dimensions_in_category",
    "format_boolean",
    "load_vocabulary",
    "load_vocabulary_extension",
    "normalize_dimension_name",
    "normalize_dimension_value",
    "normalize_dimensions",
    "safe_token",
]
