"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from devmetrics.classifiers import (
    GithubEventClassifier,
    MetricClassifier,
    build_default_classifier,
)
from devmetrics.extractors import DimensionExtractor
from devmetrics.metrics import MetricNamingRules


@pytest.fixture
def naming_rules() -> MetricNamingRules:
    """Return strict naming rules over the built-in vocabulary."""
    return MetricNamingRules()


@pytest.fixture
def dimension_extractor() -> DimensionExtractor:
    """Return a dimension extractor with default collaborators."""
    return DimensionExtractor()


@pytest.fixture
def github_classifier(
    dimension_extractor: DimensionExtractor,
    naming_rules: MetricNamingRules,
) -> GithubEventClassifier:
    """Return a GitHub classifier with strict naming."""
    return GithubEventClassifier(
        dimension_extractor=dimension_extractor, naming_rules=naming_rules
    )


@pytest.fixture
def default_classifier() -> MetricClassifier:
    """Return a dispatcher with every concrete classifier configured."""
    return build_default_classifier()
