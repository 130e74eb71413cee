"""Per-source event classifiers and the dispatcher that routes between them."""

from __future__ import annotations

from .base import BaseClassifier, NullClassifier, SourceClassifier
from .bitbucket import BitbucketEventClassifier
from .ci import CiEventClassifier
from .dispatcher import (
    GENERIC_SOURCE,
    SOURCE_PREFIXES,
    MetricClassifier,
    build_default_classifier,
)
from .generic import GenericEventClassifier
from .github import GithubEventClassifier
from .gitlab import GitlabEventClassifier
from .jira import JiraEventClassifier, JiraFallbackClassifier
from .task import TaskEventClassifier

__all__ = [
    "GENERIC_SOURCE",
    "SOURCE_PREFIXES",
    "BaseClassifier",
    "BitbucketEventClassifier",
    "CiEventClassifier",
    "GenericEventClassifier",
    "GithubEventClassifier",
    "GitlabEventClassifier",
    "JiraEventClassifier",
    "JiraFallbackClassifier",
    "MetricClassifier",
    "NullClassifier",
    "SourceClassifier",
    "TaskEventClassifier",
    "build_default_classifier",
]
