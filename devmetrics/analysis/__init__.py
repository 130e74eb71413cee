"""Commit message and file path analysis."""

from __future__ import annotations

from .commits import (
    DEFAULT_COMMIT_TYPE_RULES,
    CommitParts,
    CommitType,
    CommitTypeRules,
    ConventionalCommitParser,
    parse_commit_message,
)
from .paths import FileChangeSummary, PathAnalysis, PathAnalyzer

__all__ = [
    "DEFAULT_COMMIT_TYPE_RULES",
    "CommitParts",
    "CommitType",
    "CommitTypeRules",
    "ConventionalCommitParser",
    "FileChangeSummary",
    "PathAnalysis",
    "PathAnalyzer",
    "parse_commit_message",
]
