"""Directory and file-type hotspot analysis for pushed file paths."""

from __future__ import annotations

import collections.abc as cabc
import posixpath

import msgspec

ROOT_DIRECTORY = "root"
NO_EXTENSION = "none"


class PathAnalysis(msgspec.Struct, kw_only=True, frozen=True):
    """Aggregated change counts for a batch of paths.

    Counts are kept in first-seen order, which is also the tie-break order
    for the ``top_*`` fields.
    """

    directory_counts: dict[str, int] = msgspec.field(default_factory=dict)
    extension_counts: dict[str, int] = msgspec.field(default_factory=dict)
    top_directory: str | None = None
    top_directory_count: int = 0
    top_extension: str | None = None
    top_extension_count: int = 0


class FileChangeSummary(msgspec.Struct, kw_only=True, frozen=True):
    """File changes collected from every commit in a push."""

    added: frozenset[str] = frozenset()
    modified: frozenset[str] = frozenset()
    removed: frozenset[str] = frozenset()
    analysis: PathAnalysis = msgspec.field(default_factory=PathAnalysis)
    additions: int = 0
    deletions: int = 0

    @property
    def churn(self) -> int:
        """Return total changed lines."""
        return self.additions + self.deletions


def _normalize(path: str) -> str:
    return path.replace("\\", "/").strip().lstrip("/")


def extension_of(path: str) -> str:
    """Return the extension of ``path`` without the dot, or ``"none"``.

    Examples
    --------
    >>> extension_of("src/api.rb")
    'rb'
    >>> extension_of("Makefile")
    'none'
    >>> extension_of(".github/.gitignore")
    'none'

    """
    basename = posixpath.basename(_normalize(path))
    stem, dot, suffix = basename.rpartition(".")
    if not dot or not stem or not suffix:
        return NO_EXTENSION
    return suffix


def directories_of(path: str) -> list[str]:
    """Return the containing directory of ``path`` and all its ancestors.

    Examples
    --------
    >>> directories_of("a/b/c/file.rb")
    ['a/b/c', 'a/b', 'a']
    >>> directories_of("README.md")
    ['root']

    """
    directory = posixpath.dirname(_normalize(path))
    if not directory:
        return [ROOT_DIRECTORY]
    chain = [directory]
    parent = posixpath.dirname(directory)
    while parent:
        chain.append(parent)
        parent = posixpath.dirname(parent)
    return chain


def _top(counts: cabc.Mapping[str, int]) -> tuple[str | None, int]:
    if not counts:
        return (None, 0)
    key = max(counts, key=counts.__getitem__)
    return (key, counts[key])


class PathAnalyzer:
    """Count changes per directory and per extension."""

    def analyze(self, paths: cabc.Iterable[str]) -> PathAnalysis:
        """Analyze ``paths`` and identify the hotspots.

        Each path increments its own directory and every ancestor up to, but
        excluding, the repository root. Files at the root count towards
        ``"root"``. Blank paths are ignored.
        """
        directory_counts: dict[str, int] = {}
        extension_counts: dict[str, int] = {}
        for path in paths:
            if not isinstance(path, str) or not _normalize(path):
                continue
            extension = extension_of(path)
            extension_counts[extension] = extension_counts.get(extension, 0) + 1
            for directory in directories_of(path):
                directory_counts[directory] = directory_counts.get(directory, 0) + 1

        top_directory, top_directory_count = _top(directory_counts)
        top_extension, top_extension_count = _top(extension_counts)
        return PathAnalysis(
            directory_counts=directory_counts,
            extension_counts=extension_counts,
            top_directory=top_directory,
            top_directory_count=top_directory_count,
            top_extension=top_extension,
            top_extension_count=top_extension_count,
        )
