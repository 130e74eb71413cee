"""Conventional commit parsing with keyword-based type inference.

Messages that follow ``type(scope)!: description`` on their first line are
parsed strictly. Anything else is classified by scanning for keywords in a
fixed order, so an inferred type is always one of the known commit types.
"""

from __future__ import annotations

import enum
import re

import msgspec


class CommitType(enum.StrEnum):
    """Commit types recognised by the conventional grammar."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"


class CommitParts(msgspec.Struct, kw_only=True, frozen=True):
    """Parsed components of a commit message.

    Attributes
    ----------
    type
        Commit type, or ``None`` when the message was blank.
    scope
        Text inside the header parentheses, passed through unchanged.
    breaking
        Whether the commit announces a breaking change.
    description
        Header text after the colon, or the first line for inferred commits.
    conventional
        Whether the strict grammar matched.
    inferred
        Whether the type came from keyword inference.

    """

    type: str | None = None
    scope: str | None = None
    breaking: bool = False
    description: str = ""
    conventional: bool = False
    inferred: bool = False


class CommitTypeRules(msgspec.Struct, kw_only=True, frozen=True):
    """Ordered keyword rules used to infer a type for free-form messages.

    The first rule with a keyword found in the lowercased message wins;
    ``fallback`` applies when none match.
    """

    rules: tuple[tuple[str, tuple[str, ...]], ...] = (
        ("fix", ("fix", "bug", "issue", "problem", "error")),
        ("feat", ("feat", "feature", "add", "new", "implement")),
        ("docs", ("doc", "readme", "comment", "guide")),
        ("test", ("test", "spec", "rspec")),
        ("style", ("style", "format", "indent", "css")),
        ("refactor", ("refactor", "clean", "improve", "simplify")),
        ("perf", ("perf", "performance", "optimize", "speed")),
        ("build", ("build", "webpack", "deps", "dependency")),
        ("ci", ("ci", "travis", "jenkins", "github", "action")),
        ("revert", ("revert", "rollback", "undo")),
    )
    fallback: str = "chore"


DEFAULT_COMMIT_TYPE_RULES = CommitTypeRules()

_HEADER_PATTERN = re.compile(
    r"^(feat|fix|docs|style|refactor|perf|test|build|ci|chore|revert)"
    r"(?:\(([^)]+)\))?(!)?:\s*(.+)$",
    re.IGNORECASE,
)
_BREAKING_MARKER = "BREAKING CHANGE"


class ConventionalCommitParser:
    """Parse commit messages into :class:`CommitParts`."""

    def __init__(self, rules: CommitTypeRules = DEFAULT_COMMIT_TYPE_RULES) -> None:
        """Store the inference rules used for non-conventional messages."""
        self.rules = rules

    def parse(self, message: str | None) -> CommitParts:
        """Parse ``message``.

        Parameters
        ----------
        message : str | None
            Full commit message; only the first line is matched against the
            grammar, but the whole message is searched for breaking markers.

        Returns
        -------
        CommitParts
            Empty parts (``type`` is ``None``) for a blank message.

        """
        if message is None or not message.strip():
            return CommitParts()

        text = message.strip()
        header = text.splitlines()[0].strip()
        match = _HEADER_PATTERN.match(header)
        if match is not None:
            commit_type, scope, bang, description = match.groups()
            return CommitParts(
                type=commit_type.lower(),
                scope=scope,
                breaking=bang is not None or _BREAKING_MARKER in text,
                description=description.strip(),
                conventional=True,
            )

        lowered = text.lower()
        return CommitParts(
            type=self.infer_type(lowered),
            breaking="break" in lowered or "!" in text,
            description=header,
            inferred=True,
        )

    def infer_type(self, message: str) -> str:
        """Return the first rule type whose keyword occurs in ``message``."""
        lowered = message.lower()
        for commit_type, keywords in self.rules.rules:
            if any(keyword in lowered for keyword in keywords):
                return commit_type
        return self.rules.fallback


DEFAULT_COMMIT_PARSER = ConventionalCommitParser()


def parse_commit_message(message: str | None) -> CommitParts:
    """Parse ``message`` with the default rules."""
    return DEFAULT_COMMIT_PARSER.parse(message)
