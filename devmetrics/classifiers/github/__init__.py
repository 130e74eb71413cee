"""GitHub event classification."""

from __future__ import annotations

from .classifier import GithubEventClassifier
from .registry import GithubHandler, get_handler, register, registered_event_types
from .workflow import step_type

__all__ = [
    "GithubEventClassifier",
    "GithubHandler",
    "get_handler",
    "register",
    "registered_event_types",
    "step_type",
]
