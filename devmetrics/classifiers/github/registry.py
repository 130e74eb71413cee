"""Registry of GitHub event-type handlers."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from devmetrics.events.models import Event, MetricDefinition

    from .classifier import GithubEventClassifier

GithubHandler = typ.Callable[
    ["GithubEventClassifier", "Event", "str | None"], "list[MetricDefinition]"
]
_registry: dict[str, GithubHandler] = {}


def register(*event_types: str) -> typ.Callable[[GithubHandler], GithubHandler]:
    """Register a handler for one or more GitHub event types."""

    def _inner(func: GithubHandler) -> GithubHandler:
        for event_type in event_types:
            _registry[event_type] = func
        return func

    return _inner


def get_handler(event_type: str) -> GithubHandler | None:
    """Return the handler registered for ``event_type`` if present."""
    return _registry.get(event_type)


def registered_event_types() -> tuple[str, ...]:
    """Return every event type with a registered handler."""
    return tuple(sorted(_registry))
