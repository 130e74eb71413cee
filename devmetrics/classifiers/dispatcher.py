"""Route events to per-source classifiers by event-name prefix.

Usage
-----
>>> from devmetrics.events import build_event
>>> MetricClassifier().classify_event(build_event("gitlab.custom_thing", "gitlab"))
ClassificationResult(metrics=[])

"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import time
import typing as typ

from devmetrics.config import ClassifierConfig
from devmetrics.extractors.dimensions import DimensionExtractor
from devmetrics.metrics.naming import DEFAULT_NAMING_RULES, MetricNamingRules
from devmetrics.metrics.vocabulary import load_vocabulary
from devmetrics.observability import ClassificationEventLogger

from .base import NullClassifier, SourceClassifier
from .bitbucket import BitbucketEventClassifier
from .ci import CiEventClassifier
from .generic import GenericEventClassifier
from .github import GithubEventClassifier
from .gitlab import GitlabEventClassifier
from .jira import JiraEventClassifier, JiraFallbackClassifier
from .task import TaskEventClassifier

if typ.TYPE_CHECKING:
    from devmetrics.events.models import ClassificationResult, Event

SOURCE_PREFIXES: tuple[str, ...] = (
    "github",
    "jira",
    "gitlab",
    "bitbucket",
    "ci",
    "task",
)
GENERIC_SOURCE = "generic"


class MetricClassifier:
    """Dispatch events to the classifier registered for their source.

    The first matching prefix in :data:`SOURCE_PREFIXES` wins; names matching
    none of them go to the generic classifier. A source without a configured
    classifier uses a built-in fallback: a Jira issue and sprint subset for
    ``jira`` and an empty result for everything else.

    Parameters
    ----------
    classifiers : Mapping[str, SourceClassifier], optional
        Concrete classifiers keyed by source prefix (``"github"``, ``"jira"``,
        and so on). ``"generic"`` replaces the catch-all classifier.
    dimension_extractor : DimensionExtractor, optional
        Extractor shared with the built-in fallbacks.
    naming_rules : MetricNamingRules, optional
        Naming rules shared with the built-in fallbacks.
    event_logger : ClassificationEventLogger, optional
        Receives started, completed and failed events.

    """

    def __init__(
        self,
        classifiers: cabc.Mapping[str, SourceClassifier] | None = None,
        *,
        dimension_extractor: DimensionExtractor | None = None,
        naming_rules: MetricNamingRules | None = None,
        event_logger: ClassificationEventLogger | None = None,
    ) -> None:
        """Resolve the classifier for every source once."""
        configured = dict(classifiers or {})
        self.event_logger = event_logger or ClassificationEventLogger()
        collaborators = {
            "dimension_extractor": dimension_extractor,
            "naming_rules": naming_rules,
            "event_logger": self.event_logger,
        }
        fallbacks: dict[str, SourceClassifier] = {
            "jira": JiraFallbackClassifier(**collaborators),
        }
        self._routes: dict[str, SourceClassifier] = {
            prefix: configured.get(prefix)
            or fallbacks.get(prefix)
            or NullClassifier()
            for prefix in SOURCE_PREFIXES
        }
        self._generic: SourceClassifier = configured.get(
            GENERIC_SOURCE
        ) or GenericEventClassifier(**collaborators)

    def route(self, event_name: str) -> tuple[str, SourceClassifier]:
        """Return the source prefix and classifier chosen for ``event_name``."""
        for prefix in SOURCE_PREFIXES:
            if event_name.startswith(f"{prefix}."):
                return (prefix, self._routes[prefix])
        return (GENERIC_SOURCE, self._generic)

    def classify_event(self, event: Event) -> ClassificationResult:
        """Classify ``event`` with the classifier routed from its name.

        Raises
        ------
        MetricNameError
            If a classifier builds a name outside the vocabulary while the
            naming rules are strict. The failure is logged before it
            propagates.

        """
        prefix, classifier = self.route(event.name)
        started_at = time.monotonic()
        self.event_logger.log_classification_started(
            event_name=event.name, source=prefix
        )
        try:
            result = classifier.classify(event)
        except Exception as exc:
            self.event_logger.log_classification_failed(
                event_name=event.name,
                source=prefix,
                error=exc,
                duration=dt.timedelta(seconds=time.monotonic() - started_at),
            )
            raise
        self.event_logger.log_classification_completed(
            event_name=event.name,
            source=prefix,
            metric_count=len(result.metrics),
            duration=dt.timedelta(seconds=time.monotonic() - started_at),
        )
        return result

    def classify(self, event: Event) -> ClassificationResult:
        """Alias of :meth:`classify_event` satisfying ``SourceClassifier``."""
        return self.classify_event(event)


def build_default_classifier(
    config: ClassifierConfig | None = None,
) -> MetricClassifier:
    """Return a dispatcher with every concrete classifier wired in.

    Parameters
    ----------
    config : ClassifierConfig, optional
        Naming configuration. When omitted the built-in vocabulary and strict
        naming are used; call ``ClassifierConfig.from_env()`` to honour the
        environment.

    Raises
    ------
    VocabularyConfigError
        If ``config.vocabulary_path`` cannot be loaded.

    """
    if config is None:
        naming_rules = DEFAULT_NAMING_RULES
    else:
        naming_rules = MetricNamingRules(
            load_vocabulary(config.vocabulary_path),
            strict=config.strict_names,
        )
    dimension_extractor = DimensionExtractor()
    event_logger = ClassificationEventLogger()
    collaborators = {
        "dimension_extractor": dimension_extractor,
        "naming_rules": naming_rules,
        "event_logger": event_logger,
    }
    classifiers: dict[str, SourceClassifier] = {
        "github": GithubEventClassifier(**collaborators),
        "jira": JiraEventClassifier(**collaborators),
        "gitlab": GitlabEventClassifier(**collaborators),
        "bitbucket": BitbucketEventClassifier(**collaborators),
        "ci": CiEventClassifier(**collaborators),
        "task": TaskEventClassifier(**collaborators),
        GENERIC_SOURCE: GenericEventClassifier(**collaborators),
    }
    return MetricClassifier(
        classifiers,
        dimension_extractor=dimension_extractor,
        naming_rules=naming_rules,
        event_logger=event_logger,
    )
