"""Runtime configuration for the classification pipeline.

Usage
-----
Create a configuration with defaults:

>>> config = ClassifierConfig()
>>> config.strict_names
True

Or load from environment variables:

>>> config = ClassifierConfig.from_env()  # doctest: +SKIP

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from devmetrics.logging import normalize_log_level

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dc.dataclass(frozen=True, slots=True)
class ClassifierConfig:
    """Configuration for building a metric classifier.

    Attributes
    ----------
    log_level
        Level passed to ``configure_logging``. Default is ``INFO``.
    vocabulary_path
        Optional YAML file of vocabulary extensions merged into the built-in
        metric name table.
    strict_names
        Raise when a classifier builds a literal name outside the vocabulary.
        When ``False`` the violation is logged and a sanitized name is used.

    """

    log_level: str = "INFO"
    vocabulary_path: Path | None = None
    strict_names: bool = True

    @staticmethod
    def _parse_bool(env_var: str, *, default: bool) -> bool:
        """Read a boolean env var, falling back to a default."""
        raw = os.environ.get(env_var, "").strip().lower()
        if not raw:
            return default
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        msg = f"{env_var} must be a boolean, got: {raw!r}"
        raise ValueError(msg)

    @classmethod
    def from_env(cls) -> ClassifierConfig:
        """Create configuration from environment variables.

        Reads ``DEVMETRICS_LOG_LEVEL``, ``DEVMETRICS_VOCABULARY_PATH`` and
        ``DEVMETRICS_STRICT_NAMES``.

        Raises
        ------
        ValueError
            If ``DEVMETRICS_STRICT_NAMES`` is not a recognised boolean.

        """
        log_level, _ = normalize_log_level(os.environ.get("DEVMETRICS_LOG_LEVEL"))

        vocabulary_path: Path | None = None
        raw_path = os.environ.get("DEVMETRICS_VOCABULARY_PATH", "")
        if raw_path.strip():
            vocabulary_path = Path(raw_path.strip())

        return cls(
            log_level=log_level,
            vocabulary_path=vocabulary_path,
            strict_names=cls._parse_bool("DEVMETRICS_STRICT_NAMES", default=True),
        )
