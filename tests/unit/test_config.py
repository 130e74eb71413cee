"""Unit tests for environment-driven classifier configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from devmetrics.config import ClassifierConfig

_ENV_VARS = (
    "DEVMETRICS_LOG_LEVEL",
    "DEVMETRICS_VOCABULARY_PATH",
    "DEVMETRICS_STRICT_NAMES",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without devmetrics variables."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestClassifierConfig:
    """Tests for ``ClassifierConfig.from_env``."""

    def test_defaults(self) -> None:
        """An empty environment yields the defaults."""
        assert ClassifierConfig.from_env() == ClassifierConfig()

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Every variable is honoured."""
        monkeypatch.setenv("DEVMETRICS_LOG_LEVEL", "debug")
        monkeypatch.setenv("DEVMETRICS_VOCABULARY_PATH", " /etc/devmetrics/vocab.yaml ")
        monkeypatch.setenv("DEVMETRICS_STRICT_NAMES", "off")

        config = ClassifierConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.vocabulary_path == Path("/etc/devmetrics/vocab.yaml")
        assert config.strict_names is False

    def test_invalid_log_level_falls_back(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Unknown levels fall back to INFO."""
        monkeypatch.setenv("DEVMETRICS_LOG_LEVEL", "chatty")

        assert ClassifierConfig.from_env().log_level == "INFO"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1", True), ("YES", True), ("false", False), ("0", False), ("  ", True)],
    )
    def test_strict_names(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, *, expected: bool
    ) -> None:
        """Loose boolean spellings are accepted."""
        monkeypatch.setenv("DEVMETRICS_STRICT_NAMES", raw)

        assert ClassifierConfig.from_env().strict_names is expected

    def test_invalid_boolean(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unrecognised booleans are rejected."""
        monkeypatch.setenv("DEVMETRICS_STRICT_NAMES", "sometimes")

        with pytest.raises(ValueError, match="DEVMETRICS_STRICT_NAMES"):
            ClassifierConfig.from_env()

    def test_frozen(self) -> None:
        """Configuration cannot be mutated after construction."""
        config = ClassifierConfig()

        with pytest.raises(AttributeError):
            config.strict_names = False  # type: ignore[misc]
