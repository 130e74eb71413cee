"""Unit tests for femtologging integration helpers.

Run with:
    pytest tests/unit/test_logging.py
"""

from __future__ import annotations

import pytest

from devmetrics.logging import (
    configure_logging,
    format_log_message,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message


class TestNormalizeLogLevel:
    """Tests for normalize_log_level."""

    @pytest.mark.parametrize(
        ("input_level", "expected_level", "rejected"),
        [
            ("warning", "WARNING", False),
            (" debug ", "DEBUG", False),
            ("trace", "TRACE", False),
            (None, "INFO", True),
            ("", "INFO", True),
            ("loud", "INFO", True),
        ],
    )
    def test_normalize_log_level(
        self,
        input_level: str | None,
        expected_level: str,
        *,
        rejected: bool,
    ) -> None:
        """Normalize log levels and flag rejected inputs."""
        level, invalid = normalize_log_level(input_level)

        assert level == expected_level, (
            f"Expected {input_level!r} to normalize to {expected_level}."
        )
        assert invalid is rejected


def test_format_log_message_uses_percent_formatting() -> None:
    """Percent formatting produces the expected message."""
    assert format_log_message("skipped %s (%d)", "lead_time", 3) == (
        "skipped lead_time (3)"
    )


def test_format_log_message_without_args_is_verbatim() -> None:
    """Templates without arguments are not interpolated."""
    assert format_log_message("100% done") == "100% done"


@pytest.mark.parametrize(
    ("emit", "level"),
    [
        (log_debug, "DEBUG"),
        (log_info, "INFO"),
        (log_warning, "WARNING"),
        (log_error, "ERROR"),
    ],
)
def test_helpers_format_and_pass_level(
    emit: object,
    level: str,
) -> None:
    """Each helper formats its message and emits its own level."""
    logger = _FakeLogger()

    emit(logger, "event_name=%s", "github.push")  # type: ignore[operator]

    assert logger.calls == [(level, "event_name=github.push", None, False)]


def test_log_warning_forwards_exc_info() -> None:
    """log_warning forwards exc_info to the logger."""
    logger = _FakeLogger()
    exc = ValueError("boom")

    log_warning(logger, "warning: %s", "oops", exc_info=exc)

    assert logger.calls == [("WARNING", "warning: oops", exc, False)]


def test_log_exception_passes_exc_info() -> None:
    """log_exception forwards the exception payload to the logger."""
    logger = _FakeLogger()
    exc = ValueError("boom")

    log_exception(logger, "classification failed", exc)

    assert logger.calls == [("ERROR", "classification failed", exc, False)]


@pytest.mark.parametrize(
    ("input_level", "expected_normalized", "rejected"),
    [
        ("DEBUG", "DEBUG", False),
        ("nope", "INFO", True),
    ],
)
def test_configure_logging(
    monkeypatch: pytest.MonkeyPatch,
    input_level: str,
    expected_normalized: str,
    *,
    rejected: bool,
) -> None:
    """configure_logging normalizes input levels and flags invalid values."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("devmetrics.logging.basicConfig", fake_basic_config)

    normalized, invalid = configure_logging(input_level)

    assert normalized == expected_normalized
    assert invalid is rejected
    assert captured.get("level") == expected_normalized
    assert captured.get("force") is False, "Expected basicConfig to keep handlers."
