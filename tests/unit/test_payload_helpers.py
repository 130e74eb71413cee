"""Unit tests for payload lookup helpers."""

from __future__ import annotations

import pytest

from devmetrics.events.payload import (
    as_int,
    as_list,
    as_mapping,
    as_number,
    dig,
    is_truthy,
    text,
)

PAYLOAD = {
    "workflow_job": {
        "steps": [{"name": "Set up job"}, {"name": "Deploy release"}],
        "runner": None,
    }
}


class TestDig:
    """Tests for ``dig``."""

    @pytest.mark.parametrize(
        ("keys", "expected"),
        [
            (("workflow_job", "steps", 1, "name"), "Deploy release"),
            (("workflow_job", "steps", -1, "name"), "Deploy release"),
            (("workflow_job", "steps", 5, "name"), None),
            (("workflow_job", "runner", "name"), None),
            (("workflow_job", "steps", "name"), None),
            (("missing",), None),
        ],
    )
    def test_paths(self, keys: tuple[str | int, ...], expected: object) -> None:
        """Wrong shapes and missing steps resolve to ``None``."""
        assert dig(PAYLOAD, *keys) == expected


class TestCoercion:
    """Tests for shape and value coercion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("  main ", "main"),
            (42, "42"),
            (True, "true"),
            ("   ", None),
            ({"a": 1}, None),
            ([], None),
        ],
    )
    def test_text(self, value: object, expected: str | None) -> None:
        """Scalars render as stripped strings and containers are absent."""
        assert text(value) == expected

    def test_text_default(self) -> None:
        """Blank values fall back to the default."""
        assert text(None, "unknown") == "unknown"

    def test_shapes(self) -> None:
        """Wrong shapes become empty containers."""
        assert as_mapping(["x"]) == {}
        assert as_list({"x": 1}) == []
        assert as_list([1]) == [1]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (3, 3),
            (2.5, 2.5),
            ("7", 7),
            (" 4.25 ", 4.25),
            ("seven", None),
            (True, None),
            (None, None),
        ],
    )
    def test_as_number(self, value: object, expected: float | None) -> None:
        """Numeric strings parse and booleans are not numbers."""
        assert as_number(value) == expected

    def test_as_int(self) -> None:
        """Non-numeric values fall back to the default."""
        assert as_int("12.9") == 12
        assert as_int("n/a", default=-1) == -1

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, True),
            ("Yes", True),
            (" on ", True),
            (2, True),
            ("false", False),
            (0, False),
            (None, False),
            ("maybe", False),
        ],
    )
    def test_is_truthy(self, value: object, *, expected: bool) -> None:
        """Loose boolean representations are recognized."""
        assert is_truthy(value) is expected
