"""Unit tests for dimension name and value normalization."""

from __future__ import annotations

import datetime as dt

import pytest

from devmetrics.metrics import (
    format_boolean,
    normalize_dimension_name,
    normalize_dimension_value,
    normalize_dimensions,
)


class TestRepositoryValues:
    """Repository slugs always carry an organization."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("my-repo", "unknown/my-repo"),
            ("org/my-repo", "org/my-repo"),
            ("unknown", "unknown"),
            ("  spaced  ", "unknown/spaced"),
        ],
    )
    def test_repository(self, value: str, expected: str) -> None:
        """Bare names gain an ``unknown/`` owner."""
        assert normalize_dimension_value("repository", value) == expected


class TestBooleanValues:
    """Boolean-like dimensions serialize to string literals."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, "true"),
            (False, "false"),
            (1, "true"),
            (0, "false"),
            ("yes", "true"),
            ("no", "false"),
            ("TRUE", "true"),
        ],
    )
    def test_conventional(self, value: object, expected: str) -> None:
        """Any truthy or falsy representation is accepted."""
        assert normalize_dimension_value("conventional", value) == expected

    def test_bool_in_any_dimension(self) -> None:
        """Booleans become literals whatever the dimension."""
        assert normalize_dimension_value("status", value=True) == "true"

    def test_format_boolean(self) -> None:
        """``format_boolean`` applies the same rules."""
        assert format_boolean("on") == "true"
        assert format_boolean(None) == "false"


class TestDateValues:
    """Date and timestamp dimensions."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2025-05-07", "2025-05-07"),
            ("2025-05-07T23:10:00Z", "2025-05-07"),
            ("2025-05-07T23:10:00-07:00", "2025-05-07"),
            (dt.date(2025, 1, 2), "2025-01-02"),
            (dt.datetime(2025, 1, 2, 3, 4, tzinfo=dt.UTC), "2025-01-02"),
        ],
    )
    def test_date(self, value: object, expected: str) -> None:
        """Dates render as ``YYYY-MM-DD`` in their own calendar day."""
        assert normalize_dimension_value("commit_date", value) == expected

    def test_unparseable_date_is_dropped(self) -> None:
        """Unparseable dates normalize to ``None``."""
        assert normalize_dimension_value("date", "last tuesday") is None

    def test_timestamp(self) -> None:
        """Timestamps render as ISO-8601 in UTC."""
        assert (
            normalize_dimension_value("timestamp", "2025-05-07T10:00:00+02:00")
            == "2025-05-07T08:00:00+00:00"
        )


class TestNames:
    """Dimension key normalization."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("jobName", "job_name"),
            ("workflow-name", "workflow_name"),
            ("deploymentID", "deployment_id"),
            ("repository", "repository"),
            ("customKey", "customKey"),
        ],
    )
    def test_name(self, name: str, expected: str) -> None:
        """Registered snake_case names are used when they exist."""
        assert normalize_dimension_name(name) == expected


class TestNormalizeDimensions:
    """Whole-mapping normalization."""

    def test_mapping(self) -> None:
        """Keys and values are normalized and ``None`` values dropped."""
        assert normalize_dimensions(
            {
                "repository": "widgets",
                "runAttempt": 2,
                "conventional": True,
                "scope": None,
                "date": "not a date",
            }
        ) == {
            "repository": "unknown/widgets",
            "run_attempt": "2",
            "conventional": "true",
        }
