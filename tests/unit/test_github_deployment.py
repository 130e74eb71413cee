"""Unit tests for deployment and deployment status classification."""

from __future__ import annotations

import typing as typ

import pytest

from tests.helpers.event_builders import github_event
from tests.helpers.femtologging_capture import WARNING_LEVELS, capture_femto_logs

if typ.TYPE_CHECKING:
    from devmetrics.classifiers import GithubEventClassifier
    from devmetrics.events import Event

DEPLOYMENT = {
    "id": 5512,
    "ref": "main",
    "task": "deploy",
    "environment": "production",
    "created_at": "2025-05-07T09:00:00Z",
}


def _status_event(state: str, **deployment: object) -> Event:
    return github_event(
        "github.deployment_status",
        {
            "deployment_status": {
                "state": state,
                "environment": "production",
                "created_at": "2025-05-07T09:12:30Z",
            },
            "deployment": {**DEPLOYMENT, **deployment},
        },
    )


class TestDeployment:
    """Tests for ``github.deployment``."""

    def test_dimensions(self, github_classifier: GithubEventClassifier) -> None:
        """Deployment metadata becomes dimensions."""
        result = github_classifier.classify(
            github_event("github.deployment", {"deployment": DEPLOYMENT})
        )

        assert result.names == [
            "github.deployment.total",
            "github.deployment.environment",
        ]
        dimensions = result.metrics[0].dimensions
        assert dimensions["environment"] == "production"
        assert dimensions["deployment_id"] == "5512"
        assert dimensions["ref"] == "main"
        assert dimensions["task"] == "deploy"

    def test_sparse_payload(self, github_classifier: GithubEventClassifier) -> None:
        """Missing fields are omitted and the environment is unknown."""
        result = github_classifier.classify(
            github_event("github.deployment", {"deployment": {}})
        )

        dimensions = result.metrics[0].dimensions
        assert dimensions["environment"] == "unknown"
        assert "deployment_id" not in dimensions


class TestDeploymentStatus:
    """Tests for ``github.deployment_status``."""

    def test_success_lead_time(self, github_classifier: GithubEventClassifier) -> None:
        """Successful deployments yield the lead time in seconds."""
        result = github_classifier.classify(_status_event("success"))

        assert "github.ci.deploy.total" in result.names
        assert "github.ci.deploy.completed" in result.names
        lead_time = result.first("github.ci.lead_time")
        assert lead_time is not None
        assert lead_time.value == 750
        assert lead_time.dimensions["state"] == "success"

    @pytest.mark.parametrize("state", ["failure", "error"])
    def test_failure_is_incident(
        self, github_classifier: GithubEventClassifier, state: str
    ) -> None:
        """Failed deployments count as failures and incidents."""
        result = github_classifier.classify(_status_event(state))

        assert "github.ci.deploy.failed" in result.names
        assert "github.ci.deploy.incident" in result.names
        assert result.first("github.ci.lead_time") is None

    @pytest.mark.parametrize("state", ["pending", "in_progress", "queued"])
    def test_non_final_states(
        self, github_classifier: GithubEventClassifier, state: str
    ) -> None:
        """Intermediate states only count status updates."""
        result = github_classifier.classify(_status_event(state))

        assert result.names == [
            "github.deployment_status.total",
            f"github.deployment_status.{state}",
        ]

    def test_environment_from_deployment(
        self, github_classifier: GithubEventClassifier
    ) -> None:
        """The deployment environment is used when the status lacks one."""
        event = github_event(
            "github.deployment_status",
            {
                "deployment_status": {"state": "pending"},
                "deployment": {"environment": "staging"},
            },
        )

        result = github_classifier.classify(event)

        assert result.metrics[0].dimensions["environment"] == "staging"

    def test_unparseable_created_at(
        self, github_classifier: GithubEventClassifier
    ) -> None:
        """A bad creation time skips the lead time and logs the field."""
        with capture_femto_logs("devmetrics.observability") as capture:
            result = github_classifier.classify(
                _status_event("success", created_at="around nine")
            )
            capture.wait_for_count(1)

        assert "github.ci.deploy.completed" in result.names
        assert result.first("github.ci.lead_time") is None
        assert capture.records[0].level in WARNING_LEVELS
        assert "deployment.created_at" in capture.records[0].message
