"""Unit tests for the Jira, GitLab, Bitbucket, CI, task and generic classifiers."""

from __future__ import annotations

import pytest

from devmetrics.classifiers import (
    BitbucketEventClassifier,
    CiEventClassifier,
    GenericEventClassifier,
    GitlabEventClassifier,
    JiraEventClassifier,
    JiraFallbackClassifier,
    TaskEventClassifier,
)
from devmetrics.events import build_event

JIRA_ISSUE = {
    "issue": {
        "fields": {
            "project": {"key": "OPS"},
            "issuetype": {"name": "Bug"},
        }
    }
}


class TestJira:
    """Tests for ``JiraEventClassifier`` and its fallback subset."""

    @pytest.mark.parametrize("action", ["created", "updated", "resolved", "deleted"])
    def test_issue_actions(self, action: str) -> None:
        """Issue events count totals, actions and issue types."""
        result = JiraEventClassifier().classify(
            build_event(f"jira.issue_{action}", "jira", JIRA_ISSUE)
        )

        assert result.names == [
            "jira.issue.total",
            f"jira.issue.{action}",
            "jira.issue.by_type",
        ]
        by_type = result.metrics[2]
        assert by_type.dimensions == {
            "project": "OPS",
            "source": "jira",
            "action": action,
            "issue_type": "Bug",
        }

    def test_sprint(self) -> None:
        """Sprint events use the project from the payload root."""
        result = JiraEventClassifier().classify(
            build_event("jira.sprint_closed", "jira", {"project": {"key": "WEB"}})
        )

        assert result.names == ["jira.sprint.closed"]
        assert result.metrics[0].dimensions["project"] == "WEB"

    def test_other_subtype(self) -> None:
        """Other subtypes produce one observed counter."""
        result = JiraEventClassifier().classify(
            build_event("jira.board_configuration_changed", "jira")
        )

        assert result.names == ["jira.board_configuration_changed.total"]
        assert result.metrics[0].dimensions["project"] == "unknown"

    def test_fallback_ignores_other_subtypes(self) -> None:
        """The fallback subset classifies only issues and sprints."""
        fallback = JiraFallbackClassifier()

        other = fallback.classify(build_event("jira.comment_created", "jira"))
        issue = fallback.classify(build_event("jira.issue_created", "jira", JIRA_ISSUE))

        assert other.metrics == []
        assert issue.names[0] == "jira.issue.total"


class TestGitlab:
    """Tests for ``GitlabEventClassifier``."""

    def test_push(self) -> None:
        """Pushes count commits from the payload."""
        result = GitlabEventClassifier().classify(
            build_event(
                "gitlab.push",
                "gitlab",
                {
                    "project": {"path_with_namespace": "infra/terraform"},
                    "total_commits_count": 3,
                },
            )
        )

        assert result.names == ["gitlab.push.total", "gitlab.push.commits"]
        assert result.metrics[1].value == 3
        assert result.metrics[1].dimensions["project"] == "infra/terraform"

    def test_merge_request(self) -> None:
        """Merge request actions are counted with an action dimension."""
        result = GitlabEventClassifier().classify(
            build_event("gitlab.merge_request.merged", "gitlab")
        )

        assert result.names == [
            "gitlab.merge_request.total",
            "gitlab.merge_request.merged",
        ]
        assert result.metrics[0].dimensions["action"] == "merged"

    def test_other(self) -> None:
        """Unhandled events fold into one counter."""
        result = GitlabEventClassifier().classify(
            build_event("gitlab.pipeline.success", "gitlab")
        )

        assert result.names == ["gitlab.pipeline_success.total"]


class TestBitbucket:
    """Tests for ``BitbucketEventClassifier``."""

    def test_push(self) -> None:
        """Commits are summed across push changes."""
        result = BitbucketEventClassifier().classify(
            build_event(
                "bitbucket.repo:push",
                "bitbucket",
                {
                    "repository": {"full_name": "team/service"},
                    "push": {"changes": [{"commits": [{}, {}]}, {"commits": [{}]}]},
                },
            )
        )

        assert result.names == ["bitbucket.push.total", "bitbucket.push.commits"]
        assert result.metrics[1].value == 3
        assert result.metrics[1].dimensions["repository"] == "team/service"

    @pytest.mark.parametrize("action", ["created", "approved", "merged", "rejected"])
    def test_pull_requests(self, action: str) -> None:
        """Pull request actions are counted."""
        result = BitbucketEventClassifier().classify(
            build_event(f"bitbucket.pullrequest:{action}", "bitbucket")
        )

        assert result.names == [
            "bitbucket.pullrequest.total",
            f"bitbucket.pullrequest.{action}",
        ]

    @pytest.mark.parametrize(
        ("name", "data"),
        [
            ("bitbucket.repo:fork", {"fork": {"name": "x"}}),
            ("bitbucket.issue:comment_created", {"comment": None}),
            ("bitbucket.repo:push", {"push": "not a mapping"}),
            ("bitbucket.pullrequest:unapproved", {"repository": ["odd"]}),
            ("bitbucket.repo:commit_status_updated", {"commit_status": {}}),
        ],
    )
    def test_never_raises(self, name: str, data: dict[str, object]) -> None:
        """Any Bitbucket event yields a list of well-formed metrics."""
        classifier = BitbucketEventClassifier()

        result = classifier.classify(build_event(name, "bitbucket", data))

        assert result.metrics
        assert all(classifier.naming_rules.parse(n) is not None for n in result.names)

    def test_colon_subtype_is_folded(self) -> None:
        """Colons never leak into a metric name."""
        result = BitbucketEventClassifier().classify(
            build_event("bitbucket.repo:fork", "bitbucket")
        )

        assert result.names == ["bitbucket.repo_fork.total"]


class TestCi:
    """Tests for ``CiEventClassifier``."""

    def test_completed_build(self) -> None:
        """Completed operations report the measured duration."""
        result = CiEventClassifier().classify(
            build_event(
                "ci.build.completed",
                "ci",
                {
                    "provider": "jenkins",
                    "start_time": "2025-05-07T10:00:00Z",
                    "end_time": "2025-05-07T10:01:40Z",
                },
            )
        )

        assert result.names == [
            "ci.build.total",
            "ci.build.completed",
            "ci.build.duration",
        ]
        assert result.metrics[0].dimensions["status"] == "completed"
        assert result.metrics[2].value == 100
        assert result.metrics[2].dimensions["provider"] == "jenkins"

    def test_started_deploy(self) -> None:
        """Operations that have not finished have no duration."""
        result = CiEventClassifier().classify(build_event("ci.deploy.started", "ci"))

        assert result.names == ["ci.deploy.total", "ci.deploy.started"]

    def test_payload_form_completed_deploy(self) -> None:
        """The payload form adds completion and lead time for deploys."""
        result = CiEventClassifier().classify(
            build_event(
                "ci.event",
                "ci",
                {
                    "operation": "deploy",
                    "status": "completed",
                    "duration": 42,
                    "lead_time": "7200",
                },
            )
        )

        assert result.names == [
            "ci.deploy.total",
            "ci.deploy.completed",
            "ci.deploy.duration",
            "ci.deploy.completed",
            "ci.deploy.lead_time",
        ]
        assert result.metrics[2].value == 42
        assert result.metrics[4].value == 7200.0

    def test_payload_form_failed_deploy(self) -> None:
        """Failed deploys in the payload form are incidents."""
        result = CiEventClassifier().classify(
            build_event("ci.event", "ci", {"operation": "deploy", "status": "failed"})
        )

        assert result.names == [
            "ci.deploy.total",
            "ci.deploy.failed",
            "ci.deploy.incident",
        ]

    @pytest.mark.parametrize(
        ("operation", "status", "extra"),
        [
            ("Deploy", "Completed", "ci.deploy.lead_time"),
            ("DEPLOY", "Failed", "ci.deploy.incident"),
        ],
    )
    def test_payload_form_is_case_insensitive(
        self, operation: str, status: str, extra: str
    ) -> None:
        """Mixed-case payload values get the same deploy extras."""
        result = CiEventClassifier().classify(
            build_event(
                "ci.event",
                "ci",
                {"operation": operation, "status": status, "lead_time": 60},
            )
        )

        assert result.names[0] == "ci.deploy.total"
        assert extra in result.names
        assert result.metrics[0].dimensions["status"] == status.lower()

    def test_payload_form_without_fields(self) -> None:
        """A bare ``ci.event`` is counted generically."""
        result = CiEventClassifier().classify(build_event("ci.event", "ci"))

        assert result.names == ["ci.event.total"]


class TestTask:
    """Tests for ``TaskEventClassifier``."""

    @pytest.mark.parametrize("action", ["created", "completed", "moved"])
    def test_actions(self, action: str) -> None:
        """Known actions become ``task.item`` metrics."""
        result = TaskEventClassifier().classify(
            build_event(f"task.{action}", "task", {"project": "web", "type": "story"})
        )

        assert result.names == ["task.item.total", f"task.item.{action}"]
        assert result.metrics[0].dimensions == {
            "project": "web",
            "task_type": "story",
            "source": "task",
            "action": action,
        }

    def test_other(self) -> None:
        """Other task events are counted by subtype."""
        result = TaskEventClassifier().classify(build_event("task.archived", "task"))

        assert result.names == ["task.archived.total"]


class TestGeneric:
    """Tests for ``GenericEventClassifier``."""

    def test_folds_name(self) -> None:
        """The whole event name becomes one segment."""
        result = GenericEventClassifier().classify(
            build_event("sentry.issue.created", "sentry")
        )

        assert result.names == ["generic.sentry_issue_created.total"]
        assert result.metrics[0].dimensions == {"source": "sentry"}
