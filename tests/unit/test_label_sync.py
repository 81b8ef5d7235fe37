"""Tests for label synchronisation and its backends."""

import json
from unittest.mock import MagicMock, patch

import pytest
from github import GithubException

from workstream_scanner.core.config import GitHubConfig, LabelDefinition
from workstream_scanner.errors import ConfigurationError
from workstream_scanner.integrations.github.client import GitHubLabelBackend
from workstream_scanner.integrations.github.labels import (
    GhCliLabelBackend,
    LabelBackend,
    LabelSyncAction,
    LabelSynchronizer,
)


class InMemoryLabelBackend(LabelBackend):
    def __init__(self, labels=None, fail_on=()):
        self.labels = {l.name: l for l in (labels or [])}
        self.fail_on = set(fail_on)
        self.calls = []

    def get_label(self, name):
        if name in self.fail_on:
            raise RuntimeError("boom")
        return self.labels.get(name)

    def create_label(self, label):
        self.calls.append(("create", label.name))
        self.labels[label.name] = label

    def update_label(self, label):
        self.calls.append(("update", label.name))
        self.labels[label.name] = label


HIGH = LabelDefinition(name="priority:high", color="b60205", description="High priority task")
UI = LabelDefinition(name="workstream-ui", color="fbca04", description="UI component improvements")


class TestLabelSynchronizer:
    def test_creates_missing_label(self):
        backend = InMemoryLabelBackend()
        results = LabelSynchronizer(backend).sync([HIGH])
        assert results[0].action == LabelSyncAction.CREATED
        assert backend.labels["priority:high"] == HIGH

    def test_updates_drifted_label(self):
        backend = InMemoryLabelBackend([HIGH.model_copy(update={"color": "000000"})])
        results = LabelSynchronizer(backend).sync([HIGH])
        assert results[0].action == LabelSyncAction.UPDATED
        assert backend.calls == [("update", "priority:high")]

    def test_leaves_matching_label_alone(self):
        backend = InMemoryLabelBackend([HIGH])
        results = LabelSynchronizer(backend).sync([HIGH])
        assert results[0].action == LabelSyncAction.UNCHANGED
        assert backend.calls == []

    def test_failure_is_recorded_and_sync_continues(self):
        backend = InMemoryLabelBackend(fail_on={"priority:high"})
        results = LabelSynchronizer(backend).sync([HIGH, UI])

        assert [r.action for r in results] == [LabelSyncAction.FAILED, LabelSyncAction.CREATED]
        assert results[0].error.label_name == "priority:high"
        assert "boom" in str(results[0].error)

    def test_dry_run_writes_nothing(self):
        backend = InMemoryLabelBackend()
        results = LabelSynchronizer(backend, dry_run=True).sync([HIGH])
        assert results[0].action == LabelSyncAction.CREATED
        assert backend.calls == []


class TestGitHubLabelBackend:
    @pytest.fixture
    def repo(self):
        return MagicMock()

    @pytest.fixture
    def backend(self, repo):
        gh = MagicMock()
        gh.get_repo.return_value = repo
        return GitHubLabelBackend(GitHubConfig(owner="acme", repo="app"), gh=gh)

    def test_get_missing_label_returns_none(self, backend, repo):
        repo.get_label.side_effect = GithubException(404, {"message": "Not Found"}, None)
        assert backend.get_label("nope") is None

    def test_get_existing_label(self, backend, repo):
        label = MagicMock()
        label.name = "priority:high"
        label.color = "B60205"
        label.description = None
        repo.get_label.return_value = label

        result = backend.get_label("priority:high")
        assert result == LabelDefinition(name="priority:high", color="b60205", description="")

    def test_other_errors_propagate(self, backend, repo):
        repo.get_label.side_effect = GithubException(401, {"message": "Bad credentials"}, None)
        with pytest.raises(GithubException):
            backend.get_label("x")

    def test_create_and_update(self, backend, repo):
        backend.create_label(HIGH)
        repo.create_label.assert_called_once_with(
            name="priority:high", color="b60205", description="High priority task"
        )

        existing = MagicMock()
        repo.get_label.return_value = existing
        backend.update_label(HIGH)
        existing.edit.assert_called_once_with(
            name="priority:high", color="b60205", description="High priority task"
        )

    def test_requires_repository(self):
        with pytest.raises(ConfigurationError):
            GitHubLabelBackend(GitHubConfig(), gh=MagicMock())


class TestGhCliLabelBackend:
    def _completed(self, stdout=""):
        result = MagicMock()
        result.stdout = stdout
        result.returncode = 0
        return result

    def test_lists_once_then_serves_from_cache(self):
        listing = json.dumps([{"name": "priority:high", "color": "B60205", "description": "High priority task"}])
        with patch(
            "workstream_scanner.integrations.github.labels.run_command",
            return_value=self._completed(listing),
        ) as run:
            backend = GhCliLabelBackend("acme/app")
            assert backend.get_label("priority:high") == HIGH
            assert backend.get_label("missing") is None

        run.assert_called_once()
        cmd = run.call_args[0][0]
        assert cmd[:3] == ["gh", "label", "list"]
        assert cmd[-2:] == ["-R", "acme/app"]

    def test_create_invokes_gh(self):
        with patch(
            "workstream_scanner.integrations.github.labels.run_command",
            return_value=self._completed("[]"),
        ) as run:
            GhCliLabelBackend("acme/app").create_label(UI)

        create_cmd = run.call_args_list[0][0][0]
        assert create_cmd == [
            "gh", "label", "create", "workstream-ui",
            "--color", "fbca04",
            "--description", "UI component improvements",
            "-R", "acme/app",
        ]

    def test_missing_cli(self):
        with patch(
            "workstream_scanner.integrations.github.labels.check_command_exists",
            return_value=False,
        ):
            with pytest.raises(ConfigurationError, match="not found"):
                GhCliLabelBackend("acme/app").ensure_available()
