"""Tests for atomic writes, error handling, subprocess and validator utilities."""

import logging
import subprocess
from unittest.mock import patch

import pytest

from workstream_scanner.utils.atomic_io import atomic_write_text
from workstream_scanner.utils.error_handling import (
    ErrorContext,
    handle_filesystem_errors,
    log_and_ignore,
)
from workstream_scanner.utils.subprocess_utils import (
    SubprocessError,
    check_command_exists,
    run_command,
)
from workstream_scanner.utils.validators import validate_label_color, validate_owner_repo


class TestAtomicWrite:
    def test_writes_content(self, tmp_path):
        target = tmp_path / "report.md"
        atomic_write_text(target, "# Report\n")
        assert target.read_text() == "# Report\n"
        assert list(tmp_path.iterdir()) == [target]

    def test_replaces_existing(self, tmp_path):
        target = tmp_path / "report.md"
        target.write_text("old")
        atomic_write_text(target, "new")
        assert target.read_text() == "new"

    def test_missing_directory_raises_and_leaves_nothing(self, tmp_path):
        target = tmp_path / "missing" / "report.md"
        with pytest.raises(OSError):
            atomic_write_text(target, "x", max_retries=1)
        assert not (tmp_path / "missing").exists()


def test_log_and_ignore_does_not_raise(caplog):
    with caplog.at_level(logging.WARNING):
        try:
            raise ValueError("test error")
        except ValueError as e:
            log_and_ignore(e, "Skipping unreadable path")

    assert "Skipping unreadable path: test error" in caplog.text


def test_handle_filesystem_errors_logs_and_reraises(caplog):
    @handle_filesystem_errors("write report")
    def fail():
        raise PermissionError("read-only")

    with caplog.at_level(logging.ERROR):
        with pytest.raises(PermissionError):
            fail()

    assert "Permission denied during write report" in caplog.text


class TestErrorContext:
    def test_suppresses_and_records(self, caplog):
        with caplog.at_level(logging.ERROR):
            with ErrorContext("syncing", raise_on_error=False) as ctx:
                raise RuntimeError("boom")

        assert isinstance(ctx.error, RuntimeError)
        assert "Error during syncing: boom" in caplog.text

    def test_reraises_by_default(self):
        with pytest.raises(RuntimeError):
            with ErrorContext("syncing"):
                raise RuntimeError("boom")

    def test_no_error(self):
        with ErrorContext("syncing") as ctx:
            pass
        assert ctx.error is None


class TestRunCommand:
    def test_success(self):
        with patch("subprocess.run", return_value=subprocess.CompletedProcess(["gh"], 0, "ok", "")):
            result = run_command(["gh", "label", "list"])
        assert result.stdout == "ok"

    def test_failure_raises_with_context(self):
        failed = subprocess.CompletedProcess(["gh"], 1, "", "not authenticated")
        with patch("subprocess.run", return_value=failed):
            with pytest.raises(SubprocessError) as exc_info:
                run_command(["gh", "label", "list"])

        assert exc_info.value.returncode == 1
        assert exc_info.value.cmd == "gh label list"
        assert "not authenticated" in str(exc_info.value)

    def test_failure_ignored_without_check(self):
        failed = subprocess.CompletedProcess(["gh"], 1, "", "nope")
        with patch("subprocess.run", return_value=failed):
            assert run_command(["gh"], check=False).returncode == 1

    def test_check_command_exists(self):
        with patch("shutil.which", return_value=None):
            assert check_command_exists("gh") is False
        with patch("shutil.which", return_value="/usr/bin/gh"):
            assert check_command_exists("gh") is True


class TestValidators:
    @pytest.mark.parametrize("value", ["acme/app", "my-org/my.repo_2"])
    def test_valid_owner_repo(self, value):
        assert validate_owner_repo(value) == value

    @pytest.mark.parametrize("value", ["", "acme", "acme/app/extra", "acme/.."])
    def test_invalid_owner_repo(self, value):
        with pytest.raises(ValueError):
            validate_owner_repo(value)

    def test_label_color_normalised(self):
        assert validate_label_color("#B60205") == "b60205"

    @pytest.mark.parametrize("value", ["b6020", "zzzzzz", "#1234567"])
    def test_invalid_label_color(self, value):
        with pytest.raises(ValueError):
            validate_label_color(value)
