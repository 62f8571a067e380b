"""Tests for the CLI module."""

import json
import os
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from feedback_board.cli import app, default_device_info
from feedback_board.config import Settings
from feedback_board.exceptions import FetchError


@pytest.fixture
def settings(tmp_path):
    """Settings pointing the ledger at a temporary file."""
    return Settings(
        tracker_owner="acme",
        tracker_repo="app-feedback",
        tracker_token="token",
        ledger_path=str(tmp_path / "ledger.json"),
    )


@pytest.fixture
def cli(tracker, settings):
    """CliRunner with the tracker client and settings patched."""
    with patch("feedback_board.cli.TrackerClient", return_value=tracker), \
            patch("feedback_board.cli.get_settings", return_value=settings), \
            patch("feedback_board.cli.setup_logging"):
        yield CliRunner()


class TestCli:
    """Test cases for the CLI interface."""

    def test_list_command(self, cli, tracker, record_factory):
        """Test listing records sorted by votes."""
        tracker.records = {
            1: record_factory(1, body="a\n\n---\n👍 Votes: 1", title="Crash on start"),
            2: record_factory(2, body="b\n\n---\n👍 Votes: 4", labels=["feature-request"], title="Dark mode"),
        }

        result = cli.invoke(app, ["list"])

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert "Dark mode" in lines[0]
        assert "4 votes" in lines[0]
        assert "[bug] Crash on start" in lines[1]
        assert tracker.closed

    def test_list_command_with_filter(self, cli, tracker, record_factory):
        """Test passing a filter."""
        tracker.records = {1: record_factory(1, labels=["bug"])}

        result = cli.invoke(app, ["list", "--filter", "features"])

        assert result.exit_code == 0
        assert "No feedback yet." in result.stdout
        assert tracker.calls == [("list_issues", ["feature-request"])]

    def test_vote_command_then_duplicate(self, cli, tracker, settings, record_factory):
        """Test voting and the informational duplicate message."""
        tracker.records = {5: record_factory(5, body="x\n\n---\n👍 Votes: 5")}

        first = cli.invoke(app, ["vote", "5"])
        second = cli.invoke(app, ["vote", "5"])

        assert first.exit_code == 0
        assert "Voted for #5 (6 votes)" in first.stdout
        assert second.exit_code == 0
        assert "already voted" in second.stdout
        assert tracker.call_names().count("update_issue_body") == 1
        with open(settings.ledger_path, encoding="utf-8") as file:
            assert json.load(file) == [5]

    def test_vote_command_failure(self, cli, tracker, settings):
        """Test that tracker failures exit non-zero and leave the ledger empty."""
        tracker.failures["get_issue"] = FetchError("HTTP 500: boom", 500)

        result = cli.invoke(app, ["vote", "5"])

        assert result.exit_code == 1
        assert not os.path.exists(settings.ledger_path)

    def test_submit_command(self, cli, tracker):
        """Test submitting feedback."""
        result = cli.invoke(app, [
            "submit", "Dark mode",
            "--description", "Please add it",
            "--category", "feature-request",
            "--device-info", "Device: test",
            "--email", "me@example.com",
        ])

        assert result.exit_code == 0
        assert "Submitted #100" in result.stdout
        name, title, body, labels = tracker.calls[0]
        assert title == "Dark mode"
        assert body.startswith("Please add it\n\n---\n**Device Information:**\nDevice: test\n")
        assert "me@example.com" in body
        assert labels == ["feature-request", "user-submitted"]

    def test_show_command(self, cli, tracker, record_factory):
        """Test showing a record without its embedded sections."""
        tracker.records = {3: record_factory(3, body="Broken\n\n---\n👍 Votes: 2", title="Login")}

        result = cli.invoke(app, ["show", "3"])

        assert result.exit_code == 0
        assert "#3 Login" in result.stdout
        assert "Votes: 2" in result.stdout
        assert "Broken" in result.stdout
        assert "👍" not in result.stdout

    def test_comment_and_react_commands(self, cli, tracker, record_factory):
        """Test the comment and reaction commands."""
        tracker.records = {3: record_factory(3)}

        commented = cli.invoke(app, ["comment", "3", "Me too"])
        reacted = cli.invoke(app, ["react", "3", "--kind", "heart"])

        assert commented.exit_code == 0
        assert reacted.exit_code == 0
        assert tracker.comments[3][0].body == "Me too"
        assert tracker.reactions[0][0] == 3

    def test_ledger_commands(self, cli, settings):
        """Test showing and resetting the ledger."""
        with open(settings.ledger_path, "w", encoding="utf-8") as file:
            json.dump([2, 9], file)

        shown = cli.invoke(app, ["ledger", "show"])
        assert "#2" in shown.stdout and "#9" in shown.stdout

        cli.invoke(app, ["ledger", "reset", "2"])
        with open(settings.ledger_path, encoding="utf-8") as file:
            assert json.load(file) == [9]

        cli.invoke(app, ["ledger", "reset"])
        empty = cli.invoke(app, ["ledger", "show"])
        assert "No votes recorded" in empty.stdout


def test_default_device_info_lines():
    """Test the host summary used when no device info is given."""
    info = default_device_info().splitlines()
    assert info[0].startswith("Device: ")
    assert info[1].startswith("OS Version: ")
