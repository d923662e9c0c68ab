"""Tests for the CLI commands."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from pipojournal.cli import main
from pipojournal.config import Config
from pipojournal.core.records import Identity
from pipojournal.dashboard import DashboardView
from pipojournal.ports.auth_provider import AuthenticationError
from pipojournal.ports.record_store import GOALS, JOURNAL_ENTRIES

from fakes import FakeAuth, FakeStore, entry_row, goal_row


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def auth():
    return FakeAuth(Identity(id="u1"))


@pytest.fixture
def store():
    return FakeStore(
        entries=[entry_row(2, title="Rainy walk", mood="sad"), entry_row(1)],
        goals=[goal_row(1, title="Read more", progress=50, target_date="2025-12-31")],
    )


@pytest.fixture(autouse=True)
def wiring(auth, store):
    with patch("pipojournal.cli.load_config", return_value=Config(timezone="UTC")), patch(
        "pipojournal.cli.build_dashboard", side_effect=lambda config: DashboardView(auth, store)
    ):
        yield


class TestListing:
    def test_journal(self, runner):
        result = runner.invoke(main, ["journal"])

        assert result.exit_code == 0
        assert "## My Journal" in result.output
        assert result.output.index("Rainy walk") < result.output.index("Entry 1")
        assert "😢" in result.output

    def test_journal_json(self, runner):
        result = runner.invoke(main, ["journal", "--json"])

        data = json.loads(result.output)
        assert [e["id"] for e in data] == ["e2", "e1"]
        assert data[0]["mood"] == "sad"

    def test_journal_empty(self, runner, store):
        store.rows[JOURNAL_ENTRIES] = []
        result = runner.invoke(main, ["journal"])
        assert "No journal entries yet. Start writing!" in result.output

    def test_journal_load_failure_shows_empty_state(self, runner, store):
        store.fail_select.add(JOURNAL_ENTRIES)
        result = runner.invoke(main, ["journal"])

        assert result.exit_code == 0
        assert "No journal entries yet" in result.output

    def test_goals(self, runner):
        result = runner.invoke(main, ["goals"])

        assert result.exit_code == 0
        assert "Read more" in result.output
        assert "Target: December 31, 2025" in result.output
        assert "50%" in result.output

    def test_goals_json(self, runner):
        data = json.loads(runner.invoke(main, ["goals", "--json"]).output)
        assert data == [
            {
                "id": "g1",
                "title": "Read more",
                "description": "Description 1",
                "target_date": "2025-12-31",
                "progress": 50,
                "created_at": "2025-01-15T13:00:00+00:00",
            }
        ]

    def test_dashboard_shows_both_tabs(self, runner):
        result = runner.invoke(main, ["dashboard"])
        assert "## My Journal" in result.output
        assert "## My Goals" in result.output


class TestEntry:
    def test_creates_entry(self, runner, store):
        result = runner.invoke(main, ["entry", "-t", "T", "-c", "C", "-m", "happy"])

        assert result.exit_code == 0
        assert store.inserts == [
            (JOURNAL_ENTRIES, {"user_id": "u1", "title": "T", "content": "C", "mood": "happy"})
        ]
        assert "### T 😊" in result.output

    def test_prompts_for_missing_values(self, runner, store):
        result = runner.invoke(main, ["entry"], input="Prompted title\nPrompted content\n")

        assert result.exit_code == 0
        assert store.inserts[0][1]["title"] == "Prompted title"
        assert store.inserts[0][1]["mood"] == "neutral"

    def test_rejects_unknown_mood(self, runner, store):
        result = runner.invoke(main, ["entry", "-t", "T", "-c", "C", "-m", "grumpy"])

        assert result.exit_code != 0
        assert store.inserts == []

    def test_blank_content_is_missing(self, runner, store):
        result = runner.invoke(main, ["entry", "-t", "T", "-c", " "])

        assert result.exit_code == 1
        assert "missing content" in result.output
        assert store.inserts == []

    def test_store_failure_exits_1(self, runner, store):
        store.fail_insert.add(JOURNAL_ENTRIES)
        result = runner.invoke(main, ["entry", "-t", "T", "-c", "C"])

        assert result.exit_code == 1
        assert "could not save entry" in result.output


class TestGoal:
    def test_creates_goal_without_target_date(self, runner, store):
        result = runner.invoke(main, ["goal", "-t", "Run 10k"])

        assert result.exit_code == 0
        assert store.inserts == [
            (GOALS, {"user_id": "u1", "title": "Run 10k", "description": "", "target_date": None})
        ]
        assert "Run 10k" in result.output

    def test_creates_goal_with_target_date(self, runner, store):
        runner.invoke(main, ["goal", "-t", "Run 10k", "-d", "Sub 50min", "--target-date", "2025-09-01"])
        assert store.inserts[0][1]["target_date"] == "2025-09-01"
        assert store.inserts[0][1]["description"] == "Sub 50min"

    def test_store_failure_exits_1(self, runner, store):
        store.fail_insert.add(GOALS)
        result = runner.invoke(main, ["goal", "-t", "Run 10k"])
        assert result.exit_code == 1


class TestAuthCommands:
    @patch("pipojournal.cli.SupabaseAuth")
    def test_login(self, mock_cls, runner):
        result = runner.invoke(main, ["login", "--email", "me@example.com"], input="secret\n")

        assert result.exit_code == 0
        mock_cls.return_value.sign_in.assert_called_once_with("me@example.com", "secret")
        assert "Signed in as me@example.com." in result.output

    @patch("pipojournal.cli.SupabaseAuth")
    def test_login_failure(self, mock_cls, runner):
        mock_cls.return_value.sign_in.side_effect = AuthenticationError("Invalid login credentials")
        result = runner.invoke(main, ["login", "--email", "me@example.com", "--password", "x"])

        assert result.exit_code == 1
        assert "Invalid login credentials" in result.output

    def test_logout(self, runner, auth):
        result = runner.invoke(main, ["logout"])

        assert result.exit_code == 0
        assert auth.end_session_calls == 1

    def test_logout_failure_is_not_fatal(self, runner, auth):
        auth.fail = True
        result = runner.invoke(main, ["logout"])

        assert result.exit_code == 0
        assert auth.end_session_calls == 1


class TestBot:
    def test_missing_token(self, runner):
        with patch("pipojournal.telegram_bot.load_config", return_value=Config()):
            result = runner.invoke(main, ["bot"])

        assert result.exit_code == 1
        assert "TELEGRAM_BOT_TOKEN" in result.output

    def test_runs_bot(self, runner):
        with patch("pipojournal.telegram_bot.run_bot", MagicMock()) as run_bot:
            result = runner.invoke(main, ["bot"])

        assert result.exit_code == 0
        run_bot.assert_called_once()
