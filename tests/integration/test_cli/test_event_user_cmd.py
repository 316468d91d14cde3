"""Integration tests for the `voter-guide event` and `voter-guide user` CLI commands."""

from datetime import UTC, datetime, timedelta

import pytest
from typer.testing import CliRunner

from voter_guide.cli.app import app

pytestmark = pytest.mark.integration

runner = CliRunner()


def _create_event(*extra: str, date: str = "2026-11-03", state: str = "NY") -> str:
    result = runner.invoke(
        app,
        ["event", "create", "--state", state, "--title", "NY General", "--date", date, *extra],
    )
    assert result.exit_code == 0, result.output
    created = [line for line in result.output.splitlines() if line.startswith("Created election event ")]
    return created[0].removeprefix("Created election event ").strip()


class TestEventCommands:
    def test_create_and_list(self, database_url: str) -> None:
        event_id = _create_event("--type", "general", "--public")
        assert event_id.startswith("ny-general-")

        result = runner.invoke(app, ["event", "list"])
        assert result.exit_code == 0, result.output
        assert event_id in result.output
        assert "public" in result.output
        assert "Total: 1" in result.output

    def test_create_rejects_bad_date(self, database_url: str) -> None:
        result = runner.invoke(app, ["event", "create", "--state", "NY", "--title", "x", "--date", "11/03/2026"])
        assert result.exit_code == 1

    def test_create_rejects_state_outside_pilot(self, database_url: str) -> None:
        result = runner.invoke(app, ["event", "create", "--state", "CA", "--title", "x", "--date", "2026-11-03"])
        assert result.exit_code == 1

    def test_archive_and_restore(self, database_url: str) -> None:
        event_id = _create_event()

        assert runner.invoke(app, ["event", "archive", event_id]).exit_code == 0
        assert event_id in runner.invoke(app, ["event", "list", "--archived"]).output
        assert "Total: 0" in runner.invoke(app, ["event", "list"]).output

        assert runner.invoke(app, ["event", "restore", event_id]).exit_code == 0
        assert event_id in runner.invoke(app, ["event", "list"]).output

    def test_archive_unknown(self, database_url: str) -> None:
        assert runner.invoke(app, ["event", "archive", "missing"]).exit_code == 1

    def test_transition(self, database_url: str) -> None:
        past = (datetime.now(UTC).date() - timedelta(days=30)).isoformat()
        event_id = _create_event(date=past)

        result = runner.invoke(app, ["event", "transition"])
        assert result.exit_code == 0, result.output
        assert "Transitioned 1 election events to passed" in result.output

        listing = runner.invoke(app, ["event", "list"]).output
        row = next(line for line in listing.splitlines() if line.startswith(event_id))
        assert "passed" in row


class TestUserCommands:
    def test_create(self, database_url: str) -> None:
        result = runner.invoke(app, ["user", "create", "--username", "JaneDoe", "--state", "NY"])
        assert result.exit_code == 0, result.output
        assert "User 'JaneDoe' created" in result.output

    def test_duplicate_fails(self, database_url: str) -> None:
        runner.invoke(app, ["user", "create", "--username", "JaneDoe"])
        result = runner.invoke(app, ["user", "create", "--username", "janedoe"])
        assert result.exit_code == 1

    def test_duplicate_with_if_not_exists(self, database_url: str) -> None:
        runner.invoke(app, ["user", "create", "--username", "JaneDoe"])
        result = runner.invoke(app, ["user", "create", "--username", "JaneDoe", "--if-not-exists"])
        assert result.exit_code == 0, result.output
        assert "already exists, skipping" in result.output

    def test_reserved_name_fails(self, database_url: str) -> None:
        result = runner.invoke(app, ["user", "create", "--username", "admin"])
        assert result.exit_code == 1

    def test_prompts_for_username(self, database_url: str) -> None:
        result = runner.invoke(app, ["user", "create"], input="PromptedUser\n")
        assert result.exit_code == 0, result.output
        assert "User 'PromptedUser' created" in result.output
