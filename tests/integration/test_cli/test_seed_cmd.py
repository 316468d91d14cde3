"""Integration tests for the `voter-guide seed` CLI command."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from voter_guide.cli.app import app

pytestmark = pytest.mark.integration

runner = CliRunner()


class TestSeed:
    def test_loads_document(self, database_url: str, seed_file: Path) -> None:
        result = runner.invoke(app, ["seed", str(seed_file)])
        assert result.exit_code == 0, result.output
        assert "zipcodes" in result.output
        assert "ballot_measures" in result.output

    def test_rerun_is_idempotent(self, database_url: str, seed_file: Path) -> None:
        assert runner.invoke(app, ["seed", str(seed_file)]).exit_code == 0
        result = runner.invoke(app, ["seed", str(seed_file)])
        assert result.exit_code == 0, result.output
        rows = [line.split() for line in result.output.splitlines()]
        lines = {row[0]: int(row[1]) for row in rows if len(row) == 2 and row[1].isdigit()}
        assert lines["zipcode_districts"] == 0
        assert lines["race_candidates"] == 0

    def test_invalid_json(self, database_url: str, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        result = runner.invoke(app, ["seed", str(bad)])
        assert result.exit_code == 1

    def test_non_object(self, database_url: str, tmp_path: Path) -> None:
        bad = tmp_path / "list.json"
        bad.write_text("[]", encoding="utf-8")
        result = runner.invoke(app, ["seed", str(bad)])
        assert result.exit_code == 1

    def test_missing_file(self, database_url: str, tmp_path: Path) -> None:
        result = runner.invoke(app, ["seed", str(tmp_path / "nope.json")])
        assert result.exit_code != 0
