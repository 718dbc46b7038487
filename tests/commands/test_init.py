"""Tests for the init command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from stargate.cli import cli


@pytest.mark.usefixtures("_isolated_roster")
class TestInitCommand:
    def test_init_creates_database(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert (tmp_path / ".stargate" / "stargate.db").is_file()

    def test_init_seed_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "init", "--seed"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["data"]["seeded"] is True
        assert data["data"]["people"] == 4
        assert data["data"]["duties"] == 4

    def test_reseed_warns(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init", "--seed"])
        result = cli_runner.invoke(cli, ["init", "--seed"])
        assert result.exit_code == 0
        assert "Seed data skipped" in result.output

    def test_configured_db_path(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "stargate.toml").write_text('[database]\npath = "db/roster.db"\n')
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / "db" / "roster.db").is_file()
