"""Tests for the person command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from stargate.cli import cli


@pytest.fixture
def seeded(cli_runner: CliRunner, _isolated_roster: None) -> CliRunner:
    """Initialized CLI roster loaded with the sample data."""
    result = cli_runner.invoke(cli, ["init", "--seed"])
    assert result.exit_code == 0
    return cli_runner


@pytest.mark.usefixtures("_isolated_roster")
class TestPersonCreate:
    def test_create(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["person", "create", "Teal'c"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "Teal'c" in result.output

    def test_create_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "person", "create", "Teal'c"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "create_person"
        assert data["data"]["name"] == "Teal'c"

    def test_create_quiet_prints_id(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "person", "create", "Teal'c"])
        assert result.exit_code == 0
        assert result.output.strip() == "1"

    def test_duplicate_exits_1(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["--json", "person", "create", "John Doe"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error"]["code"] == "NAME_TAKEN"
        assert data["status_code"] == 400


@pytest.mark.usefixtures("_isolated_roster")
class TestPersonRename:
    def test_rename(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["--json", "person", "rename", "John Doe", "Jack O'Neill"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["previous_name"] == "John Doe"

        duties = seeded.invoke(cli, ["--json", "duty", "list", "Jack O'Neill"])
        assert json.loads(duties.output)["data"]["count"] == 2

    def test_rename_unknown(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["person", "rename", "Nobody", "Somebody"])
        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert "[404]" in result.output


@pytest.mark.usefixtures("_isolated_roster")
class TestPersonQueries:
    def test_get(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["person", "get", "Samantha Carter"])
        assert result.exit_code == 0
        assert "Samantha Carter" in result.output
        assert "Science Officer" in result.output

    def test_get_unknown_is_success(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["--json", "person", "get", "Nobody"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["person"] is None

    def test_get_blank_is_bad_input(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["--json", "person", "get", "  "])
        assert result.exit_code == 1
        assert json.loads(result.output)["status_code"] == 400

    def test_list(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["person", "list"])
        assert result.exit_code == 0
        assert "John Doe" in result.output
        assert "Daniel Jackson" not in result.output

    def test_list_quiet(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["-q", "person", "list"])
        assert result.output.split() == ["1", "2", "3"]
