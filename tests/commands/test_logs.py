"""Tests for the logs command and process log bracketing."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from stargate.cli import cli


def _entries(runner: CliRunner, *args: str) -> list[dict]:
    result = runner.invoke(cli, ["--json", "logs", *args])
    assert result.exit_code == 0
    return json.loads(result.output)["data"]["entries"]


@pytest.mark.usefixtures("_isolated_roster")
class TestProcessLogBracketing:
    def test_success_bracketed(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["person", "create", "Teal'c"])
        messages = [e["message"] for e in _entries(cli_runner)]
        # newest first; the logs command records its own start
        assert messages[:3] == [
            "Starting logs.logs",
            "Successfully completed person.create",
            "Starting person.create",
        ]

    def test_request_data_recorded(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["person", "create", "Teal'c"])
        start = next(e for e in _entries(cli_runner) if e["message"] == "Starting person.create")
        assert start["command"] == "person"
        assert start["action"] == "create"
        assert json.loads(start["request_data"]) == {"name": "Teal'c"}

    def test_failure_recorded_as_error(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(
            cli,
            [
                "duty",
                "create",
                "Nobody",
                "--rank",
                "Major",
                "--title",
                "Pilot",
                "--start",
                "2020-01-01",
            ],
        )
        errors = _entries(cli_runner, "--level", "ERROR")
        assert len(errors) == 1
        assert errors[0]["message"] == "Failed to complete duty.create"
        assert errors[0]["exception"].startswith("404")

    def test_disabled_by_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "stargate.toml").write_text("[process_log]\nenabled = false\n")
        cli_runner.invoke(cli, ["person", "create", "Teal'c"])
        assert _entries(cli_runner) == []


@pytest.mark.usefixtures("_isolated_roster")
class TestLogsCommand:
    def test_limit(self, cli_runner: CliRunner) -> None:
        for name in ("A", "B", "C"):
            cli_runner.invoke(cli, ["person", "create", name])
        assert len(_entries(cli_runner, "--limit", "2")) == 2

    def test_human_table(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["person", "create", "Teal'c"])
        result = cli_runner.invoke(cli, ["logs"])
        assert result.exit_code == 0
        assert "SUCCESS" in result.output
        assert "entries" in result.output

    def test_bad_level_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["logs", "--level", "TRACE"])
        assert result.exit_code == 2

    def test_bad_limit(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "logs", "--limit", "0"])
        assert result.exit_code == 1


@pytest.mark.usefixtures("_isolated_roster")
class TestCrashRecording:
    def test_unexpected_exception_logged(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from stargate.services.person import PersonService

        def _boom(self: PersonService, name: str) -> None:
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(PersonService, "create_person", _boom)
        result = cli_runner.invoke(cli, ["person", "create", "Teal'c"])
        assert result.exit_code == 1
        assert isinstance(result.exception, RuntimeError)

        errors = _entries(cli_runner, "--level", "ERROR")
        assert errors[0]["message"] == "Failed to complete person.create"
        assert "disk on fire" in errors[0]["exception"]
