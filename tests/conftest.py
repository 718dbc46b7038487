"""Shared pytest fixtures for stargate tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from stargate.config.settings import StargateSettings
from stargate.infrastructure.database.seed import seed_roster
from stargate.infrastructure.roster import Roster
from stargate.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` CLI runs enable telemetry for the thread; switch it back off."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def roster(tmp_path: Path) -> Generator[Roster]:
    """Empty roster with its database under a temp directory."""
    settings = StargateSettings.from_cli(root=tmp_path)
    r = Roster(settings)
    try:
        yield r
    finally:
        r.close()


@pytest.fixture
def seeded_roster(roster: Roster) -> Roster:
    """Roster loaded with the sample people and duties.

    John Doe (1): closed Commander duty, open Mission Lead duty, projection.
    Jane Doe (2): open Pilot duty from 2018-03-10, no projection.
    Samantha Carter (3): open Science Officer duty, projection.
    Daniel Jackson (4): no duties.
    """
    with roster.transaction() as txn:
        seed_roster(txn.conn)
    return roster


@pytest.fixture
def strict_roster(tmp_path: Path) -> Generator[Roster]:
    """Seeded roster with ``rules.require_start_after_open_duty`` enabled."""
    settings = StargateSettings.from_cli(
        root=tmp_path, rules={"require_start_after_open_duty": True}
    )
    r = Roster(settings)
    with r.transaction() as txn:
        seed_roster(txn.conn)
    try:
        yield r
    finally:
        r.close()


@pytest.fixture
def _isolated_roster(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp dir so the CLI creates an isolated roster.

    Use via ``@pytest.mark.usefixtures("_isolated_roster")`` on command test
    classes.
    """
    monkeypatch.delenv("STARGATE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
