"""Command: read the process log."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stargate.commands._base import StargateCommand
from stargate.services.process_log import LogLevel, ProcessLogService

if TYPE_CHECKING:
    from stargate.commands._context import AppContext

_LOGS_EXAMPLES = """\
  stargate logs
  stargate logs --level ERROR
  stargate -v logs --limit 10"""


@click.command("logs", cls=StargateCommand, examples=_LOGS_EXAMPLES)
@click.option(
    "--level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    default=None,
    help="Only show entries at this level.",
)
@click.option("--limit", default=50, type=int, help="Max entries.")
@click.pass_obj
def logs(app: AppContext, level: str | None, limit: int) -> None:
    """Show recent process log entries, newest first."""
    app.emit(ProcessLogService(app.roster).list_entries(level=level, limit=limit))
