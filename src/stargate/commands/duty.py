"""Command group: the astronaut duty ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stargate.commands._base import StargateGroup
from stargate.services.duty import DutyService
from stargate.services.query import QueryService

if TYPE_CHECKING:
    from stargate.commands._context import AppContext

_DUTY_EXAMPLES = """\
  stargate duty create "John Doe" --rank Colonel --title "Base Commander" --start 2020-01-01
  stargate duty create "John Doe" --rank Colonel --title RETIRED --start 2024-06-01
  stargate duty amend 4 --end 2023-12-31
  stargate duty list "John Doe\""""


@click.group(cls=StargateGroup, examples=_DUTY_EXAMPLES)
@click.pass_obj
def duty(app: AppContext) -> None:
    """Record and amend astronaut duties."""


@duty.command(
    examples="""\
  stargate duty create "Jane Doe" --rank Captain --title "Flight Lead" --start 2021-03-10
  stargate duty create "Jane Doe" --rank Captain --title RETIRED --start 2025-01-01
  stargate --json duty create "Samantha Carter" --rank Colonel --title Commander \\
      --start 2019-01-01"""
)
@click.argument("name")
@click.option("--rank", required=True, help="Rank held during the duty.")
@click.option("--title", "duty_title", required=True, help="Duty title (RETIRED ends the career).")
@click.option("--start", "duty_start_date", required=True, help="Start date, YYYY-MM-DD.")
@click.pass_obj
def create(app: AppContext, name: str, rank: str, duty_title: str, duty_start_date: str) -> None:
    """Start a new duty for NAME, closing the current one."""
    result = DutyService(app.roster).create_duty(name, rank, duty_title, duty_start_date)
    app.emit(result)


@duty.command(
    examples="""\
  stargate duty amend 4 --title "Chief Pilot"
  stargate duty amend 4 --end 2023-12-31
  stargate duty amend 2 --rank Colonel --start 2016-02-01"""
)
@click.argument("duty_id", type=int)
@click.option("--title", "duty_title", default=None, help="New duty title.")
@click.option("--rank", default=None, help="New rank.")
@click.option("--start", "duty_start_date", default=None, help="New start date, YYYY-MM-DD.")
@click.option("--end", "duty_end_date", default=None, help="End date, YYYY-MM-DD.")
@click.pass_obj
def amend(
    app: AppContext,
    duty_id: int,
    duty_title: str | None,
    rank: str | None,
    duty_start_date: str | None,
    duty_end_date: str | None,
) -> None:
    """Edit duty DUTY_ID in place.

    Setting --end on a person's last open duty records their retirement.
    """
    svc = DutyService(app.roster)
    result = svc.amend_duty(
        duty_id,
        duty_title=duty_title,
        rank=rank,
        duty_start_date=duty_start_date,
        duty_end_date=duty_end_date,
    )
    app.emit(result)


@duty.command(
    "list",
    examples="""\
  stargate duty list "John Doe"
  stargate --json duty list "Samantha Carter\"""",
)
@click.argument("name")
@click.pass_obj
def list_cmd(app: AppContext, name: str) -> None:
    """Show a person's duty history, newest first."""
    app.emit(QueryService(app.roster).get_duties(name))
