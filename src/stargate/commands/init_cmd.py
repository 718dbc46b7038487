"""Command: roster initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stargate.commands._base import StargateCommand
from stargate.services.init import InitService

if TYPE_CHECKING:
    from stargate.commands._context import AppContext

_INIT_EXAMPLES = """\
  stargate init
  stargate init --seed
  stargate -c ./stargate.toml init"""


@click.command("init", cls=StargateCommand, examples=_INIT_EXAMPLES)
@click.option("--seed", is_flag=True, help="Load the sample roster into an empty database.")
@click.pass_obj
def init_cmd(app: AppContext, seed: bool) -> None:
    """Create the roster database."""
    app.emit(InitService(app.roster).init_roster(seed=seed))
