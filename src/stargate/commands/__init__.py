"""Subcommand modules for stargate.

Provides register_commands() which uses deferred imports to keep
``stargate --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from stargate.commands.duty import duty
    from stargate.commands.person import person

    cli.add_command(person)
    cli.add_command(duty)

    # --- Standalone commands ---
    from stargate.commands.init_cmd import init_cmd
    from stargate.commands.logs import logs

    cli.add_command(init_cmd)
    cli.add_command(logs)
