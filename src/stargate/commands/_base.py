"""Custom Click base classes with --examples support and process logging.

StargateCommand and StargateGroup accept an ``examples`` parameter. When
``--examples`` is passed, the command prints usage examples and exits.
StargateCommand also records a "Starting ..." process log entry before
its callback runs; :meth:`AppContext.emit` records the outcome.
"""

from __future__ import annotations

import traceback
from typing import Any

import click


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


def _command_names(ctx: click.Context) -> tuple[str, str]:
    """``("duty", "create")`` for ``stargate duty create``; ``("init", "init")`` for top level."""
    parts = ctx.command_path.split()[1:] or [ctx.info_name or "?"]
    return parts[0], parts[-1]


class StargateCommand(click.Command):
    """Click Command with ``--examples`` and process-log bookkeeping."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)

    def invoke(self, ctx: click.Context) -> Any:
        from stargate.commands._context import AppContext

        app = ctx.find_object(AppContext)
        if app is None:
            return super().invoke(ctx)

        command, action = _command_names(ctx)
        app.begin_action(command, action, dict(ctx.params))
        try:
            return super().invoke(ctx)
        except (click.exceptions.Exit, click.ClickException):
            raise
        except Exception as exc:
            app.record_crash(exc, traceback.format_exc())
            raise


class StargateGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = StargateCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = StargateCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)
