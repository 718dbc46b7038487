"""Command group: the person directory."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from stargate.commands._base import StargateGroup
from stargate.services.person import PersonService
from stargate.services.query import QueryService

if TYPE_CHECKING:
    from stargate.commands._context import AppContext

_PERSON_EXAMPLES = """\
  stargate person create "Teal'c"
  stargate person rename "Daniel Jackson" "Dr. Daniel Jackson"
  stargate person get "John Doe"
  stargate --json person list"""


@click.group(cls=StargateGroup, examples=_PERSON_EXAMPLES)
@click.pass_obj
def person(app: AppContext) -> None:
    """Create, rename, and look up people."""


@person.command(
    examples="""\
  stargate person create "Teal'c"
  stargate -q person create "Vala Mal Doran\""""
)
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Add a person to the directory."""
    app.emit(PersonService(app.roster).create_person(name))


@person.command(
    examples="""\
  stargate person rename "Daniel Jackson" "Dr. Daniel Jackson\""""
)
@click.argument("current_name")
@click.argument("new_name")
@click.pass_obj
def rename(app: AppContext, current_name: str, new_name: str) -> None:
    """Rename a person; their duties stay attached."""
    app.emit(PersonService(app.roster).rename_person(current_name, new_name))


@person.command(
    examples="""\
  stargate person get "John Doe"
  stargate --json person get "Samantha Carter\""""
)
@click.argument("name")
@click.pass_obj
def get(app: AppContext, name: str) -> None:
    """Show a person with their current rank and duty title."""
    app.emit(QueryService(app.roster).get_person(name))


@person.command(
    "list",
    examples="""\
  stargate person list
  stargate -q person list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List everyone with an astronaut career."""
    app.emit(QueryService(app.roster).list_people())
