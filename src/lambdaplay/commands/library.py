"""Command group: manage the named-expression library."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lambdaplay.commands._base import LambdaGroup

if TYPE_CHECKING:
    from lambdaplay.commands._context import AppContext


@click.group(
    cls=LambdaGroup,
    examples="""\
  lambdaplay library save id 'λx.x'
  lambdaplay library save K '\\x.\\y.x'
  lambdaplay library list
  lambdaplay library show id
  lambdaplay library delete id""",
)
def library() -> None:
    """Save, list, and delete named expressions."""


@library.command(
    examples="""\
  lambdaplay library save id 'λx.x'
  lambdaplay library save two 'λf.λx.f (f x)'""",
)
@click.argument("name")
@click.argument("body")
@click.pass_obj
def save(app: AppContext, name: str, body: str) -> None:
    """Save BODY under NAME (overwrites an existing NAME in place)."""
    app.emit(app.library.save(name, body))


@library.command(
    examples="""\
  lambdaplay library delete id""",
)
@click.argument("name")
@click.pass_obj
def delete(app: AppContext, name: str) -> None:
    """Delete NAME from the library (no error if absent)."""
    app.emit(app.library.delete(name))


@library.command(name="list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List saved expressions in library order."""
    app.emit(app.library.list_expressions())


@library.command()
@click.argument("name")
@click.pass_obj
def show(app: AppContext, name: str) -> None:
    """Print the body saved under NAME."""
    app.emit(app.library.show(name))
