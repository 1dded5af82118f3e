"""Commands: expand names and run a single reduction step."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lambdaplay.commands._base import LambdaCommand

if TYPE_CHECKING:
    from lambdaplay.commands._context import AppContext


@click.command(
    cls=LambdaCommand,
    examples="""\
  lambdaplay reduce
  lambdaplay reduce '(λx.x) y'
  lambdaplay reduce 'id y'
  lambdaplay -q reduce '(\\x.x x) z'""",
)
@click.argument("expression", required=False)
@click.pass_obj
def reduce(app: AppContext, expression: str | None) -> None:
    """Reduce EXPRESSION by one beta step, expanding saved names first.

    Without EXPRESSION, the configured default expression is used.
    """
    if expression is None:
        expression = app.settings.workspace.default_expression
    app.emit(app.controller.reduce_expression(expression, app.library.library))


@click.command(
    cls=LambdaCommand,
    examples="""\
  lambdaplay expand 'id y'
  lambdaplay -q expand 'K a b'""",
)
@click.argument("expression")
@click.pass_obj
def expand(app: AppContext, expression: str) -> None:
    """Show EXPRESSION with saved names expanded (one pass)."""
    app.emit(app.controller.expand_expression(expression, app.library.library))
