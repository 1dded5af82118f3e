"""Click command classes that take an ``examples=`` keyword.

A command built with examples gains an eager ``--examples`` flag that
prints them and exits, so ``--help`` can stay short.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


class _ExamplesMixin:
    """Adds the ``--examples`` flag to a Click command or group."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = textwrap.dedent(examples).strip("\n") if examples else None

    def get_params(self, ctx: click.Context) -> list[click.Parameter]:
        params: list[click.Parameter] = super().get_params(ctx)  # type: ignore[misc]
        if self.examples:
            params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )
        return params

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or not self.examples:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(textwrap.indent(self.examples, "  "))
        ctx.exit(0)


class LambdaCommand(_ExamplesMixin, click.Command):
    pass


class LambdaGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`LambdaCommand` by default."""

    command_class = LambdaCommand
