"""Subcommand modules for lambdaplay.

Provides register_commands() which uses deferred imports to keep
``lambdaplay --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the library group and the standalone commands."""
    from lambdaplay.commands.library import library

    cli.add_command(library)

    from lambdaplay.commands.reduce import expand, reduce
    from lambdaplay.commands.session import session

    cli.add_command(expand)
    cli.add_command(reduce)
    cli.add_command(session)
