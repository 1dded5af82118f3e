"""Command: interactive workspace session.

Each input line is one operation on a single
:class:`~lambdaplay.services.workspace.WorkspaceService`. Lines starting
with ``:`` are commands; an empty line reduces; anything else replaces the
current expression.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import click

from lambdaplay.commands._base import LambdaCommand
from lambdaplay.output.formatters import format_result

if TYPE_CHECKING:
    from lambdaplay.commands._context import AppContext
    from lambdaplay.services.result import ServiceResult
    from lambdaplay.services.workspace import WorkspaceService

SESSION_HELP = """\
  <expression>        replace the current expression
  (empty line)        reduce one step, same as :reduce
  :reduce             reduce one step
  :save NAME BODY     save BODY under NAME
  :delete NAME        delete NAME
  :use NAME           load NAME into the current expression
  :list               list saved expressions
  :history            show reduction history
  :clear              clear reduction history
  :show               show the whole workspace
  :help               this help
  :quit               leave the session"""

_QUIT = frozenset({":quit", ":q", ":exit"})


class SessionShell:
    """Parses session input lines and dispatches them to the workspace."""

    def __init__(self, workspace: WorkspaceService) -> None:
        self.workspace = workspace
        self._commands: dict[str, Callable[[str], ServiceResult | None]] = {
            ":reduce": lambda _: self.workspace.reduce(),
            ":save": self._save,
            ":delete": self._require_name(self.workspace.delete),
            ":use": self._require_name(self.workspace.apply),
            ":list": lambda _: self.workspace.list_expressions(),
            ":history": lambda _: self.workspace.history(),
            ":clear": lambda _: self.workspace.clear_history(),
            ":show": lambda _: self.workspace.snapshot(),
            ":help": lambda _: None,
        }

    def handle(self, line: str) -> ServiceResult | None:
        """Run one input line. Returns None for lines with nothing to report."""
        text = line.strip()
        if not text:
            return self.workspace.reduce()
        if not text.startswith(":"):
            return self.workspace.edit(text)

        command, _, rest = text.partition(" ")
        handler = self._commands.get(command)
        if handler is None:
            raise click.UsageError(f"Unknown session command {command!r}; try :help")
        return handler(rest.strip())

    def _save(self, args: str) -> ServiceResult:
        name, _, body = args.partition(" ")
        return self.workspace.save(name, body)

    @staticmethod
    def _require_name(
        action: Callable[[str], ServiceResult],
    ) -> Callable[[str], ServiceResult]:
        def run(args: str) -> ServiceResult:
            if not args:
                raise click.UsageError("A NAME is required")
            return action(args)

        return run


@click.command(
    cls=LambdaCommand,
    examples="""\
  lambdaplay session
  printf '(λx.x) y\\n:reduce\\n:history\\n' | lambdaplay session""",
)
@click.pass_obj
def session(app: AppContext) -> None:
    """Start an interactive workspace session."""
    shell = SessionShell(app.new_workspace())
    output = app.output_settings
    prompt = app.settings.session.prompt

    if not output.json_output and not output.quiet:
        click.echo(f"current: {shell.workspace.workspace.current_expression}")
        click.echo("Type :help for commands, :quit to leave.")

    while True:
        try:
            line = click.prompt(prompt, default="", show_default=False, prompt_suffix="")
        except click.Abort:
            break
        if line.strip() in _QUIT:
            break
        if line.strip() == ":help":
            click.echo(SESSION_HELP)
            continue
        try:
            result = shell.handle(line)
        except click.UsageError as exc:
            click.echo(f"ERROR: {exc.message}", err=True)
            continue
        if result is None:
            continue
        click.echo(format_result(result, settings=output))
        if not output.json_output:
            for warning in result.warnings:
                click.echo(warning)
        if app.settings.session.show_expanded and result.op == "reduce":
            click.echo(f"  expanded: {result.data.get('expanded', '')}")
