"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Builds the store and services lazily and centralizes
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog
from sqlalchemy.exc import SQLAlchemyError

from lambdaplay.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from lambdaplay.config.settings import LambdaSettings
    from lambdaplay.infrastructure.store import KeyValueStore
    from lambdaplay.services.library import LibraryService
    from lambdaplay.services.reduction import ReductionController
    from lambdaplay.services.result import ServiceResult
    from lambdaplay.services.workspace import WorkspaceService

log = structlog.get_logger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is opened on first use so ``--help`` and ``--version`` never
    touch the database.
    """

    def __init__(self, settings: LambdaSettings) -> None:
        self.settings = settings
        self._store: KeyValueStore | None = None
        self._library: LibraryService | None = None
        self._controller: ReductionController | None = None

        from lambdaplay.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from lambdaplay.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def store(self) -> KeyValueStore:
        """Durable store (in-memory with ``--ephemeral``).

        A data directory that cannot be opened also yields an in-memory
        store, so commands still run with an empty, unsaved library.
        """
        if self._store is None:
            from lambdaplay.infrastructure.store import MemoryKeyValueStore, SqliteKeyValueStore

            if self.settings.ephemeral:
                self._store = MemoryKeyValueStore()
            else:
                try:
                    self._store = SqliteKeyValueStore(self.settings.data_dir)
                except (OSError, SQLAlchemyError) as exc:
                    log.warning(
                        "store.unavailable",
                        data_dir=str(self.settings.data_dir),
                        error=str(exc),
                    )
                    self._store = MemoryKeyValueStore()
        return self._store

    @property
    def library(self) -> LibraryService:
        if self._library is None:
            from lambdaplay.services.library import LibraryService

            self._library = LibraryService(self.store, key=self.settings.storage.library_key)
        return self._library

    @property
    def controller(self) -> ReductionController:
        if self._controller is None:
            from lambdaplay.infrastructure.oracle import NormalOrderOracle
            from lambdaplay.services.reduction import ReductionController

            self._controller = ReductionController(NormalOrderOracle())
        return self._controller

    def new_workspace(self) -> WorkspaceService:
        from lambdaplay.services.workspace import WorkspaceService

        return WorkspaceService(
            self.library,
            self.controller,
            default_expression=self.settings.workspace.default_expression,
        )

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
