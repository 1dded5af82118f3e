"""Shared pytest fixtures and test helpers for lambdaplay tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from lambdaplay.infrastructure.oracle import CallableOracle, NormalOrderOracle
from lambdaplay.infrastructure.store import MemoryKeyValueStore, SqliteKeyValueStore
from lambdaplay.services.library import LibraryService
from lambdaplay.services.reduction import ReductionController
from lambdaplay.services.telemetry import disable_telemetry
from lambdaplay.services.workspace import WorkspaceService


class ScriptedOracle(CallableOracle):
    """Oracle that answers from a fixed table and records every call.

    Expressions missing from the table come back unchanged.
    """

    def __init__(self, answers: dict[str, str] | None = None) -> None:
        self.answers = dict(answers or {})
        self.calls: list[str] = []
        super().__init__(self._answer)

    def _answer(self, expression: str) -> str:
        self.calls.append(expression)
        return self.answers.get(expression, expression)


class FailingOracle:
    """Oracle that always raises."""

    def __init__(self, message: str = "oracle exploded") -> None:
        self.message = message

    def reduce(self, expression: str) -> str:
        raise RuntimeError(self.message)


class BrokenStore(MemoryKeyValueStore):
    """Store whose writes always fail."""

    def set(self, key: str, value: str) -> None:
        raise OSError("disk full")


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> Generator[SqliteKeyValueStore]:
    """SQLite-backed store in a temp data directory."""
    store = SqliteKeyValueStore(tmp_path / ".lambdaplay")
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def library_service(memory_store: MemoryKeyValueStore) -> LibraryService:
    return LibraryService(memory_store)


@pytest.fixture
def scripted_oracle() -> ScriptedOracle:
    return ScriptedOracle()


@pytest.fixture
def workspace_service(
    library_service: LibraryService, scripted_oracle: ScriptedOracle
) -> WorkspaceService:
    """Workspace driven by a scripted oracle, starting at ``(λx.x) y``."""
    return WorkspaceService(library_service, ReductionController(scripted_oracle))


@pytest.fixture
def real_workspace(library_service: LibraryService) -> WorkspaceService:
    """Workspace driven by the built-in normal-order oracle."""
    return WorkspaceService(library_service, ReductionController(NormalOrderOracle()))


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project root so the CLI uses an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("LAMBDAPLAY_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def broken_store() -> BrokenStore:
    return BrokenStore()


@pytest.fixture
def failing_oracle() -> FailingOracle:
    return FailingOracle()


@pytest.fixture(autouse=True)
def _reset_process_state() -> Generator[None]:
    """CLI invocations reconfigure logging and may enable telemetry; undo both."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    app_level = logging.getLogger("lambdaplay").level
    yield
    disable_telemetry()
    root.handlers = handlers
    logging.getLogger("lambdaplay").setLevel(app_level)
