"""WorkspaceService — the event-dispatch layer over a session's Workspace.

Holds the current :class:`~lambdaplay.domain.workspace.Workspace` value and
runs one operation at a time through the pure transitions in
:mod:`lambdaplay.domain.workspace`. Library mutations are persisted through
:class:`~lambdaplay.services.library.LibraryService` after the transition
has been committed.

Pipeline per operation: TRANSITION → COMMIT → PERSIST → RESPOND

INVARIANT: State is replaced only after an operation has fully succeeded.
A rejected operation changes nothing but the message slot.
"""

from __future__ import annotations

from typing import Any

import structlog

from lambdaplay.domain import workspace as transitions
from lambdaplay.domain.workspace import DEFAULT_EXPRESSION, Change, Workspace
from lambdaplay.services.library import LibraryService, library_payload
from lambdaplay.services.reduction import ReductionController, outcome_result
from lambdaplay.services.result import ServiceResult
from lambdaplay.services.telemetry import traced

log = structlog.get_logger(__name__)


class WorkspaceService:
    """Interactive session over one workspace."""

    def __init__(
        self,
        library: LibraryService,
        controller: ReductionController,
        *,
        default_expression: str = DEFAULT_EXPRESSION,
    ) -> None:
        self._library = library
        self._controller = controller
        self._workspace = transitions.start(library.library, expression=default_expression)
        log.debug("workspace.started", library_size=len(self._workspace.library))

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def edit(self, text: str) -> ServiceResult:
        """Replace the current expression with user-typed text."""
        return self._run("edit", *transitions.edit(self._workspace, text))

    def apply(self, name: str) -> ServiceResult:
        """Load a saved expression into the current expression."""
        return self._run("apply", *transitions.apply_named(self._workspace, name))

    @traced
    def save(self, name: str, body: str) -> ServiceResult:
        ws, change = transitions.save_expression(self._workspace, name, body)
        return self._run("save_expression", ws, change)

    @traced
    def delete(self, name: str) -> ServiceResult:
        ws, change = transitions.delete_expression(self._workspace, name)
        return self._run("delete_expression", ws, change)

    def clear_history(self) -> ServiceResult:
        return self._run("clear_history", *transitions.clear_history(self._workspace))

    @traced
    def reduce(self) -> ServiceResult:
        """One reduction step of the current expression.

        On progress, the step is appended to history and becomes the new
        current expression. Otherwise only the message slot changes.
        """
        ws = self._workspace
        outcome = self._controller.step(ws.current_expression, ws.library)
        self._workspace = transitions.commit(ws, outcome)
        return outcome_result(
            "reduce",
            ws.current_expression,
            outcome,
            extra={"history_length": len(self._workspace.history)},
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def snapshot(self) -> ServiceResult:
        """Everything the presentation layer renders."""
        return ServiceResult(ok=True, op="workspace", data=self._view())

    def history(self) -> ServiceResult:
        ws = self._workspace
        return ServiceResult(
            ok=True,
            op="history",
            data={"steps": ws.history.to_list(), "count": len(ws.history)},
        )

    def list_expressions(self) -> ServiceResult:
        library = self._workspace.library
        return ServiceResult(
            ok=True,
            op="list_expressions",
            data={"items": library_payload(library), "count": len(library)},
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _view(self) -> dict[str, Any]:
        ws = self._workspace
        return {
            "current_expression": ws.current_expression,
            "library": library_payload(ws.library),
            "history": ws.history.to_list(),
            "message": ws.message,
        }

    def _run(self, op: str, ws: Workspace, change: Change) -> ServiceResult:
        self._workspace = ws
        if change.rejection is not None:
            log.debug("workspace.rejected", op=op, code=change.rejection.code)
            return ServiceResult.failure(op, change.rejection.code, change.rejection.message)

        warnings: list[str] = []
        if change.library_changed:
            self._library.replace(ws.library, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "current_expression": ws.current_expression,
                "library_size": len(ws.library),
                "history_length": len(ws.history),
            },
            warnings=warnings,
        )
