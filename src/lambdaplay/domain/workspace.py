"""Workspace aggregate and its pure state transitions.

Each operation is a function ``(Workspace, input) -> (Workspace, Change)``.
The returned workspace is a new value; the input workspace is never
modified, so a rejected operation simply hands back the original.

The ``message`` slot holds at most one user-facing message. A successful
operation clears it; a rejected one replaces it.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from lambdaplay.domain.errors import ErrorCode, ValidationError
from lambdaplay.domain.history import History
from lambdaplay.domain.library import ExpressionLibrary
from lambdaplay.domain.reduction import Failed, NoProgress, Outcome, Progressed

DEFAULT_EXPRESSION = "(λx.x) y"


class Workspace(BaseModel):
    """Session state: current expression, library, history, message slot."""

    model_config = {"frozen": True}

    current_expression: str = DEFAULT_EXPRESSION
    library: ExpressionLibrary = Field(default_factory=ExpressionLibrary)
    history: History = Field(default_factory=History)
    message: str | None = None


@dataclass(frozen=True)
class Rejection:
    """Why a transition was refused, as shown to the user."""

    code: ErrorCode
    message: str


@dataclass(frozen=True)
class Change:
    """Result of a non-reduction transition."""

    rejection: Rejection | None = None
    library_changed: bool = False

    @property
    def ok(self) -> bool:
        return self.rejection is None


def _accept(
    ws: Workspace, *, library_changed: bool = False, **update: object
) -> tuple[Workspace, Change]:
    return ws.model_copy(update={**update, "message": None}), Change(library_changed=library_changed)


def _reject(ws: Workspace, code: ErrorCode, message: str) -> tuple[Workspace, Change]:
    return ws.model_copy(update={"message": message}), Change(Rejection(code, message))


def start(
    library: ExpressionLibrary | None = None,
    *,
    expression: str = DEFAULT_EXPRESSION,
) -> Workspace:
    """Create the workspace for a new session. History always starts empty."""
    return Workspace(current_expression=expression, library=library or ExpressionLibrary())


def edit(ws: Workspace, text: str) -> tuple[Workspace, Change]:
    return _accept(ws, current_expression=text)


def apply_named(ws: Workspace, name: str) -> tuple[Workspace, Change]:
    """Load a library body into the current expression."""
    body = ws.library.get(name)
    if body is None:
        return _reject(ws, ErrorCode.NOT_FOUND, f"No saved expression named {name!r}")
    return _accept(ws, current_expression=body)


def save_expression(ws: Workspace, name: str, body: str) -> tuple[Workspace, Change]:
    try:
        library = ws.library.save(name, body)
    except ValidationError as exc:
        return _reject(ws, ErrorCode.VALIDATION_FAILED, str(exc))
    return _accept(ws, library=library, library_changed=True)


def delete_expression(ws: Workspace, name: str) -> tuple[Workspace, Change]:
    library = ws.library.delete(name)
    return _accept(ws, library=library, library_changed=library is not ws.library)


def clear_history(ws: Workspace) -> tuple[Workspace, Change]:
    return _accept(ws, history=ws.history.clear())


def commit(ws: Workspace, outcome: Outcome) -> Workspace:
    """Apply a reduction outcome.

    Only :class:`Progressed` changes the expression and history; the other
    outcomes set the message slot and leave everything else untouched.
    """
    match outcome:
        case Progressed(step=reduction):
            return ws.model_copy(
                update={
                    "current_expression": reduction.to,
                    "history": ws.history.append(reduction),
                    "message": None,
                }
            )
        case NoProgress(message=message) | Failed(message=message):
            return ws.model_copy(update={"message": message})
    raise TypeError(f"Unknown outcome: {outcome!r}")
