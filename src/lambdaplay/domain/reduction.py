"""One user-visible reduction attempt and its outcome.

The oracle is an injected capability: anything with a ``reduce(str) -> str``
method. :func:`step` expands library names, asks the oracle for one step,
and compares the answer with the *unexpanded* expression:

- equal: :class:`NoProgress`
- different: :class:`Progressed` carrying the step to commit
- oracle raised: :class:`Failed`

INVARIANT: ``step`` never mutates anything; committing a ``Progressed``
outcome is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from lambdaplay.domain.history import ReductionStep
from lambdaplay.domain.library import ExpressionLibrary
from lambdaplay.domain.substitution import expand

NO_PROGRESS_MESSAGE = "No further reduction possible."


@runtime_checkable
class ReductionOracle(Protocol):
    """Single-step reducer consumed by the controller.

    Must return its input unchanged (exact string equality) when no redex
    applies, and may raise on input it cannot handle.
    """

    def reduce(self, expression: str) -> str: ...


@dataclass(frozen=True)
class Progressed:
    step: ReductionStep
    expanded: str

    @property
    def result(self) -> str:
        return self.step.to


@dataclass(frozen=True)
class NoProgress:
    expanded: str
    message: str = NO_PROGRESS_MESSAGE


@dataclass(frozen=True)
class Failed:
    detail: str

    @property
    def message(self) -> str:
        return f"Error: {self.detail}"


Outcome = Progressed | NoProgress | Failed


def step(current: str, library: ExpressionLibrary, oracle: ReductionOracle) -> Outcome:
    """Attempt one reduction of *current* against *library*."""
    expanded = expand(current, library)
    try:
        candidate = oracle.reduce(expanded)
    except Exception as exc:
        return Failed(detail=str(exc) or type(exc).__name__)
    # Compare with the unexpanded text: an irreducible expansion still counts as progress.
    if candidate == current:
        return NoProgress(expanded=expanded)
    return Progressed(step=ReductionStep(from_=current, to=candidate), expanded=expanded)
