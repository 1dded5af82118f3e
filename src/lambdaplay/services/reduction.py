"""ReductionController — one reduction attempt against an injected oracle.

Pipeline: EXPAND → REDUCE → COMPARE
(comparison is against the unexpanded expression; see
:mod:`lambdaplay.domain.reduction`)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from lambdaplay.domain.errors import ErrorCode
from lambdaplay.domain.library import ExpressionLibrary
from lambdaplay.domain.reduction import Failed, NoProgress, Outcome, Progressed
from lambdaplay.domain.reduction import step as reduction_step
from lambdaplay.domain.substitution import expand, references
from lambdaplay.services.result import ServiceResult
from lambdaplay.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from lambdaplay.domain.reduction import ReductionOracle

log = structlog.get_logger(__name__)


class _TracedOracle:
    """Wrap the oracle call in a telemetry span."""

    def __init__(self, oracle: ReductionOracle) -> None:
        self._oracle = oracle

    def reduce(self, expression: str) -> str:
        with trace_span("oracle.reduce") as span:
            result = self._oracle.reduce(expression)
            if span is not None:
                span.annotate("changed", result != expression)
        return result


class ReductionController:
    """Composes name expansion and the oracle into a single step."""

    def __init__(self, oracle: ReductionOracle) -> None:
        self._oracle = oracle

    @property
    def oracle(self) -> ReductionOracle:
        return self._oracle

    @traced
    def step(self, current: str, library: ExpressionLibrary) -> Outcome:
        """Attempt one reduction. Never mutates its arguments."""
        outcome = reduction_step(current, library, _TracedOracle(self._oracle))
        span = get_current_span()
        if span is not None:
            span.annotate("outcome", type(outcome).__name__)

        match outcome:
            case Progressed():
                log.debug("reduction.progressed", expression=current, result=outcome.result)
            case NoProgress():
                log.debug("reduction.no_progress", expression=current)
            case Failed():
                log.info("reduction.failed", expression=current, detail=outcome.detail)
        return outcome

    @traced
    def reduce_expression(self, expression: str, library: ExpressionLibrary) -> ServiceResult:
        """One stateless step from *expression*, reported as a ServiceResult."""
        op = "reduce"
        outcome = self.step(expression, library)
        return outcome_result(op, expression, outcome)

    def expand_expression(self, expression: str, library: ExpressionLibrary) -> ServiceResult:
        expanded = expand(expression, library)
        return ServiceResult(
            ok=True,
            op="expand",
            data={
                "expression": expression,
                "expanded": expanded,
                "references": references(expression, library),
            },
        )


def outcome_result(
    op: str,
    expression: str,
    outcome: Outcome,
    *,
    extra: dict[str, object] | None = None,
) -> ServiceResult:
    """Translate a reduction outcome into a ServiceResult.

    ``NoProgress`` is a success with ``progressed`` False and the message
    carried as a warning; ``Failed`` is an error.
    """
    match outcome:
        case Progressed():
            data = {
                "from": outcome.step.from_,
                "to": outcome.result,
                "expanded": outcome.expanded,
                "progressed": True,
            }
            return ServiceResult(ok=True, op=op, data={**data, **(extra or {})})
        case NoProgress():
            data = {
                "from": expression,
                "to": expression,
                "expanded": outcome.expanded,
                "progressed": False,
            }
            return ServiceResult(
                ok=True, op=op, data={**data, **(extra or {})}, warnings=[outcome.message]
            )
        case Failed():
            return ServiceResult.failure(
                op, ErrorCode.REDUCTION_FAILED, outcome.message, expression=expression
            )
    raise TypeError(f"Unknown outcome: {outcome!r}")
