"""Tests for Workspace state transitions."""

import pytest

from lambdaplay.domain import workspace as ws_ops
from lambdaplay.domain.errors import ErrorCode
from lambdaplay.domain.history import ReductionStep
from lambdaplay.domain.library import ExpressionLibrary
from lambdaplay.domain.reduction import Failed, NoProgress, Progressed, step
from lambdaplay.domain.workspace import DEFAULT_EXPRESSION, Rejection, Workspace
from lambdaplay.infrastructure.oracle import CallableOracle


class TestStart:
    def test_defaults(self) -> None:
        ws = ws_ops.start()
        assert ws.current_expression == DEFAULT_EXPRESSION == "(λx.x) y"
        assert len(ws.library) == 0
        assert len(ws.history) == 0
        assert ws.message is None

    def test_loaded_library_and_custom_expression(self) -> None:
        lib = ExpressionLibrary().save("id", "λx.x")
        ws = ws_ops.start(lib, expression="id z")
        assert ws.library == lib
        assert ws.current_expression == "id z"


class TestLibraryTransitions:
    def test_save_marks_library_changed(self) -> None:
        ws, change = ws_ops.save_expression(ws_ops.start(), "id", "λx.x")
        assert change.ok and change.library_changed
        assert ws.library.get("id") == "λx.x"

    def test_invalid_save_sets_message_only(self) -> None:
        start = ws_ops.start()
        ws, change = ws_ops.save_expression(start, "", "x")
        assert not change.ok
        assert change.rejection == Rejection(ErrorCode.VALIDATION_FAILED, ws.message)
        assert ws.message == "Both name and expression are required"
        assert ws.library == start.library

    def test_delete_absent_does_not_mark_changed(self) -> None:
        ws, change = ws_ops.delete_expression(ws_ops.start(), "ghost")
        assert change.ok
        assert not change.library_changed

    def test_apply_loads_body(self) -> None:
        ws, _ = ws_ops.save_expression(ws_ops.start(), "K", "λx.λy.x")
        ws, change = ws_ops.apply_named(ws, "K")
        assert change.ok
        assert ws.current_expression == "λx.λy.x"

    def test_apply_unknown_name(self) -> None:
        ws, change = ws_ops.apply_named(ws_ops.start(), "nope")
        assert change.rejection is not None
        assert change.rejection.code == "NOT_FOUND"
        assert change.rejection.message == ws.message
        assert ws.current_expression == DEFAULT_EXPRESSION

    def test_success_clears_message(self) -> None:
        ws, _ = ws_ops.apply_named(ws_ops.start(), "nope")
        assert ws.message is not None
        ws, _ = ws_ops.edit(ws, "x")
        assert ws.message is None


class TestCommit:
    def test_progress_appends_and_updates(self) -> None:
        start = ws_ops.start()
        outcome = Progressed(step=ReductionStep(from_="(λx.x) y", to="y"), expanded="(λx.x) y")
        ws = ws_ops.commit(start, outcome)
        assert ws.current_expression == "y"
        assert ws.history.to_list() == [{"from": "(λx.x) y", "to": "y"}]

    @pytest.mark.parametrize("outcome", [NoProgress(expanded="y"), Failed(detail="boom")])
    def test_non_progress_only_sets_message(self, outcome: NoProgress | Failed) -> None:
        start = ws_ops.start()
        ws = ws_ops.commit(start, outcome)
        assert ws.current_expression == start.current_expression
        assert ws.history == start.history
        assert ws.message == outcome.message

    def test_clear_history(self) -> None:
        ws = ws_ops.commit(
            ws_ops.start(),
            Progressed(step=ReductionStep(from_="a", to="b"), expanded="a"),
        )
        ws, change = ws_ops.clear_history(ws)
        assert change.ok
        assert len(ws.history) == 0


class TestEndToEnd:
    def test_reduce_then_terminate(self) -> None:
        oracle = CallableOracle(lambda expr: {"(λx.x) y": "y"}.get(expr, expr))
        ws: Workspace = ws_ops.start()

        ws = ws_ops.commit(ws, step(ws.current_expression, ws.library, oracle))
        assert ws.current_expression == "y"
        assert ws.history.to_list() == [{"from": "(λx.x) y", "to": "y"}]

        outcome = step(ws.current_expression, ws.library, oracle)
        assert isinstance(outcome, NoProgress)
        ws = ws_ops.commit(ws, outcome)
        assert len(ws.history) == 1
        assert ws.message == "No further reduction possible."
