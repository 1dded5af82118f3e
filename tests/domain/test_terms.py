"""Tests for lambda terms: free variables, substitution, one-step reduction."""

from lambdaplay.domain.parser import parse
from lambdaplay.domain.terms import (
    App,
    Lam,
    Var,
    free_vars,
    fresh_name,
    reduce_once,
    render,
    substitute,
)


def _step(source: str) -> str:
    _, term = reduce_once(parse(source))
    return render(term)


class TestFreeVars:
    def test_variable(self) -> None:
        assert free_vars(Var("x")) == {"x"}

    def test_binder_removes(self) -> None:
        assert free_vars(parse("λx.x y")) == {"y"}

    def test_application_unions(self) -> None:
        assert free_vars(parse("a (λb.b c)")) == {"a", "c"}


class TestFreshName:
    def test_base_when_free(self) -> None:
        assert fresh_name("x", {"y"}) == "x"

    def test_counts_up(self) -> None:
        assert fresh_name("x", {"x", "x1", "x2"}) == "x3"


class TestSubstitute:
    def test_replaces_free_occurrence(self) -> None:
        assert substitute(Var("x"), "x", Var("y")) == Var("y")

    def test_shadowed_binder_untouched(self) -> None:
        term = Lam("x", Var("x"))
        assert substitute(term, "x", Var("y")) is term

    def test_avoids_capture(self) -> None:
        result = substitute(Lam("y", Var("x")), "x", Var("y"))
        assert result == Lam("y1", Var("y"))


class TestReduceOnce:
    def test_identity_application(self) -> None:
        assert _step("(λx.x) y") == "y"

    def test_capture_avoiding(self) -> None:
        assert _step("(λx.λy.x) y") == "λy1.y"

    def test_normal_form_unchanged(self) -> None:
        reduced, term = reduce_once(parse("λx.x"))
        assert reduced is False
        assert render(term) == "λx.x"

    def test_outermost_first(self) -> None:
        assert _step("(λx.y) ((λz.z z) (λz.z z))") == "y"

    def test_left_before_right(self) -> None:
        assert _step("((λx.x) a) ((λy.y) b)") == "a ((λy.y) b)"

    def test_reduces_under_lambda(self) -> None:
        assert _step("λx.(λy.y) x") == "λx.x"

    def test_self_application(self) -> None:
        assert _step("(\\x.x x) z") == "z z"

    def test_one_step_only(self) -> None:
        assert _step("(λx.x) ((λy.y) z)") == "(λy.y) z"


class TestRender:
    def test_lambda_in_function_position_parenthesized(self) -> None:
        assert render(App(Lam("x", Var("x")), Var("y"))) == "(λx.x) y"

    def test_left_associative_application(self) -> None:
        assert render(App(App(Var("a"), Var("b")), Var("c"))) == "a b c"

    def test_nested_argument_parenthesized(self) -> None:
        assert render(App(Var("a"), App(Var("b"), Var("c")))) == "a (b c)"

    def test_lambda_argument_parenthesized(self) -> None:
        assert render(App(Var("f"), Lam("x", Var("x")))) == "f (λx.x)"
