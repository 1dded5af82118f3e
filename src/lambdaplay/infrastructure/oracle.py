"""Reduction oracle adapters.

:class:`NormalOrderOracle` is the built-in single-step reducer: parse,
contract the leftmost-outermost redex, print. :class:`CallableOracle`
wraps any ``str -> str`` function, which is how tests and embedders plug
in their own reducer.
"""

from __future__ import annotations

from collections.abc import Callable

from lambdaplay.domain.parser import parse
from lambdaplay.domain.terms import reduce_once, render


class NormalOrderOracle:
    """One step of normal-order beta reduction over lambda-term text.

    A reduced term is returned in printed form. Text with no redex comes
    back exactly as given, whatever its spacing or lambda spelling.

    Raises:
        ReductionError: If the text does not parse.
    """

    def reduce(self, expression: str) -> str:
        reduced, term = reduce_once(parse(expression))
        return render(term) if reduced else expression


class CallableOracle:
    """Adapt a plain function to the oracle interface."""

    def __init__(self, func: Callable[[str], str]) -> None:
        self._func = func

    def reduce(self, expression: str) -> str:
        return self._func(expression)
