"""Lambda terms and one-step normal-order beta reduction.

Terms are immutable trees of :class:`Var`, :class:`Lam` and :class:`App`.
:func:`reduce_once` contracts the leftmost-outermost redex; substitution
renames binders that would capture a free variable of the argument.
"""

from __future__ import annotations

from dataclasses import dataclass

LAMBDA = "λ"


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class Lam:
    param: str
    body: Term


@dataclass(frozen=True)
class App:
    func: Term
    arg: Term


Term = Var | Lam | App


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------


def free_vars(term: Term) -> set[str]:
    """Names occurring free in *term*."""
    match term:
        case Var(name):
            return {name}
        case Lam(param, body):
            return free_vars(body) - {param}
        case App(func, arg):
            return free_vars(func) | free_vars(arg)
    raise TypeError(f"Unknown term: {term!r}")


def fresh_name(base: str, taken: set[str]) -> str:
    """First of ``base``, ``base1``, ``base2``, ... not in *taken*."""
    candidate = base
    counter = 1
    while candidate in taken:
        candidate = f"{base}{counter}"
        counter += 1
    return candidate


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------


def substitute(term: Term, name: str, replacement: Term) -> Term:
    """Capture-avoiding ``term[name := replacement]``."""
    match term:
        case Var(var):
            return replacement if var == name else term
        case App(func, arg):
            return App(substitute(func, name, replacement), substitute(arg, name, replacement))
        case Lam(param, body):
            if param == name:
                return term
            replacement_free = free_vars(replacement)
            if param not in replacement_free:
                return Lam(param, substitute(body, name, replacement))
            renamed = fresh_name(param, replacement_free | free_vars(body))
            body = substitute(body, param, Var(renamed))
            return Lam(renamed, substitute(body, name, replacement))
    raise TypeError(f"Unknown term: {term!r}")


# ---------------------------------------------------------------------------
# Reduction
# ---------------------------------------------------------------------------


def reduce_once(term: Term) -> tuple[bool, Term]:
    """Contract the leftmost-outermost redex.

    Returns ``(True, reduct)`` when a redex was found, else ``(False, term)``.
    """
    match term:
        case App(Lam(param, body), arg):
            return True, substitute(body, param, arg)
        case App(func, arg):
            reduced, new_func = reduce_once(func)
            if reduced:
                return True, App(new_func, arg)
            reduced, new_arg = reduce_once(arg)
            if reduced:
                return True, App(func, new_arg)
            return False, term
        case Lam(param, body):
            reduced, new_body = reduce_once(body)
            if reduced:
                return True, Lam(param, new_body)
            return False, term
    return False, term


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render(term: Term) -> str:
    """Print *term* with the minimal parentheses the parser needs."""
    match term:
        case Var(name):
            return name
        case Lam(param, body):
            return f"{LAMBDA}{param}.{render(body)}"
        case App(func, arg):
            left = f"({render(func)})" if isinstance(func, Lam) else render(func)
            right = render(arg) if isinstance(arg, Var) else f"({render(arg)})"
            return f"{left} {right}"
    raise TypeError(f"Unknown term: {term!r}")
