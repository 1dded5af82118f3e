"""Tokenizer and recursive-descent parser for lambda-term text.

Grammar::

    application := factor factor*
    factor      := IDENT | LAMBDA IDENT "." application | "(" application ")"

``\\`` and ``λ`` both introduce a lambda. Identifiers are runs of
alphanumerics and ``_``. Characters outside the grammar are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from lambdaplay.domain.errors import ReductionError
from lambdaplay.domain.terms import App, Lam, Term, Var


class TokenKind(StrEnum):
    LAMBDA = "lambda"
    DOT = "dot"
    LPAREN = "lparen"
    RPAREN = "rparen"
    IDENT = "ident"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ".": TokenKind.DOT,
    "\\": TokenKind.LAMBDA,
    "λ": TokenKind.LAMBDA,
}


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def tokenize(source: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    while pos < len(source):
        ch = source[pos]
        kind = _PUNCTUATION.get(ch)
        if kind is not None:
            tokens.append(Token(kind, ch))
            pos += 1
        elif _is_ident_char(ch):
            start = pos
            while pos < len(source) and _is_ident_char(source[pos]) and source[pos] != "λ":
                pos += 1
            tokens.append(Token(TokenKind.IDENT, source[start:pos]))
        else:
            pos += 1
    return tokens


class Parser:
    """Recursive-descent parser over a token list."""

    _STARTS_FACTOR = frozenset({TokenKind.IDENT, TokenKind.LAMBDA, TokenKind.LPAREN})

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> Token | None:
        token = self._peek()
        self._pos += 1
        return token

    def parse(self) -> Term:
        term = self._application()
        leftover = self._peek()
        if leftover is not None:
            raise ReductionError(f"Unexpected token: {leftover.text!r}")
        return term

    def _application(self) -> Term:
        term = self._factor()
        while (token := self._peek()) is not None and token.kind in self._STARTS_FACTOR:
            term = App(term, self._factor())
        return term

    def _factor(self) -> Term:
        token = self._next()
        if token is None:
            raise ReductionError("Unexpected end of input")
        if token.kind is TokenKind.IDENT:
            return Var(token.text)
        if token.kind is TokenKind.LAMBDA:
            param = self._next()
            if param is None or param.kind is not TokenKind.IDENT:
                raise ReductionError("Expected identifier after lambda")
            dot = self._next()
            if dot is None or dot.kind is not TokenKind.DOT:
                raise ReductionError("Expected '.' after lambda parameter")
            return Lam(param.text, self._application())
        if token.kind is TokenKind.LPAREN:
            term = self._application()
            closing = self._next()
            if closing is None or closing.kind is not TokenKind.RPAREN:
                raise ReductionError("Expected ')'")
            return term
        raise ReductionError(f"Unexpected token: {token.text!r}")


def parse(source: str) -> Term:
    """Parse *source* into a :data:`Term`.

    Raises:
        ReductionError: On malformed input.
    """
    return Parser(tokenize(source)).parse()
