"""Single-pass expansion of named references.

Every standalone occurrence of a library name is replaced by its body in
one left-to-right sweep over the input. Inserted bodies are never
re-scanned, so a body that mentions another library name keeps that name
as-is. There is no fixed-point iteration.

A name is standalone when it is bounded by non-identifier characters or
the string edges. Identifier characters are Unicode word characters
except ``λ``, which the term syntax reserves as the lambda sign.
"""

from __future__ import annotations

import re

from lambdaplay.domain.library import ExpressionLibrary

# Word character other than the lambda sign.
_IDENT_CHAR = r"[^\Wλ]"


def _name_pattern(library: ExpressionLibrary) -> re.Pattern[str]:
    """Alternation of all names; insertion order is the match precedence."""
    alternatives = "|".join(re.escape(name) for name in library.names())
    return re.compile(rf"(?<!{_IDENT_CHAR})(?:{alternatives})(?!{_IDENT_CHAR})")


def expand(text: str, library: ExpressionLibrary) -> str:
    """Replace every standalone library name in *text* with its body."""
    if not len(library):
        return text
    bodies = dict(library.as_pairs())
    return _name_pattern(library).sub(lambda m: bodies[m.group(0)], text)


def references(text: str, library: ExpressionLibrary) -> list[str]:
    """Library names that occur as standalone tokens in *text*, in library order."""
    if not len(library):
        return []
    found = set(_name_pattern(library).findall(text))
    return [name for name in library.names() if name in found]
