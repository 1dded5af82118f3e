"""Named expressions and the ordered expression library.

The library is an explicit ordered association list rather than a dict:
insertion order decides substitution precedence (see
:mod:`lambdaplay.domain.substitution`), so it is part of the value.

INVARIANT: Names are unique. Saving an existing name overwrites its body
in place; a new name is appended at the end.
"""

from __future__ import annotations

import json
from typing import Self

from pydantic import BaseModel

from lambdaplay.domain.errors import ValidationError

# Fixed durable-store key holding the serialized library.
LIBRARY_KEY = "savedExpressions"


class NamedExpression(BaseModel):
    """A user-defined shorthand bound to a lambda-term body."""

    model_config = {"frozen": True}

    name: str
    body: str


class ExpressionLibrary(BaseModel):
    """Immutable, ordered collection of :class:`NamedExpression` entries.

    Every update returns a new library; the receiver is never modified.
    """

    model_config = {"frozen": True}

    entries: tuple[NamedExpression, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self.entries)

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def get(self, name: str) -> str | None:
        """Return the body bound to *name*, or None."""
        for entry in self.entries:
            if entry.name == name:
                return entry.body
        return None

    def as_pairs(self) -> list[tuple[str, str]]:
        return [(entry.name, entry.body) for entry in self.entries]

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def save(self, name: str, body: str) -> Self:
        """Upsert ``name.strip() -> body.strip()``.

        Raises:
            ValidationError: If the trimmed name or body is empty.
        """
        name = name.strip()
        body = body.strip()
        if not name or not body:
            msg = "Both name and expression are required"
            raise ValidationError(msg)

        entry = NamedExpression(name=name, body=body)
        if name in self:
            updated = tuple(entry if e.name == name else e for e in self.entries)
        else:
            updated = (*self.entries, entry)
        return self.model_copy(update={"entries": updated})

    def delete(self, name: str) -> Self:
        """Remove *name* if present. Deleting an absent name is a no-op."""
        if name not in self:
            return self
        remaining = tuple(e for e in self.entries if e.name != name)
        return self.model_copy(update={"entries": remaining})

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> str:
        """Serialize as a JSON object whose key order is the library order."""
        return json.dumps(dict(self.as_pairs()), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> Self:
        """Parse a library serialized by :meth:`to_json`.

        Entries pass through :meth:`save`, so a stored record obeys the same
        trimming, non-empty and unique-name rules as one built in a session.

        Raises:
            ValueError: If *raw* is not a JSON object of string to string,
                or an entry has an empty name or body.
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            msg = f"Expected a JSON object, got {type(data).__name__}"
            raise ValueError(msg)
        library = cls()
        for name, body in data.items():
            if not isinstance(body, str):
                msg = f"Expression {name!r} has a non-string body"
                raise ValueError(msg)
            library = library.save(name, body)
        return library
