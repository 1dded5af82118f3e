"""LibraryService — CRUD over the named-expression library.

The library is loaded once from the durable store and kept in memory.
Mutations write the full library back under a single fixed key.

INVARIANT: An empty library is never written. Deleting the last entry
leaves the previously persisted record in place, so the next session
reloads it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from lambdaplay.domain.errors import ErrorCode, ValidationError
from lambdaplay.domain.library import LIBRARY_KEY, ExpressionLibrary
from lambdaplay.services.base import BaseService
from lambdaplay.services.result import ServiceResult
from lambdaplay.services.telemetry import traced

if TYPE_CHECKING:
    from lambdaplay.infrastructure.store import KeyValueStore

log = structlog.get_logger(__name__)


def library_payload(library: ExpressionLibrary) -> list[dict[str, Any]]:
    """Ordered ``[{"name", "body"}, ...]`` view for result data."""
    return [entry.model_dump() for entry in library.entries]


class LibraryService(BaseService):
    """Named-expression store with validation and durable persistence."""

    def __init__(self, store: KeyValueStore, *, key: str = LIBRARY_KEY) -> None:
        super().__init__(store)
        self._key = key
        self._library: ExpressionLibrary | None = None

    @property
    def library(self) -> ExpressionLibrary:
        """The current library (loaded from the store on first access)."""
        if self._library is None:
            self._library = self.load()
        return self._library

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> ExpressionLibrary:
        """Read the persisted library.

        A missing, unreadable, or unparsable record yields an empty library.
        """
        raw = self._read_record(self._key)
        if raw is None:
            return ExpressionLibrary()
        try:
            library = ExpressionLibrary.from_json(raw)
        except ValueError as exc:
            log.warning("library.unparsable", key=self._key, error=str(exc))
            return ExpressionLibrary()
        log.debug("library.loaded", key=self._key, count=len(library))
        return library

    def replace(self, library: ExpressionLibrary, warnings: list[str]) -> None:
        """Adopt *library* as current and persist it if non-empty."""
        self._library = library
        if not len(library):
            log.debug("library.persist_skipped", key=self._key)
            return
        if self._write_record(self._key, library.to_json(), warnings):
            log.debug("library.persisted", key=self._key, count=len(library))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def save(self, name: str, body: str) -> ServiceResult:
        """Upsert a named expression.

        Fails with ``VALIDATION_FAILED`` when the trimmed name or body is
        empty; the library is left unchanged.
        """
        op = "save_expression"
        warnings: list[str] = []
        try:
            library = self.library.save(name, body)
        except ValidationError as exc:
            return ServiceResult.failure(op, ErrorCode.VALIDATION_FAILED, str(exc))

        created = name.strip() not in self.library
        self.replace(library, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": name.strip(),
                "body": body.strip(),
                "created": created,
                "count": len(library),
            },
            warnings=warnings,
        )

    @traced
    def delete(self, name: str) -> ServiceResult:
        """Remove a named expression. Absent names are a successful no-op."""
        op = "delete_expression"
        warnings: list[str] = []
        removed = name in self.library
        if removed:
            self.replace(self.library.delete(name), warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"name": name, "removed": removed, "count": len(self.library)},
            warnings=warnings,
        )

    def list_expressions(self) -> ServiceResult:
        library = self.library
        return ServiceResult(
            ok=True,
            op="list_expressions",
            data={"items": library_payload(library), "count": len(library)},
        )

    def show(self, name: str) -> ServiceResult:
        op = "show_expression"
        body = self.library.get(name)
        if body is None:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No saved expression named {name!r}"
            )
        return ServiceResult(ok=True, op=op, data={"name": name, "body": body})
