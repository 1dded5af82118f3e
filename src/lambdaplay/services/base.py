"""BaseService — foundation for services that touch durable storage.

Every such service receives a :class:`KeyValueStore` at construction time
and persists through :meth:`_write_record`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lambdaplay.infrastructure.store import KeyValueStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes backed by a key-value store.

    Usage::

        class LibraryService(BaseService):
            def save(self, name: str, body: str) -> ServiceResult:
                ...
                self._write_record(key, payload, warnings)
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def _read_record(self, key: str) -> str | None:
        """Read a record, treating any storage failure as absence."""
        try:
            return self._store.get(key)
        except Exception:
            logger.warning("Failed to read record %s", key, exc_info=True)
            return None

    def _write_record(self, key: str, value: str, warnings: list[str]) -> bool:
        """Write a record. Returns False if the write failed.

        INVARIANT: Persistence failures are warnings, never errors.
        """
        try:
            self._store.set(key, value)
        except Exception:
            logger.warning("Failed to write record %s", key, exc_info=True)
            warnings.append(f"Could not persist {key}; changes are kept for this session only")
            return False
        return True
