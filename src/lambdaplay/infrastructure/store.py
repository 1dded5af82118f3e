"""Durable string store — one text value per fixed key.

``KeyValueStore`` is the boundary the library service persists through.
Two implementations:

- :class:`SqliteKeyValueStore`: survives process restarts.
- :class:`MemoryKeyValueStore`: process-local, for tests and ``--ephemeral``.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert

from lambdaplay.infrastructure.database.engine import init_database
from lambdaplay.infrastructure.database.schema import kv_store

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal durable string store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def close(self) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store. Contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def close(self) -> None:
        pass


class SqliteKeyValueStore:
    """Key-value store over the ``kv_store`` table.

    ``set`` is an upsert, committed before it returns.
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._engine: Engine = init_database(data_dir)

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str) -> str | None:
        with self._engine.connect() as conn:
            row = conn.execute(select(kv_store.c.value).where(kv_store.c.key == key)).first()
        return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        modified = datetime.now(UTC).isoformat()
        stmt = insert(kv_store).values(key=key, value=value, modified=modified)
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": stmt.excluded["value"], "modified": stmt.excluded["modified"]},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)
        logger.debug("Wrote record %s (%d chars)", key, len(value))

    def close(self) -> None:
        self._engine.dispose()
