"""Snapshot slot — the one durable key-value entry mirroring basket ids.

Writes replace the whole value; a reader sees either the old or the new
complete sequence, never a partial one.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert

from shopfront.infrastructure.database.schema import kv_store

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

DEFAULT_BASKET_KEY = "orderItems"


class SnapshotSlot(Protocol):
    """Durable storage for the ordered basket id sequence."""

    def read(self) -> list[str]: ...

    def write(self, ids: Sequence[str]) -> None: ...


def _decode(raw: str | None, key: str) -> list[str]:
    """Parse a stored JSON array of ids; anything else reads as empty."""
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring corrupt snapshot in slot %s", key)
        return []
    if not isinstance(data, list) or not all(isinstance(i, str) for i in data):
        logger.warning("Ignoring non-list snapshot in slot %s", key)
        return []
    return data


class MemorySlot:
    """In-process slot. Holds the encoded value just like the durable one."""

    def __init__(self, initial: Sequence[str] | None = None, *, key: str = DEFAULT_BASKET_KEY) -> None:
        self.key = key
        self._raw: str | None = None if initial is None else json.dumps(list(initial))

    def read(self) -> list[str]:
        return _decode(self._raw, self.key)

    def write(self, ids: Sequence[str]) -> None:
        self._raw = json.dumps(list(ids))


class SqliteSlot:
    """Slot stored as one row of the ``kv_store`` table.

    Parameters:
        engine: SQLAlchemy engine with the ``kv_store`` table.
        key: Row key; fixed for the lifetime of the application.
    """

    def __init__(self, engine: Engine, key: str = DEFAULT_BASKET_KEY) -> None:
        self._engine = engine
        self.key = key

    def read(self) -> list[str]:
        with self._engine.connect() as conn:
            raw = conn.execute(
                select(kv_store.c.value).where(kv_store.c.key == self.key)
            ).scalar_one_or_none()
        return _decode(raw, self.key)

    def write(self, ids: Sequence[str]) -> None:
        value = json.dumps(list(ids))
        modified = datetime.now(UTC).isoformat()
        stmt = insert(kv_store).values(key=self.key, value=value, modified=modified)
        stmt = stmt.on_conflict_do_update(
            index_elements=[kv_store.c.key],
            set_={"value": value, "modified": modified},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)
