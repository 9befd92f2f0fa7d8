"""Database engine setup for SQLite with WAL mode.

The DB is stored at {data_dir}/shopfront.db.

SQLAlchemy Core (not ORM) is used because shopfront is a short-lived
CLI process — no benefit from session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from shopfront.infrastructure.database.schema import metadata

DB_FILENAME = "shopfront.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(data_dir: Path) -> Engine:
    """Initialize the database at ``{data_dir}/shopfront.db``.

    Creates *data_dir* and all tables. Idempotent — safe to call on an
    existing database.
    """
    data_dir.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(data_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
