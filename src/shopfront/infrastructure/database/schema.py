"""SQLAlchemy Core table definitions for the shopfront database.

A single key-value table: the browser-style local storage the basket
snapshot lives in.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),  # JSON document
    Column("modified", Text, nullable=False),
)
