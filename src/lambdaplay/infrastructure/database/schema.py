"""SQLAlchemy Core table definitions for the lambdaplay database.

A single key-value table: each row is one logical record identified by a
fixed key. The expression library lives under one such key.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),
    Column("modified", Text, nullable=False),
)
