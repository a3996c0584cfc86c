"""SQLModel ORM table backing the SQLite key-value store."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class KVRecordModel(SQLModel, table=True):
    key: str = Field(primary_key=True)
    value: str  # JSON document
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
