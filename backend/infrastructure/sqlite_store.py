"""SQLite-backed key-value store."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select

from domain.errors import StoreError
from .database import DEFAULT_DB_PATH, create_store_engine, init_db, session_factory
from .models import KVRecordModel
from .store import KeyValueStore


class SQLiteStore(KeyValueStore):
    def __init__(self, db_path: Union[str, Path] = DEFAULT_DB_PATH):
        self.engine = create_store_engine(db_path)
        init_db(self.engine)
        self.SessionLocal = session_factory(self.engine)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Value for '{key}' is not JSON serializable") from exc
        try:
            with self.SessionLocal() as session, session.begin():
                model = session.get(KVRecordModel, key)
                if not model:
                    model = KVRecordModel(key=key, value=payload)
                else:
                    model.value = payload
                    model.updated_at = datetime.now(timezone.utc)
                session.add(model)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to write '{key}'") from exc

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            with self.SessionLocal() as session:
                model = session.get(KVRecordModel, key)
                if not model:
                    return None
                return json.loads(model.value)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to read '{key}'") from exc

    def list(self, prefix: str) -> List[Dict[str, Any]]:
        try:
            with self.SessionLocal() as session:
                statement = (
                    select(KVRecordModel)
                    .where(col(KVRecordModel.key).startswith(prefix, autoescape=True))
                    .order_by(KVRecordModel.key)
                )
                models = session.exec(statement).all()
                # LIKE is case-insensitive in SQLite, re-check exactly
                return [
                    {"key": model.key, "value": json.loads(model.value)}
                    for model in models
                    if model.key.startswith(prefix)
                ]
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to list '{prefix}*'") from exc

    def remove(self, key: str) -> None:
        try:
            with self.SessionLocal() as session, session.begin():
                model = session.get(KVRecordModel, key)
                if model:
                    session.delete(model)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to remove '{key}'") from exc
