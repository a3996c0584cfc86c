"""SQLModel database configuration."""
from __future__ import annotations

from pathlib import Path
from typing import Union

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "karaoke_pos.db"
MEMORY_DB = ":memory:"


def create_store_engine(db_path: Union[str, Path] = DEFAULT_DB_PATH) -> Engine:
    """Engine for a file database, or a single shared connection for ``:memory:``."""
    if str(db_path) == MEMORY_DB:
        return create_engine(
            "sqlite://",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> None:
    """Create tables if they do not exist."""
    from . import models  # noqa: F401  # ensure SQLModel metadata is loaded

    SQLModel.metadata.create_all(engine)


def session_factory(engine: Engine):
    def SessionLocal() -> Session:
        return Session(engine)

    return SessionLocal
