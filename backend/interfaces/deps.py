"""Shared singletons for settings, store, repository and services.

The store backend is chosen here from ``storage.backend`` in
app_config.yaml (or the ``STORAGE`` environment variable).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from app.config import AppConfig, get_settings
from application.auth_service import AuthService
from application.billing_service import BillingService
from application.catalog_service import CatalogService
from application.checkout_service import CheckOutService
from application.clock import Clock, ManualClock, SystemClock
from application.report_service import ReportService
from application.room_registry import RoomRegistry
from application.session_service import SessionService
from infrastructure.database import DEFAULT_DB_PATH
from infrastructure.memory_store import InMemoryStore
from infrastructure.repository import PosRepository
from infrastructure.sqlite_store import SQLiteStore
from infrastructure.store import KeyValueStore

logger = logging.getLogger(__name__)

settings = get_settings()


def _create_store(config: AppConfig) -> KeyValueStore:
    backend = config.database_backend
    if backend == "memory":
        return InMemoryStore()
    elif backend == "sqlite":
        path: Union[str, Path] = config.sqlite_path
        if path != ":memory:" and not Path(path).is_absolute():
            path = DEFAULT_DB_PATH.parent / path
        return SQLiteStore(path)
    else:
        raise ValueError(f"Unknown database backend: {backend}. Supported: sqlite, memory")


def _create_clock(config: AppConfig) -> Clock:
    if (config.clock or {}).get("mode") == "manual":
        return ManualClock(SystemClock().now_ms())
    return SystemClock()


store = _create_store(settings)
repository = PosRepository(store)
clock = _create_clock(settings)

registry = RoomRegistry(repository)
registry.load()

billing_service = BillingService(settings, registry, clock)
session_service = SessionService(settings, registry, repository, clock)
checkout_service = CheckOutService(settings, registry, repository, billing_service, clock)
catalog_service = CatalogService(settings, registry, repository)
auth_service = AuthService(settings, repository)
report_service = ReportService(settings, registry, repository, billing_service, clock)

catalog_service.seed_defaults()

logger.info("Store backend: %s", settings.database_backend)


def apply_settings(new_settings: AppConfig) -> None:
    """Update global settings reference and refresh dependent singletons."""
    global settings
    settings = new_settings
    billing_service.update_config(new_settings)
    session_service.update_config(new_settings)
    checkout_service.update_config(new_settings)
    catalog_service.update_config(new_settings)
    auth_service.update_config(new_settings)
    report_service.update_config(new_settings)


def reload_settings_from_disk() -> AppConfig:
    """Force re-read of app_config.yaml and propagate changes."""
    get_settings.cache_clear()
    fresh = get_settings()
    apply_settings(fresh)
    return fresh
