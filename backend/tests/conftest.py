"""Pytest configuration and fixtures."""

import os
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Optional

import pytest

# Point the composition root at the in-memory test setup before anything imports it
os.environ["KARAOKE_POS_CONFIG"] = str(Path(__file__).resolve().parent / "app_config.test.yaml")
os.environ["STORAGE"] = "memory"

from app.config import get_settings
from application.auth_service import AuthService
from application.billing_service import BillingService
from application.catalog_service import CatalogService
from application.checkout_service import CheckOutService
from application.clock import ManualClock
from application.report_service import ReportService
from application.room_registry import RoomRegistry
from application.session_service import SessionService
from domain.errors import StoreError
from domain.menu import LocalizedText, MenuItem
from domain.room import Room, RoomType
from infrastructure.memory_store import InMemoryStore
from infrastructure.repository import PosRepository

# 2023-11-14 22:13:20 UTC
T0 = 1_700_000_000_000
MINUTE = 60_000
HOUR = 3_600_000


class FlakyStore(InMemoryStore):
    """In-memory store whose writes fail for chosen key prefixes."""

    def __init__(self):
        super().__init__()
        self.failures: Dict[str, int] = {}
        self.write_attempts: Dict[str, int] = {}

    def fail_writes(self, prefix: str, times: int = 1_000_000) -> None:
        self.failures[prefix] = times

    def set(self, key: str, value: Dict[str, Any]) -> None:
        self.write_attempts[key] = self.write_attempts.get(key, 0) + 1
        for prefix, remaining in self.failures.items():
            if key.startswith(prefix) and remaining > 0:
                self.failures[prefix] = remaining - 1
                raise StoreError(f"disk full while writing {key}")
        super().set(key, value)


def make_room(
    room_id: str = "R101",
    hourly_rate: float = 8000,
    minimum_hours: Optional[float] = 2,
    **kwargs: Any,
) -> Room:
    return Room(
        room_id=room_id,
        name=LocalizedText(en=f"Room {room_id}", mm=""),
        room_type=kwargs.pop("room_type", RoomType.STANDARD),
        capacity=kwargs.pop("capacity", 6),
        hourly_rate=hourly_rate,
        minimum_hours=minimum_hours,
        **kwargs,
    )


def make_menu_item(item_id: str = "M001", price: float = 3000, name: str = "Fried Rice") -> MenuItem:
    return MenuItem(item_id=item_id, name=LocalizedText(en=name, mm=""), category="Food", price=price)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(T0)


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def pos(settings, clock, store) -> SimpleNamespace:
    """Services wired over a fresh store, with one room and two menu items."""
    repository = PosRepository(store)
    registry = RoomRegistry(repository)
    billing = BillingService(settings, registry, clock)
    ns = SimpleNamespace(
        clock=clock,
        store=store,
        repository=repository,
        registry=registry,
        billing=billing,
        sessions=SessionService(settings, registry, repository, clock),
        checkout=CheckOutService(settings, registry, repository, billing, clock),
        catalog=CatalogService(settings, registry, repository),
        auth=AuthService(settings, repository),
        reports=ReportService(settings, registry, repository, billing, clock),
    )
    registry.replace(make_room("R101", hourly_rate=8000, minimum_hours=2))
    repository.save_menu_item(make_menu_item("M001", 3000, "Fried Rice"))
    repository.save_menu_item(make_menu_item("M003", 2000, "Myanmar Beer"))
    return ns


@pytest.fixture
def client():
    """FastAPI test client over the module-level singletons, reset to seed data."""
    from fastapi.testclient import TestClient

    from app.main import app
    from interfaces import deps

    deps.repository.store = InMemoryStore()
    deps.registry.load()
    deps.catalog_service.seed_defaults()
    deps.clock.set(T0)
    with TestClient(app) as test_client:
        yield test_client
