"""Room and menu record management, plus first-start seeding."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, TYPE_CHECKING

from domain.menu import MenuItem
from domain.room import Room, RoomStatus
from infrastructure import codec

if TYPE_CHECKING:
    from app.config import AppConfig
    from application.room_registry import RoomRegistry
    from infrastructure.repository import PosRepository

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, config: "AppConfig", registry: "RoomRegistry", repository: "PosRepository"):
        self.config = config
        self.registry = registry
        self.repo = repository

    def update_config(self, config: "AppConfig") -> None:
        self.config = config

    def seed_defaults(self) -> None:
        """Write the configured rooms and menu when the store has none."""
        seed = self.config.seed or {}
        if not self.registry.list():
            for data in seed.get("rooms", []):
                self.registry.replace(codec.room_from_dict(data))
            logger.info("Seeded %d rooms", len(seed.get("rooms", [])))
        if not self.repo.list_menu_items():
            for data in seed.get("menu", []):
                self.repo.save_menu_item(codec.menu_item_from_dict(data))
            logger.info("Seeded %d menu items", len(seed.get("menu", [])))

    # Rooms ----------------------------------------------------------------
    def list_rooms(self) -> List[Room]:
        return self.registry.list()

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.registry.get(room_id)

    def save_room(self, room: Room) -> Room:
        """Create or edit a room record.

        An occupied room keeps its live status and session: editing the rate
        or minimum hours reaches only future sessions and the session's own
        minimum-hours snapshot is left alone.
        """
        existing = self.registry.get(room.room_id)
        if existing is not None and existing.session is not None:
            room = replace(room, status=existing.status, session=existing.session)
        return self.registry.replace(room)

    def delete_room(self, room_id: str) -> bool:
        room = self.registry.get(room_id)
        if room is None:
            return False
        if room.is_occupied:
            logger.debug("Refusing to delete occupied room %s", room_id)
            return False
        self.registry.discard(room_id)
        return True

    def toggle_room_active(self, room_id: str) -> Optional[Room]:
        room = self.registry.get(room_id)
        if room is None:
            return None
        return self.registry.replace(replace(room, is_active=not room.is_active))

    # Menu -----------------------------------------------------------------
    def list_menu(self) -> List[MenuItem]:
        return self.repo.list_menu_items()

    def get_menu_item(self, item_id: str) -> Optional[MenuItem]:
        return self.repo.get_menu_item(item_id)

    def save_menu_item(self, item: MenuItem) -> MenuItem:
        self.repo.save_menu_item(item)
        return item

    def delete_menu_item(self, item_id: str) -> bool:
        if self.repo.get_menu_item(item_id) is None:
            return False
        self.repo.delete_menu_item(item_id)
        return True
