"""Typed gateway over the key-value store."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from domain.errors import PersistenceError, StoreError
from domain.menu import MenuItem
from domain.room import Room
from domain.session import Session
from domain.user import User
from . import codec
from .store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

ROOM_PREFIX = "room:"
HISTORY_PREFIX = "session-history:"
MENU_PREFIX = "menu:"
CURRENT_USER_KEY = "current-user"


class PosRepository:
    """Maps rooms, menu items, settled sessions and the signed-in user onto store keys.

    Backend failures are logged and re-raised as :class:`PersistenceError`.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    # Rooms ----------------------------------------------------------------
    def get_room(self, room_id: str) -> Optional[Room]:
        return self._read(ROOM_PREFIX + room_id, codec.room_from_dict)

    def list_rooms(self) -> List[Room]:
        rooms = self._read_all(ROOM_PREFIX, codec.room_from_dict)
        return sorted(rooms, key=lambda r: r.room_id)

    def save_room(self, room: Room) -> None:
        self._write(ROOM_PREFIX + room.room_id, codec.room_to_dict(room))

    def delete_room(self, room_id: str) -> None:
        self._delete(ROOM_PREFIX + room_id)

    # Menu -----------------------------------------------------------------
    def get_menu_item(self, item_id: str) -> Optional[MenuItem]:
        return self._read(MENU_PREFIX + item_id, codec.menu_item_from_dict)

    def list_menu_items(self) -> List[MenuItem]:
        items = self._read_all(MENU_PREFIX, codec.menu_item_from_dict)
        return sorted(items, key=lambda m: m.name.en)

    def save_menu_item(self, item: MenuItem) -> None:
        self._write(MENU_PREFIX + item.item_id, codec.menu_item_to_dict(item))

    def delete_menu_item(self, item_id: str) -> None:
        self._delete(MENU_PREFIX + item_id)

    # Session history ------------------------------------------------------
    def add_history(self, session: Session) -> None:
        self._write(HISTORY_PREFIX + session.session_id, codec.session_to_dict(session))

    def get_history(self, session_id: str) -> Optional[Session]:
        return self._read(HISTORY_PREFIX + session_id, codec.session_from_dict)

    def list_history(self) -> List[Session]:
        sessions = self._read_all(HISTORY_PREFIX, codec.session_from_dict)
        return sorted(sessions, key=lambda s: s.start_time, reverse=True)

    # Current user ---------------------------------------------------------
    def get_current_user(self) -> Optional[User]:
        return self._read(CURRENT_USER_KEY, codec.user_from_dict)

    def set_current_user(self, user: User) -> None:
        self._write(CURRENT_USER_KEY, codec.user_to_dict(user))

    def clear_current_user(self) -> None:
        self._delete(CURRENT_USER_KEY)

    # Helpers --------------------------------------------------------------
    def _write(self, key: str, value: Dict[str, Any]) -> None:
        try:
            self.store.set(key, value)
        except StoreError as exc:
            logger.exception("Store write failed for %s", key)
            raise PersistenceError(key) from exc

    def _delete(self, key: str) -> None:
        try:
            self.store.remove(key)
        except StoreError as exc:
            logger.exception("Store remove failed for %s", key)
            raise PersistenceError(key) from exc

    def _read(self, key: str, decode: Callable[[Dict[str, Any]], T]) -> Optional[T]:
        try:
            data = self.store.get(key)
        except StoreError as exc:
            logger.exception("Store read failed for %s", key)
            raise PersistenceError(key, f"Failed to read '{key}'") from exc
        return decode(data) if data is not None else None

    def _read_all(self, prefix: str, decode: Callable[[Dict[str, Any]], T]) -> List[T]:
        try:
            entries = self.store.list(prefix)
        except StoreError as exc:
            logger.exception("Store list failed for %s*", prefix)
            raise PersistenceError(prefix, f"Failed to list '{prefix}*'") from exc
        return [decode(entry["value"]) for entry in entries]
