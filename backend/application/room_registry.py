"""In-memory arena of current rooms, written through to the repository."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from domain.room import Room
from infrastructure.repository import PosRepository

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Holds the authoritative current value of every room.

    Room values are frozen; a change swaps the whole value in one assignment
    and then writes ``room:<id>``. If the write fails the new value stays in
    memory and the :class:`PersistenceError` propagates to the caller.
    """

    def __init__(self, repository: PosRepository):
        self.repository = repository
        self._rooms: Dict[str, Room] = {}

    def load(self) -> int:
        self._rooms = {room.room_id: room for room in self.repository.list_rooms()}
        logger.info("Loaded %d rooms from store", len(self._rooms))
        return len(self._rooms)

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def list(self) -> List[Room]:
        return [self._rooms[room_id] for room_id in sorted(self._rooms)]

    def replace(self, room: Room) -> Room:
        self._rooms[room.room_id] = room
        self.repository.save_room(room)
        return room

    def discard(self, room_id: str) -> None:
        if self._rooms.pop(room_id, None) is not None:
            self.repository.delete_room(room_id)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms
