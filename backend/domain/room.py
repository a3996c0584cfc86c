"""Karaoke room domain model."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .menu import LocalizedText
from .session import Session


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    CLEANING = "cleaning"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class RoomType(str, Enum):
    STANDARD = "Standard"
    VIP = "VIP"
    VVIP = "VVIP"


@dataclass(frozen=True)
class Room:
    room_id: str
    name: LocalizedText
    room_type: RoomType
    capacity: int
    hourly_rate: float
    floor: int = 1
    minimum_hours: Optional[float] = None
    is_active: bool = True
    status: RoomStatus = RoomStatus.AVAILABLE
    session: Optional[Session] = None
    features: Tuple[str, ...] = ()
    smoking: bool = False

    def __post_init__(self) -> None:
        # session present <=> occupied
        if (self.session is not None) != (self.status is RoomStatus.OCCUPIED):
            raise ValueError(
                f"Room {self.room_id}: status {self.status.value} does not match session presence"
            )

    @property
    def is_occupied(self) -> bool:
        return self.status is RoomStatus.OCCUPIED

    @property
    def is_running(self) -> bool:
        """Occupied with a session whose clock is ticking."""
        return self.session is not None and not self.session.is_paused
