"""Session lifecycle: start, pause/resume, staff calls and order lines.

Every operation follows the same discipline: read the current frozen room,
build its successor value, swap it into the registry, write it through.
Failed preconditions (unknown order, room not in the right state) leave the
room untouched and return it as-is; an unknown room returns ``None``.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, TYPE_CHECKING

from domain.room import Room, RoomStatus
from domain.session import OrderItem, OrderStatus, Session, new_id

if TYPE_CHECKING:
    from app.config import AppConfig
    from application.clock import Clock
    from application.room_registry import RoomRegistry
    from infrastructure.repository import PosRepository

logger = logging.getLogger(__name__)

RoomUpdater = Callable[[Room], Room]
SessionUpdater = Callable[[Session], Session]


class SessionService:
    def __init__(
        self,
        config: "AppConfig",
        registry: "RoomRegistry",
        repository: "PosRepository",
        clock: "Clock",
    ):
        self.config = config
        self.registry = registry
        self.repo = repository
        self.clock = clock

    def update_config(self, config: "AppConfig") -> None:
        self.config = config

    def _default_minimum_hours(self) -> float:
        return float((self.config.billing or {}).get("default_minimum_hours", 2))

    # Room transitions -----------------------------------------------------
    def start_session(
        self,
        room_id: str,
        guest_count: int,
        notes: Optional[str] = None,
        waiter: Optional[str] = None,
        member_card: Optional[str] = None,
        guest_name: Optional[str] = None,
    ) -> Optional[Room]:
        def start(room: Room) -> Room:
            if room.status is not RoomStatus.AVAILABLE:
                logger.debug("Room %s is %s, not starting a session", room.room_id, room.status.value)
                return room
            now = self.clock.now_ms()
            minimum = room.minimum_hours if room.minimum_hours is not None else self._default_minimum_hours()
            session = Session(
                session_id=new_id("SES", now),
                room_id=room.room_id,
                start_time=now,
                guest_count=guest_count,
                minimum_hours=minimum,
                guest_name=guest_name,
                assigned_waiter=waiter,
                member_card=member_card,
                notes=notes,
            )
            logger.info("Session %s started in room %s", session.session_id, room.room_id)
            return replace(room, status=RoomStatus.OCCUPIED, session=session)

        return self._update_room(room_id, start)

    def update_room_status(self, room_id: str, status: RoomStatus) -> Optional[Room]:
        """Explicit status edit, e.g. ``cleaning -> available`` or into maintenance.

        ``occupied`` is owned by the session flow and cannot be entered or left here.
        """

        def set_status(room: Room) -> Room:
            if status is RoomStatus.OCCUPIED or room.status is RoomStatus.OCCUPIED:
                logger.debug("Refusing status edit %s -> %s on room %s", room.status.value, status.value, room.room_id)
                return room
            if room.status is status:
                return room
            logger.info("Room %s: %s -> %s", room.room_id, room.status.value, status.value)
            return replace(room, status=status)

        return self._update_room(room_id, set_status)

    # Session clock --------------------------------------------------------
    def pause_session(self, room_id: str) -> Optional[Room]:
        def pause(session: Session) -> Session:
            if session.is_paused:
                return session
            return replace(session, is_paused=True, paused_at=self.clock.now_ms())

        return self._update_session(room_id, pause)

    def resume_session(self, room_id: str) -> Optional[Room]:
        def resume(session: Session) -> Session:
            if not session.is_paused or session.paused_at is None:
                return session
            pause_interval = self.clock.now_ms() - session.paused_at
            return replace(
                session,
                is_paused=False,
                paused_at=None,
                total_paused_duration=session.total_paused_duration + pause_interval,
            )

        return self._update_session(room_id, resume)

    def update_start_time(self, room_id: str, new_start_time: int) -> Optional[Room]:
        """Correct the session clock. Unbounded; a future start just bills as zero elapsed."""
        return self._update_session(room_id, lambda s: replace(s, start_time=int(new_start_time)))

    def call_staff(self, room_id: str) -> Optional[Room]:
        return self._update_session(
            room_id, lambda s: replace(s, service_call_count=s.service_call_count + 1)
        )

    # Orders ---------------------------------------------------------------
    def add_order(
        self,
        room_id: str,
        menu_item_id: str,
        quantity: int,
        special_request: Optional[str] = None,
    ) -> Optional[Room]:
        menu_item = self.repo.get_menu_item(menu_item_id)
        if menu_item is None:
            logger.debug("Menu item %s not found", menu_item_id)
            return self.registry.get(room_id)

        def add(session: Session) -> Session:
            existing = session.find_order_for_menu_item(menu_item.item_id)
            if existing is not None:
                return session.replace_order(existing.with_quantity(existing.quantity + quantity))
            now = self.clock.now_ms()
            line = OrderItem(
                order_id=new_id("ORD", now),
                menu_item_id=menu_item.item_id,
                name=menu_item.name,
                quantity=quantity,
                unit_price=menu_item.price,
                subtotal=menu_item.price * quantity,
                timestamp=now,
                special_request=special_request,
            )
            return replace(session, orders=session.orders + (line,))

        return self._update_session(room_id, add)

    def update_order_quantity(self, room_id: str, order_id: str, delta: int) -> Optional[Room]:
        def change(session: Session) -> Session:
            order = session.find_order(order_id)
            if order is None:
                return session
            return session.replace_order(order.with_quantity(max(1, order.quantity + delta)))

        return self._update_session(room_id, change)

    def remove_order(self, room_id: str, order_id: str) -> Optional[Room]:
        def remove(session: Session) -> Session:
            if session.find_order(order_id) is None:
                return session
            return replace(session, orders=tuple(o for o in session.orders if o.order_id != order_id))

        return self._update_session(room_id, remove)

    def update_order_note(self, room_id: str, order_id: str, text: Optional[str]) -> Optional[Room]:
        return self._update_order(room_id, order_id, lambda o: replace(o, special_request=text))

    def update_order_status(self, room_id: str, order_id: str, status: OrderStatus) -> Optional[Room]:
        """Kitchen fulfilment progress; billing ignores it."""
        return self._update_order(room_id, order_id, lambda o: replace(o, status=status))

    # Helpers --------------------------------------------------------------
    def _update_order(
        self, room_id: str, order_id: str, updater: Callable[[OrderItem], OrderItem]
    ) -> Optional[Room]:
        def apply(session: Session) -> Session:
            order = session.find_order(order_id)
            if order is None:
                return session
            return session.replace_order(updater(order))

        return self._update_session(room_id, apply)

    def _update_session(self, room_id: str, updater: SessionUpdater) -> Optional[Room]:
        def apply(room: Room) -> Room:
            if room.session is None:
                logger.debug("Room %s has no session", room.room_id)
                return room
            session = updater(room.session)
            if session is room.session:
                return room
            return replace(room, session=session)

        return self._update_room(room_id, apply)

    def _update_room(self, room_id: str, updater: RoomUpdater) -> Optional[Room]:
        room = self.registry.get(room_id)
        if room is None:
            logger.debug("Room %s not found", room_id)
            return None
        updated = updater(room)
        if updated is room:
            return room
        return self.registry.replace(updated)
