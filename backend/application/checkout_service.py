"""Check-out workflow service: seals a session into the history."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, TYPE_CHECKING

from domain.errors import PersistenceError
from domain.room import RoomStatus
from domain.session import PaymentMethod, Session

if TYPE_CHECKING:
    from app.config import AppConfig
    from application.billing_service import BillingService
    from application.clock import Clock
    from application.room_registry import RoomRegistry
    from infrastructure.repository import PosRepository

logger = logging.getLogger(__name__)


class CheckOutService:
    def __init__(
        self,
        config: "AppConfig",
        registry: "RoomRegistry",
        repository: "PosRepository",
        billing_service: "BillingService",
        clock: "Clock",
    ):
        self.config = config
        self.registry = registry
        self.repo = repository
        self.billing_service = billing_service
        self.clock = clock

    def update_config(self, config: "AppConfig") -> None:
        self.config = config

    def checkout(
        self,
        room_id: str,
        payment_method: PaymentMethod,
        amount_tendered: Optional[float] = None,
    ) -> Optional[Session]:
        """
        Settle the room's session and move the room to cleaning.

        ``amount_tendered=None`` means the guest pays the exact total; any
        number, zero included, is recorded as tendered and may leave a
        negative change amount. Returns ``None`` when the room has no
        session to settle.
        """
        room = self.registry.get(room_id)
        if room is None or room.status is not RoomStatus.OCCUPIED or room.session is None:
            logger.debug("Room %s has nothing to check out", room_id)
            return None

        now = self.clock.now_ms()
        bill = self.billing_service.bill_for(room, now)
        paid = bill.total_amount if amount_tendered is None else float(amount_tendered)
        sealed = room.session.seal(
            end_time=now,
            bill=bill,
            payment_method=payment_method,
            paid_amount=paid,
        )

        # History first: on failure the room keeps its session and checkout can be retried
        self._write_history(sealed)

        try:
            self.registry.replace(replace(room, status=RoomStatus.CLEANING, session=None))
        except PersistenceError:
            # Sale is archived; the next write of this room reconciles the store
            logger.warning("Room %s released in memory only after settling %s", room_id, sealed.session_id)
        logger.info(
            "Session %s settled in room %s: total=%.2f paid=%.2f via %s",
            sealed.session_id,
            room_id,
            sealed.total_bill,
            sealed.paid_amount,
            payment_method.value,
        )
        return sealed

    def quick_end(self, room_id: str) -> Optional[Session]:
        """End the session paying the exact amount in cash."""
        return self.checkout(room_id, PaymentMethod.CASH, None)

    def list_history(self) -> List[Session]:
        return self.repo.list_history()

    def get_history(self, session_id: str) -> Optional[Session]:
        return self.repo.get_history(session_id)

    def _write_history(self, sealed: Session) -> None:
        attempts = self.config.history_write_attempts
        for attempt in range(1, attempts + 1):
            try:
                self.repo.add_history(sealed)
                return
            except PersistenceError:
                if attempt == attempts:
                    logger.error(
                        "Giving up on history write for session %s after %d attempts",
                        sealed.session_id,
                        attempts,
                    )
                    raise
                logger.warning("History write for session %s failed, retrying (%d/%d)", sealed.session_id, attempt, attempts)
