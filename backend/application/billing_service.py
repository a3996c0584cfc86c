"""Billing service: applies the configured rates and clock to the pure calculators."""
from __future__ import annotations

from typing import Optional

from app.config import AppConfig
from application.clock import Clock
from application.room_registry import RoomRegistry
from domain.billing import BillingRates, BillSummary, compute_bill, elapsed_ms, format_currency
from domain.room import Room


class BillingService:
    def __init__(self, config: AppConfig, registry: RoomRegistry, clock: Clock):
        self.config = config
        self.registry = registry
        self.clock = clock
        self._apply_billing_config()

    def _apply_billing_config(self) -> None:
        self.rates = BillingRates.from_config(self.config.billing)
        self.currency_symbols = dict(self.config.currency or {}) or None

    def update_config(self, config: AppConfig) -> None:
        self.config = config
        self._apply_billing_config()

    def bill_for(self, room: Room, now_ms: Optional[int] = None) -> Optional[BillSummary]:
        if room.session is None:
            return None
        now = self.clock.now_ms() if now_ms is None else now_ms
        return compute_bill(room.session, room, now, self.rates)

    def live_bill(self, room_id: str) -> Optional[BillSummary]:
        """Current charges of the room's open session, recomputed from scratch."""
        room = self.registry.get(room_id)
        if room is None:
            return None
        return self.bill_for(room)

    def elapsed(self, room: Room) -> int:
        if room.session is None:
            return 0
        return elapsed_ms(room.session, self.clock.now_ms())

    def format_amount(self, amount: float, lang: str = "en") -> str:
        return format_currency(amount, lang, self.currency_symbols)
