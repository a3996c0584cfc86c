"""Pure duration and bill calculators for room sessions.

Both functions depend only on ``(state, now)``: they are called on every
display refresh and once more at checkout, and must agree with themselves.
"""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .room import Room
from .session import Session

MS_PER_HOUR = 3_600_000


@dataclass(frozen=True)
class BillingRates:
    """Venue-wide billing constants."""

    tax_rate: float = 0.05
    service_rate: float = 0.10
    member_discount_rate: float = 0.10
    rounding_step_hours: float = 0.5
    default_minimum_hours: float = 2.0

    @classmethod
    def from_config(cls, billing_cfg: Optional[Dict[str, Any]]) -> "BillingRates":
        cfg = billing_cfg or {}
        defaults = cls()
        return cls(
            tax_rate=float(cfg.get("tax_rate", defaults.tax_rate)),
            service_rate=float(cfg.get("service_rate", defaults.service_rate)),
            member_discount_rate=float(cfg.get("member_discount_rate", defaults.member_discount_rate)),
            rounding_step_hours=float(cfg.get("rounding_step_hours", defaults.rounding_step_hours)),
            default_minimum_hours=float(cfg.get("default_minimum_hours", defaults.default_minimum_hours)),
        )


DEFAULT_RATES = BillingRates()


@dataclass(frozen=True)
class BillSummary:
    active_duration: int
    billable_hours: float
    room_charges: float
    order_total: float
    subtotal: float
    discount: float
    after_discount: float
    tax: float
    service_charge: float
    total_amount: float
    is_minimum_charge_applied: bool


# Duration -----------------------------------------------------------------
def elapsed_ms(session: Session, now_ms: int) -> int:
    """Active (unpaused) milliseconds of ``session`` at ``now_ms``, never negative."""
    if session.is_paused and session.paused_at is not None:
        until = session.paused_at
    else:
        until = now_ms
    return max(0, until - session.start_time - session.total_paused_duration)


def format_duration(ms: int) -> str:
    """Render ``HH:MM:SS``, or ``MM:SS`` under an hour."""
    total_seconds = max(0, ms // 1000)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


# Bill ---------------------------------------------------------------------
def resolve_minimum_hours(session: Session, room: Room, rates: BillingRates = DEFAULT_RATES) -> float:
    if session.minimum_hours is not None:
        return session.minimum_hours
    # Sessions written before the snapshot existed
    if room.minimum_hours is not None:
        return room.minimum_hours
    return rates.default_minimum_hours


def round_up_hours(hours: float, step: float) -> float:
    """Ceil ``hours`` to the next multiple of ``step``."""
    if step <= 0:
        return hours
    return math.ceil(hours / step) * step


def compute_bill(
    session: Session,
    room: Room,
    now_ms: int,
    rates: BillingRates = DEFAULT_RATES,
) -> BillSummary:
    active_duration = elapsed_ms(session, now_ms)
    active_hours = active_duration / MS_PER_HOUR

    min_hours = resolve_minimum_hours(session, room, rates)
    if active_hours < min_hours:
        billable_hours = min_hours
        minimum_applied = True
    else:
        billable_hours = active_hours
        minimum_applied = False
    billable_hours = round_up_hours(billable_hours, rates.rounding_step_hours)

    room_charges = billable_hours * room.hourly_rate
    order_total = sum((item.subtotal for item in session.orders), 0.0)
    subtotal = room_charges + order_total

    # Member discount covers room time only, never food and drinks
    discount = room_charges * rates.member_discount_rate if session.has_membership else 0.0
    after_discount = subtotal - discount

    tax = after_discount * rates.tax_rate
    service_charge = after_discount * rates.service_rate

    return BillSummary(
        active_duration=active_duration,
        billable_hours=billable_hours,
        room_charges=room_charges,
        order_total=order_total,
        subtotal=subtotal,
        discount=discount,
        after_discount=after_discount,
        tax=tax,
        service_charge=service_charge,
        total_amount=after_discount + tax + service_charge,
        is_minimum_charge_applied=minimum_applied,
    )


def format_currency(amount: float, lang: str = "en", symbols: Optional[Dict[str, str]] = None) -> str:
    """Whole-kyat display string, e.g. ``25,300 Ks``."""
    symbol_map = symbols or {"en": "Ks", "mm": "ကျပ်"}
    symbol = symbol_map.get(lang, symbol_map.get("en", "Ks"))
    # Halves round away from zero
    whole = int(Decimal(amount).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return f"{whole:,} {symbol}"
