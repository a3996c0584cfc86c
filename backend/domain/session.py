"""Rental session of a karaoke room and the order lines it accrues."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING
from uuid import uuid4

from .menu import LocalizedText

if TYPE_CHECKING:  # pragma: no cover
    from .billing import BillSummary


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    SERVED = "served"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    KBZ_PAY = "KBZ Pay"
    WAVE_MONEY = "Wave Money"


def new_id(prefix: str, now_ms: int) -> str:
    """Build a record id such as ``SES-1700000000000-3f9a1``."""
    return f"{prefix}-{now_ms}-{uuid4().hex[:5]}"


@dataclass(frozen=True)
class OrderItem:
    """One food/drink line. Name and unit price are copied at order time."""

    order_id: str
    menu_item_id: str
    name: LocalizedText
    quantity: int
    unit_price: float
    subtotal: float
    timestamp: int
    special_request: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDING

    def with_quantity(self, quantity: int) -> "OrderItem":
        return replace(self, quantity=quantity, subtotal=quantity * self.unit_price)


@dataclass(frozen=True)
class Session:
    """One paid occupancy of a room, from start to checkout.

    Times are epoch milliseconds. ``minimum_hours`` is the room rule captured
    when the session started, so later room edits do not reach an open
    session. The financial fields stay ``None`` until :meth:`seal` runs.
    """

    session_id: str
    room_id: str
    start_time: int
    guest_count: int
    minimum_hours: Optional[float] = None
    end_time: Optional[int] = None
    paused_at: Optional[int] = None
    total_paused_duration: int = 0
    is_paused: bool = False
    guest_name: Optional[str] = None
    assigned_waiter: Optional[str] = None
    member_card: Optional[str] = None
    notes: Optional[str] = None
    service_call_count: int = 0
    orders: Tuple[OrderItem, ...] = ()

    # Financial snapshot, written once at checkout
    total_bill: Optional[float] = None
    room_charges: Optional[float] = None
    order_charges: Optional[float] = None
    tax: Optional[float] = None
    service_charge: Optional[float] = None
    discount: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    paid_amount: Optional[float] = None
    change_amount: Optional[float] = None

    @property
    def is_settled(self) -> bool:
        return self.end_time is not None

    @property
    def has_membership(self) -> bool:
        return bool(self.member_card)

    def find_order(self, order_id: str) -> Optional[OrderItem]:
        for order in self.orders:
            if order.order_id == order_id:
                return order
        return None

    def find_order_for_menu_item(self, menu_item_id: str) -> Optional[OrderItem]:
        for order in self.orders:
            if order.menu_item_id == menu_item_id:
                return order
        return None

    def replace_order(self, updated: OrderItem) -> "Session":
        orders = tuple(updated if o.order_id == updated.order_id else o for o in self.orders)
        return replace(self, orders=orders)

    def seal(
        self,
        end_time: int,
        bill: "BillSummary",
        payment_method: PaymentMethod,
        paid_amount: float,
    ) -> "Session":
        """Return the settled copy of this session with its financial snapshot."""
        if self.is_settled:
            raise ValueError(f"Session {self.session_id} is already settled")
        return replace(
            self,
            end_time=end_time,
            total_bill=bill.total_amount,
            room_charges=bill.room_charges,
            order_charges=bill.order_total,
            tax=bill.tax,
            service_charge=bill.service_charge,
            discount=bill.discount,
            payment_method=payment_method,
            paid_amount=paid_amount,
            change_amount=paid_amount - bill.total_amount,
        )
