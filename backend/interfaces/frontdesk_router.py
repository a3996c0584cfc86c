"""Routers for front-desk workflows: session lifecycle, orders and checkout."""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from domain.room import Room
from domain.session import OrderStatus, PaymentMethod
from infrastructure import codec
from infrastructure.socketio_manager import push_room_state, room_state
from interfaces import deps

router = APIRouter(prefix="/rooms/{room_id}", tags=["frontdesk"])

session_service = deps.session_service
checkout_service = deps.checkout_service
billing_service = deps.billing_service


class StartSessionRequest(BaseModel):
    guestCount: int = Field(1, ge=1)
    notes: Optional[str] = None
    waiter: Optional[str] = None
    memberCard: Optional[str] = None
    guestName: Optional[str] = None


class StartTimeRequest(BaseModel):
    startTime: int = Field(..., description="epoch milliseconds")


class AddOrderRequest(BaseModel):
    menuItemId: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    specialRequest: Optional[str] = None


class QuantityDeltaRequest(BaseModel):
    delta: int


class OrderNoteRequest(BaseModel):
    specialRequest: Optional[str] = None


class OrderStatusRequest(BaseModel):
    status: OrderStatus


class CheckOutRequest(BaseModel):
    paymentMethod: PaymentMethod = PaymentMethod.CASH
    # null = exact amount; 0 is a real zero payment
    amountTendered: Optional[float] = None


def _room_response(room: Optional[Room], room_id: str) -> Dict[str, Any]:
    if room is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    return room_state(room)


async def _respond(room: Optional[Room], room_id: str) -> Dict[str, Any]:
    payload = _room_response(room, room_id)
    await push_room_state(room_id)
    return payload


# Session --------------------------------------------------------------------
@router.post("/session/start")
async def start_session(room_id: str, payload: StartSessionRequest) -> Dict[str, Any]:
    room = session_service.start_session(
        room_id,
        guest_count=payload.guestCount,
        notes=payload.notes,
        waiter=payload.waiter,
        member_card=payload.memberCard,
        guest_name=payload.guestName,
    )
    return await _respond(room, room_id)


@router.post("/session/pause")
async def pause_session(room_id: str) -> Dict[str, Any]:
    return await _respond(session_service.pause_session(room_id), room_id)


@router.post("/session/resume")
async def resume_session(room_id: str) -> Dict[str, Any]:
    return await _respond(session_service.resume_session(room_id), room_id)


@router.put("/session/start-time")
async def update_start_time(room_id: str, payload: StartTimeRequest) -> Dict[str, Any]:
    return await _respond(session_service.update_start_time(room_id, payload.startTime), room_id)


@router.post("/session/call-staff")
async def call_staff(room_id: str) -> Dict[str, Any]:
    return await _respond(session_service.call_staff(room_id), room_id)


@router.get("/session/bill")
def get_live_bill(room_id: str) -> Dict[str, Any]:
    room = deps.registry.get(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    bill = billing_service.live_bill(room_id)
    return {
        "roomId": room_id,
        "bill": codec.bill_to_dict(bill) if bill else None,
        "totalDisplay": billing_service.format_amount(bill.total_amount) if bill else None,
    }


# Orders ---------------------------------------------------------------------
@router.post("/session/orders")
async def add_order(room_id: str, payload: AddOrderRequest) -> Dict[str, Any]:
    room = session_service.add_order(
        room_id, payload.menuItemId, payload.quantity, payload.specialRequest
    )
    return await _respond(room, room_id)


@router.post("/session/orders/{order_id}/quantity")
async def update_order_quantity(room_id: str, order_id: str, payload: QuantityDeltaRequest) -> Dict[str, Any]:
    return await _respond(session_service.update_order_quantity(room_id, order_id, payload.delta), room_id)


@router.put("/session/orders/{order_id}/note")
async def update_order_note(room_id: str, order_id: str, payload: OrderNoteRequest) -> Dict[str, Any]:
    return await _respond(session_service.update_order_note(room_id, order_id, payload.specialRequest), room_id)


@router.put("/session/orders/{order_id}/status")
async def update_order_status(room_id: str, order_id: str, payload: OrderStatusRequest) -> Dict[str, Any]:
    return await _respond(session_service.update_order_status(room_id, order_id, payload.status), room_id)


@router.delete("/session/orders/{order_id}")
async def remove_order(room_id: str, order_id: str) -> Dict[str, Any]:
    return await _respond(session_service.remove_order(room_id, order_id), room_id)


# Checkout -------------------------------------------------------------------
@router.post("/checkout")
async def check_out(room_id: str, payload: CheckOutRequest) -> Dict[str, Any]:
    if deps.registry.get(room_id) is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    sealed = checkout_service.checkout(room_id, payload.paymentMethod, payload.amountTendered)
    if sealed is None:
        raise HTTPException(status_code=409, detail=f"Room {room_id} has no active session")
    await push_room_state(room_id)
    return {"roomId": room_id, "session": codec.session_to_dict(sealed)}


@router.post("/session/end")
async def quick_end(room_id: str) -> Dict[str, Any]:
    if deps.registry.get(room_id) is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    sealed = checkout_service.quick_end(room_id)
    if sealed is None:
        raise HTTPException(status_code=409, detail=f"Room {room_id} has no active session")
    await push_room_state(room_id)
    return {"roomId": room_id, "session": codec.session_to_dict(sealed)}
