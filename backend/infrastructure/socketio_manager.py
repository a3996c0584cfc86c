"""Socket.IO push of room state and live bills to connected terminals.

The live-bill loop in ``app.main`` calls :func:`push_live_bills` on the
refresh cadence; lifecycle routes call :func:`push_room_state` after a change.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

import socketio

from . import codec

if TYPE_CHECKING:
    from application.billing_service import BillingService
    from application.room_registry import RoomRegistry
    from domain.room import Room

logger = logging.getLogger(__name__)

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=["http://localhost:5173", "http://localhost:5174"],
    logger=False,
    engineio_logger=False,
)

# sid -> room_id
_subscriptions: Dict[str, str] = {}
_registry: Optional["RoomRegistry"] = None
_billing_service: Optional["BillingService"] = None


def set_services(registry: "RoomRegistry", billing_service: "BillingService") -> None:
    global _registry, _billing_service
    _registry = registry
    _billing_service = billing_service


# Socket.IO events -----------------------------------------------------------
@sio.event
async def connect(sid: str, environ: dict) -> None:
    logger.debug("Socket.IO client connected: %s", sid)


@sio.event
async def disconnect(sid: str) -> None:
    logger.debug("Socket.IO client disconnected: %s", sid)
    if sid in _subscriptions:
        room_id = _subscriptions.pop(sid)
        await sio.leave_room(sid, f"room:{room_id}")


@sio.event
async def subscribe_room(sid: str, data: dict) -> None:
    """Follow one room's state and live bill."""
    room_id = (data or {}).get("roomId")
    if not room_id:
        return
    if sid in _subscriptions:
        await sio.leave_room(sid, f"room:{_subscriptions[sid]}")
    _subscriptions[sid] = room_id
    await sio.enter_room(sid, f"room:{room_id}")
    await push_room_state(room_id)


@sio.event
async def subscribe_monitor(sid: str, data: dict = None) -> None:
    """Follow every room (dashboard / room grid)."""
    await sio.enter_room(sid, "monitor")
    await push_all_rooms()


@sio.event
async def unsubscribe_monitor(sid: str, data: dict = None) -> None:
    await sio.leave_room(sid, "monitor")


# Push helpers ---------------------------------------------------------------
async def push_room_state(room_id: str) -> None:
    if not _registry:
        return
    room = _registry.get(room_id)
    if not room:
        return
    state = room_state(room)
    await sio.emit("room_state", state, room=f"room:{room_id}")
    await sio.emit("room_state", state, room="monitor")


async def push_all_rooms() -> None:
    if not _registry:
        return
    rooms = [room_state(r) for r in _registry.list()]
    await sio.emit("monitor_update", {"rooms": rooms}, room="monitor")


async def push_live_bills() -> int:
    """Emit the recomputed bill of every running session; paused sessions are skipped."""
    if not _registry or not _billing_service:
        return 0
    payloads: List[Dict[str, Any]] = []
    for room in _registry.list():
        if not room.is_running:
            continue
        bill = _billing_service.bill_for(room)
        payload = {"roomId": room.room_id, "bill": codec.bill_to_dict(bill)}
        payloads.append(payload)
        await sio.emit("bill_update", payload, room=f"room:{room.room_id}")
    if payloads:
        await sio.emit("bill_updates", {"rooms": payloads}, room="monitor")
    return len(payloads)


def room_state(room: "Room") -> Dict[str, Any]:
    state = codec.room_to_dict(room)
    bill = _billing_service.bill_for(room) if _billing_service else None
    state["bill"] = codec.bill_to_dict(bill) if bill else None
    return state
