"""Room and menu record management routes."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from domain.menu import LocalizedText, MenuItem
from domain.room import Room, RoomStatus, RoomType
from infrastructure import codec
from infrastructure.socketio_manager import push_room_state, room_state
from interfaces import deps

router = APIRouter(tags=["catalog"])

catalog_service = deps.catalog_service
session_service = deps.session_service


class LocalizedTextPayload(BaseModel):
    en: str = Field(..., min_length=1)
    mm: str = ""


class RoomPayload(BaseModel):
    name: LocalizedTextPayload
    roomType: RoomType = RoomType.STANDARD
    capacity: int = Field(..., ge=1)
    hourlyRate: float = Field(..., ge=0)
    floor: int = 1
    minimumHours: Optional[float] = Field(None, ge=0)
    isActive: bool = True
    features: List[str] = Field(default_factory=list)
    smoking: bool = False


class RoomStatusRequest(BaseModel):
    status: RoomStatus


class MenuItemPayload(BaseModel):
    name: LocalizedTextPayload
    category: str
    price: float = Field(..., ge=0)
    image: str = ""
    available: bool = True
    isPopular: bool = False
    stock: Optional[int] = Field(None, ge=0)
    description: Optional[LocalizedTextPayload] = None
    preparationTime: Optional[int] = Field(None, ge=0)


def _text(payload: LocalizedTextPayload) -> LocalizedText:
    return LocalizedText(en=payload.en, mm=payload.mm)


# Rooms ----------------------------------------------------------------------
@router.get("/rooms")
def list_rooms() -> Dict[str, Any]:
    return {"rooms": [room_state(room) for room in catalog_service.list_rooms()]}


@router.get("/rooms/{room_id}")
def get_room(room_id: str) -> Dict[str, Any]:
    room = catalog_service.get_room(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    return room_state(room)


@router.put("/rooms/{room_id}")
async def save_room(room_id: str, payload: RoomPayload) -> Dict[str, Any]:
    existing = catalog_service.get_room(room_id)
    # Status is preserved on edit; new rooms start available
    status = existing.status if existing and not existing.is_occupied else RoomStatus.AVAILABLE
    room = Room(
        room_id=room_id,
        name=_text(payload.name),
        room_type=payload.roomType,
        capacity=payload.capacity,
        hourly_rate=payload.hourlyRate,
        floor=payload.floor,
        minimum_hours=payload.minimumHours,
        is_active=payload.isActive,
        status=status,
        features=tuple(payload.features),
        smoking=payload.smoking,
    )
    saved = catalog_service.save_room(room)
    await push_room_state(room_id)
    return room_state(saved)


@router.delete("/rooms/{room_id}")
def delete_room(room_id: str) -> Dict[str, Any]:
    room = catalog_service.get_room(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    if not catalog_service.delete_room(room_id):
        raise HTTPException(status_code=409, detail=f"Room {room_id} is occupied")
    return {"roomId": room_id, "deleted": True}


@router.post("/rooms/{room_id}/toggle-active")
async def toggle_room_active(room_id: str) -> Dict[str, Any]:
    room = catalog_service.toggle_room_active(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    await push_room_state(room_id)
    return room_state(room)


@router.put("/rooms/{room_id}/status")
async def update_room_status(room_id: str, payload: RoomStatusRequest) -> Dict[str, Any]:
    room = session_service.update_room_status(room_id, payload.status)
    if room is None:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    await push_room_state(room_id)
    return room_state(room)


# Menu -----------------------------------------------------------------------
@router.get("/menu")
def list_menu() -> Dict[str, Any]:
    return {"items": [codec.menu_item_to_dict(item) for item in catalog_service.list_menu()]}


@router.put("/menu/{item_id}")
def save_menu_item(item_id: str, payload: MenuItemPayload) -> Dict[str, Any]:
    item = MenuItem(
        item_id=item_id,
        name=_text(payload.name),
        category=payload.category,
        price=payload.price,
        image=payload.image,
        available=payload.available,
        is_popular=payload.isPopular,
        stock=payload.stock,
        description=_text(payload.description) if payload.description else None,
        preparation_time=payload.preparationTime,
    )
    return codec.menu_item_to_dict(catalog_service.save_menu_item(item))


@router.delete("/menu/{item_id}")
def delete_menu_item(item_id: str) -> Dict[str, Any]:
    if not catalog_service.delete_menu_item(item_id):
        raise HTTPException(status_code=404, detail=f"Menu item {item_id} not found")
    return {"itemId": item_id, "deleted": True}
