"""Domain values <-> JSON documents for the store and the API/Socket.IO payloads."""
from __future__ import annotations

from typing import Any, Dict

from pydantic import TypeAdapter

from domain.billing import BillSummary
from domain.menu import MenuItem
from domain.room import Room
from domain.session import Session
from domain.user import User

_room_adapter = TypeAdapter(Room)
_session_adapter = TypeAdapter(Session)
_menu_adapter = TypeAdapter(MenuItem)
_user_adapter = TypeAdapter(User)
_bill_adapter = TypeAdapter(BillSummary)


def room_to_dict(room: Room) -> Dict[str, Any]:
    return _room_adapter.dump_python(room, mode="json")


def room_from_dict(data: Dict[str, Any]) -> Room:
    return _room_adapter.validate_python(data)


def session_to_dict(session: Session) -> Dict[str, Any]:
    return _session_adapter.dump_python(session, mode="json")


def session_from_dict(data: Dict[str, Any]) -> Session:
    return _session_adapter.validate_python(data)


def menu_item_to_dict(item: MenuItem) -> Dict[str, Any]:
    return _menu_adapter.dump_python(item, mode="json")


def menu_item_from_dict(data: Dict[str, Any]) -> MenuItem:
    return _menu_adapter.validate_python(data)


def user_to_dict(user: User) -> Dict[str, Any]:
    return _user_adapter.dump_python(user, mode="json")


def user_from_dict(data: Dict[str, Any]) -> User:
    return _user_adapter.validate_python(data)


def bill_to_dict(bill: BillSummary) -> Dict[str, Any]:
    return _bill_adapter.dump_python(bill, mode="json")
