"""Signed-in operator of the POS terminal."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


@dataclass(frozen=True)
class User:
    user_id: str
    username: str
    role: UserRole
    name: str
