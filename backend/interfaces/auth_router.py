"""Terminal sign-in routes."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from infrastructure import codec
from interfaces import deps

router = APIRouter(prefix="/auth", tags=["auth"])

auth_service = deps.auth_service


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str


@router.post("/login")
def login(payload: LoginRequest) -> Dict[str, Any]:
    user = auth_service.login(payload.username, payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return {"user": codec.user_to_dict(user)}


@router.post("/logout")
def logout() -> Dict[str, Any]:
    auth_service.logout()
    return {"success": True}


@router.get("/me")
def current_user() -> Dict[str, Any]:
    user = auth_service.current_user()
    return {"user": codec.user_to_dict(user) if user else None}
