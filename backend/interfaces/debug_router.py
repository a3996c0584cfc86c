"""Debug-only routes: drive the manual clock and reload configuration."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from application.clock import ManualClock
from interfaces import deps

router = APIRouter(prefix="/debug", tags=["debug"])


class AdvanceClockRequest(BaseModel):
    minutes: float = Field(0, ge=0)
    seconds: float = Field(0, ge=0)


class SetClockRequest(BaseModel):
    nowMs: int = Field(..., ge=0)


def _manual_clock() -> ManualClock:
    if not isinstance(deps.clock, ManualClock):
        raise HTTPException(status_code=409, detail="Clock is not in manual mode")
    return deps.clock


@router.get("/clock")
def get_clock() -> Dict[str, Any]:
    return {
        "nowMs": deps.clock.now_ms(),
        "manual": isinstance(deps.clock, ManualClock),
    }


@router.post("/clock/advance")
def advance_clock(payload: AdvanceClockRequest) -> Dict[str, Any]:
    """
    Move the manual clock forward.

    ⚠️ Debug only: live bills jump accordingly.
    """
    clock = _manual_clock()
    return {"nowMs": clock.advance(minutes=payload.minutes, seconds=payload.seconds)}


@router.put("/clock")
def set_clock(payload: SetClockRequest) -> Dict[str, Any]:
    clock = _manual_clock()
    clock.set(payload.nowMs)
    return {"nowMs": clock.now_ms()}


@router.post("/reload-config")
def reload_config() -> Dict[str, Any]:
    fresh = deps.reload_settings_from_disk()
    return {"success": True, "configVersion": fresh.version}
