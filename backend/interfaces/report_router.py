"""Dashboard report and settled-session history."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Query

from application.report_service import ReportRange
from infrastructure import codec
from interfaces import deps

router = APIRouter(tags=["report"])

report_service = deps.report_service
checkout_service = deps.checkout_service


@router.get("/report")
def get_report(range_: ReportRange = Query(ReportRange.TODAY, alias="range")) -> Dict[str, Any]:
    report = report_service.build_report(range_)
    return {"range": range_.value, **asdict(report)}


@router.get("/history")
def list_history() -> Dict[str, Any]:
    sessions = checkout_service.list_history()
    return {"sessions": [codec.session_to_dict(s) for s in sessions]}


@router.get("/history/{session_id}")
def get_history(session_id: str) -> Dict[str, Any]:
    session = checkout_service.get_history(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return codec.session_to_dict(session)
