"""Dashboard statistics over settled and running sessions."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import List, Optional, Tuple, TYPE_CHECKING
from zoneinfo import ZoneInfo

from domain.room import RoomStatus

if TYPE_CHECKING:
    from app.config import AppConfig
    from application.billing_service import BillingService
    from application.clock import Clock
    from application.room_registry import RoomRegistry
    from infrastructure.repository import PosRepository


class ReportRange(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"


@dataclass
class DashboardReport:
    range_start: int
    range_end: int
    total_revenue: float = 0.0
    historical_revenue: float = 0.0
    active_revenue: float = 0.0
    active_count: int = 0
    relevant_active_count: int = 0
    completed_count: int = 0
    total_guests: int = 0
    avg_duration: float = 0.0
    service_calls: int = 0
    hourly_sales: List[float] = field(default_factory=lambda: [0.0] * 24)


def _to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def date_range(range_name: ReportRange, now: datetime) -> Tuple[int, int]:
    """Inclusive ``[start, end]`` epoch-ms bounds of a preset range around ``now``.

    Weeks start on Monday. ``now`` carries the reporting timezone (naive means host local).
    """
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if range_name is ReportRange.TODAY:
        start = day_start
        end = start + timedelta(days=1)
    elif range_name is ReportRange.YESTERDAY:
        start = day_start - timedelta(days=1)
        end = day_start
    elif range_name is ReportRange.THIS_WEEK:
        start = day_start - timedelta(days=now.weekday())
        end = start + timedelta(days=7)
    elif range_name is ReportRange.THIS_MONTH:
        start = day_start.replace(day=1)
        if start.month == 12:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
    else:  # pragma: no cover - closed enum
        raise ValueError(f"Unknown range {range_name}")
    return _to_ms(start), _to_ms(end) - 1


class ReportService:
    def __init__(
        self,
        config: "AppConfig",
        registry: "RoomRegistry",
        repository: "PosRepository",
        billing_service: "BillingService",
        clock: "Clock",
    ):
        self.config = config
        self.registry = registry
        self.repo = repository
        self.billing_service = billing_service
        self.clock = clock

    def update_config(self, config: "AppConfig") -> None:
        self.config = config

    def _timezone(self) -> Optional[tzinfo]:
        name = (self.config.report or {}).get("timezone")
        return ZoneInfo(name) if name else None

    def _local(self, ms: int) -> datetime:
        return datetime.fromtimestamp(ms / 1000, tz=self._timezone())

    def build_report(self, range_name: ReportRange, now_ms: Optional[int] = None) -> DashboardReport:
        now = self.clock.now_ms() if now_ms is None else now_ms
        start, end = date_range(range_name, self._local(now))
        report = DashboardReport(range_start=start, range_end=end)
        total_duration = 0

        for room in self.registry.list():
            if room.status is not RoomStatus.OCCUPIED or room.session is None:
                continue
            report.active_count += 1
            report.service_calls += room.session.service_call_count
            if start <= room.session.start_time <= end:
                report.relevant_active_count += 1
                report.active_revenue += self.billing_service.bill_for(room, now).total_amount

        for session in self.repo.list_history():
            if not start <= session.start_time <= end:
                continue
            report.completed_count += 1
            report.historical_revenue += session.total_bill or 0.0
            report.total_guests += session.guest_count
            report.service_calls += session.service_call_count
            ended = session.end_time if session.end_time is not None else now
            total_duration += ended - session.start_time - session.total_paused_duration
            report.hourly_sales[self._local(session.start_time).hour] += session.total_bill or 0.0

        report.total_revenue = report.active_revenue + report.historical_revenue
        counted = report.completed_count + report.relevant_active_count
        report.avg_duration = total_duration / counted if counted else 0.0
        return report
