"""Dashboard ranges and statistics."""

from datetime import datetime, timezone

import pytest

from application.report_service import ReportRange, date_range
from domain.room import RoomStatus
from domain.session import PaymentMethod

from conftest import HOUR, MINUTE, T0


def _ms(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


# T0 is Tuesday 2023-11-14 22:13:20 UTC
NOW = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "range_name, start, end",
    [
        (ReportRange.TODAY, (2023, 11, 14), (2023, 11, 15)),
        (ReportRange.YESTERDAY, (2023, 11, 13), (2023, 11, 14)),
        (ReportRange.THIS_WEEK, (2023, 11, 13), (2023, 11, 20)),
        (ReportRange.THIS_MONTH, (2023, 11, 1), (2023, 12, 1)),
    ],
)
def test_date_range_presets(range_name, start, end):
    assert date_range(range_name, NOW) == (_ms(*start), _ms(*end) - 1)


def test_month_range_rolls_over_year():
    december = datetime(2023, 12, 31, 23, 0, tzinfo=timezone.utc)
    assert date_range(ReportRange.THIS_MONTH, december) == (_ms(2023, 12, 1), _ms(2024, 1, 1) - 1)


def test_week_starts_on_monday():
    sunday = datetime(2023, 11, 19, 12, 0, tzinfo=timezone.utc)
    assert date_range(ReportRange.THIS_WEEK, sunday)[0] == _ms(2023, 11, 13)


def _night(pos):
    """One settled session at 19:13 and one still running since 21:13."""
    pos.clock.set(T0 - 3 * HOUR)
    pos.sessions.start_session("R101", 4)
    pos.sessions.add_order("R101", "M001", 2)
    pos.sessions.call_staff("R101")
    pos.clock.advance(hours=2)
    settled = pos.checkout.checkout("R101", PaymentMethod.CASH)

    pos.sessions.update_room_status("R101", RoomStatus.AVAILABLE)
    pos.sessions.start_session("R101", 3)
    pos.sessions.call_staff("R101")
    pos.sessions.call_staff("R101")
    pos.clock.advance(hours=1)
    return settled


def test_today_combines_history_and_live_sessions(pos):
    settled = _night(pos)
    report = pos.reports.build_report(ReportRange.TODAY)

    assert settled.total_bill == pytest.approx(25300)
    assert report.historical_revenue == pytest.approx(25300)
    # Live room is still inside its 2h minimum
    assert report.active_revenue == pytest.approx(16000 * 1.15)
    assert report.total_revenue == pytest.approx(25300 + 18400)
    assert report.active_count == 1
    assert report.relevant_active_count == 1
    assert report.completed_count == 1
    assert report.total_guests == 4
    assert report.service_calls == 3
    assert report.avg_duration == pytest.approx(2 * HOUR / 2)


def test_hourly_sales_bucket_by_start_hour(pos):
    _night(pos)
    report = pos.reports.build_report(ReportRange.TODAY)
    assert len(report.hourly_sales) == 24
    assert report.hourly_sales[19] == pytest.approx(25300)
    assert sum(report.hourly_sales) == pytest.approx(25300)


def test_yesterday_excludes_tonight(pos):
    _night(pos)
    report = pos.reports.build_report(ReportRange.YESTERDAY)
    assert report.total_revenue == 0
    assert report.completed_count == 0
    assert report.relevant_active_count == 0
    # Absolute live figures ignore the range
    assert report.active_count == 1
    assert report.service_calls == 2
    assert report.avg_duration == 0


def test_explicit_now_overrides_clock(pos):
    _night(pos)
    tomorrow = T0 + 24 * HOUR
    report = pos.reports.build_report(ReportRange.YESTERDAY, now_ms=tomorrow)
    assert report.completed_count == 1
    assert report.relevant_active_count == 1
    # Live bill is taken at the given instant: 25h elapsed
    assert report.active_revenue == pytest.approx(25 * 8000 * 1.15)


def test_paused_time_is_excluded_from_duration(pos):
    pos.clock.set(T0 - 2 * HOUR)
    pos.sessions.start_session("R101", 2)
    pos.clock.advance(minutes=30)
    pos.sessions.pause_session("R101")
    pos.clock.advance(minutes=30)
    pos.sessions.resume_session("R101")
    pos.clock.advance(minutes=30)
    pos.checkout.checkout("R101", PaymentMethod.CARD)

    report = pos.reports.build_report(ReportRange.TODAY)
    assert report.avg_duration == 60 * MINUTE
