from datetime import date, datetime
from decimal import Decimal

import pytest

from src.hrms.hrms.attendance.model import AttendanceEvent
from src.hrms.hrms.core.enums import AttendanceStatus
from src.hrms.hrms.core.exceptions import ValidationError

MON = date(2025, 1, 6)
TUE = date(2025, 1, 7)


def at(day, hour, minute):
    return datetime(day.year, day.month, day.day, hour, minute)


@pytest.fixture
def seeded(attendance_repo):
    attendance_repo.add(
        AttendanceEvent(
            employee_id=1,
            work_date=MON,
            check_in=at(MON, 8, 0),
            check_out=at(MON, 17, 30),
            status=AttendanceStatus.PRESENT,
            early_checkout=True,
            early_minutes=90,
            work_hours=Decimal("9.50"),
        )
    )
    attendance_repo.add(
        AttendanceEvent(
            employee_id=2,
            work_date=MON,
            check_in=at(MON, 8, 30),
            check_out=at(MON, 19, 30),
            status=AttendanceStatus.LATE,
            late_minutes=15,
            overtime_minutes=180,
            work_hours=Decimal("11.00"),
        )
    )
    attendance_repo.add(
        AttendanceEvent(
            employee_id=3,
            work_date=MON,
            check_in=at(MON, 9, 0),
            check_out=at(MON, 12, 0),
            status=AttendanceStatus.HALF_DAY,
            early_checkout=True,
            early_minutes=420,
            work_hours=Decimal("3.00"),
        )
    )
    attendance_repo.add(
        AttendanceEvent(
            employee_id=1,
            work_date=TUE,
            check_in=at(TUE, 8, 0),
            check_out=at(TUE, 16, 0),
            status=AttendanceStatus.PRESENT,
            early_checkout=True,
            early_minutes=180,
            work_hours=Decimal("8.00"),
        )
    )
    return attendance_repo


def test_daily_stats(container, seeded):
    stats = container.report_service.daily_stats(work_date=MON)

    assert stats == {
        "date": "2025-01-06",
        "total_employees": 4,
        "present_today": 3,
        "absent_today": 1,
        "late_today": 1,
        "half_day_today": 1,
        "average_work_hours": 7.8,
        "on_time_percentage": 67,
    }


def test_daily_stats_empty_day(container, seeded):
    stats = container.report_service.daily_stats(work_date=date(2025, 1, 8))

    assert stats["present_today"] == 0
    assert stats["absent_today"] == 4
    assert stats["average_work_hours"] == 0.0
    assert stats["on_time_percentage"] == 0


def test_report_summary_per_employee(container, seeded):
    data = container.report_service.build_attendance_report(start=MON, end=TUE)

    assert len(data.rows) == 4
    assert [s["employee_name"] for s in data.summary] == ["Alice Nguyen", "Bob Tran", "Carol Le"]

    alice, bob, carol = data.summary
    assert (alice["days"], alice["total_minutes"], alice["total_hours"]) == (2, 1050, "17:30")
    assert (bob["late_days"], bob["overtime_minutes"], bob["total_hours"]) == (1, 180, "11:00")
    assert (carol["half_days"], carol["total_hours"]) == (1, "03:00")


def test_report_rows_show_recomputed_status(container, seeded):
    data = container.report_service.build_attendance_report(start=MON, end=MON)
    by_name = {r["employee_name"]: r for r in data.rows}

    assert by_name["Bob Tran"]["status"] == "Overtime 180 min"
    assert by_name["Bob Tran"]["stored_status"] == "late"
    assert by_name["Alice Nguyen"]["status"] == "Early by 90 min"
    assert by_name["Alice Nguyen"]["work_hours"] == "9.50"


def test_report_filters(container, seeded):
    sales = container.report_service.build_attendance_report(start=MON, end=TUE, department="Sales")
    half = container.report_service.build_attendance_report(start=MON, end=TUE, status=AttendanceStatus.HALF_DAY)

    assert {r["employee_name"] for r in sales.rows} == {"Bob Tran"}
    assert [r["employee_name"] for r in half.rows] == ["Carol Le"]


def test_report_rejects_inverted_range(container):
    with pytest.raises(ValidationError):
        container.report_service.build_attendance_report(start=TUE, end=MON)


def test_list_records_paginates(container, seeded):
    page = container.report_service.list_records(limit=2, offset=0)

    assert page.total == 4
    assert len(page.rows) == 2
    assert page.rows[0]["date"] == "2025-01-07"
    assert page.pagination() == {"total": 4, "limit": 2, "offset": 0, "has_more": True}


def test_list_records_by_date(container, seeded):
    page = container.report_service.list_records(work_date=MON, limit="10", offset="0")

    assert page.total == 3
    assert page.has_more is False


@pytest.mark.parametrize("limit, offset", [(0, 0), ("abc", 0), (10, -1)])
def test_list_records_rejects_bad_paging(container, limit, offset):
    with pytest.raises(ValidationError):
        container.report_service.list_records(limit=limit, offset=offset)


def test_counters_follow_policy_changes(container, fixed_now):
    container.attendance_service.check_in(1, now=fixed_now)
    container.policy_service.update({"grace_period": 30}, updated_by=1)

    data = container.report_service.build_attendance_report(start=MON, end=MON)
    stats = container.report_service.daily_stats(work_date=MON)

    assert data.rows[0]["status"] == "On Time"
    assert data.rows[0]["stored_status"] == "late"
    assert data.summary[0]["late_days"] == 0
    assert stats["late_today"] == 0
    assert stats["present_today"] == 1
    assert stats["on_time_percentage"] == 100


def test_half_day_counters_are_recomputed(container, attendance_repo):
    # Stored before the required hours were lowered to 5.
    attendance_repo.add(
        AttendanceEvent(
            employee_id=3,
            work_date=MON,
            check_in=at(MON, 8, 0),
            check_out=at(MON, 12, 0),
            status=AttendanceStatus.HALF_DAY,
            early_checkout=True,
            early_minutes=420,
            work_hours=Decimal("4.00"),
        )
    )
    container.policy_service.update({"work_hours": 5}, updated_by=1)

    data = container.report_service.build_attendance_report(start=MON, end=MON)
    stats = container.report_service.daily_stats(work_date=MON)

    assert data.summary[0]["half_days"] == 0
    assert stats["half_day_today"] == 0
