from datetime import date, datetime
from decimal import Decimal

import pytest

from src.hrms.hrms.attendance.model import AttendanceEvent
from src.hrms.hrms.attendance.reconciler import record_check_in, record_check_out, record_manual_entry
from src.hrms.hrms.core.enums import AttendanceStatus
from src.hrms.hrms.core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    MalformedTimestamp,
    MustCheckInFirst,
    NoCheckInFound,
)

DAY = date(2025, 1, 6)


def at(hour, minute):
    return datetime(2025, 1, 6, hour, minute)


def test_first_check_in_creates_record(policy, fixed_now):
    event = record_check_in(1, DAY, fixed_now, policy, None)

    assert event.attendance_id is None
    assert event.check_in == fixed_now
    assert event.status == AttendanceStatus.LATE
    assert event.late_minutes == 1
    assert event.check_out is None


def test_second_check_in_is_rejected(policy):
    existing = AttendanceEvent(employee_id=1, work_date=DAY, attendance_id=7, check_in=at(8, 0))

    with pytest.raises(AlreadyCheckedIn):
        record_check_in(1, DAY, at(9, 0), policy, existing)


def test_check_in_fills_date_only_record(policy):
    existing = AttendanceEvent(employee_id=1, work_date=DAY, attendance_id=5, notes="pre-created")

    event = record_check_in(1, DAY, at(8, 5), policy, existing)

    assert event.attendance_id == 5
    assert event.status == AttendanceStatus.PRESENT
    assert event.notes == "pre-created"


def test_check_out_without_record(policy):
    with pytest.raises(NoCheckInFound):
        record_check_out(1, DAY, at(17, 0), policy, None)


def test_check_out_without_check_in(policy):
    existing = AttendanceEvent(employee_id=1, work_date=DAY, attendance_id=5)

    with pytest.raises(MustCheckInFirst):
        record_check_out(1, DAY, at(17, 0), policy, existing)


def test_second_check_out_is_rejected(policy):
    existing = AttendanceEvent(
        employee_id=1, work_date=DAY, attendance_id=5, check_in=at(8, 0), check_out=at(17, 0)
    )

    with pytest.raises(AlreadyCheckedOut):
        record_check_out(1, DAY, at(18, 0), policy, existing)


def test_check_out_keeps_late_status(policy):
    existing = AttendanceEvent(
        employee_id=1,
        work_date=DAY,
        attendance_id=5,
        check_in=at(8, 30),
        status=AttendanceStatus.LATE,
        late_minutes=15,
    )

    event = record_check_out(1, DAY, at(19, 0), policy, existing)

    assert event.status == AttendanceStatus.LATE
    assert event.late_minutes == 15
    assert event.overtime_minutes == 150
    assert event.work_hours == Decimal("10.50")


def test_half_day_check_out_replaces_late(policy):
    existing = AttendanceEvent(
        employee_id=1, work_date=DAY, attendance_id=5, check_in=at(8, 30), status=AttendanceStatus.LATE
    )

    event = record_check_out(1, DAY, at(12, 0), policy, existing)

    assert event.status == AttendanceStatus.HALF_DAY
    assert event.early_checkout is True
    assert event.early_minutes == 420


def test_manual_entry_classifies_full_pair(policy):
    event = record_manual_entry(2, DAY, at(8, 30), at(17, 0), policy, "forgot badge")

    assert event.status == AttendanceStatus.LATE
    assert event.late_minutes == 15
    assert event.early_checkout is True
    assert event.early_minutes == 120
    assert event.work_hours == Decimal("8.50")
    assert event.is_manual_entry is True
    assert event.notes == "forgot badge"


def test_manual_entry_overwrites_existing_day(policy):
    existing = AttendanceEvent(
        employee_id=2, work_date=DAY, attendance_id=9, check_in=at(11, 0), status=AttendanceStatus.LATE
    )

    event = record_manual_entry(2, DAY, at(8, 0), at(17, 0), policy, None, existing)

    assert event.attendance_id == 9
    assert event.status == AttendanceStatus.PRESENT
    assert event.late_minutes == 0


def test_manual_entry_rejects_reversed_pair(policy):
    with pytest.raises(MalformedTimestamp):
        record_manual_entry(2, DAY, at(17, 0), at(8, 0), policy, None)


def test_recompute_status_uses_given_policy(policy):
    from src.hrms.hrms.attendance.reconciler import recompute_status
    from src.hrms.hrms.policy.model import PolicyConfig

    record = AttendanceEvent(
        employee_id=1, work_date=DAY, attendance_id=5, check_in=at(8, 20), status=AttendanceStatus.LATE
    )
    short_day = AttendanceEvent(
        employee_id=1,
        work_date=DAY,
        attendance_id=6,
        check_in=at(8, 20),
        check_out=at(12, 0),
        status=AttendanceStatus.LATE,
    )

    assert recompute_status(record, policy) == AttendanceStatus.LATE
    assert recompute_status(record, PolicyConfig(grace_period=30)) == AttendanceStatus.PRESENT
    assert recompute_status(short_day, policy) == AttendanceStatus.HALF_DAY
    assert recompute_status(AttendanceEvent(employee_id=1, work_date=DAY, status=AttendanceStatus.ABSENT), policy) == (
        AttendanceStatus.ABSENT
    )
