from datetime import datetime

from src.hrms.hrms.attendance.gate import can_check_in, can_check_out, window_state
from src.hrms.hrms.attendance.model import AttendanceEvent


def at(hour, minute):
    return datetime(2025, 1, 6, hour, minute)


def test_check_in_window_is_inclusive(policy):
    assert can_check_in(at(8, 0), policy)
    assert can_check_in(at(10, 0), policy)
    assert not can_check_in(at(7, 59), policy)
    assert not can_check_in(at(10, 1), policy)


def test_check_out_requires_check_in(policy):
    assert can_check_out(at(17, 0), policy, True)
    assert not can_check_out(at(17, 0), policy, False)
    assert not can_check_out(at(19, 1), policy, True)


def test_window_state_for_open_day(policy):
    event = AttendanceEvent(employee_id=1, work_date=at(0, 0).date(), attendance_id=1, check_in=at(8, 5))

    state = window_state(at(17, 30), policy, event)

    assert state.can_check_in is False
    assert state.can_check_out is True


def test_window_state_for_closed_day(policy):
    event = AttendanceEvent(
        employee_id=1, work_date=at(0, 0).date(), attendance_id=1, check_in=at(8, 5), check_out=at(17, 10)
    )

    state = window_state(at(17, 30), policy, event)

    assert state.can_check_in is False
    assert state.can_check_out is False


def test_window_state_without_record(policy):
    state = window_state(at(8, 30), policy, None)

    assert state.can_check_in is True
    assert state.can_check_out is False
