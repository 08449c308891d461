"""Merge classification results into attendance records.

Pure functions: they take the existing record (if any) and return the record
to store. Rule violations are raised as typed errors before anything changes.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut, MustCheckInFirst, NoCheckInFound
from ..policy.model import PolicyConfig
from .engine import compute_check_in_status, compute_check_out_status
from .factory import AttendanceStrategyFactory, resolve_final_status
from .model import AttendanceEvent


def record_check_in(
    employee_id: int,
    work_date: date,
    check_in: datetime,
    policy: PolicyConfig,
    existing: Optional[AttendanceEvent],
    *,
    tz: Optional[tzinfo] = None,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceEvent:
    if existing is not None and existing.check_in is not None:
        raise AlreadyCheckedIn()

    factory = factory or AttendanceStrategyFactory()
    result = compute_check_in_status(check_in, policy, tz=tz)
    decision = factory.for_checkin(result).decide_checkin(result)

    # A manual entry may have pre-created a date-only record; fill it in.
    base = existing or AttendanceEvent(employee_id=employee_id, work_date=work_date, work_hours=Decimal("0.00"))
    return replace(
        base,
        check_in=check_in,
        status=decision.status,
        late_minutes=result.late_minutes,
    )


def record_check_out(
    employee_id: int,
    work_date: date,
    check_out: datetime,
    policy: PolicyConfig,
    existing: Optional[AttendanceEvent],
    *,
    tz: Optional[tzinfo] = None,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceEvent:
    if existing is None:
        raise NoCheckInFound()
    if existing.check_in is None:
        raise MustCheckInFirst()
    if existing.check_out is not None:
        raise AlreadyCheckedOut()

    factory = factory or AttendanceStrategyFactory()
    result = compute_check_out_status(existing.check_in, check_out, policy, tz=tz)
    return replace(
        existing,
        check_out=check_out,
        status=resolve_final_status(existing.status, result, factory),
        work_hours=result.work_hours,
        early_checkout=result.early_checkout,
        early_minutes=result.early_minutes,
        overtime_minutes=result.overtime_minutes,
    )


def record_manual_entry(
    employee_id: int,
    work_date: date,
    check_in: datetime,
    check_out: datetime,
    policy: PolicyConfig,
    notes: Optional[str],
    existing: Optional[AttendanceEvent] = None,
    *,
    tz: Optional[tzinfo] = None,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceEvent:
    """Administrative correction: classify the full pair at once and overwrite the day."""
    factory = factory or AttendanceStrategyFactory()

    # check_out is validated first so a reversed pair fails before any classification.
    out_result = compute_check_out_status(check_in, check_out, policy, tz=tz)
    in_result = compute_check_in_status(check_in, policy, tz=tz)

    checkin_status = factory.for_checkin(in_result).decide_checkin(in_result).status
    final_status = resolve_final_status(checkin_status, out_result, factory)

    return AttendanceEvent(
        employee_id=employee_id,
        work_date=work_date,
        attendance_id=existing.attendance_id if existing else None,
        check_in=check_in,
        check_out=check_out,
        status=final_status,
        late_minutes=in_result.late_minutes,
        early_checkout=out_result.early_checkout,
        early_minutes=out_result.early_minutes,
        overtime_minutes=out_result.overtime_minutes,
        work_hours=out_result.work_hours,
        is_manual_entry=True,
        notes=notes,
    )


def recompute_status(
    event: AttendanceEvent,
    policy: PolicyConfig,
    *,
    tz: Optional[tzinfo] = None,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceStatus:
    """Status the record gets when its timestamps are classified again under ``policy``.

    Records without a check-in keep their stored status (absent / not checked in).
    """
    if event.check_in is None:
        return event.status

    factory = factory or AttendanceStrategyFactory()
    arrival = compute_check_in_status(event.check_in, policy, tz=tz)
    status = factory.for_checkin(arrival).decide_checkin(arrival).status
    if event.check_out is None:
        return status

    departure = compute_check_out_status(event.check_in, event.check_out, policy, tz=tz)
    return resolve_final_status(status, departure, factory)
