from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Optional, Union

from ..common.datetime_utils import combine_on_date, now_local, parse_timestamp, to_naive_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import AttendanceError, MalformedTimestamp, NotFoundError
from ..employees.repository import EmployeeRepository
from ..policy.service import PolicyService
from .engine import worked_hours
from .factory import AttendanceStrategyFactory
from .formatter import check_in_message, check_out_message, format_status, status_badge, status_label
from .gate import can_check_in, can_check_out, window_state
from .model import AttendanceEvent
from .reconciler import record_check_in, record_check_out, record_manual_entry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

Instant = Union[str, datetime, None]


@dataclass(frozen=True)
class ActionOutcome:
    event: AttendanceEvent
    message: str


class AttendanceService:
    """Check-in, check-out and manual-entry use cases.

    Each operation reads one policy snapshot and uses it for every
    classification it performs.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        policies: PolicyService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        tz: Optional[tzinfo] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policies = policies
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._tz = tz

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee record not found")

    def _resolve_instant(self, now: Optional[datetime], timestamp: Instant) -> datetime:
        if timestamp is not None:
            instant = parse_timestamp(timestamp)
        else:
            instant = now or now_local(self._tz)
        return to_naive_local(instant, self._tz)

    def check_in(self, employee_id: int, *, now: Optional[datetime] = None, timestamp: Instant = None) -> ActionOutcome:
        instant = self._resolve_instant(now, timestamp)
        today = instant.date()
        self._require_employee(employee_id)

        policy = self._policies.get_active()
        if not can_check_in(instant, policy):
            logger.info("Employee %s checking in outside the check-in window at %s", employee_id, instant)

        existing = self.get_today_record(employee_id, today)
        try:
            event = record_check_in(employee_id, today, instant, policy, existing, factory=self._factory)
            event = self._attendance.save_checkin(event)
        except AttendanceError as e:
            logger.warning("Check-in rejected for employee %s on %s: %s", employee_id, today, e)
            raise

        logger.info("Employee %s checked in at %s (%s)", employee_id, instant, event.status.value)
        return ActionOutcome(event=event, message=check_in_message(event))

    def check_out(self, employee_id: int, *, now: Optional[datetime] = None, timestamp: Instant = None) -> ActionOutcome:
        instant = self._resolve_instant(now, timestamp)
        today = instant.date()
        self._require_employee(employee_id)

        policy = self._policies.get_active()
        existing = self.get_today_record(employee_id, today)
        if not can_check_out(instant, policy, bool(existing and existing.has_checked_in)):
            logger.info("Employee %s checking out outside the check-out window at %s", employee_id, instant)

        try:
            event = record_check_out(employee_id, today, instant, policy, existing, factory=self._factory)
            event = self._attendance.save_checkout(event)
        except AttendanceError as e:
            logger.warning("Check-out rejected for employee %s on %s: %s", employee_id, today, e)
            raise

        logger.info(
            "Employee %s checked out at %s (%s, %s h)", employee_id, instant, event.status.value, event.work_hours
        )
        return ActionOutcome(event=event, message=check_out_message(event))

    def manual_entry(
        self,
        employee_id: int,
        work_date: date,
        check_in: Union[str, datetime],
        check_out: Union[str, datetime],
        notes: Optional[str] = None,
        *,
        entered_by: Optional[int] = None,
    ) -> AttendanceEvent:
        if check_in in (None, "") or check_out in (None, ""):
            raise MalformedTimestamp("Check-in and check-out times are required")
        check_in_at = to_naive_local(combine_on_date(work_date, check_in), self._tz)
        check_out_at = to_naive_local(combine_on_date(work_date, check_out), self._tz)
        self._require_employee(employee_id)

        policy = self._policies.get_active()
        existing = self._attendance.get_for_employee_and_date(employee_id, work_date)
        event = record_manual_entry(
            employee_id,
            work_date,
            check_in_at,
            check_out_at,
            policy,
            (notes or "").strip() or None,
            existing,
            factory=self._factory,
        )
        event = self._attendance.upsert_manual(event)

        logger.info(
            "Manual attendance %s for employee %s on %s by %s (%s)",
            "updated" if existing else "created",
            employee_id,
            work_date,
            entered_by,
            event.status.value,
        )
        return event

    def get_today_record(self, employee_id: int, today: date) -> Optional[AttendanceEvent]:
        return self._attendance.get_for_employee_and_date(employee_id, today)

    def today(self, employee_id: int, *, now: Optional[datetime] = None) -> dict:
        """Dashboard summary for the current day, including advisory window flags."""
        instant = self._resolve_instant(now, None)
        self._require_employee(employee_id)
        policy = self._policies.get_active()
        record = self.get_today_record(employee_id, instant.date())
        windows = window_state(instant, policy, record)

        if not record:
            return {
                "date": instant.date().isoformat(),
                "has_checked_in": False,
                "has_checked_out": False,
                "check_in_time": None,
                "check_out_time": None,
                "work_hours": 0.0,
                "status": AttendanceStatus.NOT_CHECKED_IN.value,
                "late_minutes": 0,
                "early_checkout": False,
                "overtime_minutes": 0,
                "current_work_hours": 0.0,
                "display_status": "Not Checked In",
                "can_check_in": windows.can_check_in,
                "can_check_out": windows.can_check_out,
            }

        current_hours = float(record.work_hours)
        if record.check_in and not record.check_out and instant > record.check_in:
            current_hours = float(worked_hours(record.check_in, instant))

        return {
            "date": record.work_date.isoformat(),
            "has_checked_in": record.has_checked_in,
            "has_checked_out": record.has_checked_out,
            "check_in_time": record.check_in.isoformat() if record.check_in else None,
            "check_out_time": record.check_out.isoformat() if record.check_out else None,
            "work_hours": float(record.work_hours),
            "status": record.status.value,
            "late_minutes": record.late_minutes,
            "early_checkout": record.early_checkout,
            "overtime_minutes": record.overtime_minutes,
            "current_work_hours": current_hours,
            "display_status": format_status(record, policy),
            "can_check_in": windows.can_check_in,
            "can_check_out": windows.can_check_out,
        }

    def get_history_ui(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        policy = self._policies.get_active()
        rows = self._attendance.get_recent_for_employee(employee_id, limit)
        return [self._to_ui(r, policy) for r in rows]

    def delete_record(self, attendance_id: int, *, deleted_by: Optional[int] = None) -> None:
        if not self._attendance.delete(attendance_id):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record %s deleted by %s", attendance_id, deleted_by)

    def _to_ui(self, r: AttendanceEvent, policy) -> dict:
        return {
            "date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": r.check_in.strftime("%H:%M:%S") if r.check_in else "-",
            "check_out": r.check_out.strftime("%H:%M:%S") if r.check_out else "-",
            "status": status_label(r.status),
            "display_status": format_status(r, policy),
            "css_class": status_badge(r.status),
        }
