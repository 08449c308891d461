from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.engine import compute_check_in_status, round_half_up
from ..attendance.formatter import format_status
from ..attendance.model import AttendanceReportRow
from ..attendance.reconciler import recompute_status
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_hhmm
from ..common.validators import require_non_negative_int, require_positive_int
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import ArrivalStatus, AttendanceStatus
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..policy.model import PolicyConfig
from ..policy.service import PolicyService


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


@dataclass(frozen=True)
class AttendancePage:
    rows: list[dict]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total

    def pagination(self) -> dict:
        return {"total": self.total, "limit": self.limit, "offset": self.offset, "has_more": self.has_more}


def _worked_minutes(hours: Decimal) -> int:
    return int((hours * 60).to_integral_value(rounding=ROUND_HALF_UP))


class AttendanceReportService:
    """Read side: list pages, date-range reports and daily statistics.

    Display labels are recomputed from timestamps with one policy snapshot per
    request, never copied from the stored status.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository, policies: PolicyService):
        self._attendance = attendance
        self._employees = employees
        self._policies = policies

    def _to_row(self, r: AttendanceReportRow, policy: PolicyConfig) -> dict:
        e = r.event
        return {
            "id": e.attendance_id,
            "employee_id": e.employee_id,
            "employee_name": r.employee_name,
            "department_name": r.department_name or "N/A",
            "date": e.work_date.strftime("%Y-%m-%d"),
            "check_in": e.check_in.isoformat() if e.check_in else None,
            "check_out": e.check_out.isoformat() if e.check_out else None,
            "work_hours": f"{e.work_hours:.2f}",
            "status": format_status(e, policy),
            "stored_status": e.status.value,
            "late_minutes": e.late_minutes,
            "early_checkout": e.early_checkout,
            "overtime_minutes": e.overtime_minutes,
            "is_manual_entry": e.is_manual_entry,
            "notes": e.notes or "",
        }

    def list_records(
        self,
        *,
        work_date: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
        offset: int = 0,
    ) -> AttendancePage:
        limit = require_positive_int(limit, "limit")
        offset = require_non_negative_int(offset, "offset")

        policy = self._policies.get_active()
        rows = self._attendance.list_rows(work_date=work_date, limit=limit, offset=offset)
        total = self._attendance.count(work_date=work_date)
        return AttendancePage(
            rows=[self._to_row(r, policy) for r in rows],
            total=total,
            limit=limit,
            offset=offset,
        )

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        department: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("Report end date must not be before start date")

        policy = self._policies.get_active()
        query_rows = self._attendance.get_report_rows(
            start_date=start, end_date=end, department=department, status=status
        )

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            e = r.event
            out_rows.append(self._to_row(r, policy))

            s = summary_map.get(e.employee_id)
            if not s:
                s = {
                    "employee_id": e.employee_id,
                    "employee_name": r.employee_name,
                    "total_minutes": 0,
                    "days": 0,
                    "late_days": 0,
                    "half_days": 0,
                    "overtime_minutes": 0,
                }
                summary_map[e.employee_id] = s
            s["total_minutes"] += _worked_minutes(e.work_hours)
            s["days"] += 1 if e.has_checked_in else 0
            if e.has_checked_in:
                if compute_check_in_status(e.check_in, policy).status == ArrivalStatus.LATE:
                    s["late_days"] += 1
                if recompute_status(e, policy) == AttendanceStatus.HALF_DAY:
                    s["half_days"] += 1
            s["overtime_minutes"] += e.overtime_minutes

        summary = []
        for s in summary_map.values():
            summary.append(
                {
                    "employee_id": s["employee_id"],
                    "employee_name": s["employee_name"],
                    "days": s["days"],
                    "late_days": s["late_days"],
                    "half_days": s["half_days"],
                    "overtime_minutes": s["overtime_minutes"],
                    "total_minutes": s["total_minutes"],
                    "total_hours": format_hhmm(s["total_minutes"]),
                }
            )

        summary.sort(key=lambda x: x["total_minutes"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)

    def daily_stats(self, *, work_date: date) -> dict:
        policy = self._policies.get_active()
        rows = self._attendance.get_report_rows(start_date=work_date, end_date=work_date)
        total_employees = self._employees.count_active()

        present = late = half_day = 0
        hours_total = Decimal("0")
        for r in rows:
            e = r.event
            if not e.has_checked_in:
                continue
            status = recompute_status(e, policy)
            # late and half-day both count as present
            if status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY):
                present += 1
            if status == AttendanceStatus.LATE:
                late += 1
            elif status == AttendanceStatus.HALF_DAY:
                half_day += 1
            hours_total += e.work_hours

        checked_in = sum(1 for r in rows if r.event.has_checked_in)
        average = (hours_total / checked_in) if checked_in else Decimal("0")
        on_time_pct = round_half_up((present - late) / present * 100) if present else 0

        return {
            "date": work_date.isoformat(),
            "total_employees": total_employees,
            "present_today": present,
            "absent_today": max(total_employees - present, 0),
            "late_today": late,
            "half_day_today": half_day,
            "average_work_hours": float(average.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)),
            "on_time_percentage": on_time_pct,
        }
