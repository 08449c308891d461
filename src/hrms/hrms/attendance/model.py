from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one attendance record per employee per calendar date.

    ``attendance_id`` is None until the record has been stored.
    """

    employee_id: int
    work_date: date
    attendance_id: Optional[int] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.NOT_CHECKED_IN
    late_minutes: int = 0
    early_checkout: bool = False
    early_minutes: int = 0
    overtime_minutes: int = 0
    work_hours: Decimal = Decimal("0.00")
    is_manual_entry: bool = False
    notes: Optional[str] = None

    @property
    def has_checked_in(self) -> bool:
        return self.check_in is not None

    @property
    def has_checked_out(self) -> bool:
        return self.check_out is not None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for list/report pages (event joined with employee data)."""

    event: AttendanceEvent
    employee_name: str
    department_name: Optional[str] = None
