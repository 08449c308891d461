from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEvent, AttendanceReportRow


class AttendanceRepository(Protocol):
    """Record store for attendance events.

    Implementations own the atomicity the engine cannot provide: one record per
    (employee_id, work_date), and check-in / check-out writes that only apply
    when the slot they fill is still empty.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def save_checkin(self, event: AttendanceEvent) -> AttendanceEvent:
        """Insert (or fill a date-only record). Raises AlreadyCheckedIn if the slot is taken."""

        raise NotImplementedError

    def save_checkout(self, event: AttendanceEvent) -> AttendanceEvent:
        """Store check-out fields. Raises AlreadyCheckedOut if another check-out won."""

        raise NotImplementedError

    def upsert_manual(self, event: AttendanceEvent) -> AttendanceEvent:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def list_rows(
        self,
        *,
        work_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

    def count(self, *, work_date: Optional[date] = None) -> int:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
