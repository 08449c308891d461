from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hrms.hrms.attendance.model import AttendanceEvent, AttendanceReportRow
from src.hrms.hrms.container import assemble
from src.hrms.hrms.core.enums import AttendanceStatus
from src.hrms.hrms.core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut
from src.hrms.hrms.employees.model import Employee
from src.hrms.hrms.policy.model import PolicyConfig


@dataclass
class InMemoryPolicies:
    policy: Optional[PolicyConfig] = None
    saves: int = 0

    def get_active(self) -> Optional[PolicyConfig]:
        return self.policy

    def save(self, policy: PolicyConfig) -> PolicyConfig:
        self.policy = policy
        self.saves += 1
        return policy


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee] = field(default_factory=dict)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def count_active(self) -> int:
        return sum(1 for e in self.employees.values() if e.is_active)


class InMemoryAttendance:
    """Keyed by (employee_id, work_date) like the UNIQUE index in MySQL."""

    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._by_key: dict[tuple[int, date], AttendanceEvent] = {}
        self._id = 0

    def add(self, event: AttendanceEvent) -> AttendanceEvent:
        self._id += 1
        stored = replace(event, attendance_id=self._id)
        self._by_key[(event.employee_id, event.work_date)] = stored
        return stored

    def all(self) -> list[AttendanceEvent]:
        return list(self._by_key.values())

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceEvent]:
        return next((e for e in self._by_key.values() if e.attendance_id == attendance_id), None)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceEvent]:
        return self._by_key.get((employee_id, work_date))

    def get_recent_for_employee(self, employee_id: int, limit: int):
        items = [e for e in self._by_key.values() if e.employee_id == employee_id]
        items.sort(key=lambda e: e.work_date, reverse=True)
        return items[:limit]

    def save_checkin(self, event: AttendanceEvent) -> AttendanceEvent:
        current = self._by_key.get((event.employee_id, event.work_date))
        if current is not None and current.check_in is not None:
            raise AlreadyCheckedIn()
        if current is not None:
            stored = replace(event, attendance_id=current.attendance_id)
            self._by_key[(event.employee_id, event.work_date)] = stored
            return stored
        return self.add(event)

    def save_checkout(self, event: AttendanceEvent) -> AttendanceEvent:
        current = self._by_key[(event.employee_id, event.work_date)]
        if current.check_out is not None:
            raise AlreadyCheckedOut()
        self._by_key[(event.employee_id, event.work_date)] = event
        return event

    def upsert_manual(self, event: AttendanceEvent) -> AttendanceEvent:
        current = self._by_key.get((event.employee_id, event.work_date))
        if current is None:
            return self.add(event)
        stored = replace(event, attendance_id=current.attendance_id)
        self._by_key[(event.employee_id, event.work_date)] = stored
        return stored

    def delete(self, attendance_id: int) -> bool:
        for key, e in list(self._by_key.items()):
            if e.attendance_id == attendance_id:
                del self._by_key[key]
                return True
        return False

    def _row(self, e: AttendanceEvent) -> AttendanceReportRow:
        emp = self._employees.get_by_id(e.employee_id)
        return AttendanceReportRow(
            event=e,
            employee_name=emp.full_name if emp else "Unknown Employee",
            department_name=emp.department_name if emp else None,
        )

    def _sorted(self, events):
        events = sorted(events, key=lambda e: e.employee_id)
        return sorted(events, key=lambda e: e.work_date, reverse=True)

    def list_rows(self, *, work_date: Optional[date] = None, limit: int = 100, offset: int = 0):
        events = [e for e in self._by_key.values() if work_date is None or e.work_date == work_date]
        return [self._row(e) for e in self._sorted(events)[offset : offset + limit]]

    def count(self, *, work_date: Optional[date] = None) -> int:
        return sum(1 for e in self._by_key.values() if work_date is None or e.work_date == work_date)

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
    ):
        rows = [self._row(e) for e in self._sorted(self._by_key.values()) if start_date <= e.work_date <= end_date]
        if department:
            rows = [r for r in rows if r.department_name == department]
        if status is not None:
            rows = [r for r in rows if r.event.status == status]
        return rows


@pytest.fixture
def fixed_now() -> datetime:
    # Monday, one minute past the default grace period.
    return datetime(2025, 1, 6, 8, 16, 0)


@pytest.fixture
def policy() -> PolicyConfig:
    return PolicyConfig()


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        {
            1: Employee(employee_id=1, full_name="Alice Nguyen", department_id=1, department_name="Engineering"),
            2: Employee(employee_id=2, full_name="Bob Tran", department_id=2, department_name="Sales"),
            3: Employee(employee_id=3, full_name="Carol Le", department_id=1, department_name="Engineering"),
            4: Employee(employee_id=4, full_name="Dave Pham", department_id=2, department_name="Sales"),
            5: Employee(employee_id=5, full_name="Eve Vo", is_active=False),
        }
    )


@pytest.fixture
def policies() -> InMemoryPolicies:
    return InMemoryPolicies()


@pytest.fixture
def attendance_repo(employees) -> InMemoryAttendance:
    return InMemoryAttendance(employees)


@pytest.fixture
def container(policies, employees, attendance_repo):
    return assemble(policies_repo=policies, employees_repo=employees, attendance_repo=attendance_repo)
