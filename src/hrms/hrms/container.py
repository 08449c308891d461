from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import get_zone
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .policy.mysql_policy_repository import MySQLPolicyRepository
from .policy.repository import PolicyRepository
from .policy.service import PolicyService
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    tz: Optional[tzinfo]

    policies_repo: PolicyRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    policy_service: PolicyService
    attendance_service: AttendanceService
    report_service: AttendanceReportService


def assemble(
    *,
    policies_repo: PolicyRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    tz: Optional[tzinfo] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    policy_service = PolicyService(policies_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        policy_service,
        strategy_factory=AttendanceStrategyFactory(),
        tz=tz,
    )
    report_service = AttendanceReportService(attendance_repo, employees_repo, policy_service)

    return Container(
        tz=tz,
        policies_repo=policies_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        policy_service=policy_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, timezone: Optional[str] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return assemble(
        policies_repo=MySQLPolicyRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tz=get_zone(timezone),
    )
