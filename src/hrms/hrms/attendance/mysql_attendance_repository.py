from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from mysql.connector import errorcode, errors

from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import AttendanceEvent, AttendanceReportRow
from .repository import AttendanceRepository

_EVENT_COLUMNS = """
    ar.attendance_id, ar.employee_id, ar.work_date, ar.check_in, ar.check_out, ar.status,
    ar.late_minutes, ar.early_checkout, ar.early_minutes, ar.overtime_minutes,
    ar.work_hours, ar.is_manual_entry, ar.notes
"""

_ROW_JOINS = """
    FROM attendance_records ar
    LEFT JOIN employees e ON e.employee_id = ar.employee_id
    LEFT JOIN departments d ON d.department_id = e.department_id
"""


def _to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        status=AttendanceStatus(r["status"]),
        late_minutes=int(r.get("late_minutes") or 0),
        early_checkout=bool(r.get("early_checkout")),
        early_minutes=int(r.get("early_minutes") or 0),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        work_hours=as_decimal(r.get("work_hours"), "0.00"),
        is_manual_entry=bool(r.get("is_manual_entry")),
        notes=r.get("notes"),
    )


def _to_row(r: dict) -> AttendanceReportRow:
    return AttendanceReportRow(
        event=_to_event(r),
        employee_name=r.get("employee_name") or "Unknown Employee",
        department_name=r.get("department_name"),
    )


def _values(event: AttendanceEvent) -> tuple:
    return (
        event.check_in,
        event.check_out,
        event.status.value,
        int(event.late_minutes),
        int(bool(event.early_checkout)),
        int(event.early_minutes),
        int(event.overtime_minutes),
        event.work_hours,
        int(bool(event.is_manual_entry)),
        event.notes,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """Relies on UNIQUE(employee_id, work_date) in ``attendance_records``."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EVENT_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_records ar
                WHERE ar.employee_id=%s AND ar.work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_records ar
                WHERE ar.employee_id=%s
                ORDER BY ar.work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def save_checkin(self, event: AttendanceEvent) -> AttendanceEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            if event.attendance_id is not None:
                # Fill a pre-created record only while it still has no check-in.
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET check_in=%s, status=%s, late_minutes=%s
                    WHERE attendance_id=%s AND check_in IS NULL
                    """,
                    (event.check_in, event.status.value, int(event.late_minutes), int(event.attendance_id)),
                )
                if cur.rowcount == 0:
                    raise AlreadyCheckedIn()
                return event

            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, work_date, check_in, check_out, status, late_minutes,
                        early_checkout, early_minutes, overtime_minutes, work_hours,
                        is_manual_entry, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(event.employee_id), event.work_date, *_values(event)),
                )
            except errors.IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise AlreadyCheckedIn() from e
                raise
            return replace(event, attendance_id=int(cur.lastrowid))

    def save_checkout(self, event: AttendanceEvent) -> AttendanceEvent:
        if event.attendance_id is None:
            raise NotFoundError("Attendance record has not been stored yet")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out=%s, status=%s, early_checkout=%s, early_minutes=%s,
                    overtime_minutes=%s, work_hours=%s
                WHERE attendance_id=%s AND check_out IS NULL
                """,
                (
                    event.check_out,
                    event.status.value,
                    int(bool(event.early_checkout)),
                    int(event.early_minutes),
                    int(event.overtime_minutes),
                    event.work_hours,
                    int(event.attendance_id),
                ),
            )
            if cur.rowcount == 0:
                raise AlreadyCheckedOut()
            return event

    def upsert_manual(self, event: AttendanceEvent) -> AttendanceEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, check_in, check_out, status, late_minutes,
                    early_checkout, early_minutes, overtime_minutes, work_hours,
                    is_manual_entry, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    check_in=VALUES(check_in),
                    check_out=VALUES(check_out),
                    status=VALUES(status),
                    late_minutes=VALUES(late_minutes),
                    early_checkout=VALUES(early_checkout),
                    early_minutes=VALUES(early_minutes),
                    overtime_minutes=VALUES(overtime_minutes),
                    work_hours=VALUES(work_hours),
                    is_manual_entry=VALUES(is_manual_entry),
                    notes=VALUES(notes)
                """,
                (int(event.employee_id), event.work_date, *_values(event)),
            )
            return replace(event, attendance_id=int(cur.lastrowid))

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def list_rows(
        self,
        *,
        work_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[AttendanceReportRow]:
        where = "WHERE ar.work_date=%s" if work_date else ""
        params: list[object] = [work_date] if work_date else []
        params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}, e.full_name AS employee_name, d.name AS department_name
                {_ROW_JOINS}
                {where}
                ORDER BY ar.work_date DESC, ar.employee_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def count(self, *, work_date: Optional[date] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if work_date:
                cur.execute("SELECT COUNT(*) AS total FROM attendance_records WHERE work_date=%s", (work_date,))
            else:
                cur.execute("SELECT COUNT(*) AS total FROM attendance_records")
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if department:
            clauses.append("d.name=%s")
            params.append(department)
        if status is not None:
            clauses.append("ar.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}, e.full_name AS employee_name, d.name AS department_name
                {_ROW_JOINS}
                WHERE {where}
                ORDER BY ar.work_date DESC, ar.employee_id ASC
                """,
                tuple(params),
            )
            return [_to_row(r) for r in fetchall(cur)]
