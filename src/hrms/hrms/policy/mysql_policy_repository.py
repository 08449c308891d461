from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, time_column_hhmm
from .model import PolicyConfig
from .repository import PolicyRepository

_COLUMNS = """
    setting_id, work_hours, grace_period, check_in_start, check_in_end,
    check_out_start, check_out_end, overtime_rate, auto_checkout, updated_by, updated_at
"""


def _to_policy(r: dict) -> PolicyConfig:
    row = dict(r)
    for key in ("check_in_start", "check_in_end", "check_out_start", "check_out_end"):
        row[key] = time_column_hhmm(row.get(key))
    return PolicyConfig.from_row(row)


class MySQLPolicyRepository(PolicyRepository):
    """Single-row ``attendance_settings`` table (setting_id is always 1)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self) -> Optional[PolicyConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_settings ORDER BY setting_id LIMIT 1")
            r = fetchone(cur)
            return _to_policy(r) if r else None

    def save(self, policy: PolicyConfig) -> PolicyConfig:
        row = policy.to_row()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_settings(
                    setting_id, work_hours, grace_period, check_in_start, check_in_end,
                    check_out_start, check_out_end, overtime_rate, auto_checkout, updated_by
                )
                VALUES(1,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    work_hours=VALUES(work_hours),
                    grace_period=VALUES(grace_period),
                    check_in_start=VALUES(check_in_start),
                    check_in_end=VALUES(check_in_end),
                    check_out_start=VALUES(check_out_start),
                    check_out_end=VALUES(check_out_end),
                    overtime_rate=VALUES(overtime_rate),
                    auto_checkout=VALUES(auto_checkout),
                    updated_by=VALUES(updated_by)
                """,
                (
                    row["work_hours"],
                    row["grace_period"],
                    row["check_in_start"],
                    row["check_in_end"],
                    row["check_out_start"],
                    row["check_out_end"],
                    row["overtime_rate"],
                    int(bool(row["auto_checkout"])),
                    row["updated_by"],
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_settings WHERE setting_id=1")
            return _to_policy(fetchone(cur))
