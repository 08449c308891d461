from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit when the block succeeds, roll back otherwise."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def time_column_hhmm(value: Any) -> Optional[str]:
    """TIME column as "HH:MM".

    mysql-connector hands TIME back as timedelta (C extension), time, or str.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, timedelta):
        minutes = (int(value.total_seconds()) % 86400) // 60
        return f"{minutes // 60:02d}:{minutes % 60:02d}"
    if isinstance(value, str):
        return value.strip()[:5]
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def as_decimal(value: Any, default: str = "0") -> Decimal:
    """DECIMAL columns arrive as Decimal, but tolerate float/str from other drivers."""
    if value is None:
        return Decimal(default)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
