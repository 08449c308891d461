from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the session by the external auth layer."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half_day"
    ABSENT = "absent"
    NOT_CHECKED_IN = "not_checked_in"


class ArrivalStatus(str, Enum):
    """Check-in classification. EARLY is never stored, it is persisted as PRESENT."""

    EARLY = "early"
    PRESENT = "present"
    LATE = "late"
