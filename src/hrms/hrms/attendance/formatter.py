from __future__ import annotations

from datetime import tzinfo
from typing import Optional

from ..core.enums import ArrivalStatus, AttendanceStatus
from ..policy.model import PolicyConfig
from .engine import compute_check_in_status, compute_check_out_status
from .model import AttendanceEvent


def format_status(event: AttendanceEvent, policy: PolicyConfig, *, tz: Optional[tzinfo] = None) -> str:
    """Display label recomputed from the timestamps and the current policy.

    The stored status is not consulted (except for an absence without check-in),
    so labels follow policy changes. Check-out details overwrite the check-in
    label, except that an early checkout after a late arrival is appended.
    """
    if event.check_in is None:
        if event.status == AttendanceStatus.ABSENT:
            return "Absent"
        return "Not Checked In"

    arrival = compute_check_in_status(event.check_in, policy, tz=tz)
    if arrival.status == ArrivalStatus.EARLY:
        label = f"Early by {arrival.early_minutes} min"
    elif arrival.status == ArrivalStatus.LATE:
        label = f"Late by {arrival.late_minutes} min"
    else:
        label = "On Time"

    if event.check_out is None:
        return label

    departure = compute_check_out_status(event.check_in, event.check_out, policy, tz=tz)
    if departure.early_checkout:
        if label.startswith("Late"):
            return f"{label}; Early checkout {departure.early_minutes} min"
        return f"Early by {departure.early_minutes} min"
    if departure.overtime_minutes > 0:
        return f"Overtime {departure.overtime_minutes} min"
    return label


def check_in_message(event: AttendanceEvent) -> str:
    if event.late_minutes > 0:
        return f"Checked in successfully ({event.late_minutes} minutes late)"
    return "Checked in successfully (On time)"


def check_out_message(event: AttendanceEvent) -> str:
    if event.early_checkout:
        detail = f"Early checkout ({event.early_minutes} minutes early)"
    elif event.overtime_minutes > 0:
        detail = f"Overtime {event.overtime_minutes} minutes"
    else:
        detail = "On time"
    return f"Checked out successfully. Worked {event.work_hours:.1f} hours ({detail})"


_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.LATE: "Late",
    AttendanceStatus.HALF_DAY: "Half Day",
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.NOT_CHECKED_IN: "Not Checked In",
}

_BADGES = {
    AttendanceStatus.PRESENT: "bg-success",
    AttendanceStatus.LATE: "bg-danger",
    AttendanceStatus.HALF_DAY: "bg-warning text-dark",
    AttendanceStatus.ABSENT: "bg-secondary",
    AttendanceStatus.NOT_CHECKED_IN: "bg-light text-dark",
}


def status_label(status: AttendanceStatus) -> str:
    return _LABELS.get(status, status.value)


def status_badge(status: AttendanceStatus) -> str:
    return _BADGES.get(status, "bg-secondary")
