"""Attendance classification.

Every caller (check-in, check-out, manual entry, list/report, today view)
classifies through these functions; none of them re-derives the arithmetic.
All functions are pure: the policy snapshot is an argument, nothing is read
from storage or the clock.

Times are compared at minute resolution in policy-local wall-clock time
(``hour * 60 + minute``); seconds are dropped. Worked hours use the full
difference between the two instants.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..common.datetime_utils import to_local
from ..core.constants import HALF_DAY_SHORTFALL_HOURS
from ..core.enums import ArrivalStatus, AttendanceStatus
from ..core.exceptions import MalformedTimestamp
from ..policy.model import PolicyConfig


@dataclass(frozen=True)
class CheckInResult:
    status: ArrivalStatus
    late_minutes: int = 0
    early_minutes: int = 0


@dataclass(frozen=True)
class CheckOutResult:
    status: AttendanceStatus
    early_checkout: bool = False
    early_minutes: int = 0
    overtime_minutes: int = 0
    work_hours: Decimal = Decimal("0.00")

    @property
    def is_half_day(self) -> bool:
        return self.status == AttendanceStatus.HALF_DAY


def round_half_up(value: float) -> int:
    """Round .5 away from zero (Python's round() would give 2 for 2.5)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def minutes_since_midnight(instant: datetime, tz: Optional[tzinfo] = None) -> int:
    if not isinstance(instant, datetime):
        raise MalformedTimestamp(f"Expected a timestamp, got {instant!r}")
    local = to_local(instant, tz)
    return local.hour * 60 + local.minute


def elapsed_hours(check_in: datetime, check_out: datetime) -> float:
    if not isinstance(check_in, datetime) or not isinstance(check_out, datetime):
        raise MalformedTimestamp("Check-in and check-out must both be timestamps")
    try:
        seconds = (check_out - check_in).total_seconds()
    except TypeError as e:
        # Mixing naive and aware instants.
        raise MalformedTimestamp("Check-in and check-out use incompatible time zones") from e
    if seconds <= 0:
        raise MalformedTimestamp("Check-out must be after check-in")
    return seconds / 3600


def worked_hours(check_in: datetime, check_out: datetime) -> Decimal:
    """Stored work hours, 2 decimals."""
    hours = elapsed_hours(check_in, check_out)
    return Decimal(str(hours)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def compute_check_in_status(
    check_in: datetime,
    policy: PolicyConfig,
    *,
    tz: Optional[tzinfo] = None,
) -> CheckInResult:
    m = minutes_since_midnight(check_in, tz)
    start = policy.check_in_start_minutes
    threshold = policy.late_threshold_minutes

    if m < start:
        return CheckInResult(status=ArrivalStatus.EARLY, early_minutes=start - m)
    if m > threshold:
        return CheckInResult(status=ArrivalStatus.LATE, late_minutes=m - threshold)
    # start and start + grace are both on time
    return CheckInResult(status=ArrivalStatus.PRESENT)


def compute_check_out_status(
    check_in: datetime,
    check_out: datetime,
    policy: PolicyConfig,
    *,
    tz: Optional[tzinfo] = None,
) -> CheckOutResult:
    hours = elapsed_hours(check_in, check_out)
    stored_hours = worked_hours(check_in, check_out)
    required = float(policy.work_hours)
    co = minutes_since_midnight(check_out, tz)
    end = policy.check_out_end_minutes

    # Only the window end is compared; leaving any time before it is "early",
    # including right after check_out_start.
    if co < end:
        half_day = hours < required - HALF_DAY_SHORTFALL_HOURS
        return CheckOutResult(
            status=AttendanceStatus.HALF_DAY if half_day else AttendanceStatus.PRESENT,
            early_checkout=True,
            early_minutes=end - co,
            work_hours=stored_hours,
        )

    if hours > required:
        return CheckOutResult(
            status=AttendanceStatus.PRESENT,
            overtime_minutes=round_half_up((hours - required) * 60),
            work_hours=stored_hours,
        )

    return CheckOutResult(status=AttendanceStatus.PRESENT, work_hours=stored_hours)
