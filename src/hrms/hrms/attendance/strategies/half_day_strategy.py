from __future__ import annotations

from ...core.enums import ArrivalStatus, AttendanceStatus
from ..engine import CheckInResult, CheckOutResult
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Early check-out on a materially short day. Overrides a LATE check-in."""

    def decide_checkin(self, result: CheckInResult) -> StatusDecision:
        # A half day is only known at check-out; arrival is classified as usual.
        if result.status == ArrivalStatus.LATE:
            return StatusDecision(status=AttendanceStatus.LATE)
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, result: CheckOutResult, *, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY)
