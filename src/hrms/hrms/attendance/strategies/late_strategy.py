from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..engine import CheckInResult, CheckOutResult
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, result: CheckInResult) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)

    def decide_checkout(self, result: CheckOutResult, *, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
