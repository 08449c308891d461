from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..engine import CheckInResult, CheckOutResult
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time or early check-in; any check-out that is not a half day.

    On check-out the check-in status is kept, so LATE is never reset to PRESENT.
    """

    def decide_checkin(self, result: CheckInResult) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, result: CheckOutResult, *, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
