from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ArrivalStatus, AttendanceStatus
from .engine import CheckInResult, CheckOutResult
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the strategy matching a classification result."""

    def for_checkin(self, result: CheckInResult) -> AttendanceStrategy:
        if result.status == ArrivalStatus.LATE:
            return LateStrategy()
        return NormalStrategy()

    def for_checkout(self, result: CheckOutResult) -> AttendanceStrategy:
        if result.is_half_day:
            return HalfDayStrategy()
        return NormalStrategy()


def resolve_final_status(
    current: AttendanceStatus,
    result: CheckOutResult,
    factory: AttendanceStrategyFactory | None = None,
) -> AttendanceStatus:
    """Status kept on the record once the day is closed (check-out wins only for half days)."""
    factory = factory or AttendanceStrategyFactory()
    return factory.for_checkout(result).decide_checkout(result, current=current).status
