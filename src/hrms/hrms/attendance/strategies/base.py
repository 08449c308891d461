from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import AttendanceStatus
from ..engine import CheckInResult, CheckOutResult


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus


class AttendanceStrategy(ABC):
    """Strategy Pattern: turn a classification into the status stored on the record."""

    @abstractmethod
    def decide_checkin(self, result: CheckInResult) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, result: CheckOutResult, *, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError
