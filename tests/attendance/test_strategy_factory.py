from datetime import datetime

import pytest

from src.hrms.hrms.attendance.engine import CheckInResult, CheckOutResult, compute_check_out_status
from src.hrms.hrms.attendance.factory import AttendanceStrategyFactory, resolve_final_status
from src.hrms.hrms.attendance.strategies.half_day_strategy import HalfDayStrategy
from src.hrms.hrms.attendance.strategies.late_strategy import LateStrategy
from src.hrms.hrms.attendance.strategies.normal_strategy import NormalStrategy
from src.hrms.hrms.core.enums import ArrivalStatus, AttendanceStatus


def test_factory_checkin_on_time_within_grace():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(CheckInResult(status=ArrivalStatus.PRESENT))

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_early_is_stored_as_present():
    factory = AttendanceStrategyFactory()
    result = CheckInResult(status=ArrivalStatus.EARLY, early_minutes=10)

    assert factory.for_checkin(result).decide_checkin(result).status == AttendanceStatus.PRESENT


def test_factory_checkin_late_after_grace():
    factory = AttendanceStrategyFactory()
    result = CheckInResult(status=ArrivalStatus.LATE, late_minutes=3)
    strategy = factory.for_checkin(result)

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_checkin(result).status == AttendanceStatus.LATE


def test_factory_checkout_half_day():
    factory = AttendanceStrategyFactory()
    result = CheckOutResult(status=AttendanceStatus.HALF_DAY, early_checkout=True, early_minutes=420)

    assert isinstance(factory.for_checkout(result), HalfDayStrategy)


def test_late_survives_ordinary_checkout(policy):
    result = compute_check_out_status(datetime(2025, 1, 6, 8, 30), datetime(2025, 1, 6, 19, 0), policy)

    assert resolve_final_status(AttendanceStatus.LATE, result) == AttendanceStatus.LATE


def test_late_survives_early_full_day_checkout(policy):
    result = compute_check_out_status(datetime(2025, 1, 6, 8, 30), datetime(2025, 1, 6, 18, 0), policy)

    assert result.early_checkout
    assert resolve_final_status(AttendanceStatus.LATE, result) == AttendanceStatus.LATE


def test_half_day_overrides_late(policy):
    result = compute_check_out_status(datetime(2025, 1, 6, 8, 30), datetime(2025, 1, 6, 12, 0), policy)

    assert resolve_final_status(AttendanceStatus.LATE, result) == AttendanceStatus.HALF_DAY


def test_present_stays_present_on_overtime(policy):
    result = compute_check_out_status(datetime(2025, 1, 6, 8, 0), datetime(2025, 1, 6, 19, 30), policy)

    assert resolve_final_status(AttendanceStatus.PRESENT, result) == AttendanceStatus.PRESENT


def test_strategy_base_requires_both_phases():
    from src.hrms.hrms.attendance.strategies.base import AttendanceStrategy

    class CheckInOnly(AttendanceStrategy):
        def decide_checkin(self, result):
            return None

    with pytest.raises(TypeError):
        AttendanceStrategy()
    with pytest.raises(TypeError):
        CheckInOnly()


def test_late_strategy_keeps_current_on_checkout():
    result = CheckOutResult(status=AttendanceStatus.PRESENT, overtime_minutes=30)

    assert LateStrategy().decide_checkout(result, current=AttendanceStatus.LATE).status == AttendanceStatus.LATE


def test_half_day_strategy_classifies_arrival_as_usual():
    strategy = HalfDayStrategy()

    assert strategy.decide_checkin(CheckInResult(status=ArrivalStatus.LATE, late_minutes=5)).status == (
        AttendanceStatus.LATE
    )
    assert strategy.decide_checkin(CheckInResult(status=ArrivalStatus.EARLY, early_minutes=5)).status == (
        AttendanceStatus.PRESENT
    )
