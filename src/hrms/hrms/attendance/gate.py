"""Advisory check-in / check-out windows.

These flags only drive UI affordances. The service layer never rejects an
action because a window is closed; the timestamp is classified wherever it falls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from ..policy.model import PolicyConfig
from .engine import minutes_since_midnight
from .model import AttendanceEvent


@dataclass(frozen=True)
class WindowState:
    can_check_in: bool
    can_check_out: bool


def can_check_in(now: datetime, policy: PolicyConfig, *, tz: Optional[tzinfo] = None) -> bool:
    m = minutes_since_midnight(now, tz)
    return policy.check_in_start_minutes <= m <= policy.check_in_end_minutes


def can_check_out(
    now: datetime,
    policy: PolicyConfig,
    has_checked_in_today: bool,
    *,
    tz: Optional[tzinfo] = None,
) -> bool:
    if not has_checked_in_today:
        return False
    m = minutes_since_midnight(now, tz)
    return policy.check_out_start_minutes <= m <= policy.check_out_end_minutes


def window_state(
    now: datetime,
    policy: PolicyConfig,
    event: Optional[AttendanceEvent],
    *,
    tz: Optional[tzinfo] = None,
) -> WindowState:
    checked_in = bool(event and event.has_checked_in)
    checked_out = bool(event and event.has_checked_out)
    return WindowState(
        can_check_in=not checked_in and can_check_in(now, policy, tz=tz),
        can_check_out=not checked_out and can_check_out(now, policy, checked_in, tz=tz),
    )
