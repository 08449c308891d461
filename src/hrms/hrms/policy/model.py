from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, time
from typing import Any, Optional

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_non_negative_int, require_non_negative_number, require_number_at_most
from ..core import constants
from ..core.exceptions import InvalidPolicyWindow, ValidationError


def _as_hhmm(value: Any) -> str:
    # Accepts datetime.time (normalized TIME column) or "HH:MM[:SS]".
    if isinstance(value, time):
        return value.strftime("%H:%M")
    minutes = parse_hhmm(value)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class PolicyConfig:
    """Active attendance rules.

    One instance is read per operation and passed explicitly to every
    classification call, so a single computation never sees two versions.
    """

    work_hours: float = constants.DEFAULT_WORK_HOURS
    grace_period: int = constants.DEFAULT_GRACE_PERIOD_MINUTES
    check_in_start: str = constants.DEFAULT_CHECK_IN_START
    check_in_end: str = constants.DEFAULT_CHECK_IN_END
    check_out_start: str = constants.DEFAULT_CHECK_OUT_START
    check_out_end: str = constants.DEFAULT_CHECK_OUT_END
    overtime_rate: float = constants.DEFAULT_OVERTIME_RATE
    auto_checkout: bool = constants.DEFAULT_AUTO_CHECKOUT
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def check_in_start_minutes(self) -> int:
        return parse_hhmm(self.check_in_start)

    @property
    def check_in_end_minutes(self) -> int:
        return parse_hhmm(self.check_in_end)

    @property
    def check_out_start_minutes(self) -> int:
        return parse_hhmm(self.check_out_start)

    @property
    def check_out_end_minutes(self) -> int:
        return parse_hhmm(self.check_out_end)

    @property
    def late_threshold_minutes(self) -> int:
        return self.check_in_start_minutes + int(self.grace_period)

    def validate(self) -> "PolicyConfig":
        work_hours = require_non_negative_number(self.work_hours, "Work hours")
        if work_hours == 0:
            raise ValidationError("Work hours must be positive")
        require_number_at_most(work_hours, constants.MAX_WORK_HOURS, "Work hours")
        grace = require_non_negative_int(self.grace_period, "Grace period")
        require_number_at_most(grace, constants.MAX_GRACE_PERIOD_MINUTES, "Grace period")
        rate = require_non_negative_number(self.overtime_rate, "Overtime rate")
        require_number_at_most(rate, constants.MAX_OVERTIME_RATE, "Overtime rate")

        if self.check_in_start_minutes >= self.check_in_end_minutes:
            raise InvalidPolicyWindow("Check-in end time must be after start time")
        if self.check_out_start_minutes >= self.check_out_end_minutes:
            raise InvalidPolicyWindow("Check-out end time must be after start time")
        return self

    def merged(self, changes: dict[str, Any]) -> "PolicyConfig":
        """Return a normalized copy with ``changes`` applied; unknown keys are rejected."""
        allowed = {f.name for f in fields(self)} - {"updated_at", "updated_by"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Unknown policy fields: {', '.join(sorted(unknown))}")
        return PolicyConfig.from_row({**self.to_row(), **changes, "updated_at": self.updated_at})

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PolicyConfig":
        defaults = cls()
        updated_by = row.get("updated_by")
        auto_checkout = row.get("auto_checkout", defaults.auto_checkout)
        if isinstance(auto_checkout, str):
            auto_checkout = auto_checkout.strip().lower() in {"1", "true", "yes", "on"}
        return cls(
            work_hours=require_non_negative_number(row.get("work_hours", defaults.work_hours), "Work hours"),
            grace_period=require_non_negative_int(row.get("grace_period", defaults.grace_period), "Grace period"),
            check_in_start=_as_hhmm(row.get("check_in_start", defaults.check_in_start)),
            check_in_end=_as_hhmm(row.get("check_in_end", defaults.check_in_end)),
            check_out_start=_as_hhmm(row.get("check_out_start", defaults.check_out_start)),
            check_out_end=_as_hhmm(row.get("check_out_end", defaults.check_out_end)),
            overtime_rate=require_non_negative_number(
                row.get("overtime_rate", defaults.overtime_rate), "Overtime rate"
            ),
            auto_checkout=bool(auto_checkout),
            updated_by=int(updated_by) if updated_by is not None else None,
            updated_at=row.get("updated_at"),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "work_hours": self.work_hours,
            "grace_period": self.grace_period,
            "check_in_start": self.check_in_start,
            "check_in_end": self.check_in_end,
            "check_out_start": self.check_out_start,
            "check_out_end": self.check_out_end,
            "overtime_rate": self.overtime_rate,
            "auto_checkout": self.auto_checkout,
            "updated_by": self.updated_by,
        }

    def touched(self, *, updated_by: Optional[int], at: datetime) -> "PolicyConfig":
        return replace(self, updated_by=updated_by, updated_at=at)
