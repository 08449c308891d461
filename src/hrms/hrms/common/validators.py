from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import ValidationError


def require_non_negative_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} must be a number") from e
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def require_number_at_most(value: float, limit: float, field_name: str) -> float:
    if value > limit:
        raise ValidationError(f"{field_name} must not exceed {limit:g}")
    return value


def require_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"{field_name} must be an integer") from e
    if number != float(value) or number < 0:
        raise ValidationError(f"{field_name} must be a non-negative integer")
    return number


def require_positive_int(value: Any, field_name: str) -> int:
    number = require_non_negative_int(value, field_name)
    if number == 0:
        raise ValidationError(f"{field_name} must be positive")
    return number
