from __future__ import annotations

from datetime import time

from ..core.constants import MAX_DAY_OF_WEEK, MIN_DAY_OF_WEEK
from ..core.exceptions import ValidationError


def require_positive_id(value, field_name: str) -> int:
    try:
        v = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if v <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return v


def require_day_of_week(value) -> int:
    day = require_positive_id(value, "day_of_week")
    if not MIN_DAY_OF_WEEK <= day <= MAX_DAY_OF_WEEK:
        raise ValidationError(f"day_of_week must be between {MIN_DAY_OF_WEEK} and {MAX_DAY_OF_WEEK}")
    return day


def require_time_range(start: time, end: time) -> None:
    if start >= end:
        raise ValidationError("end_time must be after start_time")
