# spa_booking/schemas/common.py

import re

from ..services.scheduling.timerange import MINUTES_PER_DAY, minutes_to_time_str, time_str_to_minutes

_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def validate_time_str(v: str) -> str:
    """Validate "HH:MM" (00:00 … 24:00)."""
    if not _TIME_RE.match(v):
        raise ValueError("Time must be in HH:MM format")
    hours, minutes = v.split(":")
    if int(minutes) >= 60 or time_str_to_minutes(v) > MINUTES_PER_DAY:
        raise ValueError("Time must be between 00:00 and 24:00")
    return v


def reject_null(v, field_name: str):
    """PATCH fields backed by NOT NULL columns may be omitted but not nulled."""
    if v is None:
        raise ValueError(f"{field_name} cannot be null")
    return v


__all__ = ["reject_null", "validate_time_str", "time_str_to_minutes", "minutes_to_time_str"]
