# spa_booking/services/scheduling/roster.py
"""
Roster provider: when does a therapist work on a given date.

Resolution order for the database-backed provider:
✓ per-date work_shifts row (working / off / leave / sick)
✓ weekly template in therapists.work_schedule

Supported template formats:
  A: {"mon": {"start": "10:00", "end": "18:00"}, "sun": null, ...}
  B: {"0": ["10:00", "18:00"], ...}   (0 = Monday)
"""

import json
import logging
from datetime import date
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from .statuses import ShiftStatus
from .timerange import TimeRange, time_str_to_minutes

logger = logging.getLogger(__name__)

DAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


class RosterProvider(Protocol):
    def get_working_window(self, therapist_id: int, day: date) -> Optional[TimeRange]:
        """Working window of the therapist on day, or None when not working."""
        ...


class StaticRosterProvider:
    """Roster held in memory: {(therapist_id, date): TimeRange}."""

    def __init__(self, windows: dict[tuple[int, date], TimeRange] | None = None):
        self.windows = dict(windows or {})

    def set_window(self, therapist_id: int, day: date, window: Optional[TimeRange]) -> None:
        if window is None:
            self.windows.pop((therapist_id, day), None)
        else:
            self.windows[(therapist_id, day)] = window

    def get_working_window(self, therapist_id: int, day: date) -> Optional[TimeRange]:
        return self.windows.get((therapist_id, day))


class DbRosterProvider:
    """Roster read from work_shifts with the therapist's weekly template as fallback."""

    def __init__(self, db: Session):
        self.db = db

    def get_working_window(self, therapist_id: int, day: date) -> Optional[TimeRange]:
        from ...models.tables import Therapists, WorkShifts

        shift = (
            self.db.query(WorkShifts)
            .filter(
                WorkShifts.therapist_id == therapist_id,
                WorkShifts.date == day.isoformat(),
            )
            .first()
        )
        if shift is not None:
            if shift.status != ShiftStatus.WORKING.value:
                return None
            return TimeRange(shift.start_minute, shift.end_minute)

        therapist = self.db.get(Therapists, therapist_id)
        if therapist is None or not therapist.is_active:
            return None
        return template_window(therapist.work_schedule, day)


def template_window(work_schedule_json: str | None, day: date) -> Optional[TimeRange]:
    """Working window for day from a weekly template, or None."""
    try:
        schedule = json.loads(work_schedule_json) if work_schedule_json else {}
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed work_schedule template")
        return None

    if not isinstance(schedule, dict) or not schedule:
        return None

    bounds = _day_bounds(schedule, day)
    if bounds is None:
        return None

    try:
        return TimeRange(time_str_to_minutes(bounds[0]), time_str_to_minutes(bounds[1]))
    except (ValueError, AttributeError):
        logger.warning(f"Ignoring malformed template window {bounds!r}")
        return None


def _day_bounds(schedule: dict, day: date) -> Optional[tuple[str, str]]:
    weekday = day.weekday()

    # Format B: numeric keys
    value = schedule.get(str(weekday))
    if value is None:
        # Format A: named keys
        value = schedule.get(DAY_NAMES[weekday])

    if value is None:
        return None

    if isinstance(value, dict):
        start = value.get("start")
        end = value.get("end")
        if start and end:
            return start, end
        return None

    if isinstance(value, list):
        # ["10:00", "18:00"] or [["10:00", "18:00"]]
        if len(value) == 2 and all(isinstance(v, str) for v in value):
            return value[0], value[1]
        if len(value) == 1 and isinstance(value[0], list) and len(value[0]) == 2:
            return value[0][0], value[0][1]

    return None
