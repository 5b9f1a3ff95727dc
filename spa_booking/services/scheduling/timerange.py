# spa_booking/services/scheduling/timerange.py
"""
Minute-offset time ranges.

All windows are half-open [start, end) in minutes from midnight, so a
reservation ending at 10:00 and one starting at 10:00 do not overlap.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

MINUTES_PER_DAY = 24 * 60


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes from midnight. "24:00" is accepted."""
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes from midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True, order=True)
class TimeRange:
    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start < self.end <= MINUTES_PER_DAY:
            raise ValueError(f"Invalid time range: {self.start}-{self.end}")

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeRange":
        return cls(time_str_to_minutes(start), time_str_to_minutes(end))

    @classmethod
    def starting_at(cls, start: int, duration_minutes: int) -> "TimeRange":
        return cls(start, start + duration_minutes)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def start_datetime(self, day: date) -> datetime:
        return datetime.combine(day, time.min) + timedelta(minutes=self.start)

    def end_datetime(self, day: date) -> datetime:
        return datetime.combine(day, time.min) + timedelta(minutes=self.end)

    def __str__(self) -> str:
        return f"{minutes_to_time_str(self.start)}-{minutes_to_time_str(self.end)}"


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    return a.start < b.end and b.start < a.end


def contains(outer: TimeRange, inner: TimeRange) -> bool:
    return inner.start >= outer.start and inner.end <= outer.end
