# spa_booking/services/scheduling/calendar.py
"""
Resource calendar: busy/free view of a therapist or a room on a date.

Derived from the reservations table on every call. Nothing here is cached,
so the view can never go stale across writes.

Busy = reservation status in ACTIVE_STATUSES (new / confirmed / in_progress).
Cancelled and no-show reservations stay in the table but free their window.
"""

from datetime import date
from enum import Enum
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from .statuses import ACTIVE_STATUSES
from .timerange import TimeRange, contains, overlaps


class ResourceKind(str, Enum):
    THERAPIST = "therapist"
    ROOM = "room"


class FreeSlots:
    """
    Candidate windows of a fixed duration inside a working window.

    Iterable more than once; each iteration reads the current bookings.
    Starts are aligned to step_minutes from the start of the working window
    and come out in ascending order.
    """

    def __init__(
        self,
        calendar: "ResourceCalendar",
        kind: ResourceKind,
        resource_id: int,
        day: date,
        working_window: TimeRange,
        step_minutes: int,
        duration_minutes: int,
    ):
        if step_minutes <= 0 or duration_minutes <= 0:
            raise ValueError("step_minutes and duration_minutes must be positive")
        self.calendar = calendar
        self.kind = kind
        self.resource_id = resource_id
        self.day = day
        self.working_window = working_window
        self.step_minutes = step_minutes
        self.duration_minutes = duration_minutes

    def __iter__(self) -> Iterator[TimeRange]:
        busy = self.calendar.busy_intervals(self.kind, self.resource_id, self.day)

        start = self.working_window.start
        last_start = self.working_window.end - self.duration_minutes
        while start <= last_start:
            candidate = TimeRange.starting_at(start, self.duration_minutes)
            if contains(self.working_window, candidate) and not any(
                overlaps(candidate, b) for b in busy
            ):
                yield candidate
            start += self.step_minutes


class ResourceCalendar:
    """Read-only view over the reservation store."""

    def __init__(self, db: Session):
        self.db = db

    def busy_intervals(
        self,
        kind: ResourceKind,
        resource_id: int,
        day: date,
        exclude_reservation_id: Optional[int] = None,
    ) -> list[TimeRange]:
        """Windows of active reservations of the resource on day, ascending."""
        from ...models.tables import Reservations

        column = (
            Reservations.therapist_id
            if kind == ResourceKind.THERAPIST
            else Reservations.room_id
        )

        query = (
            self.db.query(Reservations.start_minute, Reservations.end_minute)
            .filter(
                column == resource_id,
                Reservations.date == day.isoformat(),
                Reservations.status.in_([s.value for s in ACTIVE_STATUSES]),
            )
        )
        if exclude_reservation_id is not None:
            query = query.filter(Reservations.id != exclude_reservation_id)

        rows = query.order_by(Reservations.start_minute).all()
        return [TimeRange(start, end) for start, end in rows]

    def is_free(
        self,
        kind: ResourceKind,
        resource_id: int,
        day: date,
        window: TimeRange,
        exclude_reservation_id: Optional[int] = None,
    ) -> bool:
        busy = self.busy_intervals(kind, resource_id, day, exclude_reservation_id)
        return not any(overlaps(window, b) for b in busy)

    def free_slots(
        self,
        kind: ResourceKind,
        resource_id: int,
        day: date,
        working_window: TimeRange,
        step_minutes: int,
        duration_minutes: int,
    ) -> FreeSlots:
        return FreeSlots(
            self, kind, resource_id, day, working_window, step_minutes, duration_minutes
        )
