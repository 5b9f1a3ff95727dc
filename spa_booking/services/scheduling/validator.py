# spa_booking/services/scheduling/validator.py
"""
Reservation validator.

Checks, in order, stopping at the first failure:
  1. window length == expected duration        → invalid_duration
  2. window inside therapist's working window  → outside_working_hours
  3. therapist free for the window             → therapist_conflict
  4. room free for the window                  → room_conflict
  5. new bookings do not start in the past     → past_date_time
     (moves of future reservations are exempt, moves of started ones are not)

Abutting windows (end == start) are valid. The validator only reads; callers
must hold the resource locks if they intend to write based on the answer.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from .calendar import ResourceCalendar, ResourceKind
from .config import SchedulingConfig, get_scheduling_config
from .errors import Violation, ViolationKind
from .roster import RosterProvider
from .timerange import TimeRange, contains


@dataclass(frozen=True)
class BookingRequest:
    therapist_id: int
    room_id: int
    day: date
    window: TimeRange
    # Variant duration for new bookings, snapshotted duration on reschedule
    duration_minutes: int
    exclude_reservation_id: Optional[int] = None
    # Start of the reservation being moved; None for new bookings
    current_start: Optional[datetime] = None

    @property
    def is_new_booking(self) -> bool:
        return self.exclude_reservation_id is None

    def past_check_applies(self, earliest: datetime) -> bool:
        """New bookings, and moves of reservations that have already started."""
        if self.is_new_booking:
            return True
        return self.current_start is not None and self.current_start < earliest


class ReservationValidator:
    def __init__(
        self,
        calendar: ResourceCalendar,
        roster: RosterProvider,
        config: SchedulingConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.calendar = calendar
        self.roster = roster
        self.config = config or get_scheduling_config()
        self.clock = clock

    def validate(self, request: BookingRequest) -> Optional[Violation]:
        """Return None when the booking may be accepted, else the first violation."""
        window = request.window

        if window.duration != request.duration_minutes:
            return Violation(
                ViolationKind.INVALID_DURATION,
                f"Window {window} lasts {window.duration} min, "
                f"service takes {request.duration_minutes} min",
            )

        working = self.roster.get_working_window(request.therapist_id, request.day)
        if working is None:
            return Violation(
                ViolationKind.OUTSIDE_WORKING_HOURS,
                f"Therapist {request.therapist_id} is not working on {request.day.isoformat()}",
            )
        if not contains(working, window):
            return Violation(
                ViolationKind.OUTSIDE_WORKING_HOURS,
                f"Window {window} is outside working hours {working}",
            )

        if not self.calendar.is_free(
            ResourceKind.THERAPIST,
            request.therapist_id,
            request.day,
            window,
            request.exclude_reservation_id,
        ):
            return Violation(
                ViolationKind.THERAPIST_CONFLICT,
                f"Therapist {request.therapist_id} is already booked at {window}",
            )

        if not self.calendar.is_free(
            ResourceKind.ROOM,
            request.room_id,
            request.day,
            window,
            request.exclude_reservation_id,
        ):
            return Violation(
                ViolationKind.ROOM_CONFLICT,
                f"Room {request.room_id} is already booked at {window}",
            )

        earliest = self.clock() - self.config.past_booking_grace
        if request.past_check_applies(earliest):
            if window.start_datetime(request.day) < earliest:
                return Violation(
                    ViolationKind.PAST_DATE_TIME,
                    f"Cannot book {request.day.isoformat()} {window} in the past",
                )

        return None
