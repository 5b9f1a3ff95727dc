# spa_booking/services/scheduling/availability.py
"""
Slot availability query: bookable start times for a service variant on a day.

For every active therapist with a working window that day:
  free therapist windows of the variant's duration (ResourceCalendar)
  ∩ shared room pool: the first active room free for the same window

Output is sorted by start time, then therapist name, so the schedule grid
renders deterministically. Read-only: an offered slot may be taken a moment
later; create() re-validates under lock. Starts earlier than now minus the
past-booking grace are not offered.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from .. import directory
from .calendar import ResourceCalendar, ResourceKind
from .config import SchedulingConfig, get_scheduling_config
from .roster import DbRosterProvider, RosterProvider
from .timerange import TimeRange, overlaps


@dataclass(frozen=True)
class SlotOffer:
    therapist_id: int
    therapist_name: str
    room_id: int
    window: TimeRange


def query_available_slots(
    db: Session,
    day: date,
    variant_id: int,
    therapist_id: Optional[int] = None,
    config: SchedulingConfig | None = None,
    roster: RosterProvider | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> list[SlotOffer]:
    """
    Calculate bookable slots for a variant.

    Raises:
        NotFound: unknown variant, or unknown/inactive therapist filter
    """
    config = config or get_scheduling_config()
    roster = roster or DbRosterProvider(db)
    calendar = ResourceCalendar(db)

    # Step 1: Variant duration
    variant = directory.get_variant(db, variant_id)
    duration = variant.duration_minutes

    # Step 2: Therapists to consider
    if therapist_id is not None:
        therapists = [directory.get_therapist(db, therapist_id)]
    else:
        therapists = directory.active_therapists(db)

    # Step 3: Shared room pool, busy intervals read once per query
    rooms = directory.active_rooms(db)
    if not rooms:
        return []
    room_busy = {
        room.id: calendar.busy_intervals(ResourceKind.ROOM, room.id, day)
        for room in rooms
    }

    # Step 4: Free therapist windows with a free room, not yet started
    earliest = clock() - config.past_booking_grace
    offers: list[SlotOffer] = []
    for therapist in therapists:
        working = roster.get_working_window(therapist.id, day)
        if working is None:
            continue

        slots = calendar.free_slots(
            ResourceKind.THERAPIST,
            therapist.id,
            day,
            working,
            config.slot_step_minutes,
            duration,
        )
        for window in slots:
            if window.start_datetime(day) < earliest:
                continue
            room_id = _first_free_room(rooms, room_busy, window)
            if room_id is None:
                continue
            offers.append(SlotOffer(
                therapist_id=therapist.id,
                therapist_name=therapist.display_name,
                room_id=room_id,
                window=window,
            ))

    offers.sort(key=lambda o: (o.window.start, o.therapist_name, o.therapist_id))
    return offers


def _first_free_room(
    rooms: list,
    room_busy: dict[int, list[TimeRange]],
    window: TimeRange,
) -> Optional[int]:
    for room in rooms:
        if not any(overlaps(window, b) for b in room_busy[room.id]):
            return room.id
    return None
