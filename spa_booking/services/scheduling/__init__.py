# spa_booking/services/scheduling/__init__.py
"""
Reservation scheduling engine.

timerange     → overlap / containment on minute windows
calendar      → busy / free view of a therapist or room (derived, uncached)
roster        → therapist working windows
validator     → accept / reject a proposed booking
lifecycle     → the only writer: create, status, reschedule, cancel, payment
availability  → bookable slot offers for the day schedule grid
"""

from .availability import SlotOffer, query_available_slots
from .calendar import FreeSlots, ResourceCalendar, ResourceKind
from .config import SchedulingConfig, get_scheduling_config
from .errors import (
    IllegalStatusTransition,
    NotFound,
    SchedulingError,
    ValidationError,
    Violation,
    ViolationKind,
)
from .lifecycle import CreateReservation, ReservationLifecycle, TRANSITIONS, build_window
from .locks import ResourceLocks, resource_locks
from .roster import DbRosterProvider, RosterProvider, StaticRosterProvider
from .statuses import (
    ACTIVE_STATUSES,
    PaymentMethod,
    PaymentStatus,
    ReservationSource,
    ReservationStatus,
    ShiftStatus,
)
from .timerange import TimeRange, contains, overlaps
from .validator import BookingRequest, ReservationValidator

__all__ = [
    "ACTIVE_STATUSES",
    "BookingRequest",
    "CreateReservation",
    "DbRosterProvider",
    "FreeSlots",
    "IllegalStatusTransition",
    "NotFound",
    "PaymentMethod",
    "PaymentStatus",
    "ReservationLifecycle",
    "ReservationSource",
    "ReservationStatus",
    "ReservationValidator",
    "ResourceCalendar",
    "ResourceKind",
    "ResourceLocks",
    "RosterProvider",
    "SchedulingConfig",
    "SchedulingError",
    "ShiftStatus",
    "SlotOffer",
    "StaticRosterProvider",
    "TRANSITIONS",
    "TimeRange",
    "ValidationError",
    "Violation",
    "ViolationKind",
    "build_window",
    "contains",
    "get_scheduling_config",
    "overlaps",
    "query_available_slots",
    "resource_locks",
]
