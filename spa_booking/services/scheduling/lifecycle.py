# spa_booking/services/scheduling/lifecycle.py
"""
Reservation lifecycle manager.

The only code path that writes reservation rows. Every write:
  1. takes the (therapist, date) and (room, date) locks it touches
  2. re-reads the reservation / calendar under those locks
  3. validates, writes and commits in one transaction (rollback on failure)
  4. emits a reservation_* event after the commit

Status machine:

    new ──→ confirmed ──→ in_progress ──→ completed
     │          │
     ├──────────┴──→ cancelled        (releases the window)
     └──────────┴──→ no_show          (window end must have passed)

Any non-terminal reservation may be rescheduled; the row moves from the old
window to the new one in a single UPDATE, so no reader sees it in both or
in neither.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from .. import directory, events
from .calendar import ResourceCalendar, ResourceKind
from .config import SchedulingConfig, get_scheduling_config
from .errors import IllegalStatusTransition, ValidationError, Violation, ViolationKind
from .locks import LockKey, ResourceLocks, resource_locks
from .roster import DbRosterProvider, RosterProvider
from .statuses import (
    PaymentMethod,
    PaymentStatus,
    ReservationSource,
    ReservationStatus,
    TERMINAL_STATUSES,
)
from .timerange import TimeRange
from .validator import BookingRequest, ReservationValidator

logger = logging.getLogger(__name__)


TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.NEW: frozenset({
        ReservationStatus.CONFIRMED,
        ReservationStatus.CANCELLED,
        ReservationStatus.NO_SHOW,
    }),
    ReservationStatus.CONFIRMED: frozenset({
        ReservationStatus.IN_PROGRESS,
        ReservationStatus.CANCELLED,
        ReservationStatus.NO_SHOW,
    }),
    ReservationStatus.IN_PROGRESS: frozenset({
        ReservationStatus.COMPLETED,
    }),
}


def is_legal_transition(current: ReservationStatus, new: ReservationStatus) -> bool:
    return new in TRANSITIONS.get(current, frozenset())


def build_window(start_minute: int, end_minute: Optional[int], duration_minutes: int) -> TimeRange:
    """Window from a start and an optional end (default: start + duration)."""
    end = end_minute if end_minute is not None else start_minute + duration_minutes
    try:
        return TimeRange(start_minute, end)
    except ValueError:
        raise ValidationError(Violation(
            ViolationKind.INVALID_DURATION,
            f"Invalid window {start_minute}-{end} for a {duration_minutes} min service",
        ))


@dataclass(frozen=True)
class CreateReservation:
    client_id: int
    therapist_id: int
    room_id: int
    variant_id: int
    day: date
    start_minute: int
    # None → start + variant duration
    end_minute: Optional[int] = None
    source: Optional[ReservationSource] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None


class ReservationLifecycle:
    def __init__(
        self,
        db: Session,
        config: SchedulingConfig | None = None,
        roster: RosterProvider | None = None,
        locks: ResourceLocks | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.config = config or get_scheduling_config()
        self.calendar = ResourceCalendar(db)
        self.roster = roster or DbRosterProvider(db)
        self.locks = locks or resource_locks
        self.clock = clock
        self.validator = ReservationValidator(
            self.calendar, self.roster, self.config, clock
        )

    # ── Create ───────────────────────────────────────────────────────────

    def check(self, request: CreateReservation) -> Optional[Violation]:
        """Dry run of create(): the first violation, or None. Writes nothing."""
        directory.get_client(self.db, request.client_id)
        directory.get_therapist(self.db, request.therapist_id)
        directory.get_room(self.db, request.room_id)
        variant = directory.get_variant(self.db, request.variant_id)

        try:
            booking = self._booking_request(request, variant.duration_minutes)
        except ValidationError as e:
            return e.violation
        return self.validator.validate(booking)

    def create(self, request: CreateReservation):
        from ...models.tables import Reservations

        client = directory.get_client(self.db, request.client_id)
        therapist = directory.get_therapist(self.db, request.therapist_id)
        room = directory.get_room(self.db, request.room_id)
        variant = directory.get_variant(self.db, request.variant_id)

        booking = self._booking_request(request, variant.duration_minutes)

        with self.locks.hold(self._keys(therapist.id, room.id, request.day)):
            self._reject_if_invalid(booking)

            now = self.clock()
            reservation = Reservations(
                client_id=client.id,
                therapist_id=therapist.id,
                room_id=room.id,
                service_id=variant.service_id,
                variant_id=variant.id,
                date=request.day.isoformat(),
                start_minute=booking.window.start,
                end_minute=booking.window.end,
                duration_minutes=variant.duration_minutes,
                price=_variant_price(variant),
                status=ReservationStatus.NEW.value,
                payment_status=PaymentStatus.UNPAID.value,
                payment_method=_value(request.payment_method),
                source=_value(request.source),
                notes=request.notes,
                created_by=request.created_by,
                created_at=_timestamp(now),
                updated_at=_timestamp(now),
            )
            try:
                self.db.add(reservation)
                self.db.flush()
                reservation.number = f"R-{now.year}-{reservation.id:06d}"
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            self.db.refresh(reservation)

        logger.info(
            f"Reservation created: id={reservation.id}, number={reservation.number}, "
            f"therapist_id={therapist.id}, room_id={room.id}, "
            f"time={reservation.date} {booking.window}"
        )
        events.emit_event("reservation_created", {
            "reservation_id": reservation.id,
            "number": reservation.number,
            "created_by": request.created_by,
        })
        return reservation

    # ── Status ───────────────────────────────────────────────────────────

    def update_status(self, reservation_id: int, new_status: ReservationStatus):
        new_status = ReservationStatus(new_status)
        reservation = directory.get_reservation(self.db, reservation_id)

        with self.locks.hold(self._reservation_keys(reservation)):
            self.db.refresh(reservation)
            current = ReservationStatus(reservation.status)

            if not is_legal_transition(current, new_status):
                raise IllegalStatusTransition(current.value, new_status.value)

            now = self.clock()
            day = date.fromisoformat(reservation.date)
            window = TimeRange(reservation.start_minute, reservation.end_minute)

            if new_status == ReservationStatus.NO_SHOW and now < window.end_datetime(day):
                raise IllegalStatusTransition(
                    current.value, new_status.value, "reservation has not ended yet"
                )
            if new_status == ReservationStatus.IN_PROGRESS and now < window.start_datetime(day):
                logger.warning(
                    f"Reservation {reservation.id} started before its window "
                    f"({reservation.date} {window})"
                )

            reservation.status = new_status.value
            reservation.updated_at = _timestamp(now)
            self._commit()
            self.db.refresh(reservation)

        logger.info(
            f"Reservation {reservation.id} status: {current.value} → {new_status.value}"
        )
        events.emit_event("reservation_status_changed", {
            "reservation_id": reservation.id,
            "old_status": current.value,
            "new_status": new_status.value,
            "payment_status": reservation.payment_status,
        })
        return reservation

    def cancel(self, reservation_id: int):
        reservation = self.update_status(reservation_id, ReservationStatus.CANCELLED)
        events.emit_event("reservation_cancelled", {"reservation_id": reservation.id})
        return reservation

    # ── Reschedule ───────────────────────────────────────────────────────

    def reschedule(
        self,
        reservation_id: int,
        new_day: date,
        new_window: TimeRange,
        therapist_id: Optional[int] = None,
        room_id: Optional[int] = None,
    ):
        reservation = directory.get_reservation(self.db, reservation_id)
        therapist_id = therapist_id or reservation.therapist_id
        room_id = room_id or reservation.room_id
        directory.get_therapist(self.db, therapist_id)
        directory.get_room(self.db, room_id)

        keys = self._reservation_keys(reservation) + self._keys(therapist_id, room_id, new_day)

        with self.locks.hold(keys):
            self.db.refresh(reservation)
            current = ReservationStatus(reservation.status)
            if current in TERMINAL_STATUSES:
                raise IllegalStatusTransition(
                    current.value, "rescheduled", "reservation is closed"
                )

            old_day = date.fromisoformat(reservation.date)
            old_window = TimeRange(reservation.start_minute, reservation.end_minute)
            old = f"{reservation.date} {old_window}"

            self._reject_if_invalid(BookingRequest(
                therapist_id=therapist_id,
                room_id=room_id,
                day=new_day,
                window=new_window,
                duration_minutes=reservation.duration_minutes,
                exclude_reservation_id=reservation.id,
                current_start=old_window.start_datetime(old_day),
            ))

            reservation.therapist_id = therapist_id
            reservation.room_id = room_id
            reservation.date = new_day.isoformat()
            reservation.start_minute = new_window.start
            reservation.end_minute = new_window.end
            reservation.updated_at = _timestamp(self.clock())
            self._commit()
            self.db.refresh(reservation)

        logger.info(
            f"Reservation {reservation.id} rescheduled: {old} → "
            f"{reservation.date} {new_window} (therapist_id={therapist_id}, room_id={room_id})"
        )
        events.emit_event("reservation_rescheduled", {
            "reservation_id": reservation.id,
            "date": reservation.date,
            "start": new_window.start,
            "end": new_window.end,
        })
        return reservation

    # ── Payment ──────────────────────────────────────────────────────────

    def update_payment(
        self,
        reservation_id: int,
        payment_status: PaymentStatus,
        payment_method: Optional[PaymentMethod] = None,
    ):
        """Payment state is independent of the booking status."""
        payment_status = PaymentStatus(payment_status)
        reservation = directory.get_reservation(self.db, reservation_id)

        reservation.payment_status = payment_status.value
        if payment_method is not None:
            reservation.payment_method = PaymentMethod(payment_method).value
        reservation.updated_at = _timestamp(self.clock())
        self._commit()
        self.db.refresh(reservation)

        logger.info(f"Reservation {reservation.id} payment: {payment_status.value}")
        events.emit_event("reservation_payment_changed", {
            "reservation_id": reservation.id,
            "payment_status": payment_status.value,
        })
        return reservation

    # ── Helpers ──────────────────────────────────────────────────────────

    def _booking_request(self, request: CreateReservation, duration_minutes: int) -> BookingRequest:
        window = build_window(request.start_minute, request.end_minute, duration_minutes)
        return BookingRequest(
            therapist_id=request.therapist_id,
            room_id=request.room_id,
            day=request.day,
            window=window,
            duration_minutes=duration_minutes,
        )

    def _reject_if_invalid(self, booking: BookingRequest) -> None:
        violation = self.validator.validate(booking)
        if violation is not None:
            logger.warning(
                f"Booking rejected ({violation.kind.value}): therapist_id={booking.therapist_id}, "
                f"room_id={booking.room_id}, time={booking.day.isoformat()} {booking.window}"
            )
            raise ValidationError(violation)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def _keys(therapist_id: int, room_id: int, day: date) -> list[LockKey]:
        return [
            LockKey.of(ResourceKind.THERAPIST.value, therapist_id, day),
            LockKey.of(ResourceKind.ROOM.value, room_id, day),
        ]

    def _reservation_keys(self, reservation) -> list[LockKey]:
        return self._keys(
            reservation.therapist_id,
            reservation.room_id,
            date.fromisoformat(reservation.date),
        )


def _variant_price(variant) -> float:
    """Promo price wins over the regular price when set."""
    if variant.promo_price is not None:
        return variant.promo_price
    return variant.regular_price


def _value(member) -> Optional[str]:
    return getattr(member, "value", member)


def _timestamp(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S")
