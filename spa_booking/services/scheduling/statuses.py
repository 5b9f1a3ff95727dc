# spa_booking/services/scheduling/statuses.py

from enum import Enum


class ReservationStatus(str, Enum):
    NEW = "new"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    MIXED = "mixed"
    TRANSFER = "transfer"
    PACKAGE = "package"
    VOUCHER = "voucher"


class ReservationSource(str, Enum):
    PHONE = "phone"
    ONLINE = "online"
    WALK_IN = "walk_in"


class ShiftStatus(str, Enum):
    WORKING = "working"
    OFF = "off"
    LEAVE = "leave"
    SICK = "sick"


# Reservations in these states occupy their therapist and room
ACTIVE_STATUSES = (
    ReservationStatus.NEW,
    ReservationStatus.CONFIRMED,
    ReservationStatus.IN_PROGRESS,
)

TERMINAL_STATUSES = (
    ReservationStatus.COMPLETED,
    ReservationStatus.CANCELLED,
    ReservationStatus.NO_SHOW,
)
