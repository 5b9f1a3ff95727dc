# spa_booking/services/directory.py
"""
Id → record lookups for the records the scheduler references but does not
own (clients, therapists, rooms, service variants).

Inactive (soft-deleted) records are reported as missing.
"""

from sqlalchemy.orm import Session

from ..models.tables import (
    Clients,
    Reservations,
    Rooms,
    Services,
    ServiceVariants,
    Therapists,
)
from .scheduling.errors import NotFound


def get_client(db: Session, client_id: int) -> Clients:
    client = db.get(Clients, client_id)
    if client is None or not client.is_active:
        raise NotFound("Client", client_id)
    return client


def get_therapist(db: Session, therapist_id: int) -> Therapists:
    therapist = db.get(Therapists, therapist_id)
    if therapist is None or not therapist.is_active:
        raise NotFound("Therapist", therapist_id)
    return therapist


def get_room(db: Session, room_id: int) -> Rooms:
    room = db.get(Rooms, room_id)
    if room is None or not room.is_active:
        raise NotFound("Room", room_id)
    return room


def get_variant(db: Session, variant_id: int) -> ServiceVariants:
    """Variant of an active service."""
    variant = db.get(ServiceVariants, variant_id)
    if variant is None:
        raise NotFound("Service variant", variant_id)
    service = db.get(Services, variant.service_id)
    if service is None or not service.is_active:
        raise NotFound("Service", variant.service_id)
    return variant


def get_reservation(db: Session, reservation_id: int) -> Reservations:
    reservation = db.get(Reservations, reservation_id)
    if reservation is None:
        raise NotFound("Reservation", reservation_id)
    return reservation


def active_therapists(db: Session) -> list[Therapists]:
    return (
        db.query(Therapists)
        .filter(Therapists.is_active == 1)
        .order_by(Therapists.id)
        .all()
    )


def active_rooms(db: Session) -> list[Rooms]:
    """Shared room pool in offering order."""
    return (
        db.query(Rooms)
        .filter(Rooms.is_active == 1)
        .order_by(Rooms.display_order.is_(None), Rooms.display_order, Rooms.id)
        .all()
    )
