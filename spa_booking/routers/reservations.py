# spa_booking/routers/reservations.py
# Writes go through ReservationLifecycle only. DELETE = 405 (soft lifecycle).
# Scheduling errors are rendered by the handler in main.py.

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import Reservations as DBReservations
from ..schemas.reservations import (
    AvailabilityCheckResponse,
    ReservationCreate,
    ReservationPaymentUpdate,
    ReservationRead,
    ReservationReschedule,
    ReservationStatusUpdate,
)
from ..services import directory
from ..services.scheduling import (
    CreateReservation,
    PaymentStatus,
    ReservationLifecycle,
    ReservationStatus,
    build_window,
)

router = APIRouter(prefix="/reservations", tags=["reservations"])


def get_lifecycle(db: Session = Depends(get_db)) -> ReservationLifecycle:
    return ReservationLifecycle(db)


def _create_request(data: ReservationCreate) -> CreateReservation:
    return CreateReservation(
        client_id=data.client_id,
        therapist_id=data.therapist_id,
        room_id=data.room_id,
        variant_id=data.variant_id,
        day=data.date,
        start_minute=data.start_minute,
        end_minute=data.end_minute,
        source=data.source,
        payment_method=data.payment_method,
        notes=data.notes,
        created_by=data.created_by,
    )


@router.get("/", response_model=list[ReservationRead])
def list_reservations(
    target_date: Optional[date] = Query(None, alias="date"),
    therapist_id: Optional[int] = None,
    room_id: Optional[int] = None,
    client_id: Optional[int] = None,
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    query = db.query(DBReservations)

    if target_date is not None:
        query = query.filter(DBReservations.date == target_date.isoformat())
    if therapist_id is not None:
        query = query.filter(DBReservations.therapist_id == therapist_id)
    if room_id is not None:
        query = query.filter(DBReservations.room_id == room_id)
    if client_id is not None:
        query = query.filter(DBReservations.client_id == client_id)
    if reservation_status is not None:
        query = query.filter(DBReservations.status == reservation_status.value)
    if payment_status is not None:
        query = query.filter(DBReservations.payment_status == payment_status.value)

    return (
        query.order_by(DBReservations.date, DBReservations.start_minute, DBReservations.id)
        .offset(offset)
        .limit(limit)
        .all()
    )


@router.get("/{id}", response_model=ReservationRead)
def get_reservation(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBReservations, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
):
    return lifecycle.create(_create_request(data))


@router.post("/check", response_model=AvailabilityCheckResponse)
def check_reservation(
    data: ReservationCreate,
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
):
    """Run the booking checks without writing anything."""
    violation = lifecycle.check(_create_request(data))
    if violation is None:
        return AvailabilityCheckResponse(available=True)
    return AvailabilityCheckResponse(
        available=False,
        code=violation.kind.value,
        detail=violation.message,
    )


@router.post("/{id}/status", response_model=ReservationRead)
def update_reservation_status(
    id: int,
    data: ReservationStatusUpdate,
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
):
    return lifecycle.update_status(id, data.status)


@router.post("/{id}/cancel", response_model=ReservationRead)
def cancel_reservation(
    id: int,
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
):
    return lifecycle.cancel(id)


@router.post("/{id}/reschedule", response_model=ReservationRead)
def reschedule_reservation(
    id: int,
    data: ReservationReschedule,
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
):
    reservation = directory.get_reservation(lifecycle.db, id)
    window = build_window(data.start_minute, data.end_minute, reservation.duration_minutes)
    return lifecycle.reschedule(
        id,
        data.date,
        window,
        therapist_id=data.therapist_id,
        room_id=data.room_id,
    )


@router.post("/{id}/payment", response_model=ReservationRead)
def update_reservation_payment(
    id: int,
    data: ReservationPaymentUpdate,
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
):
    return lifecycle.update_payment(id, data.payment_status, data.payment_method)


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
