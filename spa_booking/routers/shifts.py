# spa_booking/routers/shifts.py
# Per-date roster entries. One entry per therapist per date.
# Editing a shift does not re-validate reservations already booked on it.

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import WorkShifts as DBWorkShifts
from ..schemas.common import time_str_to_minutes
from ..schemas.shifts import ShiftCreate, ShiftRead, ShiftUpdate
from ..services import directory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.get("/", response_model=list[ShiftRead])
def list_shifts(
    target_date: Optional[date] = Query(None, alias="date"),
    therapist_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBWorkShifts)
    if target_date is not None:
        query = query.filter(DBWorkShifts.date == target_date.isoformat())
    if therapist_id is not None:
        query = query.filter(DBWorkShifts.therapist_id == therapist_id)
    return query.order_by(DBWorkShifts.date, DBWorkShifts.therapist_id).all()


@router.get("/{id}", response_model=ShiftRead)
def get_shift(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBWorkShifts, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=ShiftRead, status_code=status.HTTP_201_CREATED)
def create_shift(
    data: ShiftCreate,
    db: Session = Depends(get_db),
):
    directory.get_therapist(db, data.therapist_id)

    existing = (
        db.query(DBWorkShifts)
        .filter(
            DBWorkShifts.therapist_id == data.therapist_id,
            DBWorkShifts.date == data.date.isoformat(),
        )
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Therapist already has a shift for this date",
        )

    obj = DBWorkShifts(
        therapist_id=data.therapist_id,
        date=data.date.isoformat(),
        start_minute=time_str_to_minutes(data.start_time),
        end_minute=time_str_to_minutes(data.end_time),
        status=data.status.value,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)

    logger.info(
        f"Shift created: therapist_id={obj.therapist_id}, date={obj.date}, status={obj.status}"
    )
    return obj


@router.patch("/{id}", response_model=ShiftRead)
def update_shift(
    id: int,
    data: ShiftUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBWorkShifts, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    start = time_str_to_minutes(data.start_time) if data.start_time else obj.start_minute
    end = time_str_to_minutes(data.end_time) if data.end_time else obj.end_minute
    if end <= start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_time must be after start_time",
        )

    obj.start_minute = start
    obj.end_minute = end
    if data.status is not None:
        obj.status = data.status.value

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shift(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBWorkShifts, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    db.delete(obj)
    db.commit()
