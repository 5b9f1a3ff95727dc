# spa_booking/routers/therapists.py
# PATCH = ALLOWED, DELETE = soft-delete (is_active)
# Deactivated therapists drop out of slot offers; their reservations stay.

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import Therapists as DBTherapists
from ..schemas.therapists import (
    TherapistCreate,
    TherapistRead,
    TherapistUpdate,
    WorkingWindowRead,
)
from ..services import directory
from ..services.scheduling import DbRosterProvider
from ..services.scheduling.timerange import minutes_to_time_str

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/therapists", tags=["therapists"])


@router.get("/", response_model=list[TherapistRead])
def list_therapists(db: Session = Depends(get_db)):
    return directory.active_therapists(db)


@router.get("/{id}", response_model=TherapistRead)
def get_therapist(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBTherapists, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.get("/{id}/working-window", response_model=WorkingWindowRead)
def get_working_window(
    id: int,
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    """Resolved working hours on a date: per-date shift first, then the weekly template."""
    therapist = directory.get_therapist(db, id)
    window = DbRosterProvider(db).get_working_window(therapist.id, target_date)
    if window is None:
        return WorkingWindowRead(therapist_id=therapist.id, date=target_date, working=False)
    return WorkingWindowRead(
        therapist_id=therapist.id,
        date=target_date,
        working=True,
        start_time=minutes_to_time_str(window.start),
        end_time=minutes_to_time_str(window.end),
    )


@router.post("/", response_model=TherapistRead, status_code=status.HTTP_201_CREATED)
def create_therapist(
    data: TherapistCreate,
    db: Session = Depends(get_db),
):
    obj = DBTherapists(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)

    logger.info(f"Therapist created: id={obj.id}, name={obj.display_name}")
    return obj


@router.patch("/{id}", response_model=TherapistRead)
def update_therapist(
    id: int,
    data: TherapistUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBTherapists, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    if "work_schedule" in changes:
        logger.info(f"Therapist {obj.id} weekly template updated")
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_therapist(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBTherapists, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
    logger.info(f"Therapist deactivated: id={obj.id}")
