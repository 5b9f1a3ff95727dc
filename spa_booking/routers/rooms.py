# spa_booking/routers/rooms.py
# Shared room pool. PATCH = ALLOWED, DELETE = soft-delete (is_active).
# Deactivated rooms keep their reservations but are no longer offered.

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import Rooms as DBRooms
from ..schemas.rooms import (
    RoomBusyRead,
    RoomCreate,
    RoomRead,
    RoomUpdate,
)
from ..services import directory
from ..services.scheduling import ResourceCalendar, ResourceKind
from ..services.scheduling.timerange import minutes_to_time_str

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    query = db.query(DBRooms).filter(DBRooms.name == name)
    if exclude_id is not None:
        query = query.filter(DBRooms.id != exclude_id)
    return query.first() is not None


@router.get("/", response_model=list[RoomRead])
def list_rooms(db: Session = Depends(get_db)):
    """Active rooms in the order they are offered for bookings."""
    return directory.active_rooms(db)


@router.get("/{id}", response_model=RoomRead)
def get_room(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBRooms, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.get("/{id}/busy", response_model=RoomBusyRead)
def get_room_busy(
    id: int,
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    room = directory.get_room(db, id)
    busy = ResourceCalendar(db).busy_intervals(ResourceKind.ROOM, room.id, target_date)
    return RoomBusyRead(
        room_id=room.id,
        date=target_date,
        busy=[
            {"start_time": minutes_to_time_str(w.start), "end_time": minutes_to_time_str(w.end)}
            for w in busy
        ],
    )


@router.post("/", response_model=RoomRead, status_code=status.HTTP_201_CREATED)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
):
    if _name_taken(db, data.name):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room name already exists",
        )

    obj = DBRooms(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)

    logger.info(f"Room created: id={obj.id}, name={obj.name}")
    return obj


@router.patch("/{id}", response_model=RoomRead)
def update_room(
    id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBRooms, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and _name_taken(db, changes["name"], exclude_id=id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room name already exists",
        )

    for field, value in changes.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBRooms, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
    logger.info(f"Room deactivated: id={obj.id}")
