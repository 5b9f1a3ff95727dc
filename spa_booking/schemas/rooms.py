# spa_booking/schemas/rooms.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .common import reject_null


class RoomCreate(BaseModel):
    name: str = Field(min_length=1)
    display_order: Optional[int] = None
    notes: Optional[str] = None


class RoomUpdate(BaseModel):
    is_active: Optional[bool] = None
    name: Optional[str] = Field(default=None, min_length=1)
    display_order: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("name", "is_active")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        return reject_null(v, info.field_name)


class RoomRead(BaseModel):
    id: int
    name: str
    display_order: Optional[int] = None
    notes: Optional[str] = None
    is_active: bool

    model_config = {"from_attributes": True}


class BusyInterval(BaseModel):
    start_time: str  # "HH:MM"
    end_time: str    # "HH:MM"


class RoomBusyRead(BaseModel):
    """Windows held by active reservations of a room on one date."""
    room_id: int
    date: date
    busy: list[BusyInterval]
