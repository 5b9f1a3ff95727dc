# spa_booking/schemas/shifts.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, computed_field, field_validator, model_validator

from ..services.scheduling.statuses import ShiftStatus
from .common import minutes_to_time_str, time_str_to_minutes, validate_time_str


class ShiftCreate(BaseModel):
    therapist_id: int
    date: date
    start_time: str
    end_time: str
    status: ShiftStatus = ShiftStatus.WORKING

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return validate_time_str(v)

    @model_validator(mode="after")
    def check_order(self):
        if time_str_to_minutes(self.end_time) <= time_str_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class ShiftUpdate(BaseModel):
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: Optional[ShiftStatus] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_time_str(v)


class ShiftRead(BaseModel):
    id: int
    therapist_id: int
    date: date
    start_minute: int
    end_minute: int
    status: ShiftStatus

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def start_time(self) -> str:
        return minutes_to_time_str(self.start_minute)

    @computed_field
    @property
    def end_time(self) -> str:
        return minutes_to_time_str(self.end_minute)
