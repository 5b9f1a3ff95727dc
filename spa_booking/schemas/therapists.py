# spa_booking/schemas/therapists.py

import json
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ValidationInfo, computed_field, field_validator

from .common import reject_null


def validate_work_schedule(value: str) -> str:
    """Weekly template must be a JSON object (day key → window)."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        raise ValueError("work_schedule must be valid JSON")
    if not isinstance(parsed, dict):
        raise ValueError("work_schedule must be a JSON object")
    return value


class TherapistCreate(BaseModel):
    first_name: str
    last_name: Optional[str] = None
    phone: Optional[str] = None
    work_schedule: str = "{}"

    @field_validator("work_schedule")
    @classmethod
    def check_work_schedule(cls, v: str) -> str:
        return validate_work_schedule(v)


class TherapistUpdate(BaseModel):
    is_active: Optional[bool] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    work_schedule: Optional[str] = None

    @field_validator("first_name", "is_active", "work_schedule")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        return reject_null(v, info.field_name)

    @field_validator("work_schedule")
    @classmethod
    def check_work_schedule(cls, v: str) -> str:
        return validate_work_schedule(v)


class TherapistRead(BaseModel):
    id: int
    first_name: str
    last_name: Optional[str] = None
    phone: Optional[str] = None
    work_schedule: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class WorkingWindowRead(BaseModel):
    therapist_id: int
    date: date
    working: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None
