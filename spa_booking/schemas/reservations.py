# spa_booking/schemas/reservations.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, computed_field, field_validator, model_validator

from ..services.scheduling.statuses import (
    PaymentMethod,
    PaymentStatus,
    ReservationSource,
    ReservationStatus,
)
from .common import minutes_to_time_str, time_str_to_minutes, validate_time_str


class _WindowInput(BaseModel):
    start_time: str
    end_time: Optional[str] = None  # defaults to start + service duration

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_time_str(v)

    @model_validator(mode="after")
    def check_order(self):
        if self.end_time is not None and self.end_minute <= self.start_minute:
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def start_minute(self) -> int:
        return time_str_to_minutes(self.start_time)

    @property
    def end_minute(self) -> Optional[int]:
        if self.end_time is None:
            return None
        return time_str_to_minutes(self.end_time)


class ReservationCreate(_WindowInput):
    client_id: int
    therapist_id: int
    room_id: int
    variant_id: int
    date: date

    source: Optional[ReservationSource] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None


class ReservationReschedule(_WindowInput):
    date: date
    therapist_id: Optional[int] = None
    room_id: Optional[int] = None


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus


class ReservationPaymentUpdate(BaseModel):
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None


class AvailabilityCheckResponse(BaseModel):
    available: bool
    code: Optional[str] = None
    detail: Optional[str] = None


class ReservationRead(BaseModel):
    id: int
    number: str

    client_id: int
    therapist_id: int
    room_id: int
    service_id: int
    variant_id: int

    date: date
    start_minute: int
    end_minute: int

    duration_minutes: int
    price: float

    status: ReservationStatus
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    source: Optional[ReservationSource] = None
    notes: Optional[str] = None

    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def start_time(self) -> str:
        return minutes_to_time_str(self.start_minute)

    @computed_field
    @property
    def end_time(self) -> str:
        return minutes_to_time_str(self.end_minute)
