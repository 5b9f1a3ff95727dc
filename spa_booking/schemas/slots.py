# spa_booking/schemas/slots.py
"""
Pydantic schemas for the slot availability API.
"""

from datetime import date
from pydantic import BaseModel, Field


class SlotOfferRead(BaseModel):
    """One bookable (therapist, room, window) triple."""
    therapist_id: int
    therapist_name: str
    room_id: int
    start_time: str  # "HH:MM"
    end_time: str    # "HH:MM"


class SlotsDayResponse(BaseModel):
    """Bookable slots for a variant on a day."""
    date: date
    variant_id: int
    therapist_id: int | None = None
    duration_minutes: int
    slot_step_minutes: int = Field(description="Grid step in minutes (15/30/60)")
    slots: list[SlotOfferRead]
