# spa_booking/routers/slots.py
"""
Slots API endpoints.

GET /slots/day - Bookable (therapist, room, window) offers for a variant
"""

from datetime import date, datetime
from typing import Callable

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.slots import SlotOfferRead, SlotsDayResponse
from ..services import directory
from ..services.scheduling import get_scheduling_config, query_available_slots
from ..services.scheduling.timerange import minutes_to_time_str


router = APIRouter(prefix="/slots", tags=["slots"])


def get_clock() -> Callable[[], datetime]:
    return datetime.now


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    variant_id: int,
    therapist_id: int | None = None,
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Get bookable slots for a service variant on a specific day."""
    config = get_scheduling_config()
    variant = directory.get_variant(db, variant_id)

    offers = query_available_slots(
        db=db,
        day=target_date,
        variant_id=variant_id,
        therapist_id=therapist_id,
        config=config,
        clock=clock,
    )

    return SlotsDayResponse(
        date=target_date,
        variant_id=variant_id,
        therapist_id=therapist_id,
        duration_minutes=variant.duration_minutes,
        slot_step_minutes=config.slot_step_minutes,
        slots=[
            SlotOfferRead(
                therapist_id=offer.therapist_id,
                therapist_name=offer.therapist_name,
                room_id=offer.room_id,
                start_time=minutes_to_time_str(offer.window.start),
                end_time=minutes_to_time_str(offer.window.end),
            )
            for offer in offers
        ],
    )
