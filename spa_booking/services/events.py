"""
spa_booking/services/events.py

Event emitter: pushes reservation events to a Redis list for consumption by
notification workers (SMS reminders, staff notifications).

Queue:
- events:p2p: instant delivery (reservation_created, reservation_cancelled, ...)

Emission is fire-and-forget: a Redis outage never fails a booking.
"""

import json
import time
import logging

from ..config import settings
from ..redis_client import redis_client

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit a p2p event (instant delivery).

    Pushed to Redis list `events:p2p` for the consumer loop.
    """
    if not settings.events_enabled:
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(P2P_QUEUE, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
    except Exception:
        logger.exception(f"Failed to emit event {event_type}")
