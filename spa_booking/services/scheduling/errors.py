# spa_booking/services/scheduling/errors.py
"""
Scheduling error taxonomy.

Validation failures are expected outcomes: the API layer renders them as
{"detail": ..., "code": ...} so the UI can show an actionable message.
Storage failures are not wrapped here and propagate as they are.
"""

from enum import Enum
from typing import NamedTuple


class ViolationKind(str, Enum):
    INVALID_DURATION = "invalid_duration"
    OUTSIDE_WORKING_HOURS = "outside_working_hours"
    THERAPIST_CONFLICT = "therapist_conflict"
    ROOM_CONFLICT = "room_conflict"
    PAST_DATE_TIME = "past_date_time"


class Violation(NamedTuple):
    kind: ViolationKind
    message: str


class SchedulingError(Exception):
    code: str = "scheduling_error"
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """A booking request was rejected by the validator."""

    _STATUS = {
        ViolationKind.THERAPIST_CONFLICT: 409,
        ViolationKind.ROOM_CONFLICT: 409,
    }

    def __init__(self, violation: Violation):
        super().__init__(violation.message)
        self.violation = violation
        self.kind = violation.kind
        self.code = violation.kind.value
        self.status_code = self._STATUS.get(violation.kind, 422)


class IllegalStatusTransition(SchedulingError):
    code = "illegal_status_transition"
    status_code = 409

    def __init__(self, current: str, requested: str, reason: str | None = None):
        message = f"Cannot change status from {current} to {requested}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.current = current
        self.requested = requested


class NotFound(SchedulingError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
