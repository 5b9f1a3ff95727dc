# spa_booking/services/scheduling/config.py
"""
Scheduling configuration.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from ...config import settings


@dataclass(frozen=True)
class SchedulingConfig:
    """
    Configuration for the scheduling engine.

    Attributes:
        slot_step_minutes: Grid step for offered start times (15/30/60)
        past_booking_grace_minutes: How far in the past a new booking may
            still start (front desk entering a walk-in a few minutes late)
    """
    slot_step_minutes: int = 30  # 15 / 30 / 60
    past_booking_grace_minutes: int = 5

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")
        if self.past_booking_grace_minutes < 0:
            raise ValueError(
                f"past_booking_grace_minutes must be >= 0, got {self.past_booking_grace_minutes}"
            )

    @property
    def past_booking_grace(self) -> timedelta:
        return timedelta(minutes=self.past_booking_grace_minutes)


@lru_cache
def get_scheduling_config() -> SchedulingConfig:
    """Get scheduling configuration (singleton), built from settings."""
    return SchedulingConfig(
        slot_step_minutes=settings.slot_step_minutes,
        past_booking_grace_minutes=settings.past_booking_grace_minutes,
    )
