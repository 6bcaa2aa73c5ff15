"""
Doseplan Recovery Schedule Generation

Builds dated, timed dose schedules (drops, pills, exercises) for patients
recovering from a procedure, from a start date, an awake window and a
resolved protocol.

Main entry point: ScheduleGenerator / schedule()
"""

from .errors import (
    ImpossibleSchedule,
    InvalidDate,
    InvalidTimeFormat,
    InvalidWindow,
    SchedulingError,
)
from .scheduler import (
    DEFAULT_MIN_DURATION_MINUTES,
    LEGACY_MIN_DURATION_MINUTES,
    ScheduleGenerator,
    schedule,
)
from .types import (
    Action,
    AwakeWindow,
    DoseSlot,
    Phase,
    ScheduleRequest,
    ScheduleResult,
    UnresolvedCollision,
)

__all__ = [
    # Types
    "Phase",
    "Action",
    "ScheduleRequest",
    "AwakeWindow",
    "DoseSlot",
    "ScheduleResult",
    "UnresolvedCollision",
    # Errors
    "SchedulingError",
    "InvalidTimeFormat",
    "InvalidDate",
    "InvalidWindow",
    "ImpossibleSchedule",
    # Scheduler
    "ScheduleGenerator",
    "schedule",
    "DEFAULT_MIN_DURATION_MINUTES",
    "LEGACY_MIN_DURATION_MINUTES",
]
