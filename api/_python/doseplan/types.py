"""
Data structures for dose schedule generation.

Input types (Phase, Action, ScheduleRequest) are supplied by callers with
protocols already resolved. Derived and output types (AwakeWindow, DoseSlot,
ScheduleResult) are built fresh on every invocation.
"""

import math
from dataclasses import dataclass, field
from typing import Literal

from .errors import SchedulingError

MINUTES_PER_DAY = 24 * 60

# =============================================================================
# Input Types
# =============================================================================

ActionRoute = Literal["eye_drop", "oral", "other"]


@dataclass
class Phase:
    """
    A contiguous range of protocol days sharing one frequency rule.

    Days are 1-based and inclusive relative to the start date.
    """

    day_start: int
    day_end: int
    times_per_day: int = 0  # Even distribution count (also caps interval doses)
    interval_hours: float | None = None  # Fixed spacing from wake time

    @property
    def day_count(self) -> int:
        """Number of protocol days covered (0 for an inverted range)."""
        return max(self.day_end - self.day_start + 1, 0)

    @property
    def uses_interval(self) -> bool:
        """True if doses recur every N hours instead of being spread evenly."""
        return bool(
            self.interval_hours
            and math.isfinite(self.interval_hours)
            and self.interval_hours > 0
        )


@dataclass
class Action:
    """A recurring treatment item (drop, pill, exercise, check)."""

    id: str  # Grouping key for collision resolution
    name: str
    phases: list[Phase]
    min_duration_minutes: int | None = None  # None = use the generator default
    color: str | None = None
    route: ActionRoute | None = None
    notes: str | None = None


@dataclass
class ScheduleRequest:
    """Everything the engine needs for one schedule."""

    start_date: str  # "2025-01-01" ISO date (protocol day 1)
    wake_time: str  # "08:00" format
    sleep_time: str  # "22:00" format, may be earlier than wake (crosses midnight)
    actions: list[Action]


# =============================================================================
# Derived Types
# =============================================================================


@dataclass(frozen=True)
class AwakeWindow:
    """
    The daily span in which doses may be placed.

    normalized_sleep_minutes exceeds MINUTES_PER_DAY when sleep happens
    after midnight (e.g. wake 07:00, sleep 01:00 -> 420 / 1500).
    """

    wake_minutes: int
    normalized_sleep_minutes: int

    @property
    def window_minutes(self) -> int:
        return self.normalized_sleep_minutes - self.wake_minutes

    @property
    def crosses_midnight(self) -> bool:
        return self.normalized_sleep_minutes > MINUTES_PER_DAY

    @property
    def sleep_minutes_mod(self) -> int:
        """Sleep time on the 0-1439 clock face."""
        return self.normalized_sleep_minutes % MINUTES_PER_DAY


@dataclass(frozen=True)
class OccupiedInterval:
    """[start, end) minute range on the 0-1439 clock face."""

    start: int
    end: int

    def overlaps(self, start: int, end: int) -> bool:
        return max(start, self.start) < min(end, self.end)


# =============================================================================
# Output Types
# =============================================================================


@dataclass
class DoseSlot:
    """
    One scheduled occurrence of an action.

    Only `time` may be adjusted (by the collision resolver) before the final
    sort; every other field is fixed at creation.
    """

    id: str  # "slot-0", "slot-1", ... unique within one invocation
    action_id: str
    action_name: str
    color: str | None
    date: str  # "2025-01-02" ISO date, includes any rounding rollover
    time: str  # "HH:MM"
    day_index: int  # 0-based protocol day, includes any rounding rollover
    notes: str | None = None


@dataclass
class UnresolvedCollision:
    """A slot the resolver left at its original (overlapping) time."""

    slot_id: str
    action_id: str
    date: str
    time: str


ScheduleStage = Literal["sorted", "rejected"]


@dataclass
class ScheduleResult:
    """
    Outcome of one scheduling call.

    Exactly one of `slots` (on success) or `error` (on rejection) is
    meaningful. A rejected result never carries slots.
    """

    slots: list[DoseSlot] = field(default_factory=list)
    error: SchedulingError | None = None
    stage: ScheduleStage = "sorted"
    unresolved_collisions: list[UnresolvedCollision] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[DoseSlot]:
        """Return the slots, or raise the carried error for a rejected result."""
        if self.error is not None:
            raise self.error
        return self.slots

    @classmethod
    def rejected(cls, error: SchedulingError) -> "ScheduleResult":
        return cls(slots=[], error=error, stage="rejected")
