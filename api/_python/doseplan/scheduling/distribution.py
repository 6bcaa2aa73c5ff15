"""
Dose distribution across the awake window.

For each action phase, works out how many doses a protocol day gets and
their raw offsets from wake time, then materializes one DoseSlot per
(day, dose) pair:

- Interval phases: first dose at wake, then every N hours while it fits,
  optionally capped by times_per_day
- Even phases: times_per_day doses spread over the window, first at wake
- As-needed phases (no count, no interval): no scheduled doses

Times are rounded to the half hour for readability. A dose rounded past
midnight is carried onto the next calendar date and protocol day instead
of being clipped.
"""

from dataclasses import dataclass

from ..time_math import add_days, minutes_to_time_of_day, round_to_half_hour
from ..types import MINUTES_PER_DAY, Action, AwakeWindow, DoseSlot, Phase


@dataclass(frozen=True)
class PhasePlan:
    """Dose spacing for one protocol day of a phase."""

    interval_minutes: float  # Fractional for even distribution
    doses_per_day: int

    def raw_offsets(self, wake_minutes: int) -> list[float]:
        """Unrounded minutes-since-midnight of each dose (may exceed 1440)."""
        return [wake_minutes + self.interval_minutes * i for i in range(self.doses_per_day)]


def plan_phase(phase: Phase, window: AwakeWindow) -> PhasePlan | None:
    """
    Determine dose count and spacing for one day of a phase.

    Returns:
        PhasePlan, or None for as-needed phases that get no scheduled doses
    """
    if phase.uses_interval:
        interval = phase.interval_hours * 60
        possible_doses = int(window.window_minutes // interval) + 1
        if phase.times_per_day > 0:
            return PhasePlan(interval, min(possible_doses, phase.times_per_day))
        return PhasePlan(interval, possible_doses)

    if phase.times_per_day > 0:
        return PhasePlan(window.window_minutes / phase.times_per_day, phase.times_per_day)

    return None


class DoseDistributor:
    """
    Materialize dose slots for actions over their phase day ranges.

    The slot counter is shared across every action distributed by one
    instance so ids stay unique within an invocation.
    """

    def __init__(self, start_date: str, window: AwakeWindow, start_counter: int = 0) -> None:
        """
        Initialize distributor.

        Args:
            start_date: ISO date of protocol day 1
            window: Normalized awake window
            start_counter: First slot sequence number
        """
        self.start_date = start_date
        self.window = window
        self.next_counter = start_counter

    def distribute(self, action: Action) -> list[DoseSlot]:
        """Generate every slot for one action, phase by phase."""
        slots: list[DoseSlot] = []
        for phase in action.phases:
            slots.extend(self._distribute_phase(action, phase))
        return slots

    def _distribute_phase(self, action: Action, phase: Phase) -> list[DoseSlot]:
        if phase.day_end < phase.day_start:
            return []

        plan = plan_phase(phase, self.window)
        if plan is None:
            return []

        offsets = plan.raw_offsets(self.window.wake_minutes)
        slots = []
        for day_offset in range(phase.day_count):
            base_day_index = phase.day_start - 1 + day_offset
            for raw_minutes in offsets:
                slots.append(self._make_slot(action, base_day_index, raw_minutes))
        return slots

    def _make_slot(self, action: Action, base_day_index: int, raw_minutes: float) -> DoseSlot:
        rounded = round_to_half_hour(raw_minutes)
        day_carry, minutes_within_day = divmod(rounded, MINUTES_PER_DAY)
        day_index = base_day_index + day_carry

        slot = DoseSlot(
            id=f"slot-{self.next_counter}",
            action_id=action.id,
            action_name=action.name,
            color=action.color,
            date=add_days(self.start_date, day_index),
            time=minutes_to_time_of_day(minutes_within_day),
            day_index=day_index,
            notes=action.notes,
        )
        self.next_counter += 1
        return slot
