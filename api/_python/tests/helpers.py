"""
Test helper functions for dose schedule validation.

These functions can be imported by test modules for schedule analysis.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from doseplan.time_math import parse_time_of_day
from doseplan.types import Action, AwakeWindow, DoseSlot, Phase, ScheduleRequest


def make_action(
    action_id: str = "drops",
    times_per_day: int = 4,
    min_duration: int | None = 0,
    day_start: int = 1,
    day_end: int = 1,
    interval_hours: float | None = None,
    name: str | None = None,
) -> Action:
    """Single-phase action with sensible defaults."""
    return Action(
        id=action_id,
        name=name or action_id.title(),
        phases=[
            Phase(
                day_start=day_start,
                day_end=day_end,
                times_per_day=times_per_day,
                interval_hours=interval_hours,
            )
        ],
        min_duration_minutes=min_duration,
    )


def make_request(
    actions: list[Action],
    wake_time: str = "08:00",
    sleep_time: str = "22:00",
    start_date: str = "2025-01-01",
) -> ScheduleRequest:
    return ScheduleRequest(
        start_date=start_date,
        wake_time=wake_time,
        sleep_time=sleep_time,
        actions=actions,
    )


def slot_minutes(slot: DoseSlot) -> int:
    return parse_time_of_day(slot.time)


def times_for_action(slots: list[DoseSlot], action_id: str) -> list[str]:
    """HH:MM times for one action, in schedule order."""
    return [s.time for s in slots if s.action_id == action_id]


def in_awake_window(minutes: int, window: AwakeWindow) -> bool:
    """
    Window containment as seen by a patient.

    [wake, 1439] or [0, sleep mod 1440] when the window crosses midnight,
    [wake, sleep] otherwise.
    """
    if window.crosses_midnight:
        return minutes >= window.wake_minutes or minutes <= window.sleep_minutes_mod
    return window.wake_minutes <= minutes <= window.normalized_sleep_minutes


def find_same_action_overlaps(
    slots: list[DoseSlot], durations: dict[str, int], skip_ids: set[str] | None = None
) -> list[tuple[str, str]]:
    """
    Find pairs of slot ids of the same action and date whose ranges intersect.

    Args:
        slots: Schedule slots
        durations: action_id -> minimum duration (0 is treated as 1 minute)
        skip_ids: Slot ids to ignore (e.g. unresolved collisions)

    Returns:
        List of (slot_id, slot_id) pairs that overlap
    """
    skip_ids = skip_ids or set()
    overlaps = []
    kept = [s for s in slots if s.id not in skip_ids]
    for i, a in enumerate(kept):
        for b in kept[i + 1:]:
            if a.action_id != b.action_id or a.date != b.date:
                continue
            duration = max(durations.get(a.action_id, 0), 1)
            a_start, b_start = slot_minutes(a), slot_minutes(b)
            if max(a_start, b_start) < min(a_start + duration, b_start + duration):
                overlaps.append((a.id, b.id))
    return overlaps
