"""
Same-action collision resolution.

Doses of one action on one date must not overlap given the action's minimum
duration. Colliding doses are relocated with a bounded local search around
their original time; doses that cannot be moved stay put and are recorded
as unresolved (a warning, never an error).

Different actions are never compared: two drops both meant "at wake time"
may legitimately share a slot.
"""

import logging
from collections import defaultdict

from ..time_math import minutes_to_time_of_day, normalize_minutes, parse_time_of_day
from ..types import MINUTES_PER_DAY, AwakeWindow, DoseSlot, OccupiedInterval, UnresolvedCollision
from .window import is_within_window

logger = logging.getLogger(__name__)

SEARCH_STEP_MINUTES = 15
MAX_SEARCH_STEPS = 12  # up to +/-180 minutes


def to_intervals(start: int, duration: int) -> list[OccupiedInterval]:
    """Clock-face intervals for [start, start+duration), split at midnight."""
    s = normalize_minutes(start)
    e = s + duration
    if e > MINUTES_PER_DAY:
        return [
            OccupiedInterval(s, MINUTES_PER_DAY),
            OccupiedInterval(0, e - MINUTES_PER_DAY),
        ]
    return [OccupiedInterval(s, e)]


def is_range_occupied(start: int, duration: int, occupied: list[OccupiedInterval]) -> bool:
    """True if [start, start+duration) intersects any occupied interval."""
    return any(
        occ.overlaps(check.start, check.end)
        for check in to_intervals(start, duration)
        for occ in occupied
    )


def mark_range_occupied(start: int, duration: int, occupied: list[OccupiedInterval]) -> None:
    occupied.extend(to_intervals(start, duration))


def candidate_offsets() -> list[int]:
    """Search order: +15, -15, +30, -30, ... +180, -180."""
    offsets = []
    for step in range(1, MAX_SEARCH_STEPS + 1):
        offsets.extend((step * SEARCH_STEP_MINUTES, -step * SEARCH_STEP_MINUTES))
    return offsets


def find_free_slot(
    original: int,
    duration: int,
    occupied: list[OccupiedInterval],
    window: AwakeWindow,
) -> int | None:
    """
    Find the nearest free start time around an occupied original.

    The original time itself is not re-checked. A candidate must keep its
    whole duration inside the awake window and clear of occupied intervals.

    Args:
        original: Original start in minutes since midnight
        duration: Minutes the dose occupies (>= 1)
        occupied: Intervals already taken in this (date, action) group
        window: Awake window

    Returns:
        Candidate start on the 0-1439 clock face, or None if all 24 fail
    """
    for offset in candidate_offsets():
        candidate = normalize_minutes(original + offset)
        if not is_within_window(candidate, window, duration):
            continue
        if is_range_occupied(candidate, duration, occupied):
            continue
        return candidate
    return None


class CollisionResolver:
    """
    Resolve same-action overlaps in place.

    Every dose left at an overlapping time is recorded in `unresolved`.
    """

    def __init__(self) -> None:
        """Initialize resolver with empty unresolved list."""
        self.unresolved: list[UnresolvedCollision] = []

    def resolve(
        self,
        slots: list[DoseSlot],
        window: AwakeWindow,
        durations: dict[str, int],
    ) -> list[DoseSlot]:
        """
        Adjust slot times so doses of one action on one date do not overlap.

        Args:
            slots: Generated slots (mutated in place)
            window: Awake window that relocated doses must stay inside
            durations: action_id -> min_duration_minutes

        Returns:
            The same list, for chaining
        """
        for (_date, action_id), group in self._group_slots(slots).items():
            effective_duration = max(durations.get(action_id, 0), 1)
            self._resolve_group(group, window, effective_duration)
        return slots

    def _group_slots(self, slots: list[DoseSlot]) -> dict[tuple[str, str], list[DoseSlot]]:
        """Group by (date, action_id), each group sorted by time."""
        groups: dict[tuple[str, str], list[DoseSlot]] = defaultdict(list)
        for slot in slots:
            groups[(slot.date, slot.action_id)].append(slot)
        for group in groups.values():
            group.sort(key=lambda s: parse_time_of_day(s.time))
        return groups

    def _resolve_group(
        self, group: list[DoseSlot], window: AwakeWindow, duration: int
    ) -> None:
        occupied: list[OccupiedInterval] = []

        for slot in group:
            original = parse_time_of_day(slot.time)
            chosen = original

            if is_range_occupied(original, duration, occupied):
                candidate = find_free_slot(original, duration, occupied, window)
                if candidate is None:
                    self._record_unresolved(slot)
                else:
                    chosen = candidate

            mark_range_occupied(chosen, duration, occupied)
            slot.time = minutes_to_time_of_day(chosen)

    def _record_unresolved(self, slot: DoseSlot) -> None:
        logger.warning(
            "Could not resolve collision for slot %s (action %s on %s at %s)",
            slot.id,
            slot.action_id,
            slot.date,
            slot.time,
        )
        self.unresolved.append(
            UnresolvedCollision(
                slot_id=slot.id,
                action_id=slot.action_id,
                date=slot.date,
                time=slot.time,
            )
        )
