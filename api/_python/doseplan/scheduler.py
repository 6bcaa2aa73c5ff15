"""
Dose schedule generation.

Turns a resolved protocol (actions with phases) into an ordered list of
dated, timed dose slots for a patient's awake window.

Architecture:
1. Validating: parse the start date, normalize the awake window, run the
   feasibility precheck (scheduling/window.py, scheduling/feasibility.py)
2. Distributing: expand every action phase into dose slots
   (scheduling/distribution.py)
3. Resolving: relocate same-action collisions (scheduling/collision_resolver.py)
4. Sorted: final (date, time) ordering

A failure while validating rejects the whole request: the result carries the
error and no slots. Nothing after validation can fail for well-formed input.
"""

import logging

from .errors import SchedulingError
from .scheduling.collision_resolver import CollisionResolver
from .scheduling.distribution import DoseDistributor
from .scheduling.feasibility import action_duration, check_feasibility
from .scheduling.window import normalize_window
from .time_math import parse_iso_date, parse_time_of_day
from .types import AwakeWindow, DoseSlot, ScheduleRequest, ScheduleResult

logger = logging.getLogger(__name__)

# Minimum minutes per dose when an action does not specify one
DEFAULT_MIN_DURATION_MINUTES = 0  # instantaneous (pills)
LEGACY_MIN_DURATION_MINUTES = 5  # historical eye-drop spacing


def sort_slots(slots: list[DoseSlot]) -> list[DoseSlot]:
    """Chronological order: date, then time. Stable for identical keys."""
    return sorted(slots, key=lambda s: (s.date, parse_time_of_day(s.time)))


class ScheduleGenerator:
    """
    Single entry point for dose schedule generation.

    Each call is independent: no state is kept between invocations, so one
    generator may be shared freely.
    """

    def __init__(self, default_min_duration_minutes: int = DEFAULT_MIN_DURATION_MINUTES) -> None:
        """
        Initialize generator.

        Args:
            default_min_duration_minutes: Duration for actions that leave
                min_duration_minutes unset (use LEGACY_MIN_DURATION_MINUTES
                for the old eye-drop protocols)
        """
        self.default_min_duration_minutes = default_min_duration_minutes

    def generate_schedule(self, request: ScheduleRequest) -> ScheduleResult:
        """
        Generate the complete dose schedule.

        Args:
            request: ScheduleRequest with start date, awake window and actions

        Returns:
            ScheduleResult with sorted slots, or a rejected result carrying
            InvalidTimeFormat / InvalidDate / InvalidWindow / ImpossibleSchedule
        """
        # 1. Validating
        logger.debug("Validating schedule request for %d action(s)", len(request.actions))
        try:
            window = self._validate(request)
        except SchedulingError as e:
            logger.debug("Schedule rejected: %s", e.message)
            return ScheduleResult.rejected(e)

        # 2. Distributing
        slots = self._distribute(request, window)
        logger.debug("Distributed %d dose slot(s)", len(slots))

        # Collision groups are processed in chronological order
        slots = sort_slots(slots)

        # 3. Resolving
        resolver = CollisionResolver()
        durations = {
            action.id: action_duration(action, self.default_min_duration_minutes)
            for action in request.actions
        }
        resolver.resolve(slots, window, durations)

        # 4. Sorted
        return ScheduleResult(
            slots=sort_slots(slots),
            stage="sorted",
            unresolved_collisions=resolver.unresolved,
        )

    def _validate(self, request: ScheduleRequest) -> AwakeWindow:
        parse_iso_date(request.start_date)
        window = normalize_window(request.wake_time, request.sleep_time)
        check_feasibility(window, request.actions, self.default_min_duration_minutes)
        return window

    def _distribute(self, request: ScheduleRequest, window: AwakeWindow) -> list[DoseSlot]:
        distributor = DoseDistributor(request.start_date, window)
        slots: list[DoseSlot] = []
        for action in request.actions:
            slots.extend(distributor.distribute(action))
        return slots


def schedule(
    request: ScheduleRequest,
    default_min_duration_minutes: int = DEFAULT_MIN_DURATION_MINUTES,
) -> ScheduleResult:
    """
    Convenience function for one-off schedule generation.

    Args:
        request: ScheduleRequest
        default_min_duration_minutes: Duration for actions without one

    Returns:
        ScheduleResult
    """
    generator = ScheduleGenerator(default_min_duration_minutes)
    return generator.generate_schedule(request)
