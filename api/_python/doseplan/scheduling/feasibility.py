"""
Feasibility precheck.

Rejects protocols whose aggregate required time cannot fit in the awake
window before any dose is generated. The sum uses times_per_day as
configured, even for interval phases that may end up with fewer doses, so
it is a conservative upper bound rather than an exact count.
"""

import logging

from ..errors import ImpossibleSchedule
from ..types import Action, AwakeWindow

logger = logging.getLogger(__name__)


def action_duration(action: Action, default_duration: int) -> int:
    """Minutes one dose of the action occupies, falling back to the default."""
    if action.min_duration_minutes is None:
        return default_duration
    return action.min_duration_minutes


def required_minutes(actions: list[Action], default_duration: int = 0) -> int:
    """Sum of times_per_day x duration across every action and phase."""
    total = 0
    for action in actions:
        duration = action_duration(action, default_duration)
        for phase in action.phases:
            total += phase.times_per_day * duration
    return total


def check_feasibility(
    window: AwakeWindow, actions: list[Action], default_duration: int = 0
) -> int:
    """
    Fail fast when the protocol is too dense for the awake window.

    Returns:
        Total required minutes (for diagnostics)

    Raises:
        ImpossibleSchedule: if required minutes exceed window_minutes
    """
    total = required_minutes(actions, default_duration)
    if total > window.window_minutes:
        logger.warning(
            "Schedule is too dense: requires %d minutes within %d available",
            total,
            window.window_minutes,
        )
        raise ImpossibleSchedule(total, window.window_minutes)
    return total
