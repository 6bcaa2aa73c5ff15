"""
Awake window normalization.

A window whose sleep time is at or before its wake time is read as crossing
midnight: sleep happens on the following calendar day.
"""

from ..errors import InvalidWindow
from ..time_math import normalize_minutes, parse_time_of_day
from ..types import MINUTES_PER_DAY, AwakeWindow


def normalize_window(wake_time: str, sleep_time: str) -> AwakeWindow:
    """
    Build the awake window from wake/sleep time-of-day strings.

    Args:
        wake_time: "HH:MM" habitual wake time
        sleep_time: "HH:MM" habitual sleep time (may be after midnight)

    Returns:
        AwakeWindow with sleep normalized past 1440 when it crosses midnight

    Raises:
        InvalidTimeFormat: if either string fails to parse
        InvalidWindow: if the resulting window has no length
    """
    wake_minutes = parse_time_of_day(wake_time)
    sleep_minutes = parse_time_of_day(sleep_time)

    # Identical times are an empty window, not a 24h one
    if sleep_minutes == wake_minutes:
        raise InvalidWindow(f"Wake time and sleep time cannot be the same ({wake_time})")

    if sleep_minutes < wake_minutes:
        sleep_minutes += MINUTES_PER_DAY

    window = AwakeWindow(wake_minutes=wake_minutes, normalized_sleep_minutes=sleep_minutes)
    if window.window_minutes <= 0:
        raise InvalidWindow(f"Sleep time must be after wake time ({wake_time} to {sleep_time})")
    return window


def is_within_window(candidate: int, window: AwakeWindow, duration: int = 0) -> bool:
    """
    Check that a candidate start and its last occupied minute are awake.

    Both ends are compared on the 0-1439 clock face. Windows crossing midnight
    accept [wake, 1439] and [0, sleep]; others accept [wake, sleep].
    """

    def awake(minute: int) -> bool:
        minute = normalize_minutes(minute)
        if window.crosses_midnight:
            return minute >= window.wake_minutes or minute <= window.sleep_minutes_mod
        return window.wake_minutes <= minute <= window.normalized_sleep_minutes

    last_minute = candidate + duration - 1 if duration > 0 else candidate
    return awake(candidate) and awake(last_minute)
