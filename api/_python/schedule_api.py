"""
JSON API layer for dose schedule generation.

Shared by the serverless endpoint (api/schedule/generate.py) and the CLI
(build_schedule.py):
1. validate_request - shape/format checks on the camelCase payload
2. build_request - payload -> ScheduleRequest, filling caller-side defaults
3. generate_response - run the engine and map the result to (status, body)
"""

import logging
import math
import os
import re
from dataclasses import asdict
from typing import Any
from uuid import uuid4

import pytz

from doseplan.action_colors import get_action_color
from doseplan.errors import ImpossibleSchedule
from doseplan.scheduler import DEFAULT_MIN_DURATION_MINUTES, ScheduleGenerator
from doseplan.time_math import get_current_date_in_tz
from doseplan.types import Action, DoseSlot, Phase, ScheduleRequest, UnresolvedCollision

logger = logging.getLogger(__name__)


def env_int(name: str, default: int) -> int:
    """Read a non-negative integer setting, falling back to the default on bad values."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
        if value < 0:
            raise ValueError(f"{value} is negative")
    except ValueError:
        logger.warning(
            "Ignoring %s=%r: expected a non-negative integer, using %d", name, raw, default
        )
        return default
    return value


# Configuration (read once at import, like the serverless secrets)
DEFAULT_TIMEZONE = os.environ.get("DOSEPLAN_TIMEZONE", "UTC")
DEFAULT_MIN_DURATION = env_int("DOSEPLAN_DEFAULT_MIN_DURATION", DEFAULT_MIN_DURATION_MINUTES)

# Validation limits
MAX_PROTOCOL_DAY = 365
MAX_TIMES_PER_DAY = 24
MIN_INTERVAL_HOURS = 0.25  # q15min, at most 96 doses in a 24h window
ALLOWED_ROUTES = ("eye_drop", "oral", "other")

_TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):[0-5]\d")
_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_time(t: Any) -> bool:
    """Validate time format like '07:00'."""
    return isinstance(t, str) and _TIME_PATTERN.fullmatch(t) is not None


def validate_date(d: Any) -> bool:
    """Validate ISO date format like '2025-01-06'."""
    return isinstance(d, str) and _DATE_PATTERN.fullmatch(d) is not None


def validate_timezone(tz: Any) -> bool:
    """Validate IANA timezone name like 'Asia/Jerusalem'."""
    return isinstance(tz, str) and tz in pytz.all_timezones_set


def validate_phase(phase: Any, label: str) -> str | None:
    """Validate one phase dict, return error message or None if valid."""
    if not isinstance(phase, dict):
        return f"{label} must be an object"

    day_start = phase.get("dayStart")
    day_end = phase.get("dayEnd")
    if not _is_int(day_start) or day_start < 1:
        return f"{label}.dayStart must be an integer >= 1"
    if not _is_int(day_end) or day_end < day_start:
        return f"{label}.dayEnd must be greater than or equal to dayStart"
    if day_end > MAX_PROTOCOL_DAY:
        return f"{label}.dayEnd cannot exceed {MAX_PROTOCOL_DAY} days"

    times_per_day = phase.get("timesPerDay", 0)
    if not _is_int(times_per_day) or not 0 <= times_per_day <= MAX_TIMES_PER_DAY:
        return f"{label}.timesPerDay must be an integer between 0 and {MAX_TIMES_PER_DAY}"

    interval_hours = phase.get("intervalHours")
    if interval_hours is not None:
        if not _is_number(interval_hours) or not math.isfinite(interval_hours):
            return f"{label}.intervalHours must be a finite number"
        # 0 means "no fixed interval"
        if interval_hours != 0 and interval_hours < MIN_INTERVAL_HOURS:
            return f"{label}.intervalHours must be 0 or at least {MIN_INTERVAL_HOURS}"

    return None


def validate_action(action: Any, label: str) -> str | None:
    """Validate one action dict, return error message or None if valid."""
    if not isinstance(action, dict):
        return f"{label} must be an object"

    for field in ("id", "name"):
        if not isinstance(action.get(field), str) or not action[field]:
            return f"{label}.{field} must be a non-empty string"

    duration = action.get("minDurationMinutes")
    if duration is not None and (not _is_int(duration) or duration < 0):
        return f"{label}.minDurationMinutes must be a non-negative integer"

    route = action.get("route")
    if route is not None and route not in ALLOWED_ROUTES:
        return f"{label}.route must be one of: {', '.join(ALLOWED_ROUTES)}"

    phases = action.get("phases")
    if not isinstance(phases, list) or not phases:
        return f"{label}.phases must be a non-empty list"

    for i, phase in enumerate(phases):
        error = validate_phase(phase, f"{label}.phases[{i}]")
        if error:
            return error

    return None


def validate_request(data: Any) -> str | None:
    """Validate request data, return error message or None if valid."""
    if not isinstance(data, dict):
        return "Request body must be a JSON object"

    for field in ("wakeTime", "sleepTime", "actions"):
        if field not in data:
            return f"Missing required field: {field}"

    if not validate_time(data["wakeTime"]):
        return f"Invalid wake time format: {data['wakeTime']}"
    if not validate_time(data["sleepTime"]):
        return f"Invalid sleep time format: {data['sleepTime']}"
    if data["wakeTime"] == data["sleepTime"]:
        return "Wake time and sleep time cannot be the same"

    if "startDate" in data:
        if not validate_date(data["startDate"]):
            return f"Invalid start date format: {data['startDate']}"
    elif "timezone" in data and not validate_timezone(data["timezone"]):
        return f"Invalid timezone: {data['timezone']}"

    color_map = data.get("colorMap")
    if color_map is not None and not isinstance(color_map, dict):
        return "colorMap must be an object mapping action ids to colors"

    actions = data["actions"]
    if not isinstance(actions, list) or not actions:
        return "actions must be a non-empty list"

    seen_ids = set()
    for i, action in enumerate(actions):
        error = validate_action(action, f"actions[{i}]")
        if error:
            return error
        if action["id"] in seen_ids:
            return f"Duplicate action id: {action['id']}"
        seen_ids.add(action["id"])

    return None


def phase_from_dict(data: dict[str, Any]) -> Phase:
    return Phase(
        day_start=data["dayStart"],
        day_end=data["dayEnd"],
        times_per_day=data.get("timesPerDay", 0),
        interval_hours=data.get("intervalHours"),
    )


def action_from_dict(
    data: dict[str, Any], default_duration: int, color_map: dict[str, str] | None = None
) -> Action:
    """Build an Action, filling in the default duration and color."""
    action = Action(
        id=data["id"],
        name=data["name"],
        phases=[phase_from_dict(p) for p in data["phases"]],
        min_duration_minutes=data.get("minDurationMinutes", default_duration),
        color=data.get("color"),
        route=data.get("route"),
        notes=data.get("notes"),
    )
    action.color = get_action_color(action, color_map)
    return action


def build_request(
    data: dict[str, Any],
    default_duration: int = DEFAULT_MIN_DURATION,
    default_timezone: str = DEFAULT_TIMEZONE,
) -> ScheduleRequest:
    """
    Build a ScheduleRequest from a validated payload.

    A missing startDate means "today" in the request's timezone (or the
    configured default timezone).
    """
    start_date = data.get("startDate") or get_current_date_in_tz(
        data.get("timezone", default_timezone)
    )
    return ScheduleRequest(
        start_date=start_date,
        wake_time=data["wakeTime"],
        sleep_time=data["sleepTime"],
        actions=[
            action_from_dict(a, default_duration, data.get("colorMap"))
            for a in data["actions"]
        ],
    )


def slot_to_dict(slot: DoseSlot) -> dict[str, Any]:
    """Serialize a slot using the camelCase wire format."""
    return {
        "id": slot.id,
        "actionId": slot.action_id,
        "actionName": slot.action_name,
        "color": slot.color,
        "date": slot.date,
        "time": slot.time,
        "dayIndex": slot.day_index,
        "notes": slot.notes,
    }


def summarize(
    slots: list[DoseSlot], unresolved: list[UnresolvedCollision]
) -> dict[str, Any]:
    """Summary block for the schedule response."""
    dates = sorted({slot.date for slot in slots})

    doses_per_action: dict[str, int] = {}
    for slot in slots:
        doses_per_action[slot.action_id] = doses_per_action.get(slot.action_id, 0) + 1

    return {
        "total_doses": len(slots),
        "total_days": len(dates),
        "first_date": dates[0] if dates else None,
        "last_date": dates[-1] if dates else None,
        "doses_per_action": doses_per_action,
        "unresolved_collisions": [asdict(u) for u in unresolved],
    }


def generate_response(
    data: Any,
    default_duration: int = DEFAULT_MIN_DURATION,
    default_timezone: str = DEFAULT_TIMEZONE,
) -> tuple[int, dict[str, Any]]:
    """
    Validate, generate and serialize one schedule.

    Returns:
        (HTTP status code, JSON-ready body)
    """
    validation_error = validate_request(data)
    if validation_error:
        logger.warning("Validation failed: %s", validation_error)
        return 400, {"error": validation_error}

    request = build_request(data, default_duration, default_timezone)
    generator = ScheduleGenerator(default_min_duration_minutes=default_duration)
    result = generator.generate_schedule(request)

    if not result.ok:
        error = result.error
        if isinstance(error, ImpossibleSchedule):
            logger.warning("Impossible schedule requested: %s", error.message)
            return 422, error.to_dict()
        return 400, error.to_dict()

    logger.info(
        "Schedule generated: %d dose(s) for %d action(s)",
        len(result.slots),
        len(request.actions),
    )
    return 200, {
        "id": str(uuid4()),
        "schedule": [slot_to_dict(slot) for slot in result.slots],
        "summary": summarize(result.slots, result.unresolved_collisions),
    }
