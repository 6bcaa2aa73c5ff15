"""
Scheduling error taxonomy.

Every failure that aborts a schedule derives from SchedulingError and carries
a stable `code` so API layers can map it without string matching. The
orchestrator never lets these escape: it wraps them in a rejected
ScheduleResult instead (see scheduler.py).
"""


class SchedulingError(Exception):
    """Base class for errors that reject a whole schedule request."""

    code = "SCHEDULING_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class InvalidTimeFormat(SchedulingError, ValueError):
    """A time-of-day string is not "HH:MM" or is out of range."""

    code = "INVALID_TIME_FORMAT"


class InvalidDate(SchedulingError, ValueError):
    """A calendar date is not a valid ISO "YYYY-MM-DD" string."""

    code = "INVALID_DATE"


class InvalidWindow(SchedulingError):
    """The awake window has zero length (wake time equals sleep time)."""

    code = "INVALID_WINDOW"


class ImpossibleSchedule(SchedulingError):
    """
    Aggregate required minutes exceed the awake window.

    Carries both numbers so callers can explain the rejection, e.g.
    "requires 1200 minutes within 840 available".
    """

    code = "IMPOSSIBLE_SCHEDULE"

    def __init__(self, required_minutes: int, available_minutes: int) -> None:
        self.required_minutes = required_minutes
        self.available_minutes = available_minutes
        super().__init__(
            f"Schedule is too dense: requires {required_minutes} minutes "
            f"within {available_minutes} available minutes."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["required_minutes"] = self.required_minutes
        data["available_minutes"] = self.available_minutes
        return data
