"""
Pytest fixtures for dose schedule tests.
"""

import pytest

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from doseplan.scheduler import ScheduleGenerator
from doseplan.scheduling.window import normalize_window
from doseplan.types import Action, Phase


@pytest.fixture
def generator():
    """ScheduleGenerator instance with default (instantaneous) durations."""
    return ScheduleGenerator()


@pytest.fixture
def day_window():
    """08:00 to 22:00 awake window (840 minutes)."""
    return normalize_window("08:00", "22:00")


@pytest.fixture
def late_window():
    """07:00 to 01:00 awake window crossing midnight (1080 minutes)."""
    return normalize_window("07:00", "01:00")


@pytest.fixture
def eye_drop_protocol():
    """Post-LASIK style drops: tapering steroid, antibiotic, lubricant."""
    return [
        Action(
            id="sterodex",
            name="Sterodex",
            phases=[
                Phase(day_start=1, day_end=7, times_per_day=4),
                Phase(day_start=8, day_end=14, times_per_day=2),
            ],
            min_duration_minutes=5,
            route="eye_drop",
        ),
        Action(
            id="vigamox",
            name="Vigamox",
            phases=[Phase(day_start=1, day_end=7, times_per_day=4)],
            min_duration_minutes=5,
            route="eye_drop",
        ),
        Action(
            id="systane-balance",
            name="Systane Balance",
            phases=[Phase(day_start=1, day_end=30, times_per_day=6)],
            min_duration_minutes=5,
            route="eye_drop",
            notes="Shake well before use",
        ),
    ]


@pytest.fixture
def valid_payload():
    """Camel-case API payload for one distributed and one interval action."""
    return {
        "startDate": "2025-01-01",
        "wakeTime": "08:00",
        "sleepTime": "22:00",
        "actions": [
            {
                "id": "drops",
                "name": "Drops",
                "minDurationMinutes": 5,
                "phases": [{"dayStart": 1, "dayEnd": 2, "timesPerDay": 4}],
            },
            {
                "id": "acamol",
                "name": "Acamol",
                "route": "oral",
                "phases": [{"dayStart": 1, "dayEnd": 1, "timesPerDay": 0, "intervalHours": 6}],
            },
        ],
    }
