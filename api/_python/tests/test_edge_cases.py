"""
Edge Case Tests

Unusual windows and protocols that should still produce sensible schedules:
windows crossing midnight, doses rolling over to the next day, calendar
boundaries, and actions that share a time slot.
"""

import sys
from pathlib import Path

# Add both tests dir and parent dir to path
sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import (
    find_same_action_overlaps,
    in_awake_window,
    make_action,
    make_request,
    slot_minutes,
    times_for_action,
)
from doseplan.scheduler import ScheduleGenerator
from doseplan.scheduling.window import normalize_window
from doseplan.types import Action, Phase


class TestCrossMidnightWindow:
    """Awake windows that end after midnight."""

    def test_eighteen_doses_all_awake(self):
        """07:00-01:00 with 18 five-minute doses."""
        generator = ScheduleGenerator()
        window = normalize_window("07:00", "01:00")
        result = generator.generate_schedule(
            make_request(
                [make_action("drops", times_per_day=18, min_duration=5)],
                wake_time="07:00",
                sleep_time="01:00",
            )
        )

        assert result.ok
        assert len(result.slots) == 18
        for slot in result.slots:
            assert in_awake_window(slot_minutes(slot), window), f"{slot.time} is outside the window"

    def test_after_midnight_dose_sorted_last(self):
        generator = ScheduleGenerator()
        result = generator.generate_schedule(
            make_request(
                [make_action("drops", times_per_day=0, interval_hours=17.5)],
                wake_time="07:00",
                sleep_time="01:00",
            )
        )

        last = result.slots[-1]
        assert (last.date, last.time, last.day_index) == ("2025-01-02", "00:30", 1)

    def test_window_ending_exactly_at_midnight(self):
        generator = ScheduleGenerator()
        result = generator.generate_schedule(
            make_request([make_action(times_per_day=3)], wake_time="06:00", sleep_time="00:00")
        )
        assert [s.time for s in result.slots] == ["06:00", "12:00", "18:00"]


class TestDayRollover:
    """Doses pushed past midnight by rounding."""

    def test_rollover_not_clipped(self):
        """A dose that rounds to 24:00 lands on the next date, not 23:59."""
        generator = ScheduleGenerator()
        result = generator.generate_schedule(
            make_request(
                [make_action("drops", times_per_day=18, min_duration=5)],
                wake_time="07:00",
                sleep_time="01:00",
                start_date="2025-02-28",
            )
        )

        last = result.slots[-1]
        assert last.date == "2025-03-01"
        assert last.time == "00:00"
        assert last.day_index == 1
        assert all(s.time != "23:59" for s in result.slots)

    def test_year_boundary(self):
        generator = ScheduleGenerator()
        result = generator.generate_schedule(
            make_request([make_action(times_per_day=1, day_end=3)], start_date="2025-12-30")
        )
        assert [s.date for s in result.slots] == ["2025-12-30", "2025-12-31", "2026-01-01"]
        assert [s.day_index for s in result.slots] == [0, 1, 2]


class TestPhaseLayouts:
    """Phase combinations seen in real recovery protocols."""

    def test_gap_between_phases(self):
        """Days not covered by any phase have no doses."""
        action = Action(
            id="drops",
            name="Drops",
            phases=[
                Phase(day_start=1, day_end=1, times_per_day=2),
                Phase(day_start=4, day_end=4, times_per_day=2),
            ],
        )
        result = ScheduleGenerator().generate_schedule(make_request([action]))
        assert sorted({s.date for s in result.slots}) == ["2025-01-01", "2025-01-04"]

    def test_overlapping_phases_resolved_per_action(self):
        """Two phases covering the same day collide with each other and get separated."""
        action = Action(
            id="drops",
            name="Drops",
            phases=[
                Phase(day_start=1, day_end=2, times_per_day=2),
                Phase(day_start=2, day_end=3, times_per_day=2),
            ],
            min_duration_minutes=10,
        )
        result = ScheduleGenerator().generate_schedule(make_request([action]))

        day_two = [s.time for s in result.slots if s.date == "2025-01-02"]
        assert sorted(day_two) == ["08:00", "08:15", "15:00", "15:15"]
        assert find_same_action_overlaps(result.slots, {"drops": 10}) == []

    def test_late_phase_start(self):
        result = ScheduleGenerator().generate_schedule(
            make_request([make_action(times_per_day=1, day_start=30, day_end=30)])
        )
        assert [(s.date, s.day_index) for s in result.slots] == [("2025-01-30", 29)]


class TestCrossActionCollisions:
    """Different actions are allowed to share a time slot."""

    def test_two_actions_at_wake_time_keep_their_times(self):
        """
        Both actions are distributed once a day and start at wake time.

        Only same-action doses are separated, so both stay at 08:00 even
        though their 30-minute durations overlap.
        """
        actions = [
            make_action("med-a", times_per_day=1, min_duration=30),
            make_action("med-b", times_per_day=1, min_duration=30),
        ]
        result = ScheduleGenerator().generate_schedule(make_request(actions))

        assert times_for_action(result.slots, "med-a") == ["08:00"]
        assert times_for_action(result.slots, "med-b") == ["08:00"]
        assert result.unresolved_collisions == []

    def test_equal_times_keep_generation_order(self):
        actions = [
            make_action("med-a", times_per_day=1),
            make_action("med-b", times_per_day=1),
        ]
        result = ScheduleGenerator().generate_schedule(make_request(actions))
        assert [s.action_id for s in result.slots] == ["med-a", "med-b"]
