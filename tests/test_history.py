"""
Tests for tracking/history.py - workout history and streaks.
"""

import sys
import unittest
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tracking.history import StreakTracker, WorkoutHistory

DAY_ONE = datetime(2024, 1, 1, 9, 0, 0)


def days_later(days: int, hours: int = 0) -> datetime:
    return DAY_ONE + timedelta(days=days, hours=hours)


class TestStreakTracker(unittest.TestCase):
    """Consecutive-day streak counting."""

    def setUp(self):
        self.streaks = StreakTracker()

    def test_first_workout_starts_streak(self):
        self.assertEqual(self.streaks.record_workout_completion(DAY_ONE), 1)
        self.assertTrue(self.streaks.is_today_completed(DAY_ONE))
        self.assertFalse(self.streaks.is_today_completed(days_later(1)))

    def test_consecutive_days_continue_streak(self):
        self.streaks.record_workout_completion(DAY_ONE)
        self.streaks.record_workout_completion(days_later(1))
        # Late evening still counts as the next calendar day
        self.assertEqual(self.streaks.record_workout_completion(days_later(2, hours=14)), 3)
        self.assertEqual(self.streaks.best_streak, 3)

    def test_gap_breaks_streak(self):
        self.streaks.record_workout_completion(DAY_ONE)
        self.streaks.record_workout_completion(days_later(1))
        self.assertEqual(self.streaks.record_workout_completion(days_later(3)), 1)
        self.assertEqual(self.streaks.current_streak, 1)
        self.assertEqual(self.streaks.best_streak, 2)
        self.assertEqual(self.streaks.total_workouts, 3)

    def test_second_workout_same_day(self):
        self.streaks.record_workout_completion(DAY_ONE)
        self.assertEqual(self.streaks.record_workout_completion(days_later(0, hours=5)), 1)
        self.assertEqual(self.streaks.total_workouts, 2)

    def test_reset(self):
        self.streaks.record_workout_completion(DAY_ONE)
        self.streaks.reset()
        self.assertEqual(
            self.streaks.to_dict(DAY_ONE),
            {"current_streak": 0, "best_streak": 0, "total_workouts": 0, "today_completed": False},
        )


class TestWorkoutHistory(unittest.TestCase):
    """Completed workout records."""

    def setUp(self):
        self.history = WorkoutHistory(retention_days=90)
        self.history.record_completed_workout("push-ups", 20, 600, "normal", DAY_ONE)
        self.history.record_completed_workout("squats", 10, 300, "cozy", days_later(1))
        self.history.record_completed_workout("push-ups", 10, 300, "tuff", days_later(2))

    def test_recent_most_recent_first(self):
        recent = self.history.get_recent_workouts(limit=2)
        self.assertEqual([r.completed_at for r in recent], [days_later(2), days_later(1)])
        self.assertEqual(recent[0].display_name, "Push-Ups")

    def test_totals(self):
        self.assertEqual(self.history.total_workouts, 3)
        self.assertEqual(self.history.get_total_time_earned(), 1200)
        self.assertEqual(self.history.get_most_popular_workout_type(), "push-ups")

    def test_today_and_last_days(self):
        today = self.history.get_todays_workouts(days_later(2, hours=3))
        self.assertEqual([r.workout_type for r in today], ["push-ups"])
        last_two = self.history.get_workouts_from_last_days(2, days_later(2))
        self.assertEqual(len(last_two), 2)

    def test_delete_and_clear(self):
        record = self.history.get_recent_workouts()[0]
        self.assertTrue(self.history.delete_workout(record.id))
        self.assertFalse(self.history.delete_workout(record.id))
        self.assertEqual(self.history.total_workouts, 2)
        self.history.clear()
        self.assertIsNone(self.history.get_most_popular_workout_type())

    def test_cleanup_old_workouts(self):
        removed = self.history.cleanup_old_workouts(days_later(91, hours=1))
        self.assertEqual(removed, 2)
        self.assertEqual(self.history.total_workouts, 1)

    def test_record_dict(self):
        data = self.history.get_recent_workouts()[0].to_dict()
        self.assertEqual(data["workout_mode"], "tuff")
        self.assertEqual(data["completed_at"], days_later(2).isoformat())


if __name__ == "__main__":
    unittest.main()
