"""
Tests for the tracking collaborators: workouts, rep tracking and
unlock sessions.
"""

import sys
import unittest
from datetime import datetime, timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tracking.unlock import InMemoryUnlockStore, UnlockSession
from tracking.workout import InMemoryWorkoutTracker, Workout

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


class TestWorkout(unittest.TestCase):
    """Workout value validation."""

    def test_invalid_values_rejected(self):
        """Non-positive reps/reward and empty type raise ValueError."""
        bad_kwargs = [
            {"type": "", "target_reps": 10, "earned_time_seconds": 60},
            {"type": "squats", "target_reps": 0, "earned_time_seconds": 60},
            {"type": "squats", "target_reps": 10, "earned_time_seconds": -1},
        ]
        for kwargs in bad_kwargs:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    Workout(id="w", **kwargs)

    def test_dict_conversion_keeps_metadata(self):
        workout = Workout(
            id="w1", type="plank", target_reps=30, earned_time_seconds=450,
            metadata={"mode": "normal"},
        )
        restored = Workout.from_dict(workout.to_dict())
        self.assertEqual(restored, workout)
        self.assertEqual(restored.metadata, {"mode": "normal"})


class TestInMemoryWorkoutTracker(unittest.TestCase):
    """Rep counting for the active workout."""

    def setUp(self):
        self.tracker = InMemoryWorkoutTracker()
        self.workout = Workout(id="w1", type="push-ups", target_reps=4, earned_time_seconds=120)

    def test_reps_without_workout_ignored(self):
        self.tracker.record_rep(BASE_TIME)
        self.assertEqual(self.tracker.completed_reps, 0)
        self.assertFalse(self.tracker.is_completed(BASE_TIME))
        self.assertEqual(self.tracker.get_progress(BASE_TIME), 0.0)

    def test_completion_and_progress(self):
        self.tracker.record_workout_start(self.workout, BASE_TIME)
        self.tracker.record_rep(BASE_TIME)
        self.assertAlmostEqual(self.tracker.get_progress(BASE_TIME), 0.25)
        self.assertFalse(self.tracker.is_completed(BASE_TIME))

        self.tracker.record_reps(5, BASE_TIME)
        self.assertTrue(self.tracker.is_completed(BASE_TIME))
        # Progress is clamped even when reps overshoot
        self.assertEqual(self.tracker.get_progress(BASE_TIME), 1.0)

    def test_negative_reps_rejected(self):
        self.tracker.record_workout_start(self.workout, BASE_TIME)
        with self.assertRaises(ValueError):
            self.tracker.record_reps(-1, BASE_TIME)

    def test_new_workout_resets_count(self):
        self.tracker.record_workout_start(self.workout, BASE_TIME)
        self.tracker.record_reps(3, BASE_TIME)
        self.tracker.record_workout_start(self.workout, BASE_TIME)
        self.assertEqual(self.tracker.completed_reps, 0)

    def test_clear_workout(self):
        self.tracker.record_workout_start(self.workout, BASE_TIME)
        self.tracker.record_reps(4, BASE_TIME)
        self.tracker.clear_workout()
        self.assertIsNone(self.tracker.get_current_workout())
        self.assertFalse(self.tracker.is_completed(BASE_TIME))


class TestUnlockSession(unittest.TestCase):
    """Pure time calculations on a session."""

    def setUp(self):
        self.session = UnlockSession(id="s1", start_time=BASE_TIME, duration_seconds=180)

    def test_end_time_and_remaining(self):
        self.assertEqual(self.session.end_time, BASE_TIME + timedelta(seconds=180))
        self.assertEqual(self.session.get_remaining_seconds(BASE_TIME + timedelta(seconds=60)), 120)
        self.assertEqual(self.session.get_remaining_seconds(BASE_TIME + timedelta(seconds=500)), 0)

    def test_expired_at_end_time(self):
        self.assertFalse(self.session.is_expired(BASE_TIME + timedelta(seconds=179)))
        self.assertTrue(self.session.is_expired(BASE_TIME + timedelta(seconds=180)))

    def test_invalid_session_rejected(self):
        with self.assertRaises(ValueError):
            UnlockSession(id="s", start_time=BASE_TIME, duration_seconds=0)
        with self.assertRaises(ValueError):
            UnlockSession(id="s", start_time=BASE_TIME, duration_seconds=10, reason="")

    def test_from_dict_parses_timestamp(self):
        restored = UnlockSession.from_dict(self.session.to_dict())
        self.assertEqual(restored.start_time, BASE_TIME)
        self.assertEqual(restored.reason, "workout_completed")


class TestInMemoryUnlockStore(unittest.TestCase):
    """Store holds at most one session."""

    def test_record_query_clear(self):
        store = InMemoryUnlockStore()
        self.assertFalse(store.is_active(BASE_TIME))
        self.assertEqual(store.get_remaining_seconds(BASE_TIME), 0)

        session = store.record_unlock_start(60, "workout_completed", BASE_TIME)
        self.assertIs(store.get_current_session(), session)
        self.assertTrue(store.is_active(BASE_TIME + timedelta(seconds=59)))
        self.assertFalse(store.is_active(BASE_TIME + timedelta(seconds=60)))
        self.assertEqual(store.get_remaining_seconds(BASE_TIME + timedelta(seconds=15)), 45)

        store.clear_unlock_session()
        self.assertIsNone(store.get_current_session())

    def test_new_session_replaces_old(self):
        store = InMemoryUnlockStore()
        store.record_unlock_start(60, "workout_completed", BASE_TIME)
        later = BASE_TIME + timedelta(seconds=100)
        session = store.record_unlock_start(30, "workout_completed", later)
        self.assertEqual(store.get_current_session(), session)
        self.assertEqual(session.start_time, later)


if __name__ == "__main__":
    unittest.main()
