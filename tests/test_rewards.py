"""
Tests for tracking/rewards.py - earned time and workout target sizing.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tracking.rewards import WorkoutMode, WorkoutRewardCalculator, round_half_up


class TestEarnedTime(unittest.TestCase):
    """reps x 30s x difficulty multiplier."""

    def setUp(self):
        self.calculator = WorkoutRewardCalculator()

    def test_push_ups(self):
        self.assertEqual(self.calculator.calculate_earned_time("push-ups", 20), 600)

    def test_multipliers_applied_case_insensitively(self):
        self.assertEqual(self.calculator.calculate_earned_time("PLANK", 10), 450)
        self.assertEqual(self.calculator.calculate_earned_time("jumping-jacks", 10), 240)

    def test_unknown_workout_uses_base_rate(self):
        self.assertEqual(self.calculator.calculate_earned_time("yoga", 3), 90)

    def test_non_positive_reps_earn_nothing(self):
        self.assertEqual(self.calculator.calculate_earned_time("push-ups", 0), 0)
        self.assertEqual(self.calculator.calculate_earned_time("push-ups", -4), 0)

    def test_custom_base_seconds(self):
        calculator = WorkoutRewardCalculator(base_seconds_per_rep=10)
        self.assertEqual(calculator.calculate_earned_time("burpees", 4), 60)


class TestWorkoutTargets(unittest.TestCase):
    """Inverse calculation: work needed for desired screen time."""

    def setUp(self):
        self.calculator = WorkoutRewardCalculator()

    def test_modes_scale_push_up_target(self):
        self.assertEqual(
            self.calculator.calculate_workout_target("push-ups", WorkoutMode.COZY, 10), 7
        )
        self.assertEqual(
            self.calculator.calculate_workout_target("push-ups", WorkoutMode.NORMAL, 10), 10
        )
        self.assertEqual(
            self.calculator.calculate_workout_target("push-ups", WorkoutMode.TUFF, 10), 14
        )

    def test_minimum_clamp(self):
        # 0.6 burpees for one minute rounds to 1, lifted to the mode minimum
        self.assertEqual(
            self.calculator.calculate_workout_target("burpees", WorkoutMode.NORMAL, 1), 3
        )

    def test_plank_uses_fixed_maximum(self):
        self.assertEqual(
            self.calculator.calculate_workout_target("plank", WorkoutMode.NORMAL, 10), 30
        )
        self.assertEqual(
            self.calculator.calculate_workout_target("plank", WorkoutMode.TUFF, 60), 180
        )

    def test_unknown_workout_and_zero_minutes(self):
        self.assertEqual(
            self.calculator.calculate_workout_target("yoga", WorkoutMode.TUFF, 10), 10
        )
        self.assertEqual(
            self.calculator.calculate_workout_target("push-ups", WorkoutMode.NORMAL, 0), 0
        )

    def test_half_values_round_up(self):
        # 4.5 and 10.5 raw targets
        self.assertEqual(
            self.calculator.calculate_workout_target("squats", WorkoutMode.COZY, 5), 5
        )
        self.assertEqual(
            self.calculator.calculate_workout_target("push-ups", WorkoutMode.COZY, 15), 11
        )
        # 90 seconds is 1.5 minutes
        self.assertEqual(self.calculator.calculate_required_reps("push-ups", 90), 5)

    def test_minimum_wins_over_small_maximum(self):
        # One minute of push-ups: max round(3.5) = 4, but the mode minimum is 5
        self.assertEqual(
            self.calculator.calculate_workout_target("push-ups", WorkoutMode.NORMAL, 1), 5
        )
        self.assertEqual(
            self.calculator.calculate_workout_target("push-ups", WorkoutMode.TUFF, 1), 8
        )

    def test_required_reps_from_seconds(self):
        self.assertEqual(self.calculator.calculate_required_reps("push-ups", 600), 10)
        self.assertEqual(self.calculator.calculate_required_reps("push-ups", 0), 0)


class TestDescriptions(unittest.TestCase):
    """Display helpers."""

    def test_reward_description(self):
        calculator = WorkoutRewardCalculator()
        self.assertEqual(
            calculator.get_reward_description("push-ups", 20), "20 reps = 10 min unlock"
        )

    def test_description_rounds_half_minutes_up(self):
        calculator = WorkoutRewardCalculator()
        self.assertEqual(
            calculator.get_reward_description("push-ups", 5), "5 reps = 3 min unlock"
        )
        self.assertEqual(calculator.calculate_earned_time("jumping-jacks", 1), 24)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(4.5), 5)
        self.assertEqual(round_half_up(2.49), 2)
        self.assertEqual(round_half_up(0), 0)

    def test_multipliers_read_only(self):
        multipliers = WorkoutRewardCalculator.get_workout_multipliers()
        self.assertEqual(multipliers["plank"], 1.5)
        with self.assertRaises(TypeError):
            multipliers["plank"] = 3.0


if __name__ == "__main__":
    unittest.main()
