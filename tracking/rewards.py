"""
Workout reward calculation.

Converts completed reps into earned screen time, and the other way round
(how much work is needed for a given amount of screen time). Stateless.
"""

import logging
import math
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping

import config

logger = logging.getLogger(__name__)


class WorkoutMode(str, Enum):
    """Difficulty mode used when sizing workout targets."""

    COZY = "cozy"
    NORMAL = "normal"
    TUFF = "tuff"


# Reps (or plank seconds) per minute of desired screen time in NORMAL mode
BASE_RATES_PER_MINUTE: Dict[str, float] = {
    "push-ups": 1.0,       # 10 reps for 10 min
    "squats": 1.2,
    "plank": 3.0,          # Time-based: 30 sec for 10 min
    "jumping-jacks": 2.5,
    "burpees": 0.6,
}

# Per-mode scaling. Rep exercises clamp to round(minutes * max_factor);
# time-based exercises clamp to a fixed max in seconds.
WORKOUT_MODE_PROFILES: Dict[str, Dict[str, Dict[str, Any]]] = {
    "push-ups": {
        "cozy": {"multiplier": 0.7, "min": 3, "max_factor": 2.5},
        "normal": {"multiplier": 1.0, "min": 5, "max_factor": 3.5},
        "tuff": {"multiplier": 1.4, "min": 8, "max_factor": 4.0},
    },
    "squats": {
        "cozy": {"multiplier": 0.75, "min": 4, "max_factor": 2.5},
        "normal": {"multiplier": 1.0, "min": 6, "max_factor": 3.5},
        "tuff": {"multiplier": 1.3, "min": 10, "max_factor": 4.0},
    },
    "plank": {
        "cozy": {"multiplier": 0.7, "min": 20, "max": 60},
        "normal": {"multiplier": 1.0, "min": 30, "max": 120},
        "tuff": {"multiplier": 1.5, "min": 45, "max": 180},
    },
    "jumping-jacks": {
        "cozy": {"multiplier": 0.8, "min": 10, "max_factor": 3.0},
        "normal": {"multiplier": 1.0, "min": 15, "max_factor": 4.0},
        "tuff": {"multiplier": 1.2, "min": 25, "max_factor": 4.5},
    },
    "burpees": {
        "cozy": {"multiplier": 0.6, "min": 2, "max_factor": 2.0},
        "normal": {"multiplier": 1.0, "min": 3, "max_factor": 3.0},
        "tuff": {"multiplier": 1.5, "min": 5, "max_factor": 3.5},
    },
}

# Reward multipliers applied to BASE_SECONDS_PER_REP
DIFFICULTY_MULTIPLIERS: Dict[str, float] = {
    "push-ups": 1.0,
    "squats": 1.0,
    "sit-ups": 1.0,
    "plank": 1.5,          # Time-based hold
    "jumping-jacks": 0.8,  # Easier, needs more reps for the same reward
    "burpees": 1.5,
}

TIME_BASED_WORKOUTS = {"plank"}


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest int, halves rounding up (2.5 -> 3)."""
    return math.floor(value + 0.5)


class WorkoutRewardCalculator:
    """
    Calculates unlock rewards and workout targets.

    Earned time formula: reps x BASE_SECONDS_PER_REP x difficulty multiplier.
    """

    def __init__(self, base_seconds_per_rep: int = config.BASE_SECONDS_PER_REP) -> None:
        self.base_seconds_per_rep = base_seconds_per_rep

    def calculate_earned_time(self, workout_type: str, reps_completed: int) -> int:
        """
        Calculate earned unlock time in seconds.

        Args:
            workout_type: Exercise tag (case-insensitive).
            reps_completed: Reps (or seconds for time-based exercises).

        Returns:
            Earned seconds, 0 for non-positive reps.

        Example:
            calculate_earned_time("push-ups", 20) -> 600
        """
        if reps_completed <= 0:
            return 0
        multiplier = DIFFICULTY_MULTIPLIERS.get(workout_type.lower(), 1.0)
        return round_half_up(reps_completed * self.base_seconds_per_rep * multiplier)

    def calculate_workout_target(
        self,
        workout_type: str,
        mode: WorkoutMode,
        desired_screen_time_minutes: int,
    ) -> int:
        """
        Calculate how much work earns the desired screen time.

        Args:
            workout_type: Exercise tag (case-insensitive).
            mode: Difficulty mode.
            desired_screen_time_minutes: Screen time the user wants.

        Returns:
            Reps for rep-based workouts, seconds for time-based ones.
        """
        if desired_screen_time_minutes <= 0:
            return 0

        workout_type = workout_type.lower()
        base_rate = BASE_RATES_PER_MINUTE.get(workout_type, 1.0)
        profile = WORKOUT_MODE_PROFILES.get(workout_type)
        if profile is None:
            # Unknown workout: plain base-rate calculation
            return round_half_up(desired_screen_time_minutes * base_rate)

        settings = profile.get(WorkoutMode(mode).value) or profile["normal"]
        target = round_half_up(base_rate * desired_screen_time_minutes * settings["multiplier"])

        if workout_type in TIME_BASED_WORKOUTS:
            max_value = settings["max"]
        else:
            max_value = round_half_up(desired_screen_time_minutes * settings["max_factor"])
        # The mode minimum wins when it exceeds the max (very short durations)
        return max(min(target, max_value), settings["min"])

    def calculate_required_reps(
        self,
        workout_type: str,
        target_seconds: int,
        mode: WorkoutMode = WorkoutMode.NORMAL,
    ) -> int:
        """Reps needed to earn target_seconds ("do 20 push-ups for 10 minutes")."""
        if target_seconds <= 0:
            return 0
        target_minutes = round_half_up(target_seconds / 60)
        return self.calculate_workout_target(workout_type, mode, target_minutes)

    def get_reward_description(self, workout_type: str, reps: int) -> str:
        """Human-readable reward, e.g. "20 reps = 10 min unlock"."""
        seconds = self.calculate_earned_time(workout_type, reps)
        minutes = round_half_up(seconds / 60)
        return f"{reps} reps = {minutes} min unlock"

    @staticmethod
    def get_workout_multipliers() -> Mapping[str, float]:
        return MappingProxyType(DIFFICULTY_MULTIPLIERS)
