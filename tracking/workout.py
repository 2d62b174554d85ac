"""
Workout definitions and rep tracking.

The access controller only asks a tracker whether the active workout's
target is met. How reps are counted (camera, sensor, manual tap) lives
behind the WorkoutTracker protocol.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Workout:
    """
    A workout the user must finish to earn unlock time.

    Attributes:
        id: Unique workout identifier.
        type: Exercise tag, e.g. "push-ups" or "plank".
        target_reps: Required repetitions (seconds for time-based exercises).
        earned_time_seconds: Unlock duration granted on completion.
        metadata: Optional extra data supplied by the caller.
    """

    id: str
    type: str
    target_reps: int
    earned_time_seconds: int
    metadata: Optional[Dict[str, Any]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("Workout type cannot be empty")
        if self.target_reps <= 0:
            raise ValueError("target_reps must be positive")
        if self.earned_time_seconds <= 0:
            raise ValueError("earned_time_seconds must be positive")

    def to_dict(self) -> Dict[str, Any]:
        """Convert workout to a JSON-friendly dictionary."""
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "target_reps": self.target_reps,
            "earned_time_seconds": self.earned_time_seconds,
        }
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Workout":
        """Create a Workout from a dictionary produced by to_dict()."""
        return cls(
            id=data["id"],
            type=data["type"],
            target_reps=int(data["target_reps"]),
            earned_time_seconds=int(data["earned_time_seconds"]),
            metadata=data.get("metadata"),
        )


class WorkoutTracker(Protocol):
    """Protocol for workout progress tracking. All times are injected."""

    def record_workout_start(self, workout: Workout, start_time: datetime) -> None:
        """Begin tracking the given workout."""
        ...

    def record_rep(self, timestamp: datetime) -> None:
        """Record one completed repetition."""
        ...

    def record_reps(self, count: int, timestamp: datetime) -> None:
        """Record several completed repetitions at once."""
        ...

    def get_progress(self, now: datetime) -> float:
        """Progress of the active workout between 0.0 and 1.0."""
        ...

    def is_completed(self, now: datetime) -> bool:
        """True once the active workout's target is met."""
        ...

    def clear_workout(self) -> None:
        """Drop the active workout and its progress."""
        ...

    def get_current_workout(self) -> Optional[Workout]:
        """The active workout, or None."""
        ...


class InMemoryWorkoutTracker:
    """
    Counts reps for a single active workout in memory.

    Reps recorded while no workout is active are ignored.
    """

    def __init__(self) -> None:
        self._current_workout: Optional[Workout] = None
        self._completed_reps: int = 0
        self._started_at: Optional[datetime] = None

    @property
    def completed_reps(self) -> int:
        return self._completed_reps

    def record_workout_start(self, workout: Workout, start_time: datetime) -> None:
        self._current_workout = workout
        self._completed_reps = 0
        self._started_at = start_time
        logger.debug(f"Tracking workout {workout.id} ({workout.type}, {workout.target_reps} reps)")

    def record_rep(self, timestamp: datetime) -> None:
        self.record_reps(1, timestamp)

    def record_reps(self, count: int, timestamp: datetime) -> None:
        """
        Record several reps.

        Args:
            count: Number of reps to add. Must be non-negative.
            timestamp: Time the reps were completed.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError("Rep count must be non-negative")
        if self._current_workout is None:
            logger.debug("Ignoring reps recorded with no active workout")
            return
        self._completed_reps += count

    def get_progress(self, now: datetime) -> float:
        if self._current_workout is None:
            return 0.0
        progress = self._completed_reps / self._current_workout.target_reps
        return min(1.0, max(0.0, progress))

    def is_completed(self, now: datetime) -> bool:
        return (
            self._current_workout is not None
            and self._completed_reps >= self._current_workout.target_reps
        )

    def clear_workout(self) -> None:
        self._current_workout = None
        self._completed_reps = 0
        self._started_at = None

    def get_current_workout(self) -> Optional[Workout]:
        return self._current_workout
