"""
Workout history and streak tracking for PUSHIN'.

Keeps a record of completed workouts and counts consecutive days with at
least one workout. Both are held in memory; every date-dependent call
takes the current timestamp from the caller.
"""

import logging
import threading
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

import config

logger = logging.getLogger(__name__)

WORKOUT_DISPLAY_NAMES = {
    "push-ups": "Push-Ups",
    "squats": "Squats",
    "plank": "Plank",
    "jumping-jacks": "Jumping Jacks",
    "burpees": "Burpees",
}


@dataclass(frozen=True)
class WorkoutRecord:
    """
    One completed workout.

    Attributes:
        id: Unique record identifier.
        workout_type: Exercise tag, e.g. "push-ups".
        reps_completed: Reps (or seconds for time-based exercises).
        earned_time_seconds: Unlock time the workout granted.
        workout_mode: Difficulty mode the target was sized with.
        completed_at: Completion timestamp.
    """

    id: str
    workout_type: str
    reps_completed: int
    earned_time_seconds: int
    workout_mode: str
    completed_at: datetime

    @property
    def display_name(self) -> str:
        return WORKOUT_DISPLAY_NAMES.get(self.workout_type.lower(), self.workout_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "workout_type": self.workout_type,
            "display_name": self.display_name,
            "reps_completed": self.reps_completed,
            "earned_time_seconds": self.earned_time_seconds,
            "workout_mode": self.workout_mode,
            "completed_at": self.completed_at.isoformat(),
        }


class WorkoutHistory:
    """
    Completed workouts, most recent first when queried.

    Records older than the retention window are dropped by
    cleanup_old_workouts().
    """

    def __init__(self, retention_days: int = config.HISTORY_RETENTION_DAYS):
        self.retention_days = retention_days
        self._records: List[WorkoutRecord] = []
        self._lock = threading.Lock()

    def record_completed_workout(
        self,
        workout_type: str,
        reps_completed: int,
        earned_time_seconds: int,
        workout_mode: str,
        completed_at: datetime,
    ) -> WorkoutRecord:
        """
        Add a completed workout to the history.

        Returns:
            The stored record.
        """
        with self._lock:
            record = WorkoutRecord(
                id=f"history_{int(completed_at.timestamp() * 1000)}_{len(self._records)}",
                workout_type=workout_type,
                reps_completed=reps_completed,
                earned_time_seconds=earned_time_seconds,
                workout_mode=workout_mode,
                completed_at=completed_at,
            )
            self._records.append(record)
        logger.debug(f"Recorded {reps_completed} {workout_type} ({earned_time_seconds}s earned)")
        return record

    def get_recent_workouts(self, limit: int = config.RECENT_WORKOUTS_LIMIT) -> List[WorkoutRecord]:
        return self._sorted(self._records)[:limit]

    def get_workouts_from_last_days(self, days: int, now: datetime) -> List[WorkoutRecord]:
        cutoff = now - timedelta(days=days)
        return self._sorted(r for r in self._records if r.completed_at > cutoff)

    def get_todays_workouts(self, now: datetime) -> List[WorkoutRecord]:
        today = now.date()
        return self._sorted(r for r in self._records if r.completed_at.date() == today)

    @property
    def total_workouts(self) -> int:
        return len(self._records)

    def get_total_time_earned(self) -> int:
        return sum(r.earned_time_seconds for r in self._records)

    def get_most_popular_workout_type(self) -> Optional[str]:
        """Most frequent workout type (first recorded wins ties), None if empty."""
        if not self._records:
            return None
        counts = Counter(r.workout_type for r in self._records)
        return counts.most_common(1)[0][0]

    def delete_workout(self, record_id: str) -> bool:
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.id != record_id]
            return len(self._records) < before

    def clear(self) -> None:
        with self._lock:
            self._records = []

    def cleanup_old_workouts(self, now: datetime) -> int:
        """
        Drop records older than the retention window.

        Returns:
            Number of records removed.
        """
        cutoff = now - timedelta(days=self.retention_days)
        with self._lock:
            kept = [r for r in self._records if r.completed_at >= cutoff]
            removed = len(self._records) - len(kept)
            self._records = kept
        if removed:
            logger.info(f"Removed {removed} workouts older than {self.retention_days} days")
        return removed

    def _sorted(self, records) -> List[WorkoutRecord]:
        with self._lock:
            return sorted(records, key=lambda r: r.completed_at, reverse=True)


class StreakTracker:
    """
    Consecutive-day workout streaks.

    A workout on the day after the last workout day extends the streak; a
    gap of more than one day restarts it at 1; further workouts on the same
    day only count towards the total.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.current_streak = 0
        self.best_streak = 0
        self.total_workouts = 0
        self.last_workout_date: Optional[date] = None

    def record_workout_completion(self, now: datetime) -> int:
        """
        Record a completed workout.

        Args:
            now: Completion timestamp.

        Returns:
            The current streak after recording.
        """
        today = now.date()
        with self._lock:
            if self.last_workout_date is None:
                self.current_streak = 1
            else:
                days = (today - self.last_workout_date).days
                if days == 1:
                    self.current_streak += 1
                elif days > 1:
                    logger.info(f"Streak of {self.current_streak} days broken after {days} days")
                    self.current_streak = 1

            self.best_streak = max(self.best_streak, self.current_streak)
            self.total_workouts += 1
            if self.last_workout_date is None or today > self.last_workout_date:
                self.last_workout_date = today
            return self.current_streak

    def is_today_completed(self, now: datetime) -> bool:
        return self.last_workout_date == now.date()

    def reset(self) -> None:
        with self._lock:
            self.current_streak = 0
            self.best_streak = 0
            self.total_workouts = 0
            self.last_workout_date = None

    def to_dict(self, now: datetime) -> Dict[str, Any]:
        return {
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
            "total_workouts": self.total_workouts,
            "today_completed": self.is_today_completed(now),
        }
