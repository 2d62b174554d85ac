"""
AccessController: the lock/earn/unlock/expire state machine.

Decides whether the configured block targets are blocked or accessible.
Time never comes from a system clock here; every time-dependent method
takes an explicit `now`, and time only moves forward through tick().

States:
    locked   --start_workout-->               earning
    expired  --start_workout-->               earning
    earning  --cancel_workout-->              locked
    earning  --complete_workout (reps met)--> unlocked
    unlocked --tick (session elapsed)-->      expired
    expired  --tick (grace elapsed)-->        locked
    any      --lock()-->                      locked

Invalid transitions are ignored and reported through the returned
result dict rather than raised.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import config
from core.state import AccessState
from screen.blocklist import BlockTarget
from screen.enforcement import BlockingEnforcer
from tracking.unlock import InMemoryUnlockStore, UnlockSession, UnlockSessionStore
from tracking.workout import InMemoryWorkoutTracker, Workout, WorkoutTracker

logger = logging.getLogger(__name__)

# Result error types
ERROR_INVALID_TRANSITION = "invalid_transition"
ERROR_WORKOUT_INCOMPLETE = "workout_incomplete"
ERROR_NO_CHANGE = "no_change"


class AccessController:
    """
    Owns the access state, the active workout and the active unlock session.

    Collaborators (workout tracker, unlock store, enforcer) are injected
    and not owned. The controller is single-threaded; callers that tick
    from another thread must serialise access themselves.
    """

    def __init__(
        self,
        block_targets: Iterable[BlockTarget],
        grace_period_seconds: int = 0,
        workout_tracker: Optional[WorkoutTracker] = None,
        unlock_store: Optional[UnlockSessionStore] = None,
        enforcer: Optional[BlockingEnforcer] = None,
    ) -> None:
        """
        Initialise the controller in the LOCKED state.

        Args:
            block_targets: Apps/sites subject to blocking.
            grace_period_seconds: Delay between expiry and full re-lock.
            workout_tracker: Rep tracking collaborator (in-memory if None).
            unlock_store: Unlock session collaborator (in-memory if None).
            enforcer: Optional receiver of blocked/accessible lists.

        Raises:
            ValueError: If grace_period_seconds is negative.
        """
        if grace_period_seconds < 0:
            raise ValueError("grace_period_seconds must be non-negative")

        self._state: AccessState = AccessState.LOCKED
        self._block_targets: List[BlockTarget] = list(block_targets)
        self._grace_period_seconds: int = grace_period_seconds
        self._workout_tracker: WorkoutTracker = workout_tracker or InMemoryWorkoutTracker()
        self._unlock_store: UnlockSessionStore = unlock_store or InMemoryUnlockStore()
        self._enforcer: Optional[BlockingEnforcer] = enforcer

        self._active_workout: Optional[Workout] = None
        self._expired_at: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def current_state(self) -> AccessState:
        return self._state

    @property
    def block_targets(self) -> List[BlockTarget]:
        return list(self._block_targets)

    @property
    def grace_period_seconds(self) -> int:
        return self._grace_period_seconds

    @property
    def active_workout(self) -> Optional[Workout]:
        return self._active_workout

    @property
    def active_session(self) -> Optional[UnlockSession]:
        if self._state is not AccessState.UNLOCKED:
            return None
        return self._unlock_store.get_current_session()

    @property
    def workout_tracker(self) -> WorkoutTracker:
        """Tracker used for rep recording by the caller."""
        return self._workout_tracker

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_workout(self, workout: Workout, now: datetime) -> Dict[str, Any]:
        """
        LOCKED/EXPIRED -> EARNING.

        Args:
            workout: Workout the user has chosen.
            now: Current timestamp.

        Returns:
            Result dict with success, state and error_type.
        """
        if self._state not in (AccessState.LOCKED, AccessState.EXPIRED):
            return self._ignored("start_workout", ERROR_INVALID_TRANSITION)

        self._workout_tracker.record_workout_start(workout, now)
        self._active_workout = workout
        self._expired_at = None
        return self._transition(AccessState.EARNING, f"workout {workout.id} started")

    def complete_workout(self, now: datetime) -> Dict[str, Any]:
        """
        EARNING -> UNLOCKED once the tracker reports the target met.

        The unlock session lasts workout.earned_time_seconds from now.

        Args:
            now: Completion timestamp (session start).

        Returns:
            Result dict; error_type "workout_incomplete" if reps are missing.
        """
        if self._state is not AccessState.EARNING or self._active_workout is None:
            return self._ignored("complete_workout", ERROR_INVALID_TRANSITION)

        if not self._workout_tracker.is_completed(now):
            return self._ignored("complete_workout", ERROR_WORKOUT_INCOMPLETE)

        workout = self._active_workout
        self._unlock_store.record_unlock_start(
            workout.earned_time_seconds, config.UNLOCK_REASON_WORKOUT, now
        )
        self._workout_tracker.clear_workout()
        self._active_workout = None
        return self._transition(
            AccessState.UNLOCKED, f"earned {workout.earned_time_seconds}s from {workout.type}"
        )

    def cancel_workout(self) -> Dict[str, Any]:
        """EARNING -> LOCKED, discarding the active workout."""
        if self._state is not AccessState.EARNING:
            return self._ignored("cancel_workout", ERROR_INVALID_TRANSITION)

        self._workout_tracker.clear_workout()
        self._active_workout = None
        return self._transition(AccessState.LOCKED, "workout cancelled")

    def tick(self, now: datetime) -> Dict[str, Any]:
        """
        Time-based transitions, driven by an external clock.

        UNLOCKED -> EXPIRED when the session has elapsed, then
        EXPIRED -> LOCKED when the grace period has elapsed. Both may
        happen in one call, so repeated ticks with the same `now` never
        change state after the first.

        Args:
            now: Current timestamp.

        Returns:
            Result dict; error_type "no_change" when nothing happened.
        """
        changed = False

        if self._state is AccessState.UNLOCKED:
            session = self._unlock_store.get_current_session()
            if session is None or session.is_expired(now):
                self._unlock_store.clear_unlock_session()
                self._expired_at = now
                self._set_state(AccessState.EXPIRED, "unlock session elapsed")
                changed = True

        if self._state is AccessState.EXPIRED:
            if self._expired_at is None:
                # Expiry time lost; fall back to the restrictive state
                self._expired_at = now
            grace_end = self._expired_at + timedelta(seconds=self._grace_period_seconds)
            if now >= grace_end:
                self._expired_at = None
                self._set_state(AccessState.LOCKED, "grace period elapsed")
                changed = True

        if changed:
            self._push_enforcement()
            return self._result(True)
        return self._result(False, ERROR_NO_CHANGE)

    def lock(self) -> Dict[str, Any]:
        """Any state -> LOCKED. Discards workout, session and expiry."""
        self._workout_tracker.clear_workout()
        self._unlock_store.clear_unlock_session()
        self._active_workout = None
        self._expired_at = None
        return self._transition(AccessState.LOCKED, "manual lock")

    def update_blocked_apps(self, new_targets: Iterable[BlockTarget]) -> Dict[str, Any]:
        """
        Replace the block target list. The access state is unchanged.

        Args:
            new_targets: Replacement targets.
        """
        self._block_targets = list(new_targets)
        logger.info(f"Block target list updated ({len(self._block_targets)} targets)")
        self._push_enforcement()
        return self._result(True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_blocked_targets(self, now: datetime) -> List[str]:
        """Identifiers currently blocked: all of them unless UNLOCKED."""
        if self._state is AccessState.UNLOCKED:
            return []
        return [t.identifier for t in self._block_targets]

    def get_accessible_targets(self, now: datetime) -> List[str]:
        """Identifiers currently accessible: all of them only when UNLOCKED."""
        if self._state is AccessState.UNLOCKED:
            return [t.identifier for t in self._block_targets]
        return []

    def is_blocked(self, identifier: str, now: datetime) -> bool:
        return identifier in self.get_blocked_targets(now)

    def get_grace_period_remaining(self, now: datetime) -> int:
        """
        Whole seconds left before EXPIRED turns into LOCKED.

        Returns:
            Seconds remaining (rounded up), 0 outside EXPIRED.
        """
        if self._state is not AccessState.EXPIRED or self._expired_at is None:
            return 0
        elapsed = (now - self._expired_at).total_seconds()
        remaining = self._grace_period_seconds - elapsed
        return max(0, math.ceil(remaining))

    def get_workout_progress(self, now: datetime) -> float:
        if self._state is not AccessState.EARNING:
            return 0.0
        return self._workout_tracker.get_progress(now)

    def get_unlock_time_remaining(self, now: datetime) -> int:
        session = self.active_session
        return session.get_remaining_seconds(now) if session else 0

    def get_total_unlock_duration(self) -> int:
        """Total duration of the active unlock session (0 if none)."""
        session = self.active_session
        return session.duration_seconds if session else 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _set_state(self, new_state: AccessState, reason: str) -> None:
        old_state = self._state
        self._state = new_state
        if old_state is not new_state:
            logger.info(f"{old_state.value} -> {new_state.value} ({reason})")

    def _transition(self, new_state: AccessState, reason: str) -> Dict[str, Any]:
        self._set_state(new_state, reason)
        self._push_enforcement()
        return self._result(True)

    def _ignored(self, operation: str, error_type: str) -> Dict[str, Any]:
        logger.debug(f"Ignored {operation} in state {self._state.value}: {error_type}")
        return self._result(False, error_type)

    def _result(self, success: bool, error_type: Optional[str] = None) -> Dict[str, Any]:
        return {"success": success, "state": self._state, "error_type": error_type}

    def _push_enforcement(self) -> None:
        """Hand current lists to the enforcer. Failures never affect state."""
        if self._enforcer is None:
            return
        identifiers = [t.identifier for t in self._block_targets]
        unlocked = self._state is AccessState.UNLOCKED
        try:
            self._enforcer.apply(
                [] if unlocked else identifiers, identifiers if unlocked else []
            )
        except Exception as e:
            logger.warning(f"Blocking enforcer failed: {e}")
