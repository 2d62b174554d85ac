"""
PushinEngine: the clock source and app-level wiring around AccessController.

The controller never reads a clock. The engine does: it reads its `clock`
callable, ticks the controller from a background thread, converts workouts
into earned time via the reward calculator, charges unlocked time to the
daily usage tracker and forces a lock when the plan's daily cap is hit.

This module has no UI dependencies. A CLI or GUI calls engine methods and
receives updates via callbacks.

Callbacks:
    on_state_change(state: AccessState, text: str)
    on_alert(reason: str, message: str)
"""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional

import config
from core.controller import AccessController
from core.state import AccessState
from screen.blocklist import BlockTarget, BlocklistManager
from screen.enforcement import BlockingEnforcer, LoggingEnforcer
from tracking.analytics import format_duration, summarise_usage
from tracking.daily_usage import DailyUsageTracker
from tracking.history import StreakTracker, WorkoutHistory
from tracking.rewards import WorkoutMode, WorkoutRewardCalculator
from tracking.workout import Workout

logger = logging.getLogger(__name__)

ERROR_DAILY_CAP = "daily_cap_reached"
ERROR_INVALID_WORKOUT = "invalid_workout"

STATE_TEXT = {
    AccessState.LOCKED: "Locked - complete a workout to unlock",
    AccessState.EARNING: "Workout in progress",
    AccessState.UNLOCKED: "Unlocked",
    AccessState.EXPIRED: "Time's up - locking soon",
}


class PushinEngine:
    """
    App-level controller.

    Handles:
    - Periodic ticking (background thread, config.TICK_INTERVAL_SECONDS)
    - Workout start/rep/complete/cancel with reward calculation
    - Daily usage accounting and cap enforcement
    - Workout history and streaks
    - Status snapshots for the UI

    All controller access is serialised with a single re-entrant lock.
    """

    def __init__(
        self,
        block_targets: Optional[Iterable[BlockTarget]] = None,
        grace_period_seconds: Optional[int] = None,
        plan_tier: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
        enforcer: Optional[BlockingEnforcer] = None,
        reward_calculator: Optional[WorkoutRewardCalculator] = None,
        usage_tracker: Optional[DailyUsageTracker] = None,
        history: Optional[WorkoutHistory] = None,
        streak_tracker: Optional[StreakTracker] = None,
    ) -> None:
        """
        Initialise the engine and its controller in the LOCKED state.

        Args:
            block_targets: Targets to block (loaded from config.BLOCKLIST_FILE if None).
            grace_period_seconds: Grace period (config.GRACE_PERIOD_SECONDS if None).
            plan_tier: Plan tier for daily caps (config.PLAN_TIER if None).
            clock: Callable returning the current time (datetime.now if None).
            enforcer: Blocking enforcer (LoggingEnforcer if None).
            reward_calculator: Reward calculator (default calculator if None).
            usage_tracker: Daily usage tracker (fresh tracker if None).
            history: Completed workout history (fresh history if None).
            streak_tracker: Workout streak tracker (fresh tracker if None).
        """
        if block_targets is None:
            block_targets = BlocklistManager(config.BLOCKLIST_FILE).load()
        if grace_period_seconds is None:
            grace_period_seconds = config.GRACE_PERIOD_SECONDS

        self.clock: Callable[[], datetime] = clock or datetime.now
        self.enforcer: BlockingEnforcer = enforcer or LoggingEnforcer()
        self.reward_calculator = reward_calculator or WorkoutRewardCalculator()
        self.usage_tracker = usage_tracker or DailyUsageTracker(plan_tier or config.PLAN_TIER)
        self.history = history or WorkoutHistory()
        self.streak_tracker = streak_tracker or StreakTracker()
        self.controller = AccessController(
            block_targets,
            grace_period_seconds=grace_period_seconds,
            enforcer=self.enforcer,
        )

        self._lock = threading.RLock()
        self._last_charge_time: Optional[datetime] = None
        self._pending_usage_seconds: float = 0.0

        # Ticker thread
        self.should_stop: threading.Event = threading.Event()
        self.tick_thread: Optional[threading.Thread] = None

        # ---- Callbacks (set by the UI) ----
        self.on_state_change: Optional[Callable[[AccessState, str], None]] = None
        self.on_alert: Optional[Callable[[str, str], None]] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def current_state(self) -> AccessState:
        return self.controller.current_state

    def start_workout(
        self,
        workout_type: str,
        target_reps: int,
        mode: WorkoutMode = WorkoutMode.NORMAL,
    ) -> Dict[str, Any]:
        """
        Start a workout; its reward is derived from the target reps.

        Args:
            workout_type: Exercise tag, e.g. "push-ups".
            target_reps: Reps (or seconds for plank) to complete.
            mode: Difficulty mode, kept with the workout for its history record.

        Returns:
            Controller result dict, or an error dict when the daily cap is
            reached or the workout earns nothing.
        """
        now = self.clock()
        with self._lock:
            if not self.usage_tracker.can_unlock(now):
                logger.info("Daily cap reached, refusing to start workout")
                return self._error(ERROR_DAILY_CAP)

            earned = self.reward_calculator.calculate_earned_time(workout_type, target_reps)
            if target_reps <= 0 or earned <= 0:
                return self._error(ERROR_INVALID_WORKOUT)

            workout = Workout(
                id=f"workout_{int(now.timestamp() * 1000)}",
                type=workout_type,
                target_reps=target_reps,
                earned_time_seconds=earned,
                metadata={"mode": WorkoutMode(mode).value},
            )
            return self._run(lambda: self.controller.start_workout(workout, now))

    def record_rep(self) -> float:
        """Record one rep. Returns the workout progress (0.0-1.0)."""
        return self.record_reps(1)

    def record_reps(self, count: int) -> float:
        """
        Record several reps for the active workout.

        Returns:
            Workout progress after recording.
        """
        now = self.clock()
        with self._lock:
            self.controller.workout_tracker.record_reps(count, now)
            return self.controller.get_workout_progress(now)

    def complete_workout(self) -> Dict[str, Any]:
        """Complete the active workout and credit the earned time. Adds it to the history."""
        now = self.clock()
        with self._lock:
            workout = self.controller.active_workout
            result = self._run(lambda: self.controller.complete_workout(now))
            if result["success"] and workout is not None:
                self.usage_tracker.add_earned_time(workout.earned_time_seconds, now)
                self._last_charge_time = now
                self._pending_usage_seconds = 0.0
                self._record_history(workout, now)
            return result

    def cancel_workout(self) -> Dict[str, Any]:
        with self._lock:
            return self._run(self.controller.cancel_workout)

    def lock(self, reason: str = config.LOCK_REASON_MANUAL) -> Dict[str, Any]:
        """Force LOCKED from any state."""
        now = self.clock()
        with self._lock:
            self._charge_usage(now)
            self._last_charge_time = None
            self._pending_usage_seconds = 0.0
            logger.info(f"Lock requested ({reason})")
            return self._run(self.controller.lock)

    def tick(self) -> Dict[str, Any]:
        """
        Advance time once: charge usage, tick the controller, enforce caps.

        Returns:
            The controller's tick result (or the lock result on a forced lock).
        """
        now = self.clock()
        with self._lock:
            if self.controller.current_state is AccessState.UNLOCKED:
                self._charge_usage(now)

            result = self._run(lambda: self.controller.tick(now))

            if self.controller.current_state is AccessState.UNLOCKED:
                if self.usage_tracker.has_hit_daily_cap(now):
                    logger.warning("Daily cap reached while unlocked, forcing lock")
                    result = self.lock(reason=config.LOCK_REASON_DAILY_CAP)
                    self._notify_alert(
                        config.LOCK_REASON_DAILY_CAP,
                        "Daily screen time limit reached",
                    )
            else:
                self._last_charge_time = None
                self._pending_usage_seconds = 0.0
            return result

    def update_blocked_apps(self, targets: Iterable[BlockTarget]) -> Dict[str, Any]:
        with self._lock:
            return self.controller.update_blocked_apps(targets)

    def update_plan_tier(self, plan_tier: str) -> None:
        """Switch plan tier (after a subscription change)."""
        with self._lock:
            self.usage_tracker.update_plan_tier(plan_tier, self.clock())

    def get_workout_reward_description(self, workout_type: str, reps: int) -> str:
        return self.reward_calculator.get_reward_description(workout_type, reps)

    def get_status(self) -> Dict[str, Any]:
        """
        Get current engine status (polled by the UI).

        Returns:
            dict with keys: state, text, blocked, accessible,
            unlock_remaining_seconds, unlock_total_seconds,
            grace_remaining_seconds, workout_progress, active_workout,
            usage, streak, recent_workouts, is_ticking.
        """
        now = self.clock()
        with self._lock:
            state = self.controller.current_state
            unlock_remaining = self.controller.get_unlock_time_remaining(now)
            grace_remaining = self.controller.get_grace_period_remaining(now)
            workout = self.controller.active_workout

            text = STATE_TEXT[state]
            if state is AccessState.UNLOCKED:
                text = f"Unlocked - {format_duration(unlock_remaining)} left"
            elif state is AccessState.EXPIRED:
                text = f"Time's up - locking in {format_duration(grace_remaining)}"

            return {
                "state": state,
                "text": text,
                "blocked": self.controller.get_blocked_targets(now),
                "accessible": self.controller.get_accessible_targets(now),
                "unlock_remaining_seconds": unlock_remaining,
                "unlock_total_seconds": self.controller.get_total_unlock_duration(),
                "grace_remaining_seconds": grace_remaining,
                "workout_progress": self.controller.get_workout_progress(now),
                "active_workout": workout.to_dict() if workout else None,
                "usage": summarise_usage(self.usage_tracker.get_today_usage(now)),
                "streak": self.streak_tracker.to_dict(now),
                "recent_workouts": [r.to_dict() for r in self.history.get_recent_workouts()],
                "is_ticking": self.is_ticking,
            }

    # ------------------------------------------------------------------
    # Ticker thread
    # ------------------------------------------------------------------

    @property
    def is_ticking(self) -> bool:
        return self.tick_thread is not None and self.tick_thread.is_alive()

    def start(self) -> None:
        """Start the background ticker. Calling it twice is safe."""
        if self.is_ticking:
            return
        self.should_stop.clear()
        self.tick_thread = threading.Thread(target=self._tick_loop, daemon=True)
        self.tick_thread.start()
        logger.info(f"Ticker started ({config.TICK_INTERVAL_SECONDS}s interval)")

    def stop(self) -> None:
        """Stop the background ticker and wait for it to finish."""
        self.should_stop.set()
        if self.tick_thread and self.tick_thread.is_alive():
            self.tick_thread.join(timeout=2.0)
            if self.tick_thread.is_alive():
                logger.warning("Tick thread did not stop within timeout")
        self.tick_thread = None

    def _tick_loop(self) -> None:
        while not self.should_stop.wait(config.TICK_INTERVAL_SECONDS):
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Tick failed: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run(self, operation: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        """Run a controller operation and notify listeners if state changed."""
        before = self.controller.current_state
        result = operation()
        after = self.controller.current_state
        if after is not before:
            self._notify_state_change(after)
        return result

    def _charge_usage(self, now: datetime) -> None:
        """Charge unlocked time since the last charge to daily usage."""
        if self._last_charge_time is None:
            return
        session = self.controller.active_session
        end = min(now, session.end_time) if session else now
        elapsed = (end - self._last_charge_time).total_seconds()
        if elapsed > 0:
            self._pending_usage_seconds += elapsed
            whole = int(self._pending_usage_seconds)
            if whole:
                self.usage_tracker.consume_time(whole, now)
                self._pending_usage_seconds -= whole
        self._last_charge_time = max(self._last_charge_time, end)

    def _record_history(self, workout: Workout, now: datetime) -> None:
        mode = (workout.metadata or {}).get("mode", WorkoutMode.NORMAL.value)
        self.history.record_completed_workout(
            workout_type=workout.type,
            reps_completed=workout.target_reps,
            earned_time_seconds=workout.earned_time_seconds,
            workout_mode=mode,
            completed_at=now,
        )
        streak = self.streak_tracker.record_workout_completion(now)
        self.history.cleanup_old_workouts(now)
        logger.info(f"Workout recorded, streak is {streak} day(s)")

    def _error(self, error_type: str) -> Dict[str, Any]:
        return {
            "success": False,
            "state": self.controller.current_state,
            "error_type": error_type,
        }

    def _notify_state_change(self, state: AccessState) -> None:
        if self.on_state_change:
            try:
                self.on_state_change(state, STATE_TEXT[state])
            except Exception as e:
                logger.debug(f"on_state_change callback error: {e}")

    def _notify_alert(self, reason: str, message: str) -> None:
        if self.on_alert:
            try:
                self.on_alert(reason, message)
            except Exception as e:
                logger.debug(f"on_alert callback error: {e}")
