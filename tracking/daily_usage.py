"""
Daily unlock usage tracker for PUSHIN'.

Tracks earned and consumed unlock time for the current day and enforces
the plan tier's daily cap. Resets automatically when the date of the
injected timestamp changes. Held in memory only.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import config

logger = logging.getLogger(__name__)


def get_daily_cap_seconds(plan_tier: str) -> Optional[int]:
    """
    Daily cap for a plan tier.

    Args:
        plan_tier: Plan name (case-insensitive).

    Returns:
        Cap in seconds, or None for unlimited. Unknown tiers get the free cap.
    """
    tier = plan_tier.lower()
    if tier in config.DAILY_CAP_SECONDS:
        return config.DAILY_CAP_SECONDS[tier]
    return config.DAILY_CAP_SECONDS[config.PLAN_FREE]


@dataclass
class DailyUsage:
    """Usage record for one calendar day."""

    date: str
    plan_tier: str = config.PLAN_FREE
    earned_seconds: int = 0
    consumed_seconds: int = 0

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.earned_seconds - self.consumed_seconds)

    @property
    def daily_cap_seconds(self) -> Optional[int]:
        return get_daily_cap_seconds(self.plan_tier)

    @property
    def has_reached_daily_cap(self) -> bool:
        cap = self.daily_cap_seconds
        if cap is None:
            return False
        return self.consumed_seconds >= cap

    @property
    def daily_cap_progress(self) -> float:
        """Fraction of the cap consumed (0.0 for unlimited plans)."""
        cap = self.daily_cap_seconds
        if not cap:
            return 0.0
        return min(1.0, self.consumed_seconds / cap)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "plan_tier": self.plan_tier,
            "earned_seconds": self.earned_seconds,
            "consumed_seconds": self.consumed_seconds,
            "remaining_seconds": self.remaining_seconds,
            "daily_cap_seconds": self.daily_cap_seconds,
            "has_reached_daily_cap": self.has_reached_daily_cap,
        }


class DailyUsageTracker:
    """
    Tracks earned and consumed unlock time per day (thread-safe).

    Every method takes the current timestamp so the day boundary follows
    the caller's clock.
    """

    def __init__(self, plan_tier: str = config.PLAN_TIER) -> None:
        self._lock = threading.Lock()
        self._plan_tier = plan_tier.lower()
        self._usage: Optional[DailyUsage] = None

    @property
    def plan_tier(self) -> str:
        return self._plan_tier

    def _today(self, now: datetime) -> DailyUsage:
        """Get today's record, starting a fresh one on a new day. Lock must be held."""
        day = now.date().isoformat()
        if self._usage is None or self._usage.date != day:
            if self._usage is not None:
                logger.info(f"New day detected ({day}), resetting daily usage")
            self._usage = DailyUsage(date=day, plan_tier=self._plan_tier)
        return self._usage

    def get_today_usage(self, now: datetime) -> DailyUsage:
        """Snapshot copy of today's usage."""
        with self._lock:
            usage = self._today(now)
            return DailyUsage(
                date=usage.date,
                plan_tier=usage.plan_tier,
                earned_seconds=usage.earned_seconds,
                consumed_seconds=usage.consumed_seconds,
            )

    def add_earned_time(self, seconds: int, now: datetime) -> None:
        """
        Add seconds earned from a completed workout.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError("Earned seconds must be non-negative")
        with self._lock:
            self._today(now).earned_seconds += seconds

    def consume_time(self, seconds: int, now: datetime) -> None:
        """
        Record unlocked time actually used.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError("Consumed seconds must be non-negative")
        with self._lock:
            self._today(now).consumed_seconds += seconds

    def has_hit_daily_cap(self, now: datetime) -> bool:
        with self._lock:
            return self._today(now).has_reached_daily_cap

    def can_unlock(self, now: datetime) -> bool:
        """True while today's consumed time is below the plan cap."""
        return not self.has_hit_daily_cap(now)

    def get_available_seconds(self, now: datetime) -> int:
        """
        Unlock time still usable today.

        Returns:
            The lesser of earned-but-unused time and remaining cap space.
        """
        with self._lock:
            usage = self._today(now)
            cap = usage.daily_cap_seconds
            if cap is None:
                return usage.remaining_seconds
            cap_remaining = max(0, cap - usage.consumed_seconds)
            return min(cap_remaining, usage.remaining_seconds)

    def update_plan_tier(self, plan_tier: str, now: datetime) -> None:
        """Switch plan tier; today's counters are kept."""
        with self._lock:
            self._plan_tier = plan_tier.lower()
            self._today(now).plan_tier = self._plan_tier
        logger.info(f"Plan tier set to {self._plan_tier}")
