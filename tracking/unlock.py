"""Unlock sessions: time-boxed access granted by a completed workout."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Protocol

import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnlockSession:
    """
    A period of unlocked access.

    Attributes:
        id: Session identifier.
        start_time: When access was granted.
        duration_seconds: Total allowed access time (positive).
        reason: Why the session exists, e.g. "workout_completed".
    """

    id: str
    start_time: datetime
    duration_seconds: int
    reason: str = config.UNLOCK_REASON_WORKOUT

    def __post_init__(self) -> None:
        if self.duration_seconds <= 0:
            raise ValueError("duration_seconds must be positive")
        if not self.reason:
            raise ValueError("reason cannot be empty")

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(seconds=self.duration_seconds)

    def get_remaining_seconds(self, now: datetime) -> int:
        """
        Get remaining access time.

        Args:
            now: Current timestamp.

        Returns:
            Whole seconds left (clamped to 0 minimum).
        """
        remaining = int((self.end_time - now).total_seconds())
        return max(0, remaining)

    def is_expired(self, now: datetime) -> bool:
        """True once now has reached the session's end time."""
        return now >= self.end_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "start_time": self.start_time.isoformat(),
            "duration_seconds": self.duration_seconds,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UnlockSession":
        return cls(
            id=data["id"],
            start_time=datetime.fromisoformat(data["start_time"]),
            duration_seconds=int(data["duration_seconds"]),
            reason=data.get("reason", config.UNLOCK_REASON_WORKOUT),
        )


class UnlockSessionStore(Protocol):
    """Protocol for unlock session bookkeeping. All times are injected."""

    def record_unlock_start(
        self, duration_seconds: int, reason: str, start_time: datetime
    ) -> UnlockSession:
        """Create and hold a new session, replacing any existing one."""
        ...

    def get_current_session(self) -> Optional[UnlockSession]:
        ...

    def get_remaining_seconds(self, now: datetime) -> int:
        ...

    def is_active(self, now: datetime) -> bool:
        ...

    def clear_unlock_session(self) -> None:
        ...


class InMemoryUnlockStore:
    """Holds at most one unlock session in memory."""

    def __init__(self) -> None:
        self._current_session: Optional[UnlockSession] = None

    def record_unlock_start(
        self, duration_seconds: int, reason: str, start_time: datetime
    ) -> UnlockSession:
        session_id = f"session-{int(start_time.timestamp() * 1000)}"
        self._current_session = UnlockSession(
            id=session_id,
            start_time=start_time,
            duration_seconds=duration_seconds,
            reason=reason,
        )
        logger.debug(f"Recorded unlock session {session_id} for {duration_seconds}s")
        return self._current_session

    def get_current_session(self) -> Optional[UnlockSession]:
        return self._current_session

    def get_remaining_seconds(self, now: datetime) -> int:
        if self._current_session is None:
            return 0
        return self._current_session.get_remaining_seconds(now)

    def is_active(self, now: datetime) -> bool:
        if self._current_session is None:
            return False
        return not self._current_session.is_expired(now)

    def clear_unlock_session(self) -> None:
        self._current_session = None
