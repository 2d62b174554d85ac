"""
Blocking enforcement boundary.

The access controller hands its current blocked/accessible lists to an
enforcer. Real enforcers (overlay windows, OS screen-time APIs) live in
the platform layer; the controller never depends on them succeeding.
"""

import logging
from typing import List, Protocol, Tuple

logger = logging.getLogger(__name__)


class BlockingEnforcer(Protocol):
    """Receives target lists whenever the controller's view changes."""

    def apply(self, blocked: List[str], accessible: List[str]) -> None:
        ...


class LoggingEnforcer:
    """
    Enforcer that only logs and remembers what it was told.

    Used by the CLI and in tests where no platform blocking exists.
    """

    def __init__(self) -> None:
        self.blocked: Tuple[str, ...] = ()
        self.accessible: Tuple[str, ...] = ()
        self.apply_count: int = 0

    def apply(self, blocked: List[str], accessible: List[str]) -> None:
        new_blocked = tuple(blocked)
        new_accessible = tuple(accessible)
        self.apply_count += 1
        if new_blocked == self.blocked and new_accessible == self.accessible:
            return
        self.blocked = new_blocked
        self.accessible = new_accessible
        logger.info(
            f"Enforcing: {len(new_blocked)} blocked, {len(new_accessible)} accessible"
        )
