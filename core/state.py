"""Access states for the PUSHIN' lock/earn/unlock cycle."""

from enum import Enum


class AccessState(str, Enum):
    """
    State of the access controller. Exactly one value holds at any time.

    LOCKED    - targets blocked, access must be earned
    EARNING   - workout in progress, targets still blocked
    UNLOCKED  - targets accessible while the unlock session runs
    EXPIRED   - session over, targets blocked, grace period before full lock
    """

    LOCKED = "locked"
    EARNING = "earning"
    UNLOCKED = "unlocked"
    EXPIRED = "expired"

    @property
    def is_blocking(self) -> bool:
        """True for every state in which block targets are enforced."""
        return self is not AccessState.UNLOCKED
