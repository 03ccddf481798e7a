"""Access state model."""

from enum import Enum


class AccessState(str, Enum):
    """Access state for blocked targets.

    Exactly one state holds at any instant.
    """

    LOCKED = "locked"  # Nothing earned, or unlock plus grace fully elapsed
    EARNING = "earning"  # Workout in progress, still blocked
    UNLOCKED = "unlocked"  # Earned unlock window is active
    EXPIRED = "expired"  # Unlock window over, grace period running

    @property
    def is_blocking(self) -> bool:
        """Whether targets are blocked in this state."""
        return self is not AccessState.UNLOCKED

    def get_display(self) -> str:
        """Get a human-readable state string."""
        display_map = {
            AccessState.LOCKED: "Locked",
            AccessState.EARNING: "Earning",
            AccessState.UNLOCKED: "Unlocked",
            AccessState.EXPIRED: "Expired (grace period)",
        }
        return display_map[self]
