"""Unlock session model."""

from dataclasses import dataclass

WORKOUT_UNLOCK_REASON = "workout_completed"
EMERGENCY_UNLOCK_REASON = "emergency_override"


@dataclass(frozen=True)
class UnlockSession:
    """A window of access opened by a workout or an emergency unlock.

    Derived by the controller from unlocked_at and the earned (or
    emergency) duration; never stored on its own.
    """

    unlocked_at: int
    duration_seconds: int
    reason: str = WORKOUT_UNLOCK_REASON

    @property
    def ends_at(self) -> int:
        """Instant the window closes."""
        return self.unlocked_at + self.duration_seconds

    def remaining_seconds(self, now: int) -> int:
        """Seconds left in the window at the given instant."""
        return max(0, self.ends_at - now)

    def is_over(self, now: int) -> bool:
        """Whether the window has closed (the end instant counts as closed)."""
        return now >= self.ends_at

    @property
    def is_emergency(self) -> bool:
        return self.reason == EMERGENCY_UNLOCK_REASON

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "unlocked_at": self.unlocked_at,
            "duration_seconds": self.duration_seconds,
            "ends_at": self.ends_at,
            "reason": self.reason,
        }
