"""Workout models."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4


class WorkoutType(str, Enum):
    """Supported workout types."""

    PUSH_UPS = "push-ups"
    SQUATS = "squats"
    PLANK = "plank"  # Time-based: target is seconds held
    JUMPING_JACKS = "jumping-jacks"
    BURPEES = "burpees"
    SIT_UPS = "sit-ups"

    @property
    def is_timed(self) -> bool:
        """Whether the target counts seconds rather than reps."""
        return self is WorkoutType.PLANK

    def get_display(self) -> str:
        """Get a human-readable workout name."""
        return self.value.replace("-", " ").title()


class WorkoutMode(str, Enum):
    """Difficulty mode used when sizing a workout."""

    COZY = "cozy"  # Gentle start
    NORMAL = "normal"  # Balanced pace
    TUFF = "tuff"  # Maximum gains


@dataclass(frozen=True)
class Workout:
    """A workout the user completes to earn unlock time.

    earned_time_seconds belongs to the workout instance: the controller
    grants exactly this many seconds when the workout is completed.
    """

    type: WorkoutType
    target_reps: int
    earned_time_seconds: int
    mode: WorkoutMode = WorkoutMode.NORMAL
    id: str = field(default_factory=lambda: str(uuid4())[:8])
    metadata: dict | None = field(default=None, compare=False)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "type": self.type.value,
            "target_reps": self.target_reps,
            "earned_time_seconds": self.earned_time_seconds,
            "mode": self.mode.value,
        }
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Workout":
        """Create from dictionary."""
        kwargs = {}
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(
            type=WorkoutType(data["type"]),
            target_reps=data["target_reps"],
            earned_time_seconds=data["earned_time_seconds"],
            mode=WorkoutMode(data.get("mode", "normal")),
            metadata=data.get("metadata"),
            **kwargs,
        )

    def get_summary(self) -> str:
        """Get a one-line summary for display."""
        unit = "s" if self.type.is_timed else " reps"
        minutes = self.earned_time_seconds / 60
        return f"{self.type.get_display()}: {self.target_reps}{unit} -> {minutes:g} min"
