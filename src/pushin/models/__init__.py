"""Data models for pushin."""

from .session import EMERGENCY_UNLOCK_REASON, WORKOUT_UNLOCK_REASON, UnlockSession
from .state import AccessState
from .target import BlockTarget, TargetKind
from .workout import Workout, WorkoutMode, WorkoutType

__all__ = [
    "AccessState",
    "EMERGENCY_UNLOCK_REASON",
    "WORKOUT_UNLOCK_REASON",
    "BlockTarget",
    "TargetKind",
    "UnlockSession",
    "Workout",
    "WorkoutMode",
    "WorkoutType",
]
