"""pushin: gate screen time behind workouts."""

__version__ = "0.1.0"

from .core import AccessController, AllOrNothingResolver, ResolvedTargets, TargetResolver
from .errors import (
    DailyCapReachedError,
    EmergencyUnlockUnavailableError,
    InvalidTransitionError,
    InvalidWorkoutError,
    MalformedTargetError,
    OutOfOrderTimeError,
    PushinError,
)
from .models import AccessState, BlockTarget, Workout, WorkoutMode, WorkoutType

__all__ = [
    "AccessController",
    "AccessState",
    "AllOrNothingResolver",
    "BlockTarget",
    "DailyCapReachedError",
    "EmergencyUnlockUnavailableError",
    "InvalidTransitionError",
    "InvalidWorkoutError",
    "MalformedTargetError",
    "OutOfOrderTimeError",
    "PushinError",
    "ResolvedTargets",
    "TargetResolver",
    "Workout",
    "WorkoutMode",
    "WorkoutType",
]
