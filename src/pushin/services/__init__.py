"""Services built on the access-control core."""

from .emergency import EmergencyUnlockManager
from .home_state import HomeUIKind, HomeUIState, HomeViewModel, derive_home_ui_state
from .rewards import WorkoutRewardCalculator
from .usage import DailyUsage, DailyUsageTracker

__all__ = [
    "DailyUsage",
    "DailyUsageTracker",
    "derive_home_ui_state",
    "EmergencyUnlockManager",
    "HomeUIKind",
    "HomeUIState",
    "HomeViewModel",
    "WorkoutRewardCalculator",
]
