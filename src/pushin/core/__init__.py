"""Access-control core for pushin."""

from .controller import AccessController, AccessSnapshot
from .resolver import (
    AllOrNothingResolver,
    ResolvedTargets,
    TargetResolver,
    resolve_targets,
    validate_catalog,
)
from .tracking import WorkoutProgressTracker

__all__ = [
    "AccessController",
    "AccessSnapshot",
    "AllOrNothingResolver",
    "ResolvedTargets",
    "TargetResolver",
    "resolve_targets",
    "validate_catalog",
    "WorkoutProgressTracker",
]
