"""Home screen state mapping.

Turns controller state plus resolved target lists into what the home
screen should show. Two rules hold throughout:

1. The resolved target lists are authoritative. Access state alone never
   selects a view; an UNLOCKED state with a non-empty blocked list falls
   back to the locked view.
2. Time is injected. The view model stores the last instant it was given
   and never reads a clock.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ..core.controller import AccessController, AccessSnapshot
from ..core.resolver import ResolvedTargets
from ..core.tracking import WorkoutProgressTracker
from ..errors import DailyCapReachedError, EmergencyUnlockUnavailableError
from ..models.session import UnlockSession
from ..models.state import AccessState
from ..models.target import BlockTarget
from ..models.workout import Workout
from .emergency import EmergencyUnlockManager
from .usage import DailyUsageTracker

logger = logging.getLogger(__name__)


class HomeUIKind(str, Enum):
    """Which home screen view to render."""

    LOCKED = "locked"
    EARNING = "earning"
    UNLOCKED = "unlocked"
    EXPIRED = "expired"


@dataclass(frozen=True)
class HomeUIState:
    """Everything the home screen needs for one frame.

    time_remaining is unlock time for the unlocked view and grace time
    for the expired view.
    """

    kind: HomeUIKind
    blocked_targets: tuple[str, ...] = ()
    accessible_targets: tuple[str, ...] = ()
    workout_progress: float | None = None
    time_remaining: int | None = None
    can_start_workout: bool = False
    can_cancel: bool = False
    can_lock: bool = False
    can_show_recommendations: bool = False  # Never true while anything is blocked
    daily_cap_reached: bool = False

    @classmethod
    def locked(
        cls, blocked_targets: Sequence[str], daily_cap_reached: bool = False
    ) -> "HomeUIState":
        return cls(
            kind=HomeUIKind.LOCKED,
            blocked_targets=tuple(blocked_targets),
            can_start_workout=not daily_cap_reached,
            daily_cap_reached=daily_cap_reached,
        )

    @classmethod
    def earning(
        cls, blocked_targets: Sequence[str], workout_progress: float
    ) -> "HomeUIState":
        return cls(
            kind=HomeUIKind.EARNING,
            blocked_targets=tuple(blocked_targets),
            workout_progress=workout_progress,
            can_cancel=True,
        )

    @classmethod
    def unlocked(
        cls, accessible_targets: Sequence[str], time_remaining: int
    ) -> "HomeUIState":
        return cls(
            kind=HomeUIKind.UNLOCKED,
            accessible_targets=tuple(accessible_targets),
            time_remaining=time_remaining,
            can_lock=True,
            can_show_recommendations=bool(accessible_targets),
        )

    @classmethod
    def expired(
        cls,
        blocked_targets: Sequence[str],
        grace_period_remaining: int,
        daily_cap_reached: bool = False,
    ) -> "HomeUIState":
        return cls(
            kind=HomeUIKind.EXPIRED,
            blocked_targets=tuple(blocked_targets),
            time_remaining=grace_period_remaining,
            can_start_workout=not daily_cap_reached,
            daily_cap_reached=daily_cap_reached,
        )

    @property
    def shows_unlocked_content(self) -> bool:
        return self.kind == HomeUIKind.UNLOCKED

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "blocked_targets": list(self.blocked_targets),
            "accessible_targets": list(self.accessible_targets),
            "workout_progress": self.workout_progress,
            "time_remaining": self.time_remaining,
            "can_start_workout": self.can_start_workout,
            "can_cancel": self.can_cancel,
            "can_lock": self.can_lock,
            "can_show_recommendations": self.can_show_recommendations,
            "daily_cap_reached": self.daily_cap_reached,
        }


def derive_home_ui_state(
    snapshot: AccessSnapshot,
    resolved: ResolvedTargets,
    workout_progress: float = 0.0,
    daily_cap_reached: bool = False,
) -> HomeUIState:
    """Map a controller snapshot and resolved targets to a home view.

    Args:
        snapshot: Controller state and remaining times at one instant
        resolved: Resolver output for the same instant
        workout_progress: Fraction of the pending workout completed
        daily_cap_reached: Whether today's unlock budget is spent; blocks
            starting another workout from the locked and expired views

    Returns:
        The view to render. Falls back to the locked view whenever the
        target lists disagree with the access state.
    """
    blocked = resolved.blocked
    accessible = resolved.accessible
    state = snapshot.state

    if state == AccessState.LOCKED and blocked:
        return HomeUIState.locked(blocked, daily_cap_reached)

    if state == AccessState.EARNING and blocked:
        return HomeUIState.earning(blocked, workout_progress)

    if state == AccessState.UNLOCKED and not blocked and accessible:
        return HomeUIState.unlocked(accessible, snapshot.unlock_time_remaining)

    if state == AccessState.EXPIRED and blocked:
        return HomeUIState.expired(
            blocked, snapshot.grace_period_remaining, daily_cap_reached
        )

    if state != AccessState.LOCKED:
        logger.warning(
            "Target lists disagree with %s state (%d blocked, %d accessible); "
            "showing locked view",
            state.value,
            len(blocked),
            len(accessible),
        )
    return HomeUIState.locked(blocked, daily_cap_reached)


class HomeViewModel:
    """Binds a controller, a catalog and an injected clock to the home view.

    Optional collaborators: a usage tracker enforces the daily cap, and an
    emergency manager grants workout-free unlocks.
    """

    def __init__(
        self,
        controller: AccessController,
        catalog: Sequence[BlockTarget],
        initial_time: int,
        tracker: WorkoutProgressTracker | None = None,
        usage: DailyUsageTracker | None = None,
        emergency: EmergencyUnlockManager | None = None,
    ):
        self._controller = controller
        self._catalog = list(catalog)
        self._tracker = tracker or WorkoutProgressTracker()
        self._usage = usage
        self._emergency = emergency
        self._current_time = initial_time

    @property
    def current_time(self) -> int:
        return self._current_time

    @property
    def tracker(self) -> WorkoutProgressTracker:
        return self._tracker

    @property
    def usage(self) -> DailyUsageTracker | None:
        return self._usage

    @property
    def emergency(self) -> EmergencyUnlockManager | None:
        return self._emergency

    @property
    def catalog(self) -> list[BlockTarget]:
        return list(self._catalog)

    def update_time(self, now: int) -> None:
        """Accept the next instant from the external scheduler.

        With a usage tracker, workout unlock time spent since the previous
        instant is charged to the day's budget, and the unlock is cut
        short once the daily cap is reached.
        """
        previous = self._current_time
        self._current_time = now
        if self._usage is None:
            return

        session = self._controller.unlock_session
        if session is None or session.is_emergency:
            return

        spent = min(now, session.ends_at) - max(previous, session.unlocked_at)
        if spent > 0:
            self._usage.consume_time(now, spent)

        if self._usage.has_hit_daily_cap(now):
            if self._controller.get_state(now) == AccessState.UNLOCKED:
                logger.info("Daily cap reached, locking at %s", now)
                self._controller.lock(now)

    def update_catalog(self, catalog: Sequence[BlockTarget]) -> None:
        """Replace the catalog; the next frame resolves against it."""
        self._catalog = list(catalog)

    @property
    def ui_state(self) -> HomeUIState:
        now = self._current_time
        snapshot, resolved = self._controller.snapshot_and_resolve(now, self._catalog)
        return derive_home_ui_state(
            snapshot,
            resolved,
            self._tracker.get_progress(now),
            daily_cap_reached=self._daily_cap_reached(now),
        )

    # Actions, all at the injected time

    def start_workout(self, workout: Workout) -> None:
        """Start earning.

        Raises:
            DailyCapReachedError: If today's unlock budget is already spent
        """
        if self._daily_cap_reached(self._current_time):
            raise DailyCapReachedError(
                f"Daily cap of {self._usage.daily_cap_seconds}s reached; "
                "no more unlocks today"
            )
        self._controller.start_workout(workout, self._current_time)
        self._tracker.start(workout, self._current_time)

    def record_rep(self, count: int = 1) -> int:
        return self._tracker.record_rep(self._current_time, count)

    def complete_workout(self) -> bool:
        """Complete the workout if the tracker says it is done.

        Returns:
            True if the controller unlocked, False if reps are still missing
        """
        if not self._tracker.is_completed(self._current_time):
            return False
        workout = self._controller.pending_workout
        self._controller.complete_workout(self._current_time)
        self._tracker.clear()
        if self._usage is not None and workout is not None:
            self._usage.add_earned_time(self._current_time, workout.earned_time_seconds)
        return True

    def cancel_workout(self) -> None:
        self._controller.cancel_workout(self._current_time)
        self._tracker.clear()

    def emergency_unlock(self) -> UnlockSession:
        """Unlock without a workout, using one of today's emergency unlocks.

        Raises:
            EmergencyUnlockUnavailableError: If none are configured or left
        """
        if self._emergency is None:
            raise EmergencyUnlockUnavailableError("Emergency unlocks are not configured")
        return self._emergency.use(self._current_time)

    def lock(self) -> None:
        self._controller.lock(self._current_time)
        self._tracker.clear()

    def _daily_cap_reached(self, now: int) -> bool:
        return self._usage is not None and self._usage.has_hit_daily_cap(now)
