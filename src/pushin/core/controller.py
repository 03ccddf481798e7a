"""Access controller: the single source of truth for access state.

Every time-dependent operation takes the current instant ``now`` (integer
seconds) from the caller. The controller never reads a clock, so any
sequence of calls can be replayed with synthetic timestamps.

Transitions:

    LOCKED   --start_workout-->    EARNING
    EARNING  --complete_workout--> UNLOCKED
    EARNING  --cancel_workout-->   LOCKED
    LOCKED/EXPIRED --emergency_unlock--> UNLOCKED
    UNLOCKED --now >= unlock end--> EXPIRED   (expired_at = unlock end)
    EXPIRED  --now >= expired_at + grace--> LOCKED
    any      --lock-->             LOCKED

Time-driven transitions are applied by ``tick`` and implicitly by every
query and action before it does its own work. An action that is refused
leaves state and the last observed instant untouched.
"""

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass

from ..config import DEFAULT_GRACE_PERIOD_SECONDS, PushinSettings
from ..errors import InvalidTransitionError, InvalidWorkoutError, OutOfOrderTimeError
from ..models.session import EMERGENCY_UNLOCK_REASON, UnlockSession
from ..models.state import AccessState
from ..models.target import BlockTarget
from ..models.workout import Workout
from .resolver import AllOrNothingResolver, ResolvedTargets, TargetResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessSnapshot:
    """Consistent view of the controller at one instant."""

    now: int
    state: AccessState
    unlock_time_remaining: int
    grace_period_remaining: int
    total_unlock_duration: int
    pending_workout: Workout | None = None

    @property
    def time_remaining(self) -> int:
        """Unlock time while UNLOCKED, grace time while EXPIRED, else 0."""
        if self.state == AccessState.UNLOCKED:
            return self.unlock_time_remaining
        if self.state == AccessState.EXPIRED:
            return self.grace_period_remaining
        return 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "now": self.now,
            "state": self.state.value,
            "unlock_time_remaining": self.unlock_time_remaining,
            "grace_period_remaining": self.grace_period_remaining,
            "total_unlock_duration": self.total_unlock_duration,
            "pending_workout": (
                self.pending_workout.to_dict() if self.pending_workout else None
            ),
        }


class AccessController:
    """Owns access state and the timestamps that drive it.

    All state is guarded by one re-entrant lock, so concurrent callers
    never interleave inside an operation and queries see state and
    timestamps from the same moment.
    """

    def __init__(
        self,
        grace_period_seconds: int = DEFAULT_GRACE_PERIOD_SECONDS,
        strict_time: bool = True,
        resolver: TargetResolver | None = None,
    ):
        if grace_period_seconds < 0:
            raise ValueError(
                f"grace_period_seconds must be non-negative, got {grace_period_seconds}"
            )

        self._grace_period_seconds = grace_period_seconds
        self._strict_time = strict_time
        self._resolver = resolver or AllOrNothingResolver()
        self._lock = threading.RLock()

        self._state = AccessState.LOCKED
        self._pending_workout: Workout | None = None
        self._session: UnlockSession | None = None
        self._expired_at: int | None = None
        self._last_now: int | None = None

    @classmethod
    def from_settings(
        cls, settings: PushinSettings, resolver: TargetResolver | None = None
    ) -> "AccessController":
        """Create a controller from runtime settings."""
        return cls(
            grace_period_seconds=settings.grace_period_seconds,
            strict_time=settings.strict_time,
            resolver=resolver,
        )

    @property
    def grace_period_seconds(self) -> int:
        return self._grace_period_seconds

    @property
    def strict_time(self) -> bool:
        return self._strict_time

    @property
    def resolver(self) -> TargetResolver:
        return self._resolver

    @property
    def current_state(self) -> AccessState:
        """State as of the last observed instant (no time advance)."""
        with self._lock:
            return self._state

    @property
    def pending_workout(self) -> Workout | None:
        with self._lock:
            return self._pending_workout

    @property
    def unlock_session(self) -> UnlockSession | None:
        with self._lock:
            return self._session

    @property
    def unlocked_at(self) -> int | None:
        with self._lock:
            return self._session.unlocked_at if self._session else None

    @property
    def expired_at(self) -> int | None:
        with self._lock:
            return self._expired_at

    @property
    def last_observed_time(self) -> int | None:
        with self._lock:
            return self._last_now

    # Actions

    def start_workout(self, workout: Workout, now: int) -> AccessState:
        """Begin earning: LOCKED -> EARNING.

        A rejected call leaves state and the last observed instant as they
        were.

        Raises:
            InvalidTransitionError: If the state at ``now`` is not LOCKED
            InvalidWorkoutError: If the workout grants no time
            OutOfOrderTimeError: If ``now`` is earlier than a previous instant
        """
        with self._lock:
            now = self._observe(now)

            state = self._state_at(now)
            if state != AccessState.LOCKED:
                self._reject("start workout", state, f"workout {workout.id} refused")
            if workout.earned_time_seconds <= 0:
                logger.warning(
                    "Rejected workout %s with earned time %ss",
                    workout.id,
                    workout.earned_time_seconds,
                )
                raise InvalidWorkoutError(
                    f"Workout {workout.id} must earn a positive number of seconds, "
                    f"got {workout.earned_time_seconds}"
                )

            self._apply_time(now)
            self._pending_workout = workout
            self._transition(AccessState.EARNING, now)
            return self._state

    def complete_workout(self, now: int) -> AccessState:
        """Convert the pending workout into an unlock: EARNING -> UNLOCKED.

        The unlock window lasts the pending workout's earned_time_seconds,
        starting at ``now``.

        Raises:
            InvalidTransitionError: If not EARNING or no workout is pending
            OutOfOrderTimeError: If ``now`` is earlier than a previous instant
        """
        with self._lock:
            now = self._observe(now)

            state = self._state_at(now)
            if state != AccessState.EARNING:
                self._reject("complete workout", state)
            if self._pending_workout is None:
                self._reject("complete workout", state, "no workout is pending")

            self._apply_time(now)
            workout = self._pending_workout
            self._pending_workout = None
            self._open_session(
                UnlockSession(unlocked_at=now, duration_seconds=workout.earned_time_seconds)
            )
            logger.info(
                "Unlocked for %ss by %s (ends at %s)",
                workout.earned_time_seconds,
                workout.type.value,
                self._session.ends_at,
            )
            return self._state

    def emergency_unlock(self, now: int, duration_seconds: int) -> AccessState:
        """Unlock without a workout: LOCKED or EXPIRED -> UNLOCKED.

        The session is tagged "emergency_override" and then expires and
        relocks like any other. Quotas are enforced by the caller.

        Raises:
            InvalidTransitionError: If EARNING or already UNLOCKED
            ValueError: If duration_seconds is not positive
        """
        if duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")

        with self._lock:
            now = self._observe(now)

            state = self._state_at(now)
            if state not in (AccessState.LOCKED, AccessState.EXPIRED):
                self._reject("emergency unlock", state)

            self._apply_time(now)
            self._open_session(
                UnlockSession(
                    unlocked_at=now,
                    duration_seconds=duration_seconds,
                    reason=EMERGENCY_UNLOCK_REASON,
                )
            )
            logger.warning(
                "Emergency unlock for %ss (ends at %s)", duration_seconds, self._session.ends_at
            )
            return self._state

    def cancel_workout(self, now: int) -> AccessState:
        """Abandon the pending workout: EARNING -> LOCKED.

        Raises:
            InvalidTransitionError: If not EARNING
        """
        with self._lock:
            now = self._observe(now)

            state = self._state_at(now)
            if state != AccessState.EARNING:
                self._reject("cancel workout", state)

            self._apply_time(now)
            self._pending_workout = None
            self._transition(AccessState.LOCKED, now)
            return self._state

    def lock(self, now: int) -> AccessState:
        """Force LOCKED from any state and forget the current session."""
        with self._lock:
            now = self._observe(now)
            self._pending_workout = None
            self._session = None
            self._expired_at = None
            self._commit_time(now)
            if self._state != AccessState.LOCKED:
                self._transition(AccessState.LOCKED, now)
            return self._state

    def tick(self, now: int) -> AccessState:
        """Apply any time-driven transitions due at ``now``.

        Idempotent: repeating a call with the same instant changes nothing.
        """
        with self._lock:
            self._apply_time(self._observe(now))
            return self._state

    # Queries

    def get_state(self, now: int) -> AccessState:
        return self.tick(now)

    def get_unlock_time_remaining(self, now: int) -> int:
        """Seconds left in the unlock window; 0 outside UNLOCKED."""
        with self._lock:
            self.tick(now)
            return self._unlock_time_remaining(self._last_now)

    def get_grace_period_remaining(self, now: int) -> int:
        """Seconds left in the grace period; 0 outside EXPIRED."""
        with self._lock:
            self.tick(now)
            return self._grace_period_remaining(self._last_now)

    def get_total_unlock_duration(self, now: int) -> int:
        """Length of the current unlock window; 0 when none is running."""
        with self._lock:
            self.tick(now)
            return self._session.duration_seconds if self._session else 0

    def snapshot(self, now: int) -> AccessSnapshot:
        """Advance to ``now`` and capture every query result together."""
        with self._lock:
            self.tick(now)
            now = self._last_now
            return AccessSnapshot(
                now=now,
                state=self._state,
                unlock_time_remaining=self._unlock_time_remaining(now),
                grace_period_remaining=self._grace_period_remaining(now),
                total_unlock_duration=(
                    self._session.duration_seconds if self._session else 0
                ),
                pending_workout=self._pending_workout,
            )

    def resolve_targets(
        self, now: int, all_targets: Sequence[BlockTarget]
    ) -> ResolvedTargets:
        """Resolve the catalog against the state at ``now``."""
        with self._lock:
            state = self.tick(now)
            return self._resolver.resolve(state, all_targets)

    def snapshot_and_resolve(
        self, now: int, all_targets: Sequence[BlockTarget]
    ) -> tuple[AccessSnapshot, ResolvedTargets]:
        """Snapshot and resolved targets taken under the same lock."""
        with self._lock:
            snapshot = self.snapshot(now)
            return snapshot, self._resolver.resolve(snapshot.state, all_targets)

    def get_blocked_targets(
        self, now: int, all_targets: Sequence[BlockTarget]
    ) -> list[str]:
        return list(self.resolve_targets(now, all_targets).blocked)

    def get_accessible_targets(
        self, now: int, all_targets: Sequence[BlockTarget]
    ) -> list[str]:
        return list(self.resolve_targets(now, all_targets).accessible)

    # Internals (call with the lock held)

    def _observe(self, now: int) -> int:
        """Validate an incoming instant and return the one to use."""
        if now < 0:
            raise OutOfOrderTimeError(now, None)
        if self._last_now is not None and now < self._last_now:
            if self._strict_time:
                logger.warning(
                    "Rejected instant %s earlier than %s", now, self._last_now
                )
                raise OutOfOrderTimeError(now, self._last_now)
            logger.debug("Clamping instant %s to %s", now, self._last_now)
            return self._last_now
        return now

    def _commit_time(self, now: int) -> None:
        self._last_now = now

    def _apply_time(self, now: int) -> None:
        """Apply transitions due at an already observed ``now`` and record it."""
        self._advance(now)
        self._commit_time(now)

    def _state_at(self, now: int) -> AccessState:
        """State that _advance(now) would produce, without applying it."""
        state = self._state
        expired_at = self._expired_at

        if state == AccessState.UNLOCKED and self._session is not None:
            if self._session.is_over(now):
                state = AccessState.EXPIRED
                expired_at = self._session.ends_at

        if state == AccessState.EXPIRED and expired_at is not None:
            if now >= expired_at + self._grace_period_seconds:
                state = AccessState.LOCKED

        return state

    def _open_session(self, session: UnlockSession) -> None:
        self._session = session
        self._expired_at = None
        self._transition(AccessState.UNLOCKED, session.unlocked_at)

    def _advance(self, now: int) -> None:
        if self._state == AccessState.UNLOCKED and self._session is not None:
            if self._session.is_over(now):
                self._expired_at = self._session.ends_at
                self._transition(AccessState.EXPIRED, self._expired_at)

        if self._state == AccessState.EXPIRED and self._expired_at is not None:
            grace_ends_at = self._expired_at + self._grace_period_seconds
            if now >= grace_ends_at:
                self._session = None
                self._expired_at = None
                self._transition(AccessState.LOCKED, grace_ends_at)

    def _transition(self, new_state: AccessState, at: int) -> None:
        logger.info("Access %s -> %s at %s", self._state.value, new_state.value, at)
        self._state = new_state

    def _reject(self, operation: str, state: AccessState, detail: str = "") -> None:
        logger.warning("Rejected %s while %s", operation, state.value)
        raise InvalidTransitionError(operation, state, detail)

    def _unlock_time_remaining(self, now: int) -> int:
        if self._state != AccessState.UNLOCKED or self._session is None:
            return 0
        return self._session.remaining_seconds(now)

    def _grace_period_remaining(self, now: int) -> int:
        if self._state != AccessState.EXPIRED or self._expired_at is None:
            return 0
        return max(0, self._expired_at + self._grace_period_seconds - now)
