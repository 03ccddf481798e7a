"""Emergency unlocks: a limited number of workout-free unlocks per day."""

import logging
import threading

from ..config import (
    DEFAULT_EMERGENCY_UNLOCK_SECONDS,
    DEFAULT_MAX_EMERGENCY_UNLOCKS_PER_DAY,
    PushinSettings,
)
from ..core.controller import AccessController
from ..errors import EmergencyUnlockUnavailableError
from ..models.session import UnlockSession
from ..models.state import AccessState
from .usage import day_index

logger = logging.getLogger(__name__)


class EmergencyUnlockManager:
    """Grants emergency unlocks through a controller and counts them per day."""

    def __init__(
        self,
        controller: AccessController,
        unlock_seconds: int = DEFAULT_EMERGENCY_UNLOCK_SECONDS,
        max_per_day: int = DEFAULT_MAX_EMERGENCY_UNLOCKS_PER_DAY,
        day_start_offset_seconds: int = 0,
    ):
        if unlock_seconds <= 0:
            raise ValueError(f"unlock_seconds must be positive, got {unlock_seconds}")
        if max_per_day < 0:
            raise ValueError(f"max_per_day must be non-negative, got {max_per_day}")

        self._controller = controller
        self._unlock_seconds = unlock_seconds
        self._max_per_day = max_per_day
        self._day_start_offset_seconds = day_start_offset_seconds
        self._lock = threading.Lock()
        self._day: int | None = None
        self._used = 0

    @classmethod
    def from_settings(
        cls, controller: AccessController, settings: PushinSettings
    ) -> "EmergencyUnlockManager":
        return cls(
            controller,
            unlock_seconds=settings.emergency_unlock_seconds,
            max_per_day=settings.max_emergency_unlocks_per_day,
        )

    @property
    def unlock_seconds(self) -> int:
        return self._unlock_seconds

    @property
    def max_per_day(self) -> int:
        return self._max_per_day

    def used_today(self, now: int) -> int:
        with self._lock:
            self._roll_day(now)
            return self._used

    def remaining_today(self, now: int) -> int:
        with self._lock:
            self._roll_day(now)
            return max(0, self._max_per_day - self._used)

    def is_active(self, now: int) -> bool:
        """Whether the current unlock at ``now`` is an emergency one."""
        snapshot = self._controller.snapshot(now)
        session = self._controller.unlock_session
        return (
            snapshot.state == AccessState.UNLOCKED
            and session is not None
            and session.is_emergency
        )

    def time_remaining(self, now: int) -> int:
        if not self.is_active(now):
            return 0
        return self._controller.get_unlock_time_remaining(now)

    def can_use(self, now: int) -> bool:
        state = self._controller.get_state(now)
        return self.remaining_today(now) > 0 and state in (
            AccessState.LOCKED,
            AccessState.EXPIRED,
        )

    def use(self, now: int) -> UnlockSession:
        """Unlock for unlock_seconds without a workout.

        Raises:
            EmergencyUnlockUnavailableError: If today's quota is used up
            InvalidTransitionError: If the controller is EARNING or UNLOCKED
        """
        with self._lock:
            self._roll_day(now)
            if self._used >= self._max_per_day:
                logger.warning("Emergency unlock refused: %s used today", self._used)
                raise EmergencyUnlockUnavailableError(
                    f"No emergency unlocks left today ({self._max_per_day} per day)"
                )

            self._controller.emergency_unlock(now, self._unlock_seconds)
            self._used += 1
            return self._controller.unlock_session

    def _roll_day(self, now: int) -> None:
        today = day_index(now, self._day_start_offset_seconds)
        if self._day is None or today > self._day:
            self._day = today
            self._used = 0
