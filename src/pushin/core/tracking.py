"""Rep counting for the workout in progress.

This is the reference workout progress source. The access controller
does not consult it; consumers decide when a workout counts as done and
then call complete_workout.
"""

import logging
import threading

from ..models.workout import Workout

logger = logging.getLogger(__name__)


class WorkoutProgressTracker:
    """Counts reps (or held seconds for timed workouts) against a target."""

    def __init__(self):
        self._lock = threading.Lock()
        self._workout: Workout | None = None
        self._started_at: int | None = None
        self._completed_reps = 0

    @property
    def current_workout(self) -> Workout | None:
        with self._lock:
            return self._workout

    @property
    def completed_reps(self) -> int:
        with self._lock:
            return self._completed_reps

    @property
    def started_at(self) -> int | None:
        with self._lock:
            return self._started_at

    def start(self, workout: Workout, now: int) -> None:
        """Begin tracking a workout, discarding any previous count."""
        with self._lock:
            self._workout = workout
            self._started_at = now
            self._completed_reps = 0
        logger.debug("Tracking %s (target %s)", workout.type.value, workout.target_reps)

    def record_rep(self, now: int, count: int = 1) -> int:
        """Record completed reps and return the running total.

        Reps recorded with no workout in progress are ignored.
        """
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")

        with self._lock:
            if self._workout is None:
                logger.debug("Ignoring rep at %s: no workout in progress", now)
                return 0
            self._completed_reps += count
            return self._completed_reps

    def get_progress(self, now: int) -> float:
        """Fraction of the target completed, clamped to 0.0..1.0."""
        with self._lock:
            if self._workout is None or self._workout.target_reps <= 0:
                return 0.0
            return min(1.0, max(0.0, self._completed_reps / self._workout.target_reps))

    def is_completed(self, now: int) -> bool:
        with self._lock:
            return (
                self._workout is not None
                and self._completed_reps >= self._workout.target_reps
            )

    def clear(self) -> None:
        with self._lock:
            self._workout = None
            self._started_at = None
            self._completed_reps = 0
