"""Workout reward calculation.

Converts completed reps into earned screen time and, in the other
direction, desired screen time into a rep (or hold-seconds) target.
Stateless: every method is a pure calculation over the tables below.
"""

import math
from dataclasses import dataclass
from types import MappingProxyType

from ..models.workout import Workout, WorkoutMode, WorkoutType

# Seconds of unlock time earned per rep before the difficulty multiplier
BASE_SECONDS_PER_REP = 30

# Reps (or hold seconds for plank) per minute of screen time in NORMAL mode
BASE_RATES_PER_MINUTE: dict[str, float] = {
    "push-ups": 1.0,
    "squats": 1.2,
    "plank": 3.0,
    "jumping-jacks": 2.5,
    "burpees": 0.6,
}

# Earned-time multipliers: harder movements earn more per rep
DIFFICULTY_MULTIPLIERS: dict[str, float] = {
    "push-ups": 1.0,
    "squats": 1.0,
    "sit-ups": 1.0,
    "plank": 1.5,
    "jumping-jacks": 0.8,
    "burpees": 1.5,
}


@dataclass(frozen=True)
class ModeProfile:
    """Scaling for one workout type in one mode.

    Rep workouts cap the target at round(minutes * max_factor); timed
    workouts use the fixed max_value instead.
    """

    multiplier: float
    min_value: int
    max_factor: float | None = None
    max_value: int | None = None

    def clamp(self, value: int, desired_minutes: int) -> int:
        if self.max_value is not None:
            upper = self.max_value
        else:
            upper = _round_half_up(desired_minutes * (self.max_factor or 1.0))
        return min(max(value, self.min_value), max(upper, self.min_value))


WORKOUT_MODE_PROFILES: dict[str, dict[WorkoutMode, ModeProfile]] = {
    "push-ups": {
        WorkoutMode.COZY: ModeProfile(0.7, 3, max_factor=2.5),
        WorkoutMode.NORMAL: ModeProfile(1.0, 5, max_factor=3.5),
        WorkoutMode.TUFF: ModeProfile(1.4, 8, max_factor=4.0),
    },
    "squats": {
        WorkoutMode.COZY: ModeProfile(0.75, 4, max_factor=2.5),
        WorkoutMode.NORMAL: ModeProfile(1.0, 6, max_factor=3.5),
        WorkoutMode.TUFF: ModeProfile(1.3, 10, max_factor=4.0),
    },
    "plank": {
        WorkoutMode.COZY: ModeProfile(0.7, 20, max_value=60),
        WorkoutMode.NORMAL: ModeProfile(1.0, 30, max_value=120),
        WorkoutMode.TUFF: ModeProfile(1.5, 45, max_value=180),
    },
    "jumping-jacks": {
        WorkoutMode.COZY: ModeProfile(0.8, 10, max_factor=3.0),
        WorkoutMode.NORMAL: ModeProfile(1.0, 15, max_factor=4.0),
        WorkoutMode.TUFF: ModeProfile(1.2, 25, max_factor=4.5),
    },
    "burpees": {
        WorkoutMode.COZY: ModeProfile(0.6, 2, max_factor=2.0),
        WorkoutMode.NORMAL: ModeProfile(1.0, 3, max_factor=3.0),
        WorkoutMode.TUFF: ModeProfile(1.5, 5, max_factor=3.5),
    },
}


def _round_half_up(value: float) -> int:
    """Round halves away from zero (round() would give 12 for 12.5)."""
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


def _normalize_type(workout_type: WorkoutType | str) -> str:
    if isinstance(workout_type, WorkoutType):
        return workout_type.value
    return workout_type.strip().lower()


class WorkoutRewardCalculator:
    """Converts between workout effort and unlock time."""

    def calculate_earned_time(
        self, workout_type: WorkoutType | str, reps_completed: int
    ) -> int:
        """Seconds earned for a number of reps.

        Formula: reps x 30 x difficulty multiplier (unknown types use 1.0).

        Example:
            >>> WorkoutRewardCalculator().calculate_earned_time("push-ups", 20)
            600
        """
        if reps_completed <= 0:
            return 0

        multiplier = DIFFICULTY_MULTIPLIERS.get(_normalize_type(workout_type), 1.0)
        return _round_half_up(reps_completed * BASE_SECONDS_PER_REP * multiplier)

    def calculate_workout_target(
        self,
        workout_type: WorkoutType | str,
        mode: WorkoutMode,
        desired_minutes: int,
    ) -> int:
        """Reps (or hold seconds for plank) needed for the desired screen time."""
        if desired_minutes <= 0:
            return 0

        type_key = _normalize_type(workout_type)
        base_rate = BASE_RATES_PER_MINUTE.get(type_key, 1.0)

        profile = WORKOUT_MODE_PROFILES.get(type_key)
        if profile is None:
            return _round_half_up(desired_minutes * base_rate)

        settings = profile.get(mode) or profile[WorkoutMode.NORMAL]
        target = _round_half_up(base_rate * desired_minutes * settings.multiplier)
        return settings.clamp(target, desired_minutes)

    def calculate_required_reps(
        self,
        workout_type: WorkoutType | str,
        target_seconds: int,
        mode: WorkoutMode = WorkoutMode.NORMAL,
    ) -> int:
        """Reps needed to earn target_seconds, via whole minutes."""
        if target_seconds <= 0:
            return 0

        target_minutes = _round_half_up(target_seconds / 60)
        return self.calculate_workout_target(workout_type, mode, target_minutes)

    def reward_description(self, workout_type: WorkoutType | str, reps: int) -> str:
        """Short UI hint, e.g. "20 reps = 10 min unlock"."""
        seconds = self.calculate_earned_time(workout_type, reps)
        minutes = _round_half_up(seconds / 60)
        return f"{reps} reps = {minutes} min unlock"

    def get_workout_multipliers(self) -> MappingProxyType:
        """Read-only view of the difficulty multipliers."""
        return MappingProxyType(DIFFICULTY_MULTIPLIERS)

    def build_workout(
        self,
        workout_type: WorkoutType,
        desired_minutes: int,
        mode: WorkoutMode = WorkoutMode.NORMAL,
    ) -> Workout:
        """Size a workout for the desired screen time.

        The workout grants exactly desired_minutes of unlock time; the
        rep target comes from the mode profile.
        """
        target = self.calculate_workout_target(workout_type, mode, desired_minutes)
        return Workout(
            type=workout_type,
            target_reps=target,
            earned_time_seconds=max(0, desired_minutes) * 60,
            mode=mode,
        )
