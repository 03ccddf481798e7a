"""Pytest configuration and fixtures."""

import pytest

from pushin.core.controller import AccessController
from pushin.models.target import BlockTarget, TargetKind
from pushin.models.workout import Workout, WorkoutMode, WorkoutType


@pytest.fixture
def catalog():
    """Three targets, A, B and C."""
    return [
        BlockTarget("com.example.a", "A"),
        BlockTarget("com.example.b", "B"),
        BlockTarget("social", "C", TargetKind.CATEGORY),
    ]


@pytest.fixture
def pushups():
    """Push-up workout granting 10 minutes."""
    return Workout(
        id="workout-1",
        type=WorkoutType.PUSH_UPS,
        target_reps=10,
        earned_time_seconds=600,
        mode=WorkoutMode.NORMAL,
    )


@pytest.fixture
def controller():
    """Controller with a 30 second grace period."""
    return AccessController(grace_period_seconds=30)


@pytest.fixture
def unlocked_controller(controller, pushups):
    """Controller unlocked at t=5 for 600 seconds."""
    controller.start_workout(pushups, 0)
    controller.complete_workout(5)
    return controller
