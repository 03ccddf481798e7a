"""Scripted replay of an unlock cycle on synthetic time.

Drives a controller through start -> complete -> expiry -> lock with
caller-chosen instants, recording one frame per step. Used by the
``pushin simulate`` command and handy for reproducing timing reports.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from ..adapters.blocking import BlockingAdapter
from ..core.controller import AccessController, AccessSnapshot
from ..core.resolver import ResolvedTargets
from ..models.target import BlockTarget
from ..models.workout import Workout
from .home_state import HomeUIState, derive_home_ui_state


@dataclass(frozen=True)
class SimulationFrame:
    """Controller output at one simulated instant."""

    now: int
    event: str
    snapshot: AccessSnapshot
    resolved: ResolvedTargets
    ui_state: HomeUIState


def default_end_time(
    workout: Workout, start_at: int, complete_at: int, grace_period_seconds: int, step: int
) -> int:
    """First step-aligned instant at or after the grace period ends."""
    lock_at = complete_at + workout.earned_time_seconds + grace_period_seconds
    steps = -(-(lock_at - start_at) // step)
    return start_at + steps * step


def run_simulation(
    controller: AccessController,
    catalog: Sequence[BlockTarget],
    workout: Workout,
    start_at: int = 0,
    complete_at: int = 5,
    until: int | None = None,
    step: int = 60,
    adapter: BlockingAdapter | None = None,
) -> list[SimulationFrame]:
    """Replay one unlock cycle and return a frame per step.

    Frames are recorded at start_at, complete_at, every ``step`` seconds
    after start_at, and at the exact unlock and grace boundaries.

    Raises:
        ValueError: If the timeline is not ordered or step is not positive
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if complete_at < start_at:
        raise ValueError(
            f"complete_at ({complete_at}) must not precede start_at ({start_at})"
        )

    if until is None:
        until = default_end_time(
            workout, start_at, complete_at, controller.grace_period_seconds, step
        )

    unlock_ends_at = complete_at + workout.earned_time_seconds
    grace_ends_at = unlock_ends_at + controller.grace_period_seconds

    instants = set(range(start_at, until + 1, step))
    instants.update(t for t in (complete_at, unlock_ends_at, grace_ends_at) if t <= until)

    frames = []

    def record(now: int, event: str) -> None:
        snapshot, resolved = controller.snapshot_and_resolve(now, catalog)
        progress = 1.0 if now >= complete_at else 0.0
        if adapter is not None:
            adapter.apply(resolved)
        frames.append(
            SimulationFrame(
                now=now,
                event=event,
                snapshot=snapshot,
                resolved=resolved,
                ui_state=derive_home_ui_state(snapshot, resolved, progress),
            )
        )

    controller.start_workout(workout, start_at)
    record(start_at, "start workout")
    completed = False

    for now in sorted(instants):
        if now == start_at and start_at != complete_at:
            continue
        if not completed and now >= complete_at:
            controller.complete_workout(complete_at)
            completed = True
            record(complete_at, "complete workout")
            if now == complete_at:
                continue

        # With no grace period both boundaries coincide and the state is LOCKED
        if now == grace_ends_at:
            event = "grace ends"
        elif now == unlock_ends_at:
            event = "unlock ends"
        else:
            event = "tick"
        record(now, event)

    return frames
