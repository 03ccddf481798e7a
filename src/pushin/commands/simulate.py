"""Simulate command: replay an unlock cycle on synthetic time."""

from pathlib import Path

import click

from ..adapters.blocking import RecordingBlockingAdapter
from ..core.controller import AccessController
from ..errors import PushinError
from ..models.workout import Workout, WorkoutMode, WorkoutType
from ..services.rewards import WorkoutRewardCalculator
from ..services.simulation import run_simulation
from .base import (
    build_settings,
    echo_error,
    echo_info,
    echo_success,
    format_duration,
    format_table,
    get_catalog,
)


@click.command()
@click.option(
    "--workout",
    "-w",
    "workout_type",
    type=click.Choice([t.value for t in WorkoutType]),
    default=WorkoutType.PUSH_UPS.value,
    help="Workout type (default: push-ups)",
)
@click.option(
    "--earned",
    "-e",
    type=int,
    default=600,
    help="Unlock seconds the workout grants (default: 600)",
)
@click.option("--grace", "-g", type=int, help="Grace period in seconds")
@click.option(
    "--complete-at",
    type=int,
    default=5,
    help="Instant the workout is completed (default: 5)",
)
@click.option("--until", type=int, help="Last simulated instant")
@click.option("--step", "-s", type=click.IntRange(min=1), default=60, help="Seconds between ticks")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(path_type=Path),
    help="JSON file with targets to block",
)
@click.option("--lenient-time", is_flag=True, help="Clamp out-of-order instants")
@click.pass_context
def simulate(
    ctx: click.Context,
    workout_type: str,
    earned: int,
    grace: int | None,
    complete_at: int,
    until: int | None,
    step: int,
    catalog_path: Path | None,
    lenient_time: bool,
):
    """Replay one unlock cycle with synthetic timestamps.

    Starts a workout at t=0, completes it at --complete-at, then ticks
    every --step seconds through expiry and the grace period, printing
    the access state and target lists at each instant.

    Examples:

        # Default: 10 minutes of push-ups, grace from PUSHIN_GRACE_PERIOD_SECONDS
        pushin simulate

        # 5 minute unlock, 30 second grace, tick every 30 seconds
        pushin simulate --earned 300 --grace 30 --step 30
    """
    settings = build_settings(lenient_time, grace_period_seconds=grace)
    catalog = get_catalog(ctx, catalog_path)
    controller = AccessController.from_settings(settings)
    adapter = RecordingBlockingAdapter()

    calculator = WorkoutRewardCalculator()
    workout_kind = WorkoutType(workout_type)
    workout = Workout(
        type=workout_kind,
        target_reps=max(1, calculator.calculate_required_reps(workout_kind, earned)),
        earned_time_seconds=earned,
        mode=WorkoutMode.NORMAL,
    )

    echo_info(
        f"{workout.get_summary()}, grace {settings.grace_period_seconds}s, "
        f"{len(catalog)} target(s)"
    )

    try:
        frames = run_simulation(
            controller,
            catalog,
            workout,
            complete_at=complete_at,
            until=until,
            step=step,
            adapter=adapter,
        )
    except (PushinError, ValueError) as e:
        echo_error(str(e))
        ctx.exit(1)

    headers = ["t", "Event", "State", "View", "Blocked", "Accessible", "Remaining"]
    rows = []
    for frame in frames:
        rows.append([
            str(frame.now),
            frame.event,
            frame.snapshot.state.value,
            frame.ui_state.kind.value,
            str(len(frame.resolved.blocked)),
            str(len(frame.resolved.accessible)),
            format_duration(frame.snapshot.time_remaining),
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()

    final = frames[-1].snapshot if frames else None
    if final is not None:
        echo_success(
            f"Finished {final.state.get_display().lower()} at t={final.now} "
            f"after {len(adapter.history)} blocking change(s)"
        )
