"""Reward commands: convert between reps and unlock time."""

import click

from ..models.workout import WorkoutMode, WorkoutType
from ..services.rewards import WorkoutRewardCalculator
from .base import echo_info, format_duration, format_table

WORKOUT_CHOICES = click.Choice([t.value for t in WorkoutType])
MODE_CHOICES = click.Choice([m.value for m in WorkoutMode])


@click.group()
def rewards():
    """Convert between workout effort and unlock time."""
    pass


@rewards.command("earned")
@click.argument("workout_type", type=WORKOUT_CHOICES)
@click.argument("reps", type=int)
def earned(workout_type: str, reps: int):
    """Show unlock time earned by REPS of WORKOUT_TYPE."""
    calculator = WorkoutRewardCalculator()
    seconds = calculator.calculate_earned_time(workout_type, reps)
    click.echo(f"{calculator.reward_description(workout_type, reps)} ({format_duration(seconds)})")


@rewards.command("target")
@click.argument("workout_type", type=WORKOUT_CHOICES)
@click.argument("minutes", type=int)
@click.option(
    "--mode",
    "-m",
    type=MODE_CHOICES,
    help="Difficulty mode (default: show all modes)",
)
def target(workout_type: str, minutes: int, mode: str | None):
    """Show the workout needed to earn MINUTES of screen time."""
    calculator = WorkoutRewardCalculator()
    kind = WorkoutType(workout_type)
    unit = "seconds" if kind.is_timed else "reps"
    modes = [WorkoutMode(mode)] if mode else list(WorkoutMode)

    rows = []
    for workout_mode in modes:
        value = calculator.calculate_workout_target(kind, workout_mode, minutes)
        rows.append([workout_mode.value, f"{value} {unit}"])

    echo_info(f"{kind.get_display()} for {minutes} min of screen time")
    click.echo(format_table(["Mode", "Target"], rows))
