"""Interactive session: drive the controller with the real clock."""

import time
from pathlib import Path

import click
import questionary
from questionary import Style

from ..core.controller import AccessController
from ..core.tracking import WorkoutProgressTracker
from ..errors import PushinError
from ..models.workout import WorkoutMode, WorkoutType
from ..services.emergency import EmergencyUnlockManager
from ..services.home_state import HomeUIKind, HomeUIState, HomeViewModel
from ..services.rewards import WorkoutRewardCalculator
from ..services.usage import DailyUsageTracker
from .base import (
    build_settings,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    format_duration,
    get_catalog,
)

custom_style = Style(
    [
        ("qmark", "fg:#673ab7 bold"),
        ("question", "bold"),
        ("answer", "fg:#f44336 bold"),
        ("pointer", "fg:#673ab7 bold"),
        ("highlighted", "fg:#673ab7 bold"),
        ("selected", "fg:#cc5454"),
        ("separator", "fg:#cc5454"),
        ("instruction", ""),
        ("text", ""),
    ]
)

KIND_COLORS = {
    HomeUIKind.LOCKED: "red",
    HomeUIKind.EARNING: "yellow",
    HomeUIKind.UNLOCKED: "green",
    HomeUIKind.EXPIRED: "magenta",
}


def sample_clock() -> int:
    """Read the wall clock. Nothing else in pushin does."""
    return int(time.time())


@click.command()
@click.option("--grace", "-g", type=int, help="Grace period in seconds")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(path_type=Path),
    help="JSON file with targets to block",
)
@click.option("--daily-cap", type=int, help="Unlocked seconds allowed per day")
@click.option("--lenient-time", is_flag=True, help="Clamp out-of-order instants")
@click.pass_context
def session(
    ctx: click.Context,
    grace: int | None,
    catalog_path: Path | None,
    daily_cap: int | None,
    lenient_time: bool,
):
    """Run an interactive unlock session against the real clock.

    Start a workout, log reps, complete it and watch the unlock window
    and grace period count down. Refresh to re-read the clock.
    """
    settings = build_settings(
        lenient_time, grace_period_seconds=grace, daily_cap_seconds=daily_cap
    )
    catalog = get_catalog(ctx, catalog_path)
    controller = AccessController.from_settings(settings)
    view_model = HomeViewModel(
        controller,
        catalog,
        initial_time=sample_clock(),
        tracker=WorkoutProgressTracker(),
        usage=DailyUsageTracker(settings.daily_cap_seconds),
        emergency=EmergencyUnlockManager.from_settings(controller, settings),
    )
    calculator = WorkoutRewardCalculator()

    echo_info(
        f"Session started with {len(catalog)} target(s), "
        f"grace period {settings.grace_period_seconds}s"
    )

    while True:
        view_model.update_time(sample_clock())
        ui_state = view_model.ui_state
        _print_status(ui_state)

        action = questionary.select(
            "What next?",
            choices=_action_choices(ui_state, view_model),
            style=custom_style,
        ).ask()

        if action is None or action == "quit":
            break

        view_model.update_time(sample_clock())
        try:
            _run_action(action, view_model, calculator)
        except PushinError as e:
            echo_error(str(e))

    echo_info("Session ended")


def _action_choices(
    ui_state: HomeUIState, view_model: HomeViewModel
) -> list[questionary.Choice]:
    choices = [questionary.Choice("Refresh", "refresh")]
    if ui_state.can_start_workout:
        choices.append(questionary.Choice("Start a workout", "start"))
    if ui_state.kind == HomeUIKind.EARNING:
        choices.append(questionary.Choice("Log reps", "reps"))
        choices.append(questionary.Choice("Complete workout", "complete"))
    if ui_state.can_cancel:
        choices.append(questionary.Choice("Cancel workout", "cancel"))
    if ui_state.can_lock:
        choices.append(questionary.Choice("Lock now", "lock"))
    emergency = view_model.emergency
    if emergency and emergency.can_use(view_model.current_time):
        left = emergency.remaining_today(view_model.current_time)
        choices.append(
            questionary.Choice(f"Emergency unlock ({left} left today)", "emergency")
        )
    choices.append(questionary.Choice("Quit", "quit"))
    return choices


def _run_action(
    action: str, view_model: HomeViewModel, calculator: WorkoutRewardCalculator
) -> None:
    if action == "start":
        workout_type = questionary.select(
            "Which workout?",
            choices=[questionary.Choice(t.get_display(), t) for t in WorkoutType],
            style=custom_style,
        ).ask()
        if workout_type is None:
            return
        minutes = questionary.select(
            "How much screen time?",
            choices=[questionary.Choice(f"{m} minutes", m) for m in (5, 10, 15, 30)],
            style=custom_style,
        ).ask()
        mode = questionary.select(
            "Difficulty?",
            choices=[questionary.Choice(m.value.title(), m) for m in WorkoutMode],
            style=custom_style,
        ).ask()
        if minutes is None or mode is None:
            return
        workout = calculator.build_workout(workout_type, minutes, mode)
        view_model.start_workout(workout)
        echo_success(f"Started {workout.get_summary()}")

    elif action == "reps":
        count = questionary.text(
            "How many reps?",
            default="1",
            validate=lambda v: v.isdigit() and int(v) > 0 or "Enter a positive number",
            style=custom_style,
        ).ask()
        if count:
            total = view_model.record_rep(int(count))
            echo_info(f"{total} rep(s) logged")

    elif action == "complete":
        if view_model.complete_workout():
            echo_success("Workout complete, targets unlocked")
        else:
            workout = view_model.tracker.current_workout
            remaining = workout.target_reps - view_model.tracker.completed_reps if workout else 0
            echo_warning(f"{remaining} more rep(s) needed")

    elif action == "cancel":
        view_model.cancel_workout()
        echo_info("Workout cancelled")

    elif action == "lock":
        view_model.lock()
        echo_info("Locked")

    elif action == "emergency":
        unlock = view_model.emergency_unlock()
        echo_warning(f"Emergency unlock for {format_duration(unlock.duration_seconds)}")


def _print_status(ui_state: HomeUIState) -> None:
    click.echo()
    label = click.style(
        ui_state.kind.value.upper(), fg=KIND_COLORS[ui_state.kind], bold=True
    )
    line = f"Status: {label}"

    if ui_state.kind == HomeUIKind.EARNING and ui_state.workout_progress is not None:
        line += f"  progress {ui_state.workout_progress:.0%}"
    elif ui_state.kind == HomeUIKind.UNLOCKED:
        line += f"  {format_duration(ui_state.time_remaining or 0)} left"
    elif ui_state.kind == HomeUIKind.EXPIRED:
        line += f"  grace {format_duration(ui_state.time_remaining or 0)}"

    click.echo(line)
    if ui_state.daily_cap_reached:
        echo_warning("Daily cap reached, no more workouts today")
    if ui_state.blocked_targets:
        click.echo(f"Blocked: {', '.join(ui_state.blocked_targets)}")
    if ui_state.accessible_targets:
        click.echo(f"Accessible: {', '.join(ui_state.accessible_targets)}")
