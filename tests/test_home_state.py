"""Tests for home screen state mapping."""

import pytest

from pushin.core.controller import AccessController, AccessSnapshot
from pushin.core.resolver import AllOrNothingResolver, ResolvedTargets
from pushin.core.tracking import WorkoutProgressTracker
from pushin.errors import DailyCapReachedError, EmergencyUnlockUnavailableError
from pushin.models.state import AccessState
from pushin.services.home_state import (
    HomeUIKind,
    HomeUIState,
    HomeViewModel,
    derive_home_ui_state,
)
from pushin.services.emergency import EmergencyUnlockManager
from pushin.services.usage import SECONDS_PER_DAY, DailyUsageTracker

ALL = ("com.example.a", "com.example.b", "social")


def make_snapshot(state, unlock=0, grace=0):
    return AccessSnapshot(
        now=0,
        state=state,
        unlock_time_remaining=unlock,
        grace_period_remaining=grace,
        total_unlock_duration=0,
    )


class BlockEverythingResolver(AllOrNothingResolver):
    """Faulty resolver that keeps blocking while UNLOCKED."""

    def resolve(self, state, all_targets):
        identifiers = tuple(t.platform_agnostic_identifier for t in all_targets)
        return ResolvedTargets(blocked=identifiers, accessible=identifiers)


class TestDeriveHomeUIState:
    """Tests for derive_home_ui_state."""

    def test_locked(self):
        """Test LOCKED maps to the locked view."""
        ui = derive_home_ui_state(make_snapshot(AccessState.LOCKED), ResolvedTargets(ALL, ()))
        assert ui.kind == HomeUIKind.LOCKED
        assert ui.blocked_targets == ALL
        assert ui.can_start_workout
        assert not ui.can_show_recommendations

    def test_earning_carries_progress(self):
        """Test EARNING shows workout progress and allows cancel."""
        ui = derive_home_ui_state(
            make_snapshot(AccessState.EARNING), ResolvedTargets(ALL, ()), 0.4
        )
        assert ui.kind == HomeUIKind.EARNING
        assert ui.workout_progress == 0.4
        assert ui.can_cancel
        assert not ui.can_start_workout

    def test_unlocked_requires_clear_blocked_list(self):
        """Test UNLOCKED with empty blocked list shows unlocked content."""
        ui = derive_home_ui_state(
            make_snapshot(AccessState.UNLOCKED, unlock=300), ResolvedTargets((), ALL)
        )
        assert ui.kind == HomeUIKind.UNLOCKED
        assert ui.time_remaining == 300
        assert ui.can_lock
        assert ui.can_show_recommendations
        assert ui.shows_unlocked_content

    def test_expired_uses_grace_time(self):
        """Test EXPIRED reports grace period, not unlock time."""
        ui = derive_home_ui_state(
            make_snapshot(AccessState.EXPIRED, unlock=0, grace=20),
            ResolvedTargets(ALL, ()),
        )
        assert ui.kind == HomeUIKind.EXPIRED
        assert ui.time_remaining == 20
        assert ui.can_start_workout

    def test_blocked_list_overrides_unlocked_state(self):
        """Test a non-empty blocked list refuses unlocked content."""
        ui = derive_home_ui_state(
            make_snapshot(AccessState.UNLOCKED, unlock=300),
            ResolvedTargets(("com.example.a",), ("com.example.b", "social")),
        )
        assert ui.kind == HomeUIKind.LOCKED
        assert not ui.shows_unlocked_content
        assert ui.accessible_targets == ()
        assert ui.blocked_targets == ("com.example.a",)

    def test_unlocked_with_empty_catalog_is_not_unlocked(self):
        """Test UNLOCKED with nothing accessible falls back to locked."""
        ui = derive_home_ui_state(
            make_snapshot(AccessState.UNLOCKED, unlock=300), ResolvedTargets((), ())
        )
        assert ui.kind == HomeUIKind.LOCKED

    @pytest.mark.parametrize(
        "state", [AccessState.LOCKED, AccessState.EARNING, AccessState.EXPIRED]
    )
    def test_blocking_state_without_blocked_targets(self, state):
        """Test blocking states with an empty blocked list use the fallback."""
        ui = derive_home_ui_state(make_snapshot(state), ResolvedTargets((), ()))
        assert ui.kind == HomeUIKind.LOCKED
        assert ui.blocked_targets == ()

    def test_to_dict(self):
        """Test UI state serialization."""
        data = HomeUIState.expired(ALL, 12).to_dict()
        assert data["kind"] == "expired"
        assert data["time_remaining"] == 12
        assert data["blocked_targets"] == list(ALL)


class TestHomeViewModel:
    """Tests for HomeViewModel."""

    def test_full_cycle(self, controller, catalog, pushups):
        """Test the view follows the controller through a cycle."""
        view_model = HomeViewModel(controller, catalog, initial_time=0)
        assert view_model.ui_state.kind == HomeUIKind.LOCKED

        view_model.start_workout(pushups)
        view_model.update_time(2)
        view_model.record_rep(4)
        ui = view_model.ui_state
        assert ui.kind == HomeUIKind.EARNING
        assert ui.workout_progress == pytest.approx(0.4)

        view_model.update_time(5)
        view_model.record_rep(6)
        assert view_model.complete_workout()
        assert view_model.ui_state.kind == HomeUIKind.UNLOCKED
        assert view_model.ui_state.time_remaining == 600

        view_model.update_time(610)
        ui = view_model.ui_state
        assert ui.kind == HomeUIKind.EXPIRED
        assert ui.time_remaining == 25

        view_model.update_time(635)
        assert view_model.ui_state.kind == HomeUIKind.LOCKED

    def test_complete_waits_for_reps(self, controller, catalog, pushups):
        """Test completion is refused until the tracker reports done."""
        view_model = HomeViewModel(controller, catalog, initial_time=0)
        view_model.start_workout(pushups)
        view_model.record_rep(9)

        assert not view_model.complete_workout()
        assert controller.current_state == AccessState.EARNING

    def test_cancel_and_lock_clear_tracker(self, controller, catalog, pushups):
        """Test cancel resets progress."""
        tracker = WorkoutProgressTracker()
        view_model = HomeViewModel(controller, catalog, initial_time=0, tracker=tracker)
        view_model.start_workout(pushups)
        view_model.record_rep(3)
        view_model.cancel_workout()

        assert tracker.current_workout is None
        assert view_model.ui_state.kind == HomeUIKind.LOCKED

    def test_lock_from_unlocked(self, controller, catalog, pushups):
        """Test manual lock returns to the locked view."""
        view_model = HomeViewModel(controller, catalog, initial_time=0)
        view_model.start_workout(pushups)
        view_model.record_rep(10)
        view_model.complete_workout()
        view_model.update_time(100)
        view_model.lock()

        ui = view_model.ui_state
        assert ui.kind == HomeUIKind.LOCKED
        assert ui.time_remaining is None

    def test_faulty_resolver_never_shows_unlocked(self, catalog, pushups):
        """Test blocked targets win over an UNLOCKED state."""
        controller = AccessController(
            grace_period_seconds=30, resolver=BlockEverythingResolver()
        )
        view_model = HomeViewModel(controller, catalog, initial_time=0)
        view_model.start_workout(pushups)
        view_model.record_rep(10)
        view_model.complete_workout()

        assert controller.current_state == AccessState.UNLOCKED
        ui = view_model.ui_state
        assert ui.kind == HomeUIKind.LOCKED
        assert not ui.shows_unlocked_content
        assert not ui.can_show_recommendations

    def test_catalog_change_applies_next_frame(self, controller, catalog):
        """Test the catalog passed at query time is used."""
        view_model = HomeViewModel(controller, catalog, initial_time=0)
        view_model.update_catalog(catalog[:1])
        assert view_model.ui_state.blocked_targets == ("com.example.a",)

    def test_emergency_unlock_requires_manager(self, controller, catalog):
        """Test emergency unlock is refused when not configured."""
        view_model = HomeViewModel(controller, catalog, initial_time=0)
        with pytest.raises(EmergencyUnlockUnavailableError):
            view_model.emergency_unlock()

    def test_emergency_unlock(self, controller, catalog):
        """Test an emergency unlock shows the unlocked view."""
        emergency = EmergencyUnlockManager(controller, unlock_seconds=300)
        view_model = HomeViewModel(controller, catalog, initial_time=0, emergency=emergency)
        session = view_model.emergency_unlock()

        assert session.is_emergency
        view_model.update_time(100)
        ui = view_model.ui_state
        assert ui.kind == HomeUIKind.UNLOCKED
        assert ui.time_remaining == 200


class TestDailyCap:
    """Tests for the daily cap in the home view."""

    @pytest.fixture
    def view_model(self, controller, catalog, pushups):
        """View model with a 300 second cap, unlocked at t=0 for 600 seconds."""
        view_model = HomeViewModel(
            controller,
            catalog,
            initial_time=0,
            usage=DailyUsageTracker(daily_cap_seconds=300),
            emergency=EmergencyUnlockManager(controller, unlock_seconds=300),
        )
        view_model.start_workout(pushups)
        view_model.record_rep(10)
        view_model.complete_workout()
        return view_model

    def test_cap_flag_disables_start(self):
        """Test the locked and expired views refuse new workouts at the cap."""
        locked = HomeUIState.locked(ALL, daily_cap_reached=True)
        expired = HomeUIState.expired(ALL, 12, daily_cap_reached=True)
        assert not locked.can_start_workout
        assert not expired.can_start_workout
        assert locked.to_dict()["daily_cap_reached"] is True

    def test_earned_time_credited(self, view_model):
        """Test completing a workout credits its earned time."""
        assert view_model.usage.get_usage(0).earned_seconds == 600

    def test_unlocked_time_charged(self, view_model):
        """Test time spent unlocked is consumed."""
        view_model.update_time(200)
        assert view_model.usage.get_usage(200).consumed_seconds == 200
        assert view_model.ui_state.kind == HomeUIKind.UNLOCKED

    def test_cap_locks_early(self, view_model, controller, pushups):
        """Test reaching the cap ends the unlock and refuses new workouts."""
        view_model.update_time(200)
        view_model.update_time(320)

        assert controller.current_state == AccessState.LOCKED
        ui = view_model.ui_state
        assert ui.kind == HomeUIKind.LOCKED
        assert ui.daily_cap_reached
        assert not ui.can_start_workout
        with pytest.raises(DailyCapReachedError):
            view_model.start_workout(pushups)

    def test_cap_resets_next_day(self, view_model):
        """Test a new day allows workouts again."""
        view_model.update_time(320)
        view_model.update_time(SECONDS_PER_DAY + 10)

        ui = view_model.ui_state
        assert not ui.daily_cap_reached
        assert ui.can_start_workout

    def test_emergency_time_not_charged(self, view_model, controller):
        """Test emergency unlocks still work at the cap and cost nothing."""
        view_model.update_time(320)
        view_model.emergency_unlock()
        view_model.update_time(500)

        assert controller.current_state == AccessState.UNLOCKED
        assert view_model.usage.get_usage(500).consumed_seconds == 320
        assert view_model.ui_state.kind == HomeUIKind.UNLOCKED
