"""Tests for the scripted simulation."""

import pytest

from pushin.adapters.blocking import RecordingBlockingAdapter
from pushin.core.controller import AccessController
from pushin.models.state import AccessState
from pushin.services.home_state import HomeUIKind
from pushin.services.simulation import default_end_time, run_simulation


class TestRunSimulation:
    """Tests for run_simulation."""

    def test_push_up_cycle(self, controller, catalog, pushups):
        """Test frames cover start, unlock, expiry and lock."""
        adapter = RecordingBlockingAdapter()
        frames = run_simulation(controller, catalog, pushups, step=60, adapter=adapter)
        by_time = {frame.now: frame for frame in frames}

        assert by_time[0].snapshot.state == AccessState.EARNING
        assert by_time[5].snapshot.state == AccessState.UNLOCKED
        assert by_time[5].snapshot.unlock_time_remaining == 600
        assert by_time[600].ui_state.kind == HomeUIKind.UNLOCKED
        assert by_time[605].event == "unlock ends"
        assert by_time[605].snapshot.state == AccessState.EXPIRED
        assert by_time[605].snapshot.grace_period_remaining == 30
        assert by_time[635].event == "grace ends"
        assert by_time[635].snapshot.state == AccessState.LOCKED
        assert frames[-1].now == 660

        assert [action for action, _ in adapter.history] == ["block", "unblock", "block"]

    def test_zero_grace_boundary_labelled_by_state(self, catalog, pushups):
        """Test the shared boundary is reported as a relock."""
        controller = AccessController(grace_period_seconds=0)
        frames = run_simulation(controller, catalog, pushups, step=60)
        boundary = [frame for frame in frames if frame.now == 605]

        assert len(boundary) == 1
        assert boundary[0].event == "grace ends"
        assert boundary[0].snapshot.state == AccessState.LOCKED
        assert "unlock ends" not in [frame.event for frame in frames]

    def test_frames_are_time_ordered(self, controller, catalog, pushups):
        """Test frame instants never go backwards."""
        frames = run_simulation(controller, catalog, pushups, step=45)
        instants = [frame.now for frame in frames]
        assert instants == sorted(instants)

    def test_complete_at_start(self, controller, catalog, pushups):
        """Test completing at the start instant."""
        frames = run_simulation(controller, catalog, pushups, complete_at=0, until=60)
        assert [frame.event for frame in frames[:2]] == ["start workout", "complete workout"]

    def test_invalid_step(self, controller, catalog, pushups):
        """Test step must be positive."""
        with pytest.raises(ValueError):
            run_simulation(controller, catalog, pushups, step=0)

    def test_default_end_time(self, pushups):
        """Test the end is the first step at or after the grace period."""
        assert default_end_time(pushups, 0, 5, 30, 60) == 660
        assert default_end_time(pushups, 0, 5, 55, 60) == 660
        assert default_end_time(pushups, 0, 5, 56, 60) == 720
