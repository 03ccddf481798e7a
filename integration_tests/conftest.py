"""Pytest configuration for CLI integration tests."""

import pytest
from click.testing import CliRunner


# Mark everything collected here as an integration test
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def runner():
    """CLI runner with PUSHIN_* settings cleared."""
    return CliRunner(
        env={
            "PUSHIN_GRACE_PERIOD_SECONDS": None,
            "PUSHIN_STRICT_TIME": None,
            "PUSHIN_EMERGENCY_UNLOCK_SECONDS": None,
            "PUSHIN_MAX_EMERGENCY_UNLOCKS_PER_DAY": None,
            "PUSHIN_DAILY_CAP_SECONDS": None,
        }
    )
