"""Runtime settings for pushin."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GRACE_PERIOD_SECONDS = 30
DEFAULT_EMERGENCY_UNLOCK_SECONDS = 600
DEFAULT_MAX_EMERGENCY_UNLOCKS_PER_DAY = 3


class PushinSettings(BaseSettings):
    """Settings used to construct an access controller and its services.

    Every field can be set through a PUSHIN_-prefixed environment
    variable, e.g. PUSHIN_GRACE_PERIOD_SECONDS=45.
    """

    model_config = SettingsConfigDict(env_prefix="PUSHIN_", frozen=True)

    grace_period_seconds: int = Field(DEFAULT_GRACE_PERIOD_SECONDS, ge=0)
    strict_time: bool = True  # Reject out-of-order instants instead of clamping

    # Emergency unlocks
    emergency_unlock_seconds: int = Field(DEFAULT_EMERGENCY_UNLOCK_SECONDS, gt=0)
    max_emergency_unlocks_per_day: int = Field(DEFAULT_MAX_EMERGENCY_UNLOCKS_PER_DAY, ge=0)

    # Unlocked seconds allowed per day; None means unlimited
    daily_cap_seconds: int | None = Field(None, ge=0)

    def with_overrides(self, **overrides) -> "PushinSettings":
        """Return a copy with any non-None values replaced and re-validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PushinSettings(**values)
