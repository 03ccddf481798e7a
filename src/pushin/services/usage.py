"""Daily unlock budget.

Tracks unlock time earned and consumed per day and enforces an optional
daily cap. Days are 24 hour windows of injected time; nothing here reads
a clock or persists between runs.
"""

import logging
import threading
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

# Days of records kept for get_usage_history
DEFAULT_HISTORY_DAYS = 30


def day_index(now: int, day_start_offset_seconds: int = 0) -> int:
    """Day number containing ``now``.

    day_start_offset_seconds moves the boundary away from midnight UTC,
    e.g. -3600 * 5 for a day that starts at local midnight in UTC-5.
    """
    return (now + day_start_offset_seconds) // SECONDS_PER_DAY


@dataclass(frozen=True)
class DailyUsage:
    """Unlock time earned and consumed during one day."""

    day: int
    earned_seconds: int = 0
    consumed_seconds: int = 0
    daily_cap_seconds: int | None = None  # None means unlimited

    @property
    def remaining_seconds(self) -> int:
        """Earned time not yet used."""
        return max(0, self.earned_seconds - self.consumed_seconds)

    @property
    def has_reached_daily_cap(self) -> bool:
        if self.daily_cap_seconds is None:
            return False
        return self.consumed_seconds >= self.daily_cap_seconds

    @property
    def daily_cap_progress(self) -> float:
        """Fraction of the cap consumed, 0.0 for unlimited days."""
        if self.daily_cap_seconds is None:
            return 0.0
        if self.daily_cap_seconds == 0:
            return 1.0
        return min(1.0, self.consumed_seconds / self.daily_cap_seconds)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "day": self.day,
            "earned_seconds": self.earned_seconds,
            "consumed_seconds": self.consumed_seconds,
            "remaining_seconds": self.remaining_seconds,
            "daily_cap_seconds": self.daily_cap_seconds,
            "has_reached_daily_cap": self.has_reached_daily_cap,
        }


class DailyUsageTracker:
    """Keeps one DailyUsage record per day and answers cap questions.

    A new day starts with a fresh record; the previous days stay
    available through get_usage_history until they age out.
    """

    def __init__(
        self,
        daily_cap_seconds: int | None = None,
        day_start_offset_seconds: int = 0,
        history_days: int = DEFAULT_HISTORY_DAYS,
    ):
        if daily_cap_seconds is not None and daily_cap_seconds < 0:
            raise ValueError(
                f"daily_cap_seconds must be non-negative, got {daily_cap_seconds}"
            )
        if history_days < 1:
            raise ValueError(f"history_days must be at least 1, got {history_days}")

        self._daily_cap_seconds = daily_cap_seconds
        self._day_start_offset_seconds = day_start_offset_seconds
        self._history_days = history_days
        self._lock = threading.Lock()
        self._records: dict[int, DailyUsage] = {}

    @property
    def daily_cap_seconds(self) -> int | None:
        return self._daily_cap_seconds

    def get_usage(self, now: int) -> DailyUsage:
        """Record for the day containing ``now``."""
        with self._lock:
            return self._today(now)

    def add_earned_time(self, now: int, seconds: int) -> DailyUsage:
        """Credit unlock time earned by a completed workout."""
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")

        with self._lock:
            usage = self._today(now)
            usage = replace(usage, earned_seconds=usage.earned_seconds + seconds)
            self._records[usage.day] = usage
            return usage

    def consume_time(self, now: int, seconds: int) -> DailyUsage:
        """Charge unlocked time actually spent."""
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")

        with self._lock:
            usage = self._today(now)
            was_capped = usage.has_reached_daily_cap
            usage = replace(usage, consumed_seconds=usage.consumed_seconds + seconds)
            self._records[usage.day] = usage

        if usage.has_reached_daily_cap and not was_capped:
            logger.info(
                "Daily cap of %ss reached on day %s", usage.daily_cap_seconds, usage.day
            )
        return usage

    def can_unlock_more(self, now: int) -> bool:
        return not self.get_usage(now).has_reached_daily_cap

    def has_hit_daily_cap(self, now: int) -> bool:
        return self.get_usage(now).has_reached_daily_cap

    def get_remaining_available_seconds(self, now: int) -> int:
        """Unused earned time, limited by what is left of the cap."""
        usage = self.get_usage(now)
        if usage.daily_cap_seconds is None:
            return usage.remaining_seconds

        cap_remaining = usage.daily_cap_seconds - usage.consumed_seconds
        return min(max(cap_remaining, 0), usage.remaining_seconds)

    def get_usage_history(self, now: int, days: int) -> list[DailyUsage]:
        """Records for the last ``days`` days that saw any activity, newest first."""
        today = day_index(now, self._day_start_offset_seconds)
        with self._lock:
            return [
                self._records[day]
                for day in range(today, today - days, -1)
                if day in self._records
            ]

    def _today(self, now: int) -> DailyUsage:
        today = day_index(now, self._day_start_offset_seconds)
        usage = self._records.get(today)
        if usage is None:
            usage = DailyUsage(day=today, daily_cap_seconds=self._daily_cap_seconds)
            self._records[today] = usage
            self._prune(today)
        return usage

    def _prune(self, today: int) -> None:
        cutoff = today - self._history_days
        for day in [d for d in self._records if d <= cutoff]:
            del self._records[day]
