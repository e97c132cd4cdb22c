"""
Time provider abstraction for deterministic runs

Every identifier of one run shares a single timestamp, so the generator only
ever needs "now" once. Making it injectable keeps whole runs reproducible.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    """Protocol for time providers - allows deterministic testing"""

    def now(self) -> datetime:
        """Return current UTC datetime"""
        ...


class RealTimeProvider:
    """Production time provider using system clock"""

    def now(self) -> datetime:
        """Return current UTC time from system clock"""
        return datetime.now(timezone.utc)


class TestTimeProvider:
    """
    Controllable time provider for deterministic tests

    Allows tests to freeze time and advance it in whole seconds.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, initial_time: datetime | None = None) -> None:
        self._current_time = initial_time or datetime(1970, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        """Return current test time"""
        return self._current_time

    def advance_seconds(self, seconds: int) -> None:
        """Advance time by specified seconds"""
        self._current_time += timedelta(seconds=seconds)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def truncate_to_seconds(dt: datetime) -> datetime:
    """Drop sub-second precision; the identifier only stores whole seconds"""
    return as_utc(dt).replace(microsecond=0)


def to_unix_seconds(dt: datetime) -> int:
    """Whole Unix seconds for a datetime (floor, so pre-epoch times stay consistent)"""
    return int(truncate_to_seconds(dt).timestamp())


# Global default time provider
default_time_provider: TimeProvider = RealTimeProvider()
