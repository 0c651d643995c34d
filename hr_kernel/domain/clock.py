"""
Injectable time source (``hr_kernel.domain.clock``).

Engines never read the time.  Services hold a ``Clock`` and pass
``clock.today()`` into the router as the stage approval date, and stamp
generated GOSI reports with ``clock.now_utc()``.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """Source of the current time, always timezone-aware UTC."""

    @abstractmethod
    def now_utc(self) -> datetime:
        ...

    def today(self) -> date:
        """Calendar date of ``now_utc()``; used for stage approval dates."""
        return self.now_utc().date()


class SystemClock(Clock):
    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Fixed clock for tests.

    Time only moves when ``advance()`` or ``advance_days()`` is called.
    A naive start time is taken to be UTC.
    """

    DEFAULT_START = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __init__(self, fixed_time: datetime | None = None):
        start = fixed_time or self.DEFAULT_START
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._current = start.astimezone(timezone.utc)

    def now_utc(self) -> datetime:
        return self._current

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)

    def advance_days(self, days: int = 1) -> None:
        self._current += timedelta(days=days)
