"""
TimeProviderPort - Time source interface.

Swap deadlines are computed from the injected clock instead of calling
datetime.now() directly, so tests can pin the time.

Implementations:
- SystemTimeAdapter: wall clock (production)
- FixedTimeAdapter: fixed time (tests)
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime, timezone


class TimeProviderPort(ABC):
    """Time source port."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time."""
        pass

    def timestamp(self) -> int:
        """Return the current time as whole Unix seconds."""
        return int(self.now().timestamp())


class SystemTimeAdapter(TimeProviderPort):
    """Wall-clock time adapter."""

    def now(self) -> datetime:
        """Return the current UTC time."""
        return datetime.now(timezone.utc)


class FixedTimeAdapter(TimeProviderPort):
    """
    Fixed time adapter for tests.

    Returns a predictable time until changed with set_time() or advance().
    """

    def __init__(self, fixed_time: datetime):
        self._fixed_time = fixed_time

    def set_time(self, new_time: datetime) -> None:
        """Change the returned time."""
        self._fixed_time = new_time

    def advance(self, seconds: int) -> None:
        """Move the clock forward."""
        self._fixed_time = datetime.fromtimestamp(
            self._fixed_time.timestamp() + seconds,
            tz=self._fixed_time.tzinfo,
        )

    def now(self) -> datetime:
        """Return the fixed time."""
        return self._fixed_time
