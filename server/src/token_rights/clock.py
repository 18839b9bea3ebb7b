"""Current-time sources for the registries.

Registries never read the wall clock directly; they ask a Clock for "now"
once per operation so that expiry is a pure comparison.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Protocol for anything that can report the current time in seconds."""

    def now(self) -> int:
        """Current time as integer seconds."""
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to. Used by tests and simulations."""

    def __init__(self, start: int = 0) -> None:
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        """Jump to an absolute timestamp."""
        self._now = timestamp

    def advance(self, seconds: int) -> int:
        """Move forward by a number of seconds.

        Returns:
            The new current time

        Raises:
            ValueError: If seconds is negative
        """
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += seconds
        return self._now
