"""Clock sources for the reminder scheduler.

Reminder decisions depend on wall-clock time, so the clock is injected rather
than read directly. Tests use FakeClock to travel through time without waiting.
"""

import time
from typing import Optional

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND


class Clock:
    """Supplies the current wall-clock time in epoch milliseconds."""

    def now(self) -> int:
        raise NotImplementedError


class SystemClock(Clock):
    """Real wall-clock time."""

    def now(self) -> int:
        return int(time.time() * MS_PER_SECOND)


class FakeClock(Clock):
    """Manually controlled clock for deterministic tests."""

    def __init__(self, start_ms: int = 0):
        self._now_ms = int(start_ms)

    def now(self) -> int:
        return self._now_ms

    def set(self, epoch_ms: int) -> None:
        """Jump to an absolute time (may go backwards to simulate clock skew)."""
        self._now_ms = int(epoch_ms)

    def advance(
        self,
        ms: int = 0,
        seconds: Optional[float] = None,
        minutes: Optional[float] = None
    ) -> int:
        """Move the clock forward.

        Args:
            ms: Milliseconds to add
            seconds: Seconds to add
            minutes: Minutes to add

        Returns:
            The new time in epoch ms

        Raises:
            ValueError: If the total delta is negative (use set() for skew)
        """
        delta = int(ms)
        if seconds is not None:
            delta += int(seconds * MS_PER_SECOND)
        if minutes is not None:
            delta += int(minutes * MS_PER_MINUTE)
        if delta < 0:
            raise ValueError("advance() only moves forward; use set() to go back")

        self._now_ms += delta
        return self._now_ms
