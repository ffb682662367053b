"""
FrameTimer — pausable countdown for the delay between two frames.

Kept as a (start, remaining) pair on a monotonic clock: pausing records
what is left, resuming starts a fresh countdown for that remainder. Any
number of pause/resume cycles within one frame add up to the full
delay.
"""

from __future__ import annotations
import asyncio
import time
from typing import Callable, Optional


class FrameTimer:
    """
    Attributes:
        duration: Full delay in seconds
    """

    def __init__(self, duration: float, clock: Callable[[], float] = time.monotonic):
        self.duration = max(0.0, duration)
        self._clock = clock
        self._remaining = self.duration
        self._started_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    @property
    def remaining(self) -> float:
        """Seconds left before expiry."""
        if self._started_at is None:
            return self._remaining
        return max(0.0, self._remaining - (self._clock() - self._started_at))

    @property
    def elapsed(self) -> float:
        return self.duration - self.remaining

    def start(self) -> None:
        if self._started_at is None:
            self._started_at = self._clock()

    def pause(self) -> float:
        """
        Freeze the countdown.

        Returns:
            Seconds remaining at the moment of the pause
        """
        self._remaining = self.remaining
        self._started_at = None
        return self._remaining

    def resume(self) -> None:
        """Start a new countdown for the remaining time."""
        self.start()

    async def expired(self) -> None:
        """Sleep until the countdown reaches zero. Cancel to abandon it."""
        await asyncio.sleep(self.remaining)

    def __repr__(self) -> str:
        state = "running" if self.running else "paused"
        return f"FrameTimer({self.duration:.3f}s, remaining={self.remaining:.3f}s, {state})"
