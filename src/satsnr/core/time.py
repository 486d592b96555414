"""Clock abstraction for the host loop.

``RealTimeSource`` uses the system monotonic clock and ``asyncio.sleep``.
``StepTimeSource`` is a deterministic clock whose ``sleep`` jumps time
forward immediately, so frame loops can run through many simulated
seconds in tests without waiting.

Usage:
    ts = StepTimeSource(start=0.0)
    await ts.sleep(1.5)
    assert ts.monotonic() == 1.5
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol

__all__ = [
    "TimeSource",
    "RealTimeSource",
    "StepTimeSource",
]


class TimeSource(Protocol):
    def monotonic(self) -> float:
        """Return monotonic time in seconds."""
        ...

    async def sleep(self, seconds: float) -> None:
        ...


class RealTimeSource:
    """Real-time implementation using system clocks and asyncio.sleep."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class StepTimeSource:
    """Simulated clock advanced by ``sleep`` and ``advance``."""

    def __init__(self, *, start: float = 0.0) -> None:
        self._now = float(start)

    def monotonic(self) -> float:
        return self._now

    def advance(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"Cannot advance time backwards: dt={dt}")
        self._now += dt

    async def sleep(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError(f"Sleep duration must be non-negative: {seconds}")
        self._now += seconds
        # Still yield so other tasks get scheduled
        await asyncio.sleep(0)
