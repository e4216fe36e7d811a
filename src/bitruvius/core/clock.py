"""Millisecond clock for tick-driven scheduling."""

import time


class FrameClock:
    """Monotonic millisecond timestamps for ``tick(now)`` callers."""

    def __init__(self):
        self._origin = time.perf_counter()

    def now(self) -> float:
        """Milliseconds elapsed since the clock was created or reset."""
        return (time.perf_counter() - self._origin) * 1000.0

    def reset(self) -> None:
        self._origin = time.perf_counter()
