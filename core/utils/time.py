"""
Time Utilities

Periodic timer used to bound the sampling window.

Interval ticks on a fixed schedule anchored at the first call to tick():
the first tick completes immediately, every following tick completes one
period after the previous deadline. Deadlines are computed from the
schedule, not from when the caller got around to awaiting, so slow frame
handling does not stretch the window.
"""

import asyncio
from typing import Optional


class Interval:
    """
    Async periodic timer.

    Attributes:
        period: Seconds between ticks
        ticks: Number of ticks completed so far

    Example:
        >>> interval = Interval(10)
        >>> await interval.tick()  # returns at once -> 1
        >>> await interval.tick()  # ~10 s later     -> 2
    """

    def __init__(self, period: float):
        if period <= 0:
            raise ValueError(f"Interval period must be positive, got {period}")

        self.period = float(period)
        self.ticks = 0
        self._deadline: Optional[float] = None

    async def tick(self) -> int:
        """
        Wait for the next scheduled tick.

        Returns:
            int: Ordinal of the tick that fired (1 for the first)
        """
        loop = asyncio.get_running_loop()
        now = loop.time()

        if self._deadline is None:
            self._deadline = now

        delay = self._deadline - now
        if delay > 0:
            await asyncio.sleep(delay)

        self._deadline += self.period
        self.ticks += 1
        return self.ticks
