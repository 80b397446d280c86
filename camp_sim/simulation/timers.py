"""Wall-clock timers for player actions that last a fixed number of real seconds.

These run on session time (raw elapsed seconds between frames), not on the
game clock, so eating or sleeping takes the same few seconds however the
length of a game day is tuned.

    timers = TimerScheduler()
    timers.schedule(now=12.0, delay=2.0, callback=finish_meal, label="EAT")
    ...
    timers.poll(now=14.1)   # finish_meal() runs here
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class ScheduledTimer:
    """A pending callback, ordered by due time then insertion order."""

    due: float
    _seq: int = field(compare=True, repr=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    label: str = field(compare=False, default="")


class TimerScheduler:
    """Priority queue of one-shot callbacks. Timers cannot be cancelled."""

    def __init__(self) -> None:
        self._queue: list[ScheduledTimer] = []
        self._seq: int = 0
        self.fired: int = 0

    def __len__(self) -> int:
        return len(self._queue)

    def schedule(
        self, now: float, delay: float, callback: Callable[[], None], label: str = ""
    ) -> ScheduledTimer:
        """Run *callback* once ``delay`` seconds after *now*."""
        self._seq += 1
        timer = ScheduledTimer(due=now + delay, _seq=self._seq, callback=callback, label=label)
        heapq.heappush(self._queue, timer)
        return timer

    def poll(self, now: float) -> int:
        """Fire every timer due at or before *now*. Returns how many fired."""
        count = 0
        while self._queue and self._queue[0].due <= now:
            timer = heapq.heappop(self._queue)
            timer.callback()
            count += 1
        self.fired += count
        return count
