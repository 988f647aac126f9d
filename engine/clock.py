"""
clock.py — Cooperative Timer Source
====================================
The PlaybackScheduler only needs one thing from a clock:

    handle = clock.call_later(delay_seconds, callback)
    handle.cancel()

An `asyncio` event loop already satisfies this.  `TickClock` is the
same contract for hosts that have no running loop (the Flask shell,
tests): timers fire when the host calls `run_due()`, e.g. from a
polling request, on the caller's thread.

Catch-up semantics: while a timer callback runs, "now" is that timer's
due time, so a callback that schedules the next timer keeps a steady
cadence even if `run_due()` is called late; one late poll fires every
timer that has become due since the previous poll, in order.
"""

import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    __slots__ = ("due", "callback", "args", "cancelled")

    def __init__(self, due: float, callback: Callable, args: tuple):
        self.due       = due
        self.callback  = callback
        self.args      = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        return f"TimerHandle(due={self.due:.3f}, {state})"


class TickClock:
    """
    Attributes:
        time_fn : zero-arg callable returning seconds (time.monotonic by default).
    """

    def __init__(self, time_fn: Callable[[], float] = time.monotonic):
        self.time_fn = time_fn
        self._heap:    List[Tuple[float, int, TimerHandle]] = []
        self._seq      = itertools.count()
        self._current: Optional[float] = None

    def time(self) -> float:
        if self._current is not None:
            return self._current
        return self.time_fn()

    def call_later(self, delay: float, callback: Callable, *args) -> TimerHandle:
        handle = TimerHandle(self.time() + max(0.0, delay), callback, args)
        heapq.heappush(self._heap, (handle.due, next(self._seq), handle))
        return handle

    def run_due(self) -> int:
        """Fire every timer due by now, oldest first.  Returns how many fired."""
        now = self.time_fn()
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            due, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self._current = due
            try:
                handle.callback(*handle.args)
            finally:
                self._current = None
            fired += 1
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if not h.cancelled)
