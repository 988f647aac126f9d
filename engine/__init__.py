"""
engine/
-------
Playback & run-summary layer.

    from engine import PlaybackScheduler, TickClock, summarize
"""

from engine.clock     import TickClock, TimerHandle
from engine.scheduler import PlaybackScheduler, PlaybackHandle, PlaybackSession, SchedulerState, STEP_STATES
from engine.recorder  import RunMetrics, summarize

__all__ = [
    "TickClock",
    "TimerHandle",
    "PlaybackScheduler",
    "PlaybackHandle",
    "PlaybackSession",
    "SchedulerState",
    "STEP_STATES",
    "RunMetrics",
    "summarize",
]
