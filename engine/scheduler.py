"""
scheduler.py — Timed Playback Engine
=====================================
The PlaybackScheduler replays a finished step sequence onto a drawable
surface, one step per `speed_ms`, and is the ONLY owner of the
"running" flag the editor checks before every mutation.

State machine:
    IDLE     →  start()                →  RUNNING
    RUNNING  →  DONE step / cancel()   →  IDLE
    RUNNING  →  start()                →  RUNNING   (rejected, returns None)

Cancellation:
  Every run gets a PlaybackHandle.  cancel() invalidates it and cancels
  the pending timer; the timer callback re-checks the handle before it
  applies anything, so a step whose wait was interrupted never lands on
  the surface.  Finishing on DONE goes through the same exit as cancel(),
  so listeners see exactly one running → idle transition per run.

Thread safety:
  This class is NOT thread-safe.  All calls, and the clock's timer
  callbacks, must happen on one thread (an asyncio loop, or the request
  thread that drives a TickClock).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple

from config import PlaybackConfig
from graph import ElementState
from algorithms.step import Step, StepKind

if TYPE_CHECKING:
    from ui.surface import DrawableSurface

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class SchedulerState(Enum):
    IDLE    = "idle"
    RUNNING = "running"


# how each step kind is drawn
STEP_STATES: Dict[StepKind, ElementState] = {
    StepKind.VISIT_NODE: ElementState.VISITED,
    StepKind.VISIT_EDGE: ElementState.VISITED,
    StepKind.PATH_NODE:  ElementState.PATH,
    StepKind.PATH_EDGE:  ElementState.PATH,
}

RunningListener = Callable[[bool], None]


# ---------------------------------------------------------------------------
# Handle & session
# ---------------------------------------------------------------------------
class PlaybackHandle:
    """Returned by start().  Stays valid until the run it names has exited."""

    def __init__(self, scheduler: "PlaybackScheduler"):
        self._scheduler = scheduler
        self._valid = True

    @property
    def valid(self) -> bool:
        return self._valid

    def invalidate(self) -> None:
        self._valid = False

    def cancel(self) -> bool:
        """Cancel the run this handle names (no-op once it has exited)."""
        if not self._valid:
            return False
        return self._scheduler.cancel()


@dataclass
class PlaybackSession:
    steps:    Tuple[Step, ...]
    speed_ms: int
    handle:   PlaybackHandle
    index:    int = 0          # next step to apply
    timer:    Any = None       # pending clock handle


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------
class PlaybackScheduler:
    """
    Attributes:
        surface   : Where step effects are drawn.
        clock     : Anything with call_later(delay_s, callback) → handle.cancel().
        state     : Current SchedulerState.
        last_exit : "finished" / "cancelled" for the most recent run (None before the first).
    """

    def __init__(self, surface: "DrawableSurface", clock: Any):
        self.surface = surface
        self.clock = clock
        self.state: SchedulerState = SchedulerState.IDLE
        self.last_exit: Optional[str] = None
        self._session: Optional[PlaybackSession] = None
        self._listeners: List[RunningListener] = []

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_listener(self, listener: RunningListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self, running: bool) -> None:
        for listener in list(self._listeners):
            listener(running)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, steps: Sequence[Step], speed_ms: int = PlaybackConfig.DEFAULT_SPEED_MS) -> Optional[PlaybackHandle]:
        """Begin replaying `steps`.  Returns None (and changes nothing) if already running."""
        if self.running:
            logger.info("start() rejected: playback already running")
            return None

        speed_ms = PlaybackConfig.normalize_speed(speed_ms)
        handle = PlaybackHandle(self)
        self._session = PlaybackSession(steps=tuple(steps), speed_ms=speed_ms, handle=handle)
        self.state = SchedulerState.RUNNING
        logger.debug("playback started: %d step(s) at %d ms", len(self._session.steps), speed_ms)
        self._notify(True)
        self._schedule_next(self._session)
        return handle

    def cancel(self) -> bool:
        """Stop the current run immediately.  Returns False if nothing was running."""
        if not self.running:
            return False
        self._exit("cancelled")
        return True

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self.state == SchedulerState.RUNNING

    @property
    def session(self) -> Optional[PlaybackSession]:
        return self._session

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _schedule_next(self, session: PlaybackSession) -> None:
        session.timer = self.clock.call_later(session.speed_ms / 1000.0, self._on_timer, session.handle)

    def _on_timer(self, handle: PlaybackHandle) -> None:
        session = self._session
        if not handle.valid or session is None or session.handle is not handle:
            return

        if session.index >= len(session.steps):
            self._exit("finished")
            return

        step = session.steps[session.index]
        session.index += 1
        if step.is_done:
            self._exit("finished")
            return

        self._apply(step)
        self._schedule_next(session)

    def _apply(self, step: Step) -> None:
        self.surface.set_element_state(step.element_id, STEP_STATES[step.kind])

    def _exit(self, reason: str) -> None:
        session = self._session
        if session is not None:
            session.handle.invalidate()
            if session.timer is not None:
                session.timer.cancel()
        self._session = None
        self.state = SchedulerState.IDLE
        self.last_exit = reason
        logger.debug("playback %s", reason)
        self._notify(False)
