"""Shared pytest fixtures for the graph playground tests.

Provides a manual time source for the TickClock, a recording surface bound
to a fresh graph, and the reference triangle graph used across suites.

TRIANGLE:
    A(100, 100) ── 1 ── B(300, 100)
        \\                 /
         5               2
          \\             /
            C(200, 300)

    Shortest A → C is A, B, C with cost 3 (the direct edge costs 5).
"""

from typing import Callable, Dict

import pytest

from editor import ToolModeController
from engine import PlaybackScheduler, TickClock
from graph import EdgeKind, Graph
from ui import CommandSurface, bind_graph


# =============================================================================
# TIME
# =============================================================================


class ManualTime:
    """Zero-arg callable returning a time that only moves when a test says so."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def manual_time() -> ManualTime:
    return ManualTime()


@pytest.fixture
def clock(manual_time: ManualTime) -> TickClock:
    return TickClock(manual_time)


@pytest.fixture
def advance(manual_time: ManualTime, clock: TickClock) -> Callable[[float], int]:
    """advance(seconds) moves time forward and fires every due timer."""

    def _advance(seconds: float) -> int:
        manual_time.now += seconds
        return clock.run_due()

    return _advance


# =============================================================================
# GRAPH + SURFACE
# =============================================================================


@pytest.fixture
def surface() -> CommandSurface:
    return CommandSurface()


@pytest.fixture
def graph(surface: CommandSurface) -> Graph:
    """Empty graph whose change events are mirrored onto `surface`."""
    g = Graph()
    bind_graph(g, surface)
    return g


@pytest.fixture
def triangle(graph: Graph) -> Dict[str, str]:
    """Build the triangle into `graph`; returns {"A": id, "B": id, "C": id, "AB": id, …}."""
    a = graph.add_node(100, 100, label="A")
    b = graph.add_node(300, 100, label="B")
    c = graph.add_node(200, 300, label="C")
    ab = graph.add_or_replace_edge(a.id, b.id, EdgeKind.WEIGHTED, 1)
    bc = graph.add_or_replace_edge(b.id, c.id, EdgeKind.WEIGHTED, 2)
    ac = graph.add_or_replace_edge(a.id, c.id, EdgeKind.WEIGHTED, 5)
    return {"A": a.id, "B": b.id, "C": c.id, "AB": ab.id, "BC": bc.id, "AC": ac.id}


# =============================================================================
# EDITOR
# =============================================================================


@pytest.fixture
def scheduler(surface: CommandSurface, clock: TickClock) -> PlaybackScheduler:
    return PlaybackScheduler(surface, clock)


@pytest.fixture
def controller(graph: Graph, scheduler: PlaybackScheduler, surface: CommandSurface) -> ToolModeController:
    return ToolModeController(graph, scheduler, surface)
