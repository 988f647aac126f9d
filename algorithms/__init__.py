"""
algorithms/__init__.py — Algorithm Registry & Engine Entry Point
=================================================================
Single source of truth for every algorithm the visualizer knows about.

    from algorithms import REGISTRY, get_algorithm, run

REGISTRY is a dict:
    {
        "bfs": AlgoInfo(key, label, fn, anchors, …),
        …
    }

`anchors` is how many nodes the user must pick before the run starts:
1 for traversals (start only), 2 for path-finding (start and end).
The editor reads it from here and never special-cases algorithm keys,
so adding an algorithm is: write the generator, add one entry here.

`run()` is the AlgorithmEngine contract: pure, deterministic, no
timing, no graph mutation.  It materialises the generator into an
immutable tuple, so a rejected run (NegativeWeight) never leaks a
partial step sequence.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from graph import Graph
from algorithms.bfs      import bfs
from algorithms.dfs      import dfs
from algorithms.dijkstra import dijkstra
from algorithms.errors   import AlgorithmError, NegativeWeight, UnknownAlgorithm
from algorithms.step     import Step, StepKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:             str                    # registry key, e.g. "bfs"
    label:           str                    # human label, e.g. "Breadth-First Search"
    fn:              Callable               # the generator function
    anchors:         int                    # 1 = start only, 2 = start + end
    complexity_time: str = ""
    description:     str = ""


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", fn=bfs, anchors=1,
        complexity_time="O(V + E)",
        description="Explores layer-by-layer from the start node.",
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", fn=dfs, anchors=1,
        complexity_time="O(V + E)",
        description="Dives deep before backtracking.",
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=dijkstra, anchors=2,
        complexity_time="O((V + E) log V)",
        description="Greedily finalises the closest node. Needs non-negative weights.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
def run(
    graph: Graph,
    key: str,
    start_id: str,
    end_id: Optional[str] = None,
) -> Tuple[Step, ...]:
    """
    Compute the full visualization step sequence for one run.

    Raises:
        UnknownAlgorithm : `key` is not registered.
        NegativeWeight   : a weighted algorithm met a negative edge weight.
    """
    info = get_algorithm(key)
    if info is None:
        raise UnknownAlgorithm(key)
    steps = tuple(info.fn(graph, start_id, end_id))
    logger.debug("%s from %s to %s → %d step(s)", key, start_id, end_id, len(steps))
    return steps


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "run",
    "Step",
    "StepKind",
    "AlgorithmError",
    "NegativeWeight",
    "UnknownAlgorithm",
]
