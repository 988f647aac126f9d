"""
recorder.py — Run Summary
==========================
Turns a computed step sequence into the small metrics card the UI shows
after a run, most importantly whether a path was found at all (an
unreachable target is a normal outcome, not an error).

Usage:
    steps   = algorithms.run(graph, "dijkstra", start, end)
    metrics = summarize(graph, "dijkstra", steps)
"""

from dataclasses import asdict, dataclass, field
from typing import List, Sequence

from graph import Graph
from algorithms import get_algorithm
from algorithms.step import Step, StepKind, path_edges, path_nodes


# ---------------------------------------------------------------------------
# Metrics dataclass: what the summary panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:      str   = ""
    algo_label:    str   = ""
    nodes_visited: int   = 0
    edges_visited: int   = 0
    path:          List[str] = field(default_factory=list)   # node ids, start → end
    path_cost:     float = 0.0
    path_found:    bool  = False
    path_expected: bool  = False                             # algorithm searches for an end node
    total_steps:   int   = 0

    def to_dict(self) -> dict:
        return asdict(self)


def summarize(graph: Graph, algo_key: str, steps: Sequence[Step]) -> RunMetrics:
    info = get_algorithm(algo_key)
    nodes = path_nodes(steps)
    cost = 0.0
    for edge_id in path_edges(steps):
        edge = graph.get_edge(edge_id)
        if edge is not None:
            cost += edge.weight

    return RunMetrics(
        algo_key=algo_key,
        algo_label=info.label if info else "",
        nodes_visited=sum(1 for s in steps if s.kind is StepKind.VISIT_NODE),
        edges_visited=sum(1 for s in steps if s.kind is StepKind.VISIT_EDGE),
        path=nodes,
        path_cost=cost,
        path_found=bool(nodes),
        path_expected=bool(info and info.anchors >= 2),
        total_steps=len(steps),
    )
