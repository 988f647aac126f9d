"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Generator-based Dijkstra using a min-heap (heapq).

Yields, for every node as it is FINALISED (popped with its best distance):
  • VISIT_EDGE(edge it was reached through)   – skipped for the source
  • VISIT_NODE(node)
Finalisation order is increasing distance; equal distances are broken by
node insertion order, so the sequence is fully deterministic.

When the target is finalised the shortest path is yielded start → end as
PATH_NODE / PATH_EDGE pairs, followed by DONE.  An unreachable target
simply ends with DONE and no PATH steps ("no path found").

Correctness note: Dijkstra requires non-negative weights.  A negative
weight anywhere in the graph raises NegativeWeight before the first step.
"""

import heapq
from typing import Dict, Generator, List, Optional, Tuple

from graph import Graph
from algorithms.errors import NegativeWeight
from algorithms.step import Step, path_steps


def dijkstra(
    graph: Graph,
    source: str,
    target: Optional[str] = None,
) -> Generator[Step, None, None]:
    for edge in graph.edges.values():
        if edge.weight < 0:
            raise NegativeWeight(edge.id, edge.weight)

    if graph.get_node(source) is None:
        yield Step.done()
        return

    if source == target:
        yield Step.visit_node(source)
        yield Step.done()
        return

    order: Dict[str, int] = {nid: i for i, nid in enumerate(graph.node_ids())}
    dist:  Dict[str, float] = {source: 0.0}
    via:   Dict[str, Tuple[str, str]] = {}          # node → (parent, edge_id)
    final: set = set()
    pq = [(0.0, order[source], source)]            # (distance, insertion order, node)

    while pq:
        d, _, node = heapq.heappop(pq)
        if node in final or d > dist[node]:
            continue                                # stale entry
        final.add(node)

        if node in via:
            yield Step.visit_edge(via[node][1])
        yield Step.visit_node(node)

        if node == target:
            nodes, edges = _reconstruct(via, source, target)
            yield from path_steps(nodes, edges)
            yield Step.done()
            return

        for edge_id, nbr, weight in graph.neighbors(node):
            if nbr in final:
                continue
            new_dist = d + weight
            if new_dist < dist.get(nbr, float("inf")):
                dist[nbr] = new_dist
                via[nbr]  = (node, edge_id)
                heapq.heappush(pq, (new_dist, order[nbr], nbr))

    yield Step.done()


# ---------------------------------------------------------------------------
def _reconstruct(via: Dict[str, Tuple[str, str]], source: str, target: str) -> Tuple[List[str], List[str]]:
    """Walk parents end → start, then reverse into start → end order."""
    nodes, edges = [target], []
    cur = target
    while cur != source:
        parent, edge_id = via[cur]
        edges.append(edge_id)
        nodes.append(parent)
        cur = parent
    nodes.reverse()
    edges.reverse()
    return nodes, edges
