"""
bfs.py — Breadth-First Search
==============================
Generator-based BFS over the whole component reachable from the source.
Yields:
  1. VISIT_NODE(source)
  2. For every newly discovered neighbour, in adjacency order:
       VISIT_EDGE(discovering edge), VISIT_NODE(neighbour)
  3. DONE once the queue is exhausted

Traversals do not use a target; they light up everything reachable.
"""

from collections import deque
from typing import Generator, Optional

from graph import Graph
from algorithms.step import Step


def bfs(
    graph: Graph,
    source: str,
    target: Optional[str] = None,
) -> Generator[Step, None, None]:
    if graph.get_node(source) is None:
        yield Step.done()
        return

    queue   = deque([source])
    visited = {source}
    yield Step.visit_node(source)

    while queue:
        node = queue.popleft()
        for edge_id, nbr, _weight in graph.neighbors(node):
            if nbr in visited:
                continue
            visited.add(nbr)
            queue.append(nbr)
            yield Step.visit_edge(edge_id)
            yield Step.visit_node(nbr)

    yield Step.done()
