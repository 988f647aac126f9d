"""
dfs.py — Depth-First Search
=============================
Generator-based DFS using an explicit stack of neighbour iterators
(no Python recursion limit issues) that reproduces recursive visiting
order: the first unvisited neighbour is always followed before any of
its siblings.

Yields:
  1. VISIT_NODE(source)
  2. On every descent: VISIT_EDGE(tree edge), VISIT_NODE(child)
  3. DONE once the stack is empty
"""

from typing import Generator, Iterator, List, Optional, Tuple

from graph import Graph
from algorithms.step import Step


def dfs(
    graph: Graph,
    source: str,
    target: Optional[str] = None,
) -> Generator[Step, None, None]:
    if graph.get_node(source) is None:
        yield Step.done()
        return

    visited = {source}
    stack: List[Iterator[Tuple[str, str, float]]] = [iter(graph.neighbors(source))]
    yield Step.visit_node(source)

    while stack:
        for edge_id, nbr, _weight in stack[-1]:
            if nbr in visited:
                continue
            visited.add(nbr)
            yield Step.visit_edge(edge_id)
            yield Step.visit_node(nbr)
            # descend; the parent's iterator resumes where it stopped
            stack.append(iter(graph.neighbors(nbr)))
            break
        else:
            stack.pop()

    yield Step.done()
