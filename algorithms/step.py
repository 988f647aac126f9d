"""
step.py — Visualization Step
=============================
Every algorithm is a generator that yields Step objects.
A Step is one atomic, replayable event in the order the algorithm
discovered things:

    • VISIT_NODE / VISIT_EDGE  – reached by the exploration
    • PATH_NODE  / PATH_EDGE   – part of the final reconstructed path
    • DONE                     – end of the run (always last, exactly once)

Design decisions:
  - Step is a frozen dataclass.  The algorithm generator is the only
    writer; the scheduler is a pure reader.
  - A step names one element id and nothing else.  How a step looks on
    screen is the scheduler's business (see STEP_STATES there).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence


class StepKind(Enum):
    VISIT_NODE = "visit_node"
    VISIT_EDGE = "visit_edge"
    PATH_NODE  = "path_node"
    PATH_EDGE  = "path_edge"
    DONE       = "done"


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        kind       : What happened.
        element_id : Node or edge id the step refers to (None for DONE).
    """

    kind:       StepKind
    element_id: Optional[str] = None

    # -- constructors used by the algorithm generators --
    @classmethod
    def visit_node(cls, node_id: str) -> "Step":
        return cls(StepKind.VISIT_NODE, node_id)

    @classmethod
    def visit_edge(cls, edge_id: str) -> "Step":
        return cls(StepKind.VISIT_EDGE, edge_id)

    @classmethod
    def path_node(cls, node_id: str) -> "Step":
        return cls(StepKind.PATH_NODE, node_id)

    @classmethod
    def path_edge(cls, edge_id: str) -> "Step":
        return cls(StepKind.PATH_EDGE, edge_id)

    @classmethod
    def done(cls) -> "Step":
        return cls(StepKind.DONE)

    @property
    def is_done(self) -> bool:
        return self.kind is StepKind.DONE


def path_steps(nodes: Sequence[str], edges: Sequence[str]) -> Iterator[Step]:
    """
    Interleave a start → end path as node, edge, node, …, node.
    `edges[i]` joins `nodes[i]` and `nodes[i + 1]`.
    """
    for i, node_id in enumerate(nodes):
        yield Step.path_node(node_id)
        if i < len(edges):
            yield Step.path_edge(edges[i])


def visited_nodes(steps: Sequence[Step]) -> List[str]:
    return [s.element_id for s in steps if s.kind is StepKind.VISIT_NODE]


def path_nodes(steps: Sequence[Step]) -> List[str]:
    return [s.element_id for s in steps if s.kind is StepKind.PATH_NODE]


def path_edges(steps: Sequence[Step]) -> List[str]:
    return [s.element_id for s in steps if s.kind is StepKind.PATH_EDGE]
