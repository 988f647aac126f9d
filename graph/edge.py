"""
edge.py — Graph Edge
====================
Connects two nodes.  Every edge has a kind chosen from the edge dropdown:

  - UNDIRECTED : traversable both ways, weight fixed at 1
  - DIRECTED   : traversable source → target only, weight fixed at 1
  - WEIGHTED   : traversable both ways, carries an editable weight

Design decisions:
  - `source` and `target` are node-id strings, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - Unweighted kinds still report weight 1 so a weighted algorithm that
    meets them counts one hop per edge.
  - `pair_key` is what the Graph uses to enforce "one edge per endpoint
    pair per kind": ordered for DIRECTED, unordered otherwise.
"""

from enum import Enum
from typing import Optional, Tuple, FrozenSet, Union
import uuid


# ---------------------------------------------------------------------------
# Edge Kind Enum: values match the edge dropdown keys
# ---------------------------------------------------------------------------
class EdgeKind(Enum):
    UNDIRECTED = "undirected"
    DIRECTED   = "directed"
    WEIGHTED   = "weighted"

    @property
    def is_directed(self) -> bool:
        return self is EdgeKind.DIRECTED

    @property
    def is_weighted(self) -> bool:
        return self is EdgeKind.WEIGHTED


UNWEIGHTED_COST = 1.0


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------
class Edge:
    """
    Attributes:
        id      : Unique identifier.
        source  : ID of the tail node.
        target  : ID of the head node.
        kind    : EdgeKind.
        weight  : Traversal cost. Editable only for WEIGHTED edges.
    """

    __slots__ = ("id", "source", "target", "kind", "weight")

    def __init__(
        self,
        source: str,
        target: str,
        kind: EdgeKind = EdgeKind.UNDIRECTED,
        weight: Optional[float] = None,
        edge_id: Optional[str] = None,
    ):
        self.id:     str      = edge_id or str(uuid.uuid4())[:8]
        self.source: str      = source
        self.target: str      = target
        self.kind:   EdgeKind = kind
        if kind.is_weighted and weight is not None:
            self.weight: float = float(weight)
        else:
            self.weight = UNWEIGHTED_COST

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @property
    def directed(self) -> bool:
        return self.kind.is_directed

    @property
    def endpoints(self) -> Tuple[str, str]:
        return (self.source, self.target)

    @property
    def pair_key(self) -> Tuple[EdgeKind, Union[Tuple[str, str], FrozenSet[str]]]:
        if self.directed:
            return (self.kind, (self.source, self.target))
        return (self.kind, frozenset((self.source, self.target)))

    def touches(self, node_id: str) -> bool:
        return node_id == self.source or node_id == self.target

    def other_end(self, node_id: str) -> Optional[str]:
        """Given one endpoint, return the one reachable from it (None if not traversable)."""
        if node_id == self.source:
            return self.target
        if node_id == self.target and not self.directed:
            return self.source
        return None

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":     self.id,
            "source": self.source,
            "target": self.target,
            "kind":   self.kind.value,
            "weight": self.weight,
        }

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        arrow = " → " if self.directed else " ↔ "
        return f"Edge({self.source}{arrow}{self.target}, kind={self.kind.value}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
