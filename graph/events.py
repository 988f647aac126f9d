"""
events.py — Graph Change Events
================================
The Graph publishes one of these after every completed mutation.
Subscribers (the drawable-surface binding, tests) re-render only the
element named in the event.
"""

from dataclasses import dataclass
from typing import Callable, Tuple, Union

from graph.edge import EdgeKind


@dataclass(frozen=True)
class NodeAdded:
    node_id:  str
    position: Tuple[float, float]
    label:    str


@dataclass(frozen=True)
class NodeMoved:
    node_id:  str
    position: Tuple[float, float]


@dataclass(frozen=True)
class NodeRemoved:
    node_id: str


@dataclass(frozen=True)
class EdgeChanged:
    """Emitted when an edge is created, replaced or re-weighted."""
    edge_id:   str
    endpoints: Tuple[str, str]
    kind:      EdgeKind
    weight:    float
    created:   bool = True


@dataclass(frozen=True)
class EdgeRemoved:
    edge_id: str


GraphEvent = Union[NodeAdded, NodeMoved, NodeRemoved, EdgeChanged, EdgeRemoved]
GraphListener = Callable[[GraphEvent], None]
