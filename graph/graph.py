"""
graph.py — Graph Container
===========================
Single source of truth for the graph.  The editor mutates it, the
algorithms read it, and the drawable surface hears about every change
through subscribed listeners.

Responsibilities:
  1. CRUD on nodes & edges                  (add / move / delete, add-or-replace)
  2. Adjacency queries                      (neighbors, in insertion order)
  3. Hit testing for the pointer tools      (node_at, edge_at)
  4. Change notification                    (subscribe → GraphEvent)

Design decisions:
  - Nodes & edges stored in plain dicts keyed by id for O(1) lookup;
    dict order doubles as insertion order, which every algorithm uses
    as its tie-break.
  - A separate adjacency dict `_adj[node_id] → [edge_id, …]` is
    maintained incrementally so neighbour queries are O(degree).
    Directed edges are listed only under their source.
  - `_pairs[pair_key] → edge_id` enforces "one edge per endpoint pair
    per kind"; re-adding re-weights the existing edge in place.
  - Events fire after the mutation is complete, so a listener always
    sees a consistent graph.  Node deletion reports each cascaded edge
    removal before the node removal.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from graph.node import Node
from graph.edge import Edge, EdgeKind
from graph.errors import InvalidEndpoint
from graph.events import (
    GraphEvent, GraphListener,
    NodeAdded, NodeMoved, NodeRemoved, EdgeChanged, EdgeRemoved,
)

logger = logging.getLogger(__name__)

Neighbor = Tuple[str, str, float]    # (edge_id, other_node_id, weight)


class Graph:
    """
    Attributes:
        nodes  : {node_id: Node}
        edges  : {edge_id: Edge}
        _adj   : {node_id: [edge_id, …]}
        _pairs : {pair_key: edge_id}
    """

    def __init__(self):
        self.nodes:  Dict[str, Node] = {}
        self.edges:  Dict[str, Edge] = {}
        self._adj:   Dict[str, List[str]] = {}
        self._pairs: Dict[tuple, str] = {}
        self._listeners: List[GraphListener] = []
        self._next_node: int = 0
        self._next_edge: int = 0

    # ==================================================================
    # SUBSCRIPTION
    # ==================================================================
    def subscribe(self, listener: GraphListener) -> Callable[[], None]:
        """Register a change listener.  Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: GraphEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, x: float, y: float, label: Optional[str] = None) -> Node:
        seq = self._next_node
        self._next_node += 1
        node = Node(x=x, y=y, label=label or str(seq + 1), node_id=f"n{seq}")
        self.nodes[node.id] = node
        self._adj[node.id] = []
        logger.debug("added node %s at (%.1f, %.1f)", node.id, node.x, node.y)
        self._emit(NodeAdded(node.id, node.position, node.label))
        return node

    def move_node(self, node_id: str, x: float, y: float) -> None:
        node = self.nodes.get(node_id)
        if node is None:
            return
        node.move_to(x, y)
        self._emit(NodeMoved(node.id, node.position))

    def delete_node(self, node_id: str) -> None:
        if node_id not in self.nodes:
            return
        # remove every edge touching this node, including directed edges
        # that point at it and therefore are not in its adjacency list
        incident = [eid for eid, e in self.edges.items() if e.touches(node_id)]
        for eid in incident:
            self.delete_edge(eid)
        del self.nodes[node_id]
        self._adj.pop(node_id, None)
        logger.debug("deleted node %s (%d incident edge(s))", node_id, len(incident))
        self._emit(NodeRemoved(node_id))

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_or_replace_edge(
        self,
        source: str,
        target: str,
        kind: EdgeKind,
        weight: Optional[float] = None,
    ) -> Edge:
        if source not in self.nodes or target not in self.nodes:
            raise InvalidEndpoint(source, target)
        if source == target:
            raise InvalidEndpoint(source, target, reason="self-loops are not allowed")

        probe = Edge(source, target, kind=kind, weight=weight, edge_id="probe")
        existing_id = self._pairs.get(probe.pair_key)
        if existing_id is not None:
            edge = self.edges[existing_id]
            edge.weight = probe.weight
            logger.debug("replaced edge %s (w=%s)", edge.id, edge.weight)
            self._emit(EdgeChanged(edge.id, edge.endpoints, edge.kind, edge.weight, created=False))
            return edge

        edge = Edge(source, target, kind=kind, weight=weight, edge_id=f"e{self._next_edge}")
        self._next_edge += 1
        self.edges[edge.id] = edge
        self._pairs[edge.pair_key] = edge.id
        self._adj[source].append(edge.id)
        if not edge.directed:
            self._adj[target].append(edge.id)
        logger.debug("added %r", edge)
        self._emit(EdgeChanged(edge.id, edge.endpoints, edge.kind, edge.weight, created=True))
        return edge

    def set_edge_weight(self, edge_id: str, weight: float) -> Optional[Edge]:
        """Edit-edge primitive.  Only weighted edges carry an editable weight."""
        edge = self.edges.get(edge_id)
        if edge is None or not edge.kind.is_weighted:
            return None
        edge.weight = float(weight)
        self._emit(EdgeChanged(edge.id, edge.endpoints, edge.kind, edge.weight, created=False))
        return edge

    def delete_edge(self, edge_id: str) -> None:
        edge = self.edges.pop(edge_id, None)
        if edge is None:
            return
        for endpoint in edge.endpoints:
            adj = self._adj.get(endpoint)
            if adj and edge_id in adj:
                adj.remove(edge_id)
        self._pairs.pop(edge.pair_key, None)
        self._emit(EdgeRemoved(edge_id))

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self.edges.get(edge_id)

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbors(self, node_id: str) -> List[Neighbor]:
        """Return [(edge_id, neighbour_id, weight)] in edge insertion order."""
        result = []
        for eid in self._adj.get(node_id, []):
            edge = self.edges[eid]
            other = edge.other_end(node_id)
            if other is not None:
                result.append((eid, other, edge.weight))
        return result

    # ==================================================================
    # HIT TESTING
    # ==================================================================
    def node_at(self, x: float, y: float, radius: float) -> Optional[Node]:
        """Closest node whose centre lies within `radius` of (x, y)."""
        best, best_d = None, radius
        for node in self.nodes.values():
            d = node.distance_to_point(x, y)
            if d <= best_d and (best is None or d < best_d):
                best, best_d = node, d
        return best

    def edge_at(self, x: float, y: float, tolerance: float) -> Optional[Edge]:
        """Closest edge segment within `tolerance` of (x, y)."""
        best, best_d = None, tolerance
        for edge in self.edges.values():
            a = self.nodes[edge.source]
            b = self.nodes[edge.target]
            d = _point_segment_distance(x, y, a.x, a.y, b.x, b.y)
            if d <= best_d and (best is None or d < best_d):
                best, best_d = edge, d
        return best

    # ==================================================================
    # RESET / SNAPSHOT
    # ==================================================================
    def clear(self) -> None:
        """Remove everything, reporting each removal to the listeners."""
        for eid in list(self.edges):
            self.delete_edge(eid)
        for nid in list(self.nodes):
            self.delete_node(nid)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "edges": [e.to_dict() for e in self.edges.values()],
        }

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def node_ids(self) -> List[str]:
        return list(self.nodes.keys())

    def edge_ids(self) -> List[str]:
        return list(self.edges.keys())

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()})"


def _point_segment_distance(px: float, py: float, ax: float, ay: float, bx: float, by: float) -> float:
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return ((px - ax) ** 2 + (py - ay) ** 2) ** 0.5
    t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / length_sq))
    cx, cy = ax + t * dx, ay + t * dy
    return ((px - cx) ** 2 + (py - cy) ** 2) ** 0.5
