"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge, EdgeKind, ElementState
    from graph import InvalidEndpoint
    from graph.events import NodeAdded, EdgeChanged, …
"""

from graph.node   import Node,  ElementState
from graph.edge   import Edge,  EdgeKind
from graph.errors import GraphError, InvalidEndpoint
from graph.graph  import Graph

__all__ = [
    "Node",       "ElementState",
    "Edge",       "EdgeKind",
    "GraphError", "InvalidEndpoint",
    "Graph",
]
