"""
surface.py — Drawable Surface
==============================
The write-only command sink the core draws on.  The core never reads
geometry back from a surface; it only issues these five commands:

    render_node(id, position, style)
    render_edge(id, endpoints, kind, weight, style)
    remove_node(id)
    remove_edge(id)
    set_element_state(id, state)

`CommandSurface` buffers the commands as JSON-ready dicts so the web
shell can ship them to the browser on the next poll (and tests can
inspect exactly what was drawn).

`bind_graph()` subscribes a surface to a Graph's change events, so every
mutation re-renders the affected element only.
"""

import logging
from typing import Callable, Dict, List, Tuple

from graph import Graph, EdgeKind, ElementState
from graph.events import (
    GraphEvent, NodeAdded, NodeMoved, NodeRemoved, EdgeChanged, EdgeRemoved,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------
class DrawableSurface:
    """Base class.  Concrete surfaces override every command."""

    def render_node(self, node_id: str, position: Tuple[float, float], style: Dict[str, str]) -> None:
        raise NotImplementedError

    def render_edge(
        self,
        edge_id: str,
        endpoints: Tuple[str, str],
        kind: EdgeKind,
        weight: float,
        style: Dict[str, str],
    ) -> None:
        raise NotImplementedError

    def remove_node(self, node_id: str) -> None:
        raise NotImplementedError

    def remove_edge(self, edge_id: str) -> None:
        raise NotImplementedError

    def set_element_state(self, element_id: str, state: ElementState) -> None:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Buffering implementation
# ---------------------------------------------------------------------------
class CommandSurface(DrawableSurface):
    """
    Attributes:
        commands       : every command issued since the last drain(), oldest first.
        element_states : latest state per element id (for redrawing a fresh page).
    """

    def __init__(self):
        self.commands: List[dict] = []
        self.element_states: Dict[str, ElementState] = {}

    def render_node(self, node_id, position, style):
        if "state" in style:
            self.element_states[node_id] = ElementState(style["state"])
        self.commands.append({"op": "render_node", "id": node_id, "position": list(position), "style": dict(style)})

    def render_edge(self, edge_id, endpoints, kind, weight, style):
        if "state" in style:
            self.element_states[edge_id] = ElementState(style["state"])
        self.commands.append({
            "op":        "render_edge",
            "id":        edge_id,
            "endpoints": list(endpoints),
            "kind":      kind.value,
            "weight":    weight,
            "style":     dict(style),
        })

    def remove_node(self, node_id):
        self.element_states.pop(node_id, None)
        self.commands.append({"op": "remove_node", "id": node_id})

    def remove_edge(self, edge_id):
        self.element_states.pop(edge_id, None)
        self.commands.append({"op": "remove_edge", "id": edge_id})

    def set_element_state(self, element_id, state):
        self.element_states[element_id] = state
        self.commands.append({"op": "set_state", "id": element_id, "state": state.value})

    def drain(self) -> List[dict]:
        """Hand over the buffered commands and start a fresh buffer."""
        out, self.commands = self.commands, []
        return out

    def states(self) -> List[Tuple[str, str]]:
        """(id, state) for every buffered set_state command — handy in tests."""
        return [(c["id"], c["state"]) for c in self.commands if c["op"] == "set_state"]


# ---------------------------------------------------------------------------
# Graph → surface binding
# ---------------------------------------------------------------------------
def bind_graph(graph: Graph, surface: DrawableSurface) -> Callable[[], None]:
    """
    Forward every graph change event to `surface` as the matching command.
    Returns the unsubscribe callable.
    """

    def on_event(event: GraphEvent) -> None:
        if isinstance(event, NodeAdded):
            surface.render_node(event.node_id, event.position, {"label": event.label, "state": ElementState.DEFAULT.value})
        elif isinstance(event, NodeMoved):
            node = graph.get_node(event.node_id)
            label = node.label if node else event.node_id
            surface.render_node(event.node_id, event.position, {"label": label})
        elif isinstance(event, NodeRemoved):
            surface.remove_node(event.node_id)
        elif isinstance(event, EdgeChanged):
            style = {"state": ElementState.DEFAULT.value} if event.created else {}
            surface.render_edge(event.edge_id, event.endpoints, event.kind, event.weight, style)
        elif isinstance(event, EdgeRemoved):
            surface.remove_edge(event.edge_id)
        else:
            logger.warning("unhandled graph event %r", event)

    return graph.subscribe(on_event)

