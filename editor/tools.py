"""
tools.py — Editing Tools & Algorithm Selection
===============================================
`Tool` lists the mutually exclusive interaction modes.  The controller
holds a single `Optional[Tool]` (None = idle), so two tools can never
be active at once; `tool_flags()` renders that value as the boolean
map the control panel highlights its buttons from.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Tool(Enum):
    DRAW_NODE         = "draw_node"
    MOVE_NODE         = "move_node"
    DELETE_NODE       = "delete_node"
    RESET             = "reset"
    EDIT_EDGE         = "edit_edge"
    DELETE_EDGE       = "delete_edge"
    SELECT_START_NODE = "select_start_node"
    SELECT_END_NODE   = "select_end_node"


def tool_flags(active: Optional[Tool]) -> Dict[str, bool]:
    """{tool_name: is_active} for every tool — at most one True."""
    return {tool.value: tool is active for tool in Tool}


@dataclass
class AlgorithmSelection:
    """
    The algorithm dropdown plus the anchors picked for it.

    Attributes:
        key     : registry key, None while the "Select Algorithm" placeholder shows.
        anchors : how many nodes the algorithm needs (1 = start, 2 = start + end).
        start   : picked start node id.
        end     : picked end node id.
    """

    key:     Optional[str] = None
    anchors: int = 0
    start:   Optional[str] = None
    end:     Optional[str] = None

    def choose(self, key: str, anchors: int) -> None:
        self.key, self.anchors = key, anchors
        self.start = self.end = None

    def clear(self) -> None:
        self.key, self.anchors = None, 0
        self.start = self.end = None

    def forget_node(self, node_id: str) -> None:
        if self.start == node_id:
            self.start = None
        if self.end == node_id:
            self.end = None

    @property
    def is_selected(self) -> bool:
        return self.key is not None

    @property
    def complete(self) -> bool:
        if self.key is None or self.start is None:
            return False
        return self.anchors < 2 or self.end is not None

    def to_dict(self) -> dict:
        return {"algorithm": self.key, "anchors": self.anchors, "start": self.start, "end": self.end}
