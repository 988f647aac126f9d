from enum import Enum
from typing import Optional, Tuple
import uuid


# ---------------------------------------------------------------------------
# Element State Enum: the visual states a surface can show for a node / edge
# ---------------------------------------------------------------------------
class ElementState(Enum):
    DEFAULT  = "default"   # neutral, nothing has touched it
    VISITED  = "visited"   # reached by the running algorithm
    PATH     = "path"      # on the final reconstructed path
    START    = "start"     # start anchor
    END      = "end"       # end anchor


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Immutable identity (id, label), mutable position.

    Attributes:
        id     : Unique identifier (assigned by the Graph, uuid fragment otherwise).
        label  : Human-readable name shown on the canvas.
        x, y   : Canvas coordinates in pixels.
    """

    __slots__ = ("id", "label", "x", "y")

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
        node_id: Optional[str] = None,
    ):
        self.id: str    = node_id or str(uuid.uuid4())[:8]
        self.label: str = label or self.id
        self.x: float   = float(x)
        self.y: float   = float(y)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def distance_to_point(self, x: float, y: float) -> float:
        return ((self.x - x) ** 2 + (self.y - y) ** 2) ** 0.5

    # ------------------------------------------------------------------
    # Serialisation  (JSON snapshot for the web shell)
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     self.x,
            "y":     self.y,
        }

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
