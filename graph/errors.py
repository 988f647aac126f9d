class GraphError(Exception):
    """Base class for rejected graph mutations."""


class InvalidEndpoint(GraphError):
    """An edge was requested between nodes that do not both exist."""

    def __init__(self, source: str, target: str, reason: str = "missing node"):
        self.source = source
        self.target = target
        self.reason = reason
        super().__init__(f"Cannot connect '{source}' → '{target}': {reason}")
