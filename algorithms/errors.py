class AlgorithmError(Exception):
    """Base class for rejected algorithm runs."""


class NegativeWeight(AlgorithmError):
    """A shortest-path run was requested on a graph holding a negative edge weight."""

    def __init__(self, edge_id: str, weight: float):
        self.edge_id = edge_id
        self.weight = weight
        super().__init__(f"Edge '{edge_id}' has negative weight {weight}; Dijkstra needs weights ≥ 0")


class UnknownAlgorithm(AlgorithmError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown algorithm: {key}")
