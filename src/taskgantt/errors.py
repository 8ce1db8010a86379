from __future__ import annotations

from typing import Optional


class GraphError(ValueError):
    """Base class for task graph contract violations."""


class NodeNotFoundError(GraphError):
    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"Node not found for id={node_id}")


class DuplicateNodeError(GraphError):
    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"Node already exists for id={node_id}")


class EdgeNotFoundError(GraphError):
    def __init__(self, source: int, target: int):
        self.source = source
        self.target = target
        super().__init__(f"Edge not found for {source}->{target}")


class DuplicateEdgeError(GraphError):
    def __init__(self, source: int, target: int):
        self.source = source
        self.target = target
        super().__init__(f"Edge already exists for {source}->{target}")


class InvalidWeightError(GraphError):
    def __init__(self, weight: object, *, node_id: Optional[int] = None, edge: Optional[tuple[int, int]] = None):
        self.weight = weight
        self.node_id = node_id
        self.edge = edge
        if edge is not None:
            where = f"edge {edge[0]}->{edge[1]}"
        elif node_id is not None:
            where = f"node {node_id}"
        else:
            where = "graph"
        super().__init__(f"Invalid weight {weight!r} on {where}")


class CyclicGraphError(GraphError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} requires an acyclic graph")
