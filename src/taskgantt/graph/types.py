from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from taskgantt.errors import EdgeNotFoundError

Weight = Union[int, float]


@dataclass(slots=True)
class ChildEdge:
    target: int
    weight: Weight = 0
    seq: int = 0  # graph-wide insertion order; shared by both halves of an undirected edge


@dataclass(slots=True)
class GraphNode:
    id: int
    weight: Weight = 0
    edges: list[ChildEdge] = field(default_factory=list)
    parents: list[int] = field(default_factory=list)

    @property
    def children(self) -> list[int]:
        return [edge.target for edge in self.edges]

    @property
    def edge_weights(self) -> list[Weight]:
        return [edge.weight for edge in self.edges]

    def edge_to(self, child_id: int) -> ChildEdge:
        for edge in self.edges:
            if edge.target == child_id:
                return edge
        raise EdgeNotFoundError(self.id, child_id)

    def weight_to(self, child_id: int) -> Weight:
        return self.edge_to(child_id).weight

    def has_child(self, child_id: int) -> bool:
        return any(edge.target == child_id for edge in self.edges)


Graph = list[GraphNode]


@dataclass(slots=True)
class GraphEdge:
    source: int
    target: int
    weight: Weight
