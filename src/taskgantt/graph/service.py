from __future__ import annotations

import copy
import itertools
import logging
import math
from typing import Optional

from taskgantt.errors import (
    DuplicateEdgeError,
    DuplicateNodeError,
    EdgeNotFoundError,
    InvalidWeightError,
    NodeNotFoundError,
)

from .ids import IdAllocator
from .types import ChildEdge, Graph, GraphEdge, GraphNode, Weight

logger = logging.getLogger(__name__)


class GraphService:
    """Authoritative API for task graph mutations and queries."""

    def __init__(self, allocator: Optional[IdAllocator] = None, *, directed: bool = True):
        self.allocator = allocator or IdAllocator()
        self.directed = directed
        self._nodes: list[GraphNode] = []
        self._by_id: dict[int, GraphNode] = {}
        self._edge_seq = itertools.count()

    def __len__(self) -> int:
        return len(self._nodes)

    # Node operations
    def add_node(self, node_id: Optional[int] = None, weight: Weight = 0) -> GraphNode:
        _check_weight(weight, node_id=node_id)
        if node_id is None:
            node_id = self.allocator.allocate()
            while node_id in self._by_id:
                node_id = self.allocator.allocate()
        elif node_id in self._by_id:
            raise DuplicateNodeError(node_id)
        else:
            self.allocator.reserve(node_id)

        node = GraphNode(id=node_id, weight=weight)
        self._nodes.append(node)
        self._by_id[node_id] = node
        logger.debug("Added node %s", node_id)
        return node

    def remove_node(self, node_id: int) -> None:
        node = self.require_node(node_id)
        for other in self._nodes:
            if other is node:
                continue
            other.edges = [edge for edge in other.edges if edge.target != node_id]
            other.parents = [pid for pid in other.parents if pid != node_id]
        self._nodes.remove(node)
        del self._by_id[node_id]
        logger.debug("Removed node %s", node_id)

    def set_node_weight(self, node_id: int, weight: Weight) -> GraphNode:
        _check_weight(weight, node_id=node_id)
        node = self.require_node(node_id)
        node.weight = weight
        return node

    def get_node(self, node_id: int) -> Optional[GraphNode]:
        return self._by_id.get(node_id)

    def require_node(self, node_id: int) -> GraphNode:
        node = self._by_id.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def list_nodes(self) -> list[GraphNode]:
        return list(self._nodes)

    # Edge operations
    def add_edge(self, source: int, target: int, directed: Optional[bool] = None) -> GraphEdge:
        directed = self.directed if directed is None else directed
        source_node = self.require_node(source)
        target_node = self.require_node(target)
        mirror = not directed and source != target

        if source_node.has_child(target):
            raise DuplicateEdgeError(source, target)
        if mirror and target_node.has_child(source):
            raise DuplicateEdgeError(target, source)

        seq = next(self._edge_seq)
        source_node.edges.append(ChildEdge(target=target, seq=seq))
        target_node.parents.append(source)
        if mirror:
            target_node.edges.append(ChildEdge(target=source, seq=seq))
            source_node.parents.append(target)

        logger.debug("Added edge %s->%s (directed=%s)", source, target, directed)
        return GraphEdge(source=source, target=target, weight=0)

    def remove_edge(self, source: int, target: int, directed: Optional[bool] = None) -> None:
        directed = self.directed if directed is None else directed
        source_node = self.require_node(source)
        target_node = self.require_node(target)

        _unlink(source_node, target_node)
        if not directed and source != target and target_node.has_child(source):
            _unlink(target_node, source_node)
        logger.debug("Removed edge %s->%s (directed=%s)", source, target, directed)

    def set_edge_weight(self, source: int, target: int, weight: Weight) -> GraphEdge:
        _check_weight(weight, edge=(source, target))
        source_node = self.require_node(source)
        target_node = self.require_node(target)
        edge = source_node.edge_to(target)
        edge.weight = weight

        # Mirrored halves share the insertion sequence.
        for back in target_node.edges:
            if back.target == source and back.seq == edge.seq and back is not edge:
                back.weight = weight
        return GraphEdge(source=source, target=target, weight=weight)

    def get_edge(self, source: int, target: int) -> Optional[GraphEdge]:
        node = self._by_id.get(source)
        if node is None or not node.has_child(target):
            return None
        return GraphEdge(source=source, target=target, weight=node.weight_to(target))

    def list_edges(self) -> list[GraphEdge]:
        """Each stored edge once, in insertion order; undirected halves are collapsed."""

        return [edge for edge, _mirrored in self.list_edges_with_mirror()]

    def list_edges_with_mirror(self) -> list[tuple[GraphEdge, bool]]:
        halves: list[tuple[int, int, GraphNode, ChildEdge]] = []
        for position, node in enumerate(self._nodes):
            for edge in node.edges:
                halves.append((edge.seq, position, node, edge))
        halves.sort(key=lambda item: (item[0], item[1]))

        seq_counts: dict[int, int] = {}
        for seq, *_ in halves:
            seq_counts[seq] = seq_counts.get(seq, 0) + 1

        seen: set[int] = set()
        result: list[tuple[GraphEdge, bool]] = []
        for seq, _position, node, edge in halves:
            if seq in seen:
                continue
            seen.add(seq)
            result.append(
                (GraphEdge(source=node.id, target=edge.target, weight=edge.weight), seq_counts[seq] > 1)
            )
        return result

    # Whole graph
    def snapshot(self) -> Graph:
        """Deep copy of the graph for analyzers and the simulator."""

        return copy.deepcopy(self._nodes)

    def clear(self) -> None:
        self._nodes = []
        self._by_id = {}
        logger.debug("Cleared graph")


def _unlink(source_node: GraphNode, target_node: GraphNode) -> None:
    for index, edge in enumerate(source_node.edges):
        if edge.target == target_node.id:
            del source_node.edges[index]
            break
    else:
        raise EdgeNotFoundError(source_node.id, target_node.id)
    target_node.parents.remove(source_node.id)


def _check_weight(weight: object, *, node_id: Optional[int] = None, edge: Optional[tuple[int, int]] = None) -> None:
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise InvalidWeightError(weight, node_id=node_id, edge=edge)
    if not math.isfinite(weight) or weight < 0:
        raise InvalidWeightError(weight, node_id=node_id, edge=edge)
