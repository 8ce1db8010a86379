from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from taskgantt.errors import NodeNotFoundError
from taskgantt.graph.types import GraphNode


@dataclass(slots=True)
class GraphCheck:
    acyclic: bool
    connected: bool


def check_graph(graph: Sequence[GraphNode]) -> GraphCheck:
    """Flags published to the editing surface after every mutation."""

    return GraphCheck(acyclic=is_acyclic(graph), connected=is_connected(graph))


def index_nodes(graph: Sequence[GraphNode]) -> dict[int, GraphNode]:
    return {node.id: node for node in graph}


def lookup(by_id: dict[int, GraphNode], node_id: int) -> GraphNode:
    node = by_id.get(node_id)
    if node is None:
        raise NodeNotFoundError(node_id)
    return node


def is_acyclic(graph: Sequence[GraphNode]) -> bool:
    """
    True when no chain of children links leads from a node back to itself.

    Every node is used as a starting point so disconnected components are
    covered. Nodes whose descendants were fully explored are remembered and
    never re-entered; ``on_path`` holds the current descent. The walk uses an
    explicit stack, so depth is bounded by graph size rather than the
    interpreter recursion limit.
    """

    by_id = index_nodes(graph)
    proven: set[int] = set()

    for start in graph:
        if start.id in proven:
            continue
        on_path = {start.id}
        stack: list[tuple[GraphNode, Iterator[int]]] = [(start, iter(start.children))]
        while stack:
            node, children = stack[-1]
            for child_id in children:
                if child_id in on_path:
                    return False
                if child_id in proven:
                    continue
                child = lookup(by_id, child_id)
                on_path.add(child_id)
                stack.append((child, iter(child.children)))
                break
            else:
                stack.pop()
                on_path.discard(node.id)
                proven.add(node.id)
    return True


def is_connected(graph: Sequence[GraphNode], root: Optional[int] = None) -> bool:
    """True when one walk over children and parents reaches every node."""

    if not graph:
        return True
    start = graph[0].id if root is None else root
    visited = depth_first_search(graph, start)
    return len(visited) == len(graph)


def depth_first_search(
    graph: Sequence[GraphNode], start: int, visited: Optional[set[int]] = None
) -> set[int]:
    """Undirected walk from ``start``; returns the ids reached."""

    by_id = index_nodes(graph)
    visited = visited if visited is not None else set()
    stack = [lookup(by_id, start)]
    while stack:
        node = stack.pop()
        if node.id in visited:
            continue
        visited.add(node.id)
        # Reverse so children are explored in stored order.
        neighbors = list(node.children) + list(node.parents)
        for neighbor_id in reversed(neighbors):
            if neighbor_id not in visited:
                stack.append(lookup(by_id, neighbor_id))
    return visited
