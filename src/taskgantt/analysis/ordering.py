from __future__ import annotations

from typing import Callable, Iterable, Literal, Optional, Sequence, TypeVar

from taskgantt.errors import CyclicGraphError
from taskgantt.graph.types import GraphNode

from .checks import index_nodes, is_acyclic, lookup

SortStrategy = Literal["critical_time", "critical_path", "weight"]

SORT_STRATEGIES: tuple[SortStrategy, ...] = ("critical_time", "critical_path", "weight")

T = TypeVar("T")


def critical_time(graph: Sequence[GraphNode]) -> dict[int, float]:
    """time(n) = weight(n) + min(0, min(time(c) for c in children(n)))."""

    _require_acyclic(graph, "critical_time")
    return _fold(graph, lambda node, times: node.weight + min([*times, 0]))


def path_counts(graph: Sequence[GraphNode]) -> dict[int, int]:
    """Number of nodes on the longest chain starting at each node (leaf == 1)."""

    _require_acyclic(graph, "path_counts")
    return _fold(graph, lambda node, counts: 1 + max(counts, default=0))


def critical_path(graph: Sequence[GraphNode], root: Optional[int] = None) -> list[int]:
    """
    Longest node-count path starting at ``root`` (the first node by default).

    Among equally long paths the one met first by a depth-first enumeration of
    children in stored order wins.
    """

    _require_acyclic(graph, "critical_path")
    if not graph:
        return []
    by_id = index_nodes(graph)
    start = graph[0] if root is None else lookup(by_id, root)

    def longest(node: GraphNode, child_paths: list[list[int]]) -> list[int]:
        best: list[int] = []
        for path in child_paths:
            if len(path) > len(best):
                best = path
        return [node.id, *best]

    return _fold(graph, longest, starts=[start])[start.id]


def sort_by_critical_time(graph: Sequence[GraphNode]) -> list[GraphNode]:
    times = critical_time(graph)
    return sorted(graph, key=lambda node: -times[node.id])


def sort_by_critical_path(graph: Sequence[GraphNode], root: Optional[int] = None) -> list[GraphNode]:
    """Critical-path members first in their current order, then the rest by path count descending."""

    on_path = set(critical_path(graph, root))
    counts = path_counts(graph)

    def key(node: GraphNode) -> tuple[int, int]:
        if node.id in on_path:
            return (0, 0)
        return (1, -counts[node.id])

    return sorted(graph, key=key)


def sort_by_weight(graph: Sequence[GraphNode]) -> list[GraphNode]:
    return sorted(graph, key=lambda node: -node.weight)


def order_nodes(
    graph: Sequence[GraphNode], strategy: SortStrategy, root: Optional[int] = None
) -> list[int]:
    if strategy == "critical_time":
        ordered = sort_by_critical_time(graph)
    elif strategy == "critical_path":
        ordered = sort_by_critical_path(graph, root)
    elif strategy == "weight":
        ordered = sort_by_weight(graph)
    else:
        raise ValueError(f"Unknown sort strategy: {strategy}")
    return [node.id for node in ordered]


def _require_acyclic(graph: Sequence[GraphNode], operation: str) -> None:
    if not is_acyclic(graph):
        raise CyclicGraphError(operation)


def _fold(
    graph: Sequence[GraphNode],
    combine: Callable[[GraphNode, list[T]], T],
    starts: Optional[Iterable[GraphNode]] = None,
) -> dict[int, T]:
    # Post-order over an acyclic graph; each node is combined once, after all of its children.
    by_id = index_nodes(graph)
    values: dict[int, T] = {}
    for start in graph if starts is None else starts:
        stack: list[tuple[GraphNode, bool]] = [(start, False)]
        while stack:
            node, expanded = stack.pop()
            if node.id in values:
                continue
            if expanded:
                values[node.id] = combine(node, [values[child_id] for child_id in node.children])
                continue
            stack.append((node, True))
            for child_id in node.children:
                if child_id not in values:
                    stack.append((lookup(by_id, child_id), False))
    return values
