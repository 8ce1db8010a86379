from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from taskgantt.analysis.checks import is_acyclic, is_connected
from taskgantt.analysis.ordering import SortStrategy, order_nodes
from taskgantt.graph.types import GraphNode

STRATEGY_LABELS: dict[SortStrategy, str] = {
    "critical_time": "Critical time, descending",
    "critical_path": "Critical path first, then path length descending",
    "weight": "Weight, descending",
}


@dataclass(slots=True)
class GraphSummary:
    acyclic: bool
    connected: bool
    order: list[int]
    note: Optional[str] = None


def summarize_graph(graph: Sequence[GraphNode], strategy: SortStrategy) -> GraphSummary:
    acyclic = is_acyclic(graph)
    connected = is_connected(graph)
    if strategy != "weight" and not acyclic:
        # Critical orderings are undefined on cycles; keep the stored order.
        return GraphSummary(
            acyclic=acyclic,
            connected=connected,
            order=[node.id for node in graph],
            note="Sorting requires an acyclic graph",
        )
    return GraphSummary(acyclic=acyclic, connected=connected, order=order_nodes(graph, strategy))


def format_order(order: Sequence[int]) -> str:
    return ", ".join(str(node_id) for node_id in order)
