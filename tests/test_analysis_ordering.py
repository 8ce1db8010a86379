from __future__ import annotations

import pytest

from taskgantt.analysis.ordering import (
    critical_path,
    critical_time,
    order_nodes,
    path_counts,
    sort_by_critical_path,
    sort_by_critical_time,
    sort_by_weight,
)
from taskgantt.errors import CyclicGraphError
from taskgantt.graph.service import GraphService


def _build(weights, edges) -> GraphService:
    service = GraphService()
    for weight in weights:
        service.add_node(weight=weight)
    for source, target in edges:
        service.add_edge(source, target)
    return service


def test_critical_time_of_leaf_is_weight():
    graph = _build([4], []).snapshot()
    assert critical_time(graph) == {0: 4}


def test_critical_time_with_non_negative_children():
    graph = _build([2, 5, 1], [(0, 1), (0, 2)]).snapshot()
    assert critical_time(graph) == {0: 2, 1: 5, 2: 1}


def test_sort_by_critical_time_descending_and_stable():
    graph = _build([1, 3, 3, 2], [(0, 1), (1, 3)]).snapshot()
    ordered = [node.id for node in sort_by_critical_time(graph)]
    assert ordered == [1, 2, 3, 0]

    times = critical_time(graph)
    assert times[ordered[0]] == max(times.values())


def test_path_counts():
    graph = _build([0] * 4, [(0, 1), (1, 2), (0, 3)]).snapshot()
    assert path_counts(graph) == {0: 3, 1: 2, 2: 1, 3: 1}


def test_critical_path_longest_chain():
    graph = _build([0] * 5, [(0, 1), (0, 2), (2, 3), (3, 4)]).snapshot()
    assert critical_path(graph) == [0, 2, 3, 4]


def test_critical_path_tie_keeps_first_discovered():
    graph = _build([0] * 5, [(0, 1), (1, 2), (0, 3), (3, 4)]).snapshot()
    assert critical_path(graph) == [0, 1, 2]


def test_critical_path_explicit_root():
    graph = _build([0] * 4, [(0, 1), (2, 3)]).snapshot()
    assert critical_path(graph, root=2) == [2, 3]


def test_critical_path_empty_graph():
    assert critical_path([]) == []


def test_sort_by_critical_path():
    # Path from node 0 is 0 -> 2 -> 3; node 4 heads a two-node chain, node 1 is a leaf.
    graph = _build([0] * 6, [(0, 1), (0, 2), (2, 3), (4, 5)]).snapshot()
    ordered = [node.id for node in sort_by_critical_path(graph)]
    assert ordered[:3] == [0, 2, 3]
    assert ordered[3] == 4
    assert set(ordered[4:]) == {1, 5}
    assert ordered[4:] == [1, 5]


def test_sort_by_weight_descending_and_stable():
    graph = _build([2, 7, 2, 9], []).snapshot()
    assert [node.id for node in sort_by_weight(graph)] == [3, 1, 0, 2]


@pytest.mark.parametrize("strategy", ["critical_time", "critical_path", "weight"])
def test_order_nodes_is_permutation(strategy):
    graph = _build([3, 1, 4, 1, 5], [(0, 1), (1, 2), (3, 4)]).snapshot()
    order = order_nodes(graph, strategy)
    assert sorted(order) == [0, 1, 2, 3, 4]


def test_order_nodes_unknown_strategy():
    with pytest.raises(ValueError):
        order_nodes([], "alphabetical")


@pytest.mark.parametrize("strategy", ["critical_time", "critical_path"])
def test_cyclic_graph_rejected(strategy):
    graph = _build([1, 1], [(0, 1), (1, 0)]).snapshot()
    with pytest.raises(CyclicGraphError):
        order_nodes(graph, strategy)


def test_weight_sort_allowed_on_cyclic_graph():
    graph = _build([1, 2], [(0, 1), (1, 0)]).snapshot()
    assert order_nodes(graph, "weight") == [1, 0]


def test_sorting_does_not_mutate_graph():
    graph = _build([1, 2, 3], [(0, 1)]).snapshot()
    sort_by_weight(graph)
    sort_by_critical_path(graph)
    assert [node.id for node in graph] == [0, 1, 2]
