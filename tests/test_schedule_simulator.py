from __future__ import annotations

import logging

import pytest

from taskgantt.errors import EdgeNotFoundError, InvalidWeightError, NodeNotFoundError
from taskgantt.graph.service import GraphService
from taskgantt.graph.types import ChildEdge, GraphNode
from taskgantt.schedule.simulator import ScheduleSimulator, simulate
from taskgantt.schedule.types import GanttCell


def _build(weights, edges) -> GraphService:
    """``edges`` holds (source, target, transfer weight) triples."""

    service = GraphService()
    for weight in weights:
        service.add_node(weight=weight)
    for source, target, weight in edges:
        service.add_edge(source, target)
        service.set_edge_weight(source, target, weight)
    return service


def _compute(task_id: int) -> GanttCell:
    return GanttCell(task_id=task_id, phase="compute")


def _phases(schedule) -> set[str]:
    return {cell.phase for row in schedule.rows for cell in row if cell is not None}


@pytest.mark.parametrize("workers", [0, 1, 3])
def test_empty_graph_produces_no_rows(workers):
    schedule = simulate([], workers)
    assert schedule.rows == []
    assert schedule.stalled is False
    assert schedule.is_complete


def test_single_task_runs_for_its_weight():
    schedule = simulate(_build([5], []).snapshot(), 1)
    assert schedule.rows == [[_compute(0)]] * 5
    assert schedule.makespan == 5
    assert schedule.is_complete


def test_chain_on_one_worker_needs_no_transfer():
    graph = _build([3, 4], [(0, 1, 2)]).snapshot()
    schedule = simulate(graph, 1)

    assert schedule.makespan == 7
    assert schedule.rows[:3] == [[_compute(0)]] * 3
    assert schedule.rows[3:] == [[_compute(1)]] * 4
    assert _phases(schedule) == {"compute"}


def test_independent_tasks_run_in_parallel():
    schedule = simulate(_build([2, 3], []).snapshot(), 2)
    assert schedule.rows == [
        [_compute(0), _compute(1)],
        [_compute(0), _compute(1)],
        [None, _compute(1)],
    ]


def test_diamond_dependencies():
    # 0 -> 1, 0 -> 2, 1 -> 3, 2 -> 3
    graph = _build([1, 2, 2, 1], [(0, 1, 1), (0, 2, 1), (1, 3, 1), (2, 3, 1)]).snapshot()
    simulator = ScheduleSimulator(graph, 2)

    simulator.step()
    assert simulator.done == {0}
    assert [task.id for task in simulator.ready_tasks()] == [1, 2]

    schedule = simulator.run()
    assert schedule.is_complete
    last_b = max(time for time, _, _ in schedule.cells_for(1))
    last_c = max(time for time, _, _ in schedule.cells_for(2))
    first_d = min(time for time, _, _ in schedule.cells_for(3))
    assert first_d > last_b
    assert first_d > last_c


def test_output_moves_between_workers_with_write_then_read():
    # Tasks 0 and 1 finish on different workers; task 2 needs both outputs.
    graph = _build([2, 1, 2], [(0, 2, 1), (1, 2, 3)]).snapshot()
    schedule = simulate(graph, 2)

    write = GanttCell(task_id=1, phase="write")
    read = GanttCell(task_id=1, phase="read")
    assert schedule.rows == [
        [_compute(0), _compute(1)],
        [_compute(0), None],
        [None, write],
        [None, write],
        [None, write],
        [read, None],
        [read, None],
        [read, None],
        [_compute(2), None],
        [_compute(2), None],
    ]
    assert schedule.is_complete


def test_task_never_dispatched_twice():
    graph = _build([2, 1, 2], [(0, 2, 1), (1, 2, 3)]).snapshot()
    schedule = simulate(graph, 2)
    for task_id in (0, 1, 2):
        computes = [cell for cell in schedule.cells_for(task_id) if cell[2] == "compute"]
        workers = {worker for _, worker, _ in computes}
        assert len(workers) == 1


def test_zero_weight_tasks_take_no_rows():
    graph = _build([0, 1], [(0, 1, 0)]).snapshot()
    schedule = simulate(graph, 1)
    assert schedule.rows == [[_compute(1)]]
    assert schedule.cells_for(0) == []
    assert schedule.is_complete


def test_all_zero_weights_complete_immediately():
    schedule = simulate(_build([0, 0], [(0, 1, 0)]).snapshot(), 2)
    assert schedule.rows == []
    assert schedule.stalled is False


def test_no_workers_stalls_with_pending_tasks():
    schedule = simulate(_build([1, 1], []).snapshot(), 0)
    assert schedule.rows == []
    assert schedule.stalled is True
    assert schedule.pending == [0, 1]


def test_cycle_stalls_and_logs(caplog):
    graph = _build([1, 1], [(0, 1, 1), (1, 0, 1)]).snapshot()
    with caplog.at_level(logging.WARNING, logger="taskgantt.schedule.simulator"):
        schedule = simulate(graph, 2)
    assert schedule.stalled is True
    assert schedule.pending == [0, 1]
    assert not schedule.is_complete
    assert "stalled" in caplog.text


def test_step_returns_none_after_finish():
    simulator = ScheduleSimulator(_build([1], []).snapshot(), 1)
    assert simulator.step() == [_compute(0)]
    assert simulator.step() is None
    assert simulator.finished
    assert simulator.step() is None


def test_simulation_is_repeatable():
    graph = _build([2, 1, 2, 3], [(0, 2, 1), (1, 2, 3), (2, 3, 2)]).snapshot()
    assert simulate(graph, 2) == simulate(graph, 2)


def test_input_graph_not_mutated():
    graph = _build([2, 1, 2], [(0, 2, 1), (1, 2, 3)]).snapshot()
    before = repr(graph)
    simulate(graph, 2)
    assert repr(graph) == before


def test_negative_worker_count_rejected():
    with pytest.raises(ValueError):
        ScheduleSimulator([], -1)


def test_fractional_weight_rejected():
    service = _build([1], [])
    service.set_node_weight(0, 1.5)
    with pytest.raises(InvalidWeightError) as excinfo:
        simulate(service.snapshot(), 1)
    assert excinfo.value.node_id == 0


def test_negative_edge_weight_rejected():
    graph = [
        GraphNode(id=0, weight=1, edges=[ChildEdge(target=1, weight=-2)]),
        GraphNode(id=1, weight=1, parents=[0]),
    ]
    with pytest.raises(InvalidWeightError) as excinfo:
        simulate(graph, 1)
    assert excinfo.value.edge == (0, 1)


def test_integral_float_weights_accepted():
    schedule = simulate(_build([2.0], []).snapshot(), 1)
    assert schedule.makespan == 2


def test_inconsistent_parent_link_rejected():
    graph = [GraphNode(id=0, weight=1), GraphNode(id=1, weight=1, parents=[0])]
    with pytest.raises(EdgeNotFoundError):
        simulate(graph, 1)


def test_dangling_child_rejected():
    graph = [GraphNode(id=0, weight=1, edges=[ChildEdge(target=4)])]
    with pytest.raises(NodeNotFoundError):
        simulate(graph, 1)


def _three_into_one() -> list:
    # 0, 1 and 2 all feed 3.
    return _build([1, 2, 1, 1], [(0, 3, 1), (1, 3, 1), (2, 3, 1)]).snapshot()


def test_preferred_worker_holds_fewest_parent_outputs():
    graph = _three_into_one()
    simulator = ScheduleSimulator(graph, 2)
    simulator.workers[0].resident = {0, 1}
    simulator.workers[1].resident = {2}

    assert simulator.preferred_worker(graph[3]) == 1


def test_preferred_worker_ties_go_to_lowest_index():
    graph = _three_into_one()
    simulator = ScheduleSimulator(graph, 2)
    simulator.workers[0].resident = {0}
    simulator.workers[1].resident = {2}

    assert simulator.preferred_worker(graph[3]) == 0


def test_preferred_worker_none_without_resident_parents():
    graph = _three_into_one()
    simulator = ScheduleSimulator(graph, 2)
    assert simulator.preferred_worker(graph[3]) is None


def test_output_bouncing_between_workers_is_detected_as_stall(caplog):
    with caplog.at_level(logging.WARNING, logger="taskgantt.schedule.simulator"):
        schedule = simulate(_three_into_one(), 2)

    assert schedule.rows == [
        [_compute(0), _compute(1)],
        [_compute(2), _compute(1)],
        [GanttCell(task_id=0, phase="write"), None],
        [GanttCell(task_id=0, phase="read"), None],
    ]
    assert schedule.stalled is True
    assert schedule.pending == [3]
    assert "stalled" in caplog.text
