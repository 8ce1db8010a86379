from __future__ import annotations

import copy
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Hashable, Optional, Sequence

from taskgantt.analysis.checks import index_nodes, lookup
from taskgantt.errors import EdgeNotFoundError, InvalidWeightError
from taskgantt.graph.types import GraphNode

from .types import GanttCell, GanttRow, GanttSchedule, Phase

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Activity:
    task_id: int
    phase: Phase
    remaining: int


@dataclass(slots=True)
class WorkerState:
    current: Optional[Activity] = None
    resident: set[int] = field(default_factory=set)

    @property
    def busy(self) -> bool:
        return self.current is not None


class ScheduleSimulator:
    """
    Discrete-time list scheduling of a task graph onto interchangeable workers.

    Each tick the ready tasks (unscheduled, every parent computed) are offered
    front-first to idle workers in index order. A task only runs on a worker
    that holds all of its parents' outputs; missing outputs are moved with a
    ``write`` on the worker that owns them followed by a ``read`` on the worker
    that needs them, each lasting the weight of the connecting edge.

    The input graph is copied and never mutated.
    """

    def __init__(self, graph: Sequence[GraphNode], worker_count: int):
        if worker_count < 0:
            raise ValueError(f"worker_count must be non-negative, got {worker_count}")
        self.worker_count = worker_count
        self._tasks = copy.deepcopy(list(graph))
        self._by_id = index_nodes(self._tasks)
        self._compute_time: dict[int, int] = {}
        self._transfer_time: dict[tuple[int, int], int] = {}
        self._load_durations()

        self.workers = [WorkerState() for _ in range(worker_count)]
        self.scheduled: set[int] = set()
        self.done: set[int] = set()
        self.data: set[int] = set()  # outputs written out and readable by any worker
        self.rows: list[GanttRow] = []
        self.finished = False
        self.stalled = False
        self._seen: set[Hashable] = set()

    def ready_tasks(self) -> list[GraphNode]:
        return [
            task
            for task in self._tasks
            if task.id not in self.scheduled and all(pid in self.done for pid in task.parents)
        ]

    def preferred_worker(self, task: GraphNode) -> Optional[int]:
        """Index of the worker holding the fewest (but at least one) of the task's parent outputs."""

        parents = set(task.parents)
        candidates = [
            (len(worker.resident & parents), index)
            for index, worker in enumerate(self.workers)
            if worker.resident & parents
        ]
        if not candidates:
            return None
        return min(candidates)[1]

    def step(self) -> Optional[GanttRow]:
        """Advance one tick; returns the recorded row, or None once the run is over."""

        if self.finished:
            return None
        if not self._settle():
            return self._stop(stalled=True)
        if not any(worker.busy for worker in self.workers):
            return self._stop(stalled=len(self.done) < len(self._tasks))

        state = self._fingerprint()
        if state in self._seen:
            return self._stop(stalled=True)
        self._seen.add(state)

        row = self._record()
        self.rows.append(row)
        self._advance()
        return row

    def run(self) -> GanttSchedule:
        while self.step() is not None:
            pass
        return GanttSchedule(
            worker_count=self.worker_count,
            rows=list(self.rows),
            stalled=self.stalled,
            pending=[task.id for task in self._tasks if task.id not in self.done],
        )

    # Assignment
    def _settle(self) -> bool:
        # Zero-length phases finish as they start, which can unblock more work in the same tick.
        seen: set[Hashable] = set()
        while self._assign():
            state = self._fingerprint()
            if state in seen:
                return False
            seen.add(state)
        return True

    def _assign(self) -> bool:
        ready = deque(self.ready_tasks())
        preferences = {task.id: self.preferred_worker(task) for task in ready}
        instant = False

        for index, worker in enumerate(self.workers):
            if worker.busy:
                continue
            if not ready:
                break
            task = ready[0]
            preferred = preferences[task.id]
            if preferred is not None and preferred != index:
                continue

            missing = [pid for pid in task.parents if pid not in worker.resident]
            if missing:
                instant |= self._fetch(index, task, missing)
                continue

            ready.popleft()
            self.scheduled.add(task.id)
            worker.resident.add(task.id)
            instant |= self._start(index, task.id, "compute", self._compute_time[task.id])

        return instant

    def _fetch(self, index: int, task: GraphNode, missing: list[int]) -> bool:
        worker = self.workers[index]
        instant = False
        for parent_id in missing:
            duration = self._transfer_time[(parent_id, task.id)]
            owner = self._owner_of(parent_id)
            if owner is None:
                if parent_id not in self.data:
                    continue  # write-out still in progress
                worker.resident.add(parent_id)
                instant |= self._start(index, parent_id, "read", duration)
                break

            owner_state = self.workers[owner]
            if owner_state.busy:
                continue
            owner_state.resident.discard(parent_id)
            instant |= self._start(owner, parent_id, "write", duration)
        return instant

    def _owner_of(self, task_id: int) -> Optional[int]:
        for index, worker in enumerate(self.workers):
            if task_id in worker.resident:
                return index
        return None

    def _start(self, index: int, task_id: int, phase: Phase, duration: int) -> bool:
        if duration == 0:
            self._complete(task_id, phase)
            return True
        self.workers[index].current = Activity(task_id=task_id, phase=phase, remaining=duration)
        return False

    def _complete(self, task_id: int, phase: Phase) -> None:
        if phase == "compute":
            self.done.add(task_id)
        elif phase == "write":
            self.data.add(task_id)
        else:
            self.data.discard(task_id)

    # Time
    def _record(self) -> GanttRow:
        return [
            GanttCell(task_id=worker.current.task_id, phase=worker.current.phase)
            if worker.current
            else None
            for worker in self.workers
        ]

    def _advance(self) -> None:
        for worker in self.workers:
            activity = worker.current
            if activity is None:
                continue
            activity.remaining -= 1
            if activity.remaining <= 0:
                worker.current = None
                self._complete(activity.task_id, activity.phase)

    def _stop(self, *, stalled: bool) -> None:
        self.finished = True
        self.stalled = stalled
        if stalled:
            pending = [task.id for task in self._tasks if task.id not in self.done]
            logger.warning(
                "Simulation stalled after %d ticks with %d workers; pending tasks: %s",
                len(self.rows),
                self.worker_count,
                pending,
            )
        else:
            logger.debug("Simulation finished after %d ticks", len(self.rows))
        return None

    def _fingerprint(self) -> Hashable:
        workers = tuple(
            (
                (worker.current.task_id, worker.current.phase, worker.current.remaining)
                if worker.current
                else None,
                frozenset(worker.resident),
            )
            for worker in self.workers
        )
        return (frozenset(self.scheduled), frozenset(self.done), frozenset(self.data), workers)

    def _load_durations(self) -> None:
        for task in self._tasks:
            self._compute_time[task.id] = _duration(task.weight, node_id=task.id)
            for edge in task.edges:
                lookup(self._by_id, edge.target)
                self._transfer_time[(task.id, edge.target)] = _duration(
                    edge.weight, edge=(task.id, edge.target)
                )
        for task in self._tasks:
            for parent_id in task.parents:
                lookup(self._by_id, parent_id)
                if (parent_id, task.id) not in self._transfer_time:
                    raise EdgeNotFoundError(parent_id, task.id)


def simulate(graph: Sequence[GraphNode], worker_count: int) -> GanttSchedule:
    """Run the scheduler to completion (or to a detected stall)."""

    return ScheduleSimulator(graph, worker_count).run()


def _duration(value: object, *, node_id: Optional[int] = None, edge: Optional[tuple[int, int]] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidWeightError(value, node_id=node_id, edge=edge)
    if isinstance(value, float) and not value.is_integer():
        raise InvalidWeightError(value, node_id=node_id, edge=edge)
    if value < 0:
        raise InvalidWeightError(value, node_id=node_id, edge=edge)
    return int(value)
