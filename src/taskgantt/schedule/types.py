from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

Phase = Literal["compute", "read", "write"]


@dataclass(slots=True, frozen=True)
class GanttCell:
    """What one worker is doing during one time step."""

    task_id: int
    phase: Phase


GanttRow = list[Optional[GanttCell]]


@dataclass(slots=True)
class GanttSchedule:
    """Time-indexed occupancy table produced by a simulation run."""

    worker_count: int
    rows: list[GanttRow] = field(default_factory=list)
    stalled: bool = False
    pending: list[int] = field(default_factory=list)

    @property
    def makespan(self) -> int:
        return len(self.rows)

    @property
    def is_complete(self) -> bool:
        return not self.stalled and not self.pending

    def cells_for(self, task_id: int) -> list[tuple[int, int, Phase]]:
        """(time, worker, phase) triples in which ``task_id`` occupies a worker."""

        found = []
        for time, row in enumerate(self.rows):
            for worker, cell in enumerate(row):
                if cell is not None and cell.task_id == task_id:
                    found.append((time, worker, cell.phase))
        return found
