from __future__ import annotations

import logging
from typing import Optional

from PySide6 import QtWidgets

from taskgantt.errors import GraphError
from taskgantt.graph.service import GraphService
from taskgantt.schedule.report import build_schedule_table
from taskgantt.schedule.simulator import simulate
from taskgantt.schedule.types import GanttSchedule

logger = logging.getLogger(__name__)


class ScheduleView(QtWidgets.QWidget):
    """Read-only Gantt table for the current graph."""

    def __init__(
        self,
        graph_service: GraphService,
        worker_count: int = 2,
        parent: QtWidgets.QWidget | None = None,
    ):
        super().__init__(parent)
        self.graph_service = graph_service
        self.schedule: Optional[GanttSchedule] = None

        self.workers_spin = QtWidgets.QSpinBox()
        self.workers_spin.setRange(0, 64)
        self.workers_spin.setValue(worker_count)
        self.status_label = QtWidgets.QLabel()

        self.table = QtWidgets.QTableWidget(0, 0)
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)

        controls = QtWidgets.QHBoxLayout()
        controls.addWidget(QtWidgets.QLabel("Workers:"))
        controls.addWidget(self.workers_spin)
        controls.addWidget(self.status_label)
        controls.addStretch(1)

        layout = QtWidgets.QVBoxLayout(self)
        layout.addLayout(controls)
        layout.addWidget(self.table)

        self.workers_spin.valueChanged.connect(lambda _value: self.refresh())

    def refresh(self) -> None:
        try:
            self.schedule = simulate(self.graph_service.snapshot(), self.workers_spin.value())
        except GraphError as exc:
            logger.warning("Cannot simulate graph: %s", exc)
            self.schedule = None
            self.table.setRowCount(0)
            self.table.setColumnCount(0)
            self.status_label.setText(str(exc))
            return

        header, body = build_schedule_table(self.schedule)
        self.table.setColumnCount(len(header))
        self.table.setHorizontalHeaderLabels(header)
        self.table.setRowCount(len(body))
        for row_idx, row in enumerate(body):
            for col_idx, text in enumerate(row):
                self.table.setItem(row_idx, col_idx, QtWidgets.QTableWidgetItem(text))

        if self.schedule.stalled:
            pending = ", ".join(str(t) for t in self.schedule.pending)
            self.status_label.setText(f"Stalled; pending tasks: {pending}")
        else:
            self.status_label.setText(f"Makespan: {self.schedule.makespan}")
