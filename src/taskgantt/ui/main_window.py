from __future__ import annotations

import logging
from pathlib import Path

from PySide6 import QtWidgets

from taskgantt.document.exporter import export_graph
from taskgantt.document.importer import import_graph
from taskgantt.document.validation_types import ValidationResult
from taskgantt.errors import GraphError
from taskgantt.graph.service import GraphService
from taskgantt.settings import Settings

from .views.analysis_view import AnalysisView
from .views.schedule_view import ScheduleView

logger = logging.getLogger(__name__)

MAX_ID = 1_000_000
MAX_WEIGHT = 1_000_000


class MainWindow(QtWidgets.QMainWindow):
    """Task graph editing buttons over analysis and schedule tabs."""

    def __init__(self, graph_service: GraphService, settings: Settings | None = None):
        super().__init__()
        settings = settings or Settings()
        self.graph_service = graph_service
        self.setWindowTitle("Task Gantt")

        self.analysis_view = AnalysisView(graph_service, strategy=settings.sort_strategy, parent=self)
        self.schedule_view = ScheduleView(graph_service, worker_count=settings.worker_count, parent=self)

        self.tabs = QtWidgets.QTabWidget()
        self.tabs.addTab(self.analysis_view, "Task Graph")
        self.tabs.addTab(self.schedule_view, "Schedule")

        container = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(container)
        layout.addLayout(self._build_button_row())
        layout.addWidget(self.tabs)
        self.setCentralWidget(container)

        self.refresh()

    def _build_button_row(self) -> QtWidgets.QHBoxLayout:
        row = QtWidgets.QHBoxLayout()
        actions = [
            ("Add Node", self._add_node),
            ("Add Edge", self._add_edge),
            ("Node Weight", self._set_node_weight),
            ("Edge Weight", self._set_edge_weight),
            ("Remove Node", self._remove_node),
            ("Remove Edge", self._remove_edge),
            ("Clear", self._clear),
            ("Open...", self._open),
            ("Save...", self._save),
        ]
        for label, handler in actions:
            button = QtWidgets.QPushButton(label)
            button.clicked.connect(handler)
            row.addWidget(button)
        row.addStretch(1)
        return row

    def refresh(self) -> None:
        self.analysis_view.refresh()
        self.schedule_view.refresh()

    def _apply(self, mutation) -> None:
        try:
            mutation()
        except GraphError as exc:
            logger.warning("Rejected edit: %s", exc)
            QtWidgets.QMessageBox.warning(self, "Task Gantt", str(exc))
            return
        self.refresh()

    def _ask_id(self, title: str, label: str) -> int | None:
        value, ok = QtWidgets.QInputDialog.getInt(self, title, label, 0, 0, MAX_ID)
        return value if ok else None

    def _ask_weight(self, title: str) -> int | None:
        value, ok = QtWidgets.QInputDialog.getInt(self, title, "Weight:", 0, 0, MAX_WEIGHT)
        return value if ok else None

    def _ask_edge(self, title: str) -> tuple[int, int] | None:
        source = self._ask_id(title, "From node:")
        if source is None:
            return None
        target = self._ask_id(title, "To node:")
        if target is None:
            return None
        return source, target

    def _add_node(self) -> None:
        weight = self._ask_weight("Add Node")
        if weight is None:
            return
        self._apply(lambda: self.graph_service.add_node(weight=weight))

    def _add_edge(self) -> None:
        edge = self._ask_edge("Add Edge")
        if edge is None:
            return
        weight = self._ask_weight("Add Edge")
        if weight is None:
            return

        def mutation():
            self.graph_service.add_edge(*edge)
            self.graph_service.set_edge_weight(*edge, weight)

        self._apply(mutation)

    def _set_node_weight(self) -> None:
        node_id = self._ask_id("Node Weight", "Node:")
        if node_id is None:
            return
        weight = self._ask_weight("Node Weight")
        if weight is None:
            return
        self._apply(lambda: self.graph_service.set_node_weight(node_id, weight))

    def _set_edge_weight(self) -> None:
        edge = self._ask_edge("Edge Weight")
        if edge is None:
            return
        weight = self._ask_weight("Edge Weight")
        if weight is None:
            return
        self._apply(lambda: self.graph_service.set_edge_weight(*edge, weight))

    def _remove_node(self) -> None:
        node_id = self._ask_id("Remove Node", "Node:")
        if node_id is None:
            return
        self._apply(lambda: self.graph_service.remove_node(node_id))

    def _remove_edge(self) -> None:
        edge = self._ask_edge("Remove Edge")
        if edge is None:
            return
        self._apply(lambda: self.graph_service.remove_edge(*edge))

    def _clear(self) -> None:
        self._apply(self.graph_service.clear)

    def _open(self) -> None:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Open Graph", "", "Graph JSON (*.json)")
        if not path:
            return
        result = import_graph(Path(path), self.graph_service)
        self._show_issues(result.validation)
        self.refresh()

    def _save(self) -> None:
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Save Graph", "graph.json", "Graph JSON (*.json)")
        if not path:
            return
        try:
            result = export_graph(self.graph_service, Path(path))
        except OSError as exc:
            logger.warning("Cannot write %s: %s", path, exc)
            QtWidgets.QMessageBox.warning(self, "Task Gantt", str(exc))
            return
        self._show_issues(result.validation)

    def _show_issues(self, validation: ValidationResult) -> None:
        if not validation.errors:
            return
        messages = "\n".join(issue.message for issue in validation.errors[:10])
        QtWidgets.QMessageBox.warning(self, "Task Gantt", messages)
