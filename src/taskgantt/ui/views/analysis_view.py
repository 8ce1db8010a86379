from __future__ import annotations

from PySide6 import QtCore, QtWidgets

from taskgantt.analysis.ordering import SortStrategy
from taskgantt.graph.service import GraphService

from ..analysis_logic import STRATEGY_LABELS, GraphSummary, format_order, summarize_graph


class AnalysisView(QtWidgets.QWidget):
    """Integrity flags, node ordering and adjacency listing for the current graph."""

    def __init__(
        self,
        graph_service: GraphService,
        strategy: SortStrategy = "critical_time",
        parent: QtWidgets.QWidget | None = None,
    ):
        super().__init__(parent)
        self.graph_service = graph_service
        self.summary: GraphSummary | None = None

        self.acyclic_label = QtWidgets.QLabel()
        self.connected_label = QtWidgets.QLabel()
        self.strategy_combo = QtWidgets.QComboBox()
        for key, label in STRATEGY_LABELS.items():
            self.strategy_combo.addItem(label, key)
        self.strategy_combo.setCurrentIndex(max(0, self.strategy_combo.findData(strategy)))
        self.order_label = QtWidgets.QLabel()
        self.order_label.setTextInteractionFlags(QtCore.Qt.TextInteractionFlag.TextSelectableByMouse)

        self.nodes_table = QtWidgets.QTableWidget(0, 4)
        self.nodes_table.setHorizontalHeaderLabels(["Node", "Weight", "Children (weight)", "Parents"])
        self.nodes_table.horizontalHeader().setStretchLastSection(True)
        self.nodes_table.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)

        flags = QtWidgets.QHBoxLayout()
        flags.addWidget(self.acyclic_label)
        flags.addWidget(self.connected_label)
        flags.addStretch(1)

        layout = QtWidgets.QVBoxLayout(self)
        layout.addLayout(flags)
        layout.addWidget(self.strategy_combo)
        layout.addWidget(self.order_label)
        layout.addWidget(self.nodes_table)

        self.strategy_combo.currentIndexChanged.connect(lambda _index: self.refresh())

    @property
    def strategy(self) -> SortStrategy:
        return self.strategy_combo.currentData()

    def refresh(self) -> None:
        graph = self.graph_service.snapshot()
        self.summary = summarize_graph(graph, self.strategy)
        self.acyclic_label.setText(f"Acyclic: {str(self.summary.acyclic).lower()}")
        self.connected_label.setText(f"Connected: {str(self.summary.connected).lower()}")
        order_text = f"Sorted: {format_order(self.summary.order)}"
        if self.summary.note:
            order_text += f" ({self.summary.note})"
        self.order_label.setText(order_text)

        self.nodes_table.setRowCount(len(graph))
        for idx, node in enumerate(graph):
            children = ", ".join(f"{edge.target} ({edge.weight})" for edge in node.edges)
            parents = ", ".join(str(pid) for pid in node.parents)
            self.nodes_table.setItem(idx, 0, QtWidgets.QTableWidgetItem(str(node.id)))
            self.nodes_table.setItem(idx, 1, QtWidgets.QTableWidgetItem(str(node.weight)))
            self.nodes_table.setItem(idx, 2, QtWidgets.QTableWidgetItem(children))
            self.nodes_table.setItem(idx, 3, QtWidgets.QTableWidgetItem(parents))
