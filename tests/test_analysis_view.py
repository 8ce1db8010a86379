from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtWidgets")

from PySide6 import QtWidgets

from taskgantt.graph.service import GraphService
from taskgantt.ui.views.analysis_view import AnalysisView


@pytest.fixture
def service():
    svc = GraphService()
    for weight in (1, 4, 2):
        svc.add_node(weight=weight)
    svc.add_edge(0, 1)
    svc.set_edge_weight(0, 1, 3)
    return svc


def test_flags_and_order(service: GraphService):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    view = AnalysisView(service, strategy="weight")
    view.refresh()

    assert view.strategy == "weight"
    assert view.acyclic_label.text() == "Acyclic: true"
    assert view.connected_label.text() == "Connected: false"
    assert view.order_label.text() == "Sorted: 1, 2, 0"


def test_nodes_table(service: GraphService):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    view = AnalysisView(service)
    view.refresh()

    assert view.nodes_table.rowCount() == 3
    assert view.nodes_table.item(0, 2).text() == "1 (3)"
    assert view.nodes_table.item(1, 3).text() == "0"


def test_strategy_change_refreshes(service: GraphService):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    view = AnalysisView(service, strategy="weight")
    view.refresh()

    view.strategy_combo.setCurrentIndex(view.strategy_combo.findData("critical_path"))

    assert view.strategy == "critical_path"
    assert view.order_label.text() == "Sorted: 0, 1, 2"


def test_cycle_note_shown(service: GraphService):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    service.add_edge(1, 0)
    view = AnalysisView(service, strategy="critical_time")
    view.refresh()

    assert view.acyclic_label.text() == "Acyclic: false"
    assert view.order_label.text() == "Sorted: 0, 1, 2 (Sorting requires an acyclic graph)"
