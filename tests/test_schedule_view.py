from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtWidgets")

from PySide6 import QtWidgets

from taskgantt.graph.service import GraphService
from taskgantt.ui.views.schedule_view import ScheduleView


@pytest.fixture
def service():
    svc = GraphService()
    a, b = svc.add_node(weight=2), svc.add_node(weight=1)
    svc.add_edge(a.id, b.id)
    return svc


def test_schedule_table_populated(service: GraphService):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    view = ScheduleView(service, worker_count=1)
    view.refresh()

    assert view.table.columnCount() == 2
    assert view.table.horizontalHeaderItem(1).text() == "P0"
    assert view.table.rowCount() == 3
    assert view.table.item(0, 1).text() == "0"
    assert view.table.item(2, 1).text() == "1"
    assert view.status_label.text() == "Makespan: 3"


def test_worker_count_change_reruns(service: GraphService):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    view = ScheduleView(service, worker_count=1)
    view.refresh()

    view.workers_spin.setValue(3)

    assert view.schedule.worker_count == 3
    assert view.table.columnCount() == 4


def test_stalled_schedule_reported(service: GraphService):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    service.add_edge(1, 0)
    view = ScheduleView(service, worker_count=1)
    view.refresh()

    assert view.schedule.stalled
    assert view.status_label.text() == "Stalled; pending tasks: 0, 1"


def test_invalid_weight_reported(service: GraphService):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    service.set_node_weight(0, 0.5)
    view = ScheduleView(service, worker_count=1)
    view.refresh()

    assert view.schedule is None
    assert view.table.rowCount() == 0
    assert "Invalid weight" in view.status_label.text()
