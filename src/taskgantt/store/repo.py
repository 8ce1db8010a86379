from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import GraphRecord, TaskEdgeRecord, TaskNodeRecord

logger = logging.getLogger(__name__)


class GraphRepository:
    """Saves and loads named graph documents."""

    def __init__(self, session: Session):
        self.session = session

    def save_document(self, name: str, document: dict[str, Any]) -> GraphRecord:
        """Store ``document`` under ``name``, replacing any graph saved with that name."""

        existing = self.get_graph(name)
        if existing is not None:
            self.session.delete(existing)
            self.session.flush()

        directed = bool(document.get("directed", True))
        record = GraphRecord(name=name, directed=directed)
        record.nodes = [
            TaskNodeRecord(node_id=entry["id"], weight=entry.get("value", 0), position=position)
            for position, entry in enumerate(document.get("nodes", []))
        ]
        record.edges = [
            TaskEdgeRecord(
                source_node_id=entry["from"],
                target_node_id=entry["to"],
                weight=entry.get("value", 0),
                directed=entry.get("directed"),
                position=position,
            )
            for position, entry in enumerate(document.get("edges", []))
        ]
        self.session.add(record)
        saved = self._commit_and_refresh(record)
        logger.info("Saved graph %r (%d nodes, %d edges)", name, len(record.nodes), len(record.edges))
        return saved

    def load_document(self, name: str) -> Optional[dict[str, Any]]:
        record = self.get_graph(name)
        if record is None:
            return None

        nodes = [{"id": node.node_id, "value": _number(node.weight)} for node in record.nodes]
        edges = []
        for edge in record.edges:
            entry: dict[str, Any] = {
                "from": edge.source_node_id,
                "to": edge.target_node_id,
                "value": _number(edge.weight),
            }
            if edge.directed is not None:
                entry["directed"] = edge.directed
            edges.append(entry)
        return {"directed": record.directed, "nodes": nodes, "edges": edges}

    def get_graph(self, name: str) -> Optional[GraphRecord]:
        return self.session.scalar(select(GraphRecord).where(GraphRecord.name == name))

    def list_graph_names(self) -> list[str]:
        return list(self.session.scalars(select(GraphRecord.name).order_by(GraphRecord.name)).all())

    def delete_graph(self, name: str) -> bool:
        record = self.get_graph(name)
        if record is None:
            return False
        self.session.delete(record)
        self._commit()
        return True

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _commit_and_refresh(self, obj):
        try:
            self.session.commit()
            self.session.refresh(obj)
            return obj
        except Exception:
            self.session.rollback()
            raise


def _number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value
