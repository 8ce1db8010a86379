from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from taskgantt.document.preflight import preflight_validate
from taskgantt.document.validation_types import ValidationResult
from taskgantt.graph.service import GraphService


@dataclass(slots=True)
class ExportCounts:
    nodes_exported: int = 0
    edges_exported: int = 0
    files_written: int = 0


@dataclass(slots=True)
class ExportResult:
    counts: ExportCounts = field(default_factory=ExportCounts)
    validation: ValidationResult = field(default_factory=ValidationResult)


def graph_to_document(graph_service: GraphService) -> dict[str, Any]:
    """
    Serialise the graph to the ``{"directed", "nodes", "edges"}`` document.

    Edges are listed in insertion order and undirected edges appear once, so
    replaying the document through the service reproduces children and
    parents order exactly. An edge whose orientation differs from the graph's
    default carries its own ``directed`` flag. Labels are included for
    drawing surfaces and ignored on import.
    """

    directed = graph_service.directed
    nodes = [
        {"id": node.id, "value": node.weight, "label": f"{node.id} ({node.weight})"}
        for node in graph_service.list_nodes()
    ]

    edges: list[dict[str, Any]] = []
    for edge, mirrored in graph_service.list_edges_with_mirror():
        entry: dict[str, Any] = {
            "from": edge.source,
            "to": edge.target,
            "value": edge.weight,
            "label": str(edge.weight),
        }
        if edge.source != edge.target and mirrored == directed:
            entry["directed"] = not mirrored
        edges.append(entry)

    return {"directed": directed, "nodes": nodes, "edges": edges}


def export_graph(graph_service: GraphService, output_path: str | Path) -> ExportResult:
    result = ExportResult()
    document = graph_to_document(graph_service)
    result.counts.nodes_exported = len(document["nodes"])
    result.counts.edges_exported = len(document["edges"])

    output_path = Path(output_path)
    output_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    result.counts.files_written = 1

    result.validation.issues.extend(preflight_validate(document).issues)
    return result
