from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from taskgantt.document.preflight import ROOT_PATH, preflight_validate
from taskgantt.document.validation_types import ValidationResult
from taskgantt.errors import GraphError
from taskgantt.graph.service import GraphService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportCounts:
    files_read: int = 0
    nodes_seen: int = 0
    nodes_created: int = 0
    nodes_skipped: int = 0
    edges_seen: int = 0
    edges_created: int = 0
    edges_skipped: int = 0


@dataclass(slots=True)
class ImportResult:
    counts: ImportCounts = field(default_factory=ImportCounts)
    validation: ValidationResult = field(default_factory=ValidationResult)


def import_graph(input_path: str | Path, graph_service: GraphService, *, replace: bool = True) -> ImportResult:
    """Read a JSON graph document from disk and rebuild the graph from it."""

    result = ImportResult()
    path = Path(input_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        result.validation.add_issue(
            "error", f"Graph file not found: {path}", ROOT_PATH, "file_not_found"
        )
        return result
    except json.JSONDecodeError as exc:
        result.validation.add_issue(
            "error", f"Invalid JSON in {path}: {exc.msg}", ROOT_PATH, "invalid_json"
        )
        return result

    result.counts.files_read = 1
    loaded = load_graph_document(payload, graph_service, replace=replace)
    loaded.counts.files_read = result.counts.files_read
    return loaded


def load_graph_document(
    document: Any, graph_service: GraphService, *, replace: bool = True
) -> ImportResult:
    """
    Rebuild graph state through the service's mutation API.

    Entries rejected by preflight, or by the service itself, are skipped and
    reported; nothing is raised for document problems.
    """

    result = ImportResult()
    preflight = preflight_validate(document)
    result.validation.issues.extend(preflight.issues)

    if any(issue.path == ROOT_PATH for issue in preflight.errors):
        return result
    rejected = {issue.path for issue in preflight.errors}

    directed = document.get("directed", True)
    if replace:
        graph_service.clear()
        graph_service.directed = directed

    for idx, entry in enumerate(document["nodes"]):
        path = f"nodes[{idx}]"
        result.counts.nodes_seen += 1
        if path in rejected:
            result.counts.nodes_skipped += 1
            continue
        try:
            graph_service.add_node(entry["id"])
            graph_service.set_node_weight(entry["id"], entry.get("value", 0))
        except GraphError as exc:
            _reject(result, path, exc)
            result.counts.nodes_skipped += 1
            continue
        result.counts.nodes_created += 1

    for idx, entry in enumerate(document.get("edges", [])):
        path = f"edges[{idx}]"
        result.counts.edges_seen += 1
        if path in rejected:
            result.counts.edges_skipped += 1
            continue
        source, target = entry["from"], entry["to"]
        try:
            graph_service.add_edge(source, target, directed=entry.get("directed", directed))
            graph_service.set_edge_weight(source, target, entry.get("value", 0))
        except GraphError as exc:
            _reject(result, path, exc)
            result.counts.edges_skipped += 1
            continue
        result.counts.edges_created += 1

    logger.info(
        "Imported %d nodes and %d edges (%d issues)",
        result.counts.nodes_created,
        result.counts.edges_created,
        len(result.validation.issues),
    )
    return result


def _reject(result: ImportResult, path: str, exc: GraphError) -> None:
    logger.warning("Rejected %s: %s", path, exc)
    result.validation.add_issue("error", str(exc), path, "rejected")
