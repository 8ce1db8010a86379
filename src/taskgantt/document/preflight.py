from __future__ import annotations

import math
from typing import Any

from .validation_types import ValidationResult

ROOT_PATH = "$"


def preflight_validate(document: Any) -> ValidationResult:
    """
    Structural check of a ``{"directed", "nodes", "edges"}`` graph document.

    Never raises. Entry-level errors carry the entry path (``nodes[i]`` or
    ``edges[i]``) so importers can skip just that entry; root-level errors use
    ``$``. Keys other than the ones read here (labels, shapes, edge ids written
    by a drawing surface) are ignored.
    """

    result = ValidationResult()

    if not isinstance(document, dict):
        result.add_issue("error", "Graph document must be a JSON object.", ROOT_PATH, "invalid_root")
        return result

    directed = document.get("directed", True)
    if not isinstance(directed, bool):
        result.add_issue("error", "'directed' must be true or false.", ROOT_PATH, "invalid_directed")
        return result

    nodes = document.get("nodes")
    if not isinstance(nodes, list):
        result.add_issue("error", "'nodes' must be a list.", ROOT_PATH, "invalid_nodes")
        return result

    edges = document.get("edges", [])
    if "edges" not in document:
        result.add_issue("warning", "Document has no 'edges'; assuming none.", ROOT_PATH, "missing_edges")
    if not isinstance(edges, list):
        result.add_issue("error", "'edges' must be a list.", ROOT_PATH, "invalid_edges")
        return result

    node_ids: set[int] = set()
    for idx, entry in enumerate(nodes):
        path = f"nodes[{idx}]"
        if not isinstance(entry, dict):
            result.add_issue("error", f"Node at index {idx} must be an object.", path, "invalid_node_shape")
            continue
        node_id = entry.get("id")
        if not _is_id(node_id):
            result.add_issue("error", "Node 'id' must be a non-negative integer.", path, "invalid_id")
            continue
        if node_id in node_ids:
            result.add_issue("error", f"Duplicate node id {node_id}.", path, "duplicate_id")
            continue
        if not _check_value(entry, path, result):
            continue
        node_ids.add(node_id)

    occupied: set[tuple[int, int]] = set()
    for idx, entry in enumerate(edges):
        path = f"edges[{idx}]"
        if not isinstance(entry, dict):
            result.add_issue("error", f"Edge at index {idx} must be an object.", path, "invalid_edge_shape")
            continue
        source, target = entry.get("from"), entry.get("to")
        if not _is_id(source) or not _is_id(target):
            result.add_issue("error", "Edge 'from' and 'to' must be node ids.", path, "invalid_endpoint")
            continue
        if source not in node_ids or target not in node_ids:
            result.add_issue(
                "error",
                f"Edge {source}->{target} references a missing node.",
                path,
                "dangling_edge",
            )
            continue
        edge_directed = entry.get("directed", directed)
        if not isinstance(edge_directed, bool):
            result.add_issue("error", "Edge 'directed' must be true or false.", path, "invalid_directed")
            continue

        halves = {(source, target)}
        if not edge_directed:
            halves.add((target, source))
        if halves & occupied:
            result.add_issue("error", f"Duplicate edge {source}->{target}.", path, "duplicate_edge")
            continue
        if not _check_value(entry, path, result):
            continue
        occupied |= halves

    return result


def _is_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _check_value(entry: dict[str, Any], path: str, result: ValidationResult) -> bool:
    if "value" not in entry:
        result.add_issue("warning", "Missing 'value'; defaulting to 0.", path, "missing_value")
        return True
    value = entry["value"]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        result.add_issue("error", "'value' must be a number.", path, "invalid_value")
        return False
    if not math.isfinite(value) or value < 0:
        result.add_issue("error", "'value' must be a non-negative finite number.", path, "invalid_value")
        return False
    return True
