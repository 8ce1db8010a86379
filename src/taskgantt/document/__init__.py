from .exporter import export_graph, graph_to_document
from .importer import import_graph, load_graph_document
from .preflight import preflight_validate
from .validation_types import ValidationIssue, ValidationResult

__all__ = [
    "preflight_validate",
    "export_graph",
    "graph_to_document",
    "import_graph",
    "load_graph_document",
    "ValidationIssue",
    "ValidationResult",
]
