from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Ensure src/ is importable when running as a script
ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from taskgantt.analysis.ordering import SORT_STRATEGIES  # noqa: E402
from taskgantt.document.exporter import graph_to_document  # noqa: E402
from taskgantt.document.importer import ImportResult, import_graph, load_graph_document  # noqa: E402
from taskgantt.errors import GraphError  # noqa: E402
from taskgantt.graph.service import GraphService  # noqa: E402
from taskgantt.schedule.report import render_text_table  # noqa: E402
from taskgantt.schedule.simulator import simulate  # noqa: E402
from taskgantt.settings import LOG_LEVELS, Settings  # noqa: E402
from taskgantt.store.db import open_store  # noqa: E402
from taskgantt.store.repo import GraphRepository  # noqa: E402
from taskgantt.ui.analysis_logic import format_order, summarize_graph  # noqa: E402

logger = logging.getLogger("taskgantt")


def main(argv: Optional[list[str]] = None) -> int:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Analyse a task graph and simulate its schedule.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database for saved graphs.")
    parser.add_argument("--graph", type=Path, default=None, help="Graph JSON document to import.")
    parser.add_argument("--load", metavar="NAME", default=None, help="Load a graph saved in the database.")
    parser.add_argument("--save", metavar="NAME", default=None, help="Save the resulting graph to the database.")
    parser.add_argument("--workers", type=int, default=settings.worker_count, help="Number of workers.")
    parser.add_argument("--sort", choices=SORT_STRATEGIES, default=settings.sort_strategy)
    parser.add_argument(
        "--undirected",
        action="store_true",
        help="Start with an undirected graph. A --graph or --load document sets its own mode.",
    )
    parser.add_argument("--report", action="store_true", help="Print a text report instead of opening the UI.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=settings.log_level)
    args, extra = parser.parse_known_args(argv)

    logging.basicConfig(
        level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    if args.workers < 0:
        parser.error("--workers must be non-negative")
    settings.worker_count = args.workers
    settings.sort_strategy = args.sort

    graph_service = GraphService(directed=not args.undirected)

    if args.graph:
        if not _report_import(import_graph(args.graph, graph_service)):
            return 1

    session = open_store(args.db) if args.load or args.save else None

    try:
        if args.load:
            document = GraphRepository(session).load_document(args.load)
            if document is None:
                logger.error("No saved graph named %r", args.load)
                return 1
            if not _report_import(load_graph_document(document, graph_service)):
                return 1
        if args.save:
            GraphRepository(session).save_document(args.save, graph_to_document(graph_service))

        if args.report:
            return _print_report(graph_service, settings)

        from taskgantt.ui.app import run_app

        return run_app(graph_service, settings, argv=extra if extra else None)
    finally:
        if session is not None:
            session.close()


def _report_import(result: ImportResult) -> bool:
    for issue in result.validation.issues:
        level = logging.ERROR if issue.severity == "error" else logging.WARNING
        logger.log(level, "%s: %s", issue.path or "graph", issue.message)
    return not any(issue.path == "$" for issue in result.validation.errors)


def _print_report(graph_service: GraphService, settings: Settings) -> int:
    graph = graph_service.snapshot()
    summary = summarize_graph(graph, settings.sort_strategy)
    print(f"Acyclic: {str(summary.acyclic).lower()}")
    print(f"Connected: {str(summary.connected).lower()}")
    order = format_order(summary.order)
    print(f"Sorted ({settings.sort_strategy}): {order}" + (f" ({summary.note})" if summary.note else ""))
    print()

    try:
        schedule = simulate(graph, settings.worker_count)
    except GraphError as exc:
        logger.error("Cannot simulate graph: %s", exc)
        return 1
    print(render_text_table(schedule))
    return 2 if schedule.stalled else 0


if __name__ == "__main__":
    raise SystemExit(main())
