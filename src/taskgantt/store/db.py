from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from taskgantt.settings import Settings

from .models import Base

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).resolve().parents[3] / "taskgantt.db"


def resolve_db_path(db_path: Optional[Path | str] = None) -> Path:
    """Explicit path first, then ``TASKGANTT_DB``, then ``taskgantt.db`` in the repo root."""

    if db_path:
        return Path(db_path)
    return Settings.from_env().db_path or DEFAULT_DB_PATH


def get_engine(db_path: Optional[Path | str] = None) -> Engine:
    resolved = resolve_db_path(db_path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite+pysqlite:///{resolved}", future=True, echo=False)
    # task_nodes/task_edges rely on ON DELETE CASCADE, which SQLite enforces per connection.
    event.listen(engine, "connect", _enable_foreign_keys)
    logger.debug("Graph store at %s", resolved)
    return engine


def create_db(engine: Optional[Engine] = None) -> Engine:
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    return engine


def get_session(engine: Optional[Engine] = None) -> Session:
    factory = sessionmaker(bind=engine or get_engine(), autoflush=False, future=True)
    return factory()


def open_store(db_path: Optional[Path | str] = None) -> Session:
    """Session on a database whose tables are guaranteed to exist."""

    return get_session(create_db(get_engine(db_path)))


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()
