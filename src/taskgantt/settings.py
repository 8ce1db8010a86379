from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from taskgantt.analysis.ordering import SORT_STRATEGIES, SortStrategy

logger = logging.getLogger(__name__)

ENV_DB = "TASKGANTT_DB"
ENV_WORKERS = "TASKGANTT_WORKERS"
ENV_SORT = "TASKGANTT_SORT"
ENV_LOG_LEVEL = "TASKGANTT_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class Settings:
    db_path: Optional[Path] = None
    worker_count: int = 2
    sort_strategy: SortStrategy = "critical_time"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read overrides from the environment; unusable values keep the default."""

        settings = cls()

        db_path = os.getenv(ENV_DB)
        if db_path:
            settings.db_path = Path(db_path)

        workers = os.getenv(ENV_WORKERS)
        if workers:
            try:
                count = int(workers)
            except ValueError:
                count = -1
            if count >= 0:
                settings.worker_count = count
            else:
                logger.warning("Ignoring %s=%r: expected a non-negative integer", ENV_WORKERS, workers)

        sort = os.getenv(ENV_SORT)
        if sort:
            if sort in SORT_STRATEGIES:
                settings.sort_strategy = sort  # type: ignore[assignment]
            else:
                logger.warning("Ignoring %s=%r: expected one of %s", ENV_SORT, sort, ", ".join(SORT_STRATEGIES))

        level = os.getenv(ENV_LOG_LEVEL)
        if level:
            if level.upper() in LOG_LEVELS:
                settings.log_level = level.upper()
            else:
                logger.warning("Ignoring %s=%r", ENV_LOG_LEVEL, level)

        return settings
