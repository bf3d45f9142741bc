"""Logging setup shared by the CLI and the dashboard.

The root logger gets a stdout handler (plus an optional file handler).
Ingestion logs a line per file and warns about dropped rows, which gets
noisy on large batches, so `yoy_rollup.ingest` can run at its own level.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
INGEST_LOGGER = "yoy_rollup.ingest"


def parse_level(name: str) -> int:
    """Return the numeric level for a name such as "debug" or "WARNING".

    Raises:
        ValueError: if `name` is not a logging level name.
    """
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level


def configure_logging(
    log_path: Path | None = None,
    level: int = logging.INFO,
    ingest_level: int | None = None,
) -> None:
    """Configure root logging handlers and formatting.

    Args:
        log_path: Optional path to a file where logs will be written.
        level: Root logging level (defaults to INFO).
        ingest_level: Level for the ingestion loggers; None follows `level`.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    logging.getLogger(INGEST_LOGGER).setLevel(ingest_level if ingest_level is not None else logging.NOTSET)
