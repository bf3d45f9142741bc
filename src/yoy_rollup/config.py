"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the dashboard and CLI defaults from the environment (and `.env`).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import os

from dotenv import load_dotenv

from yoy_rollup.logging_config import parse_level
from yoy_rollup.models import ChartType, VisualizationMetric

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")


@dataclass(frozen=True)
class Settings:
    """Container for configuration read from the environment.

    Attributes:
        data_dir: Directory the CLI resolves relative CSV paths against.
        log_path: File that receives a copy of the log stream.
        top_n: Default number of groups shown in charts.
        metric: Default visualization metric.
        chart_type: Default chart type (bar or waterfall).
        csv_blocksize: Dask blocksize used when reading transaction CSVs.
        log_level: Root logging level.
        ingest_log_level: Level for ingestion loggers (None follows `log_level`).
    """
    data_dir: Path
    log_path: Path
    top_n: int
    metric: VisualizationMetric
    chart_type: ChartType
    csv_blocksize: str
    log_level: int = logging.INFO
    ingest_log_level: int | None = None


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `ROLLUP_TOP_N`, `ROLLUP_METRIC`, `ROLLUP_CHART_TYPE`,
            `ROLLUP_LOG_LEVEL` or `ROLLUP_INGEST_LOG_LEVEL` hold values that
            cannot be used.
    """
    data_dir = Path(os.getenv("ROLLUP_DATA_DIR", "data"))
    log_path = Path(os.getenv("ROLLUP_LOG_PATH", "logs/rollup.log"))
    csv_blocksize = os.getenv("ROLLUP_CSV_BLOCKSIZE", "64MB").strip() or "64MB"

    raw_top_n = os.getenv("ROLLUP_TOP_N", "10").strip()
    try:
        top_n = int(raw_top_n)
    except ValueError:
        raise RuntimeError(f"ROLLUP_TOP_N must be an integer, got {raw_top_n!r}.") from None

    raw_metric = os.getenv("ROLLUP_METRIC", VisualizationMetric.NET_CHANGE.value).strip()
    try:
        metric = VisualizationMetric(raw_metric)
    except ValueError:
        choices = ", ".join(m.value for m in VisualizationMetric)
        raise RuntimeError(f"ROLLUP_METRIC must be one of: {choices} (got {raw_metric!r}).") from None

    raw_chart = os.getenv("ROLLUP_CHART_TYPE", ChartType.BAR.value).strip().lower()
    try:
        chart_type = ChartType(raw_chart)
    except ValueError:
        choices = ", ".join(c.value for c in ChartType)
        raise RuntimeError(f"ROLLUP_CHART_TYPE must be one of: {choices} (got {raw_chart!r}).") from None

    levels: dict[str, int | None] = {}
    for name, default in (("ROLLUP_LOG_LEVEL", "INFO"), ("ROLLUP_INGEST_LOG_LEVEL", "")):
        raw = os.getenv(name, default).strip()
        if not raw:
            levels[name] = None
            continue
        try:
            levels[name] = parse_level(raw)
        except ValueError:
            raise RuntimeError(f"{name} must be a logging level name (got {raw!r}).") from None

    return Settings(
        data_dir=data_dir,
        log_path=log_path,
        top_n=top_n,
        metric=metric,
        chart_type=chart_type,
        csv_blocksize=csv_blocksize,
        log_level=levels["ROLLUP_LOG_LEVEL"] or logging.INFO,
        ingest_log_level=levels["ROLLUP_INGEST_LOG_LEVEL"],
    )
