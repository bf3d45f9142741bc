from __future__ import annotations

import logging
from pathlib import Path

import pytest

from yoy_rollup.logging_config import INGEST_LOGGER, configure_logging, parse_level


def test_configure_logging_adds_stream_handler() -> None:
    # Ensure configuring logging doesn't raise and attaches a StreamHandler
    configure_logging(None)
    root = logging.getLogger()
    assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "rollup.log"
    configure_logging(log_path)
    logging.getLogger("yoy_rollup.test").info("hello from test")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello from test" in log_path.read_text(encoding="utf-8")
    configure_logging(None)


def test_parse_level_accepts_any_case() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(" Warning ") == logging.WARNING
    with pytest.raises(ValueError):
        parse_level("loud")


def test_ingest_logger_gets_its_own_level() -> None:
    configure_logging(None, level=logging.INFO, ingest_level=logging.WARNING)
    ingest = logging.getLogger(INGEST_LOGGER)
    assert logging.getLogger().level == logging.INFO
    assert ingest.level == logging.WARNING
    assert not logging.getLogger("yoy_rollup.ingest.load_csv").isEnabledFor(logging.INFO)

    configure_logging(None)
    assert ingest.level == logging.NOTSET
    assert logging.getLogger("yoy_rollup.ingest.load_csv").isEnabledFor(logging.INFO)
