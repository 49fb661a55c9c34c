"""Tests for logging setup."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from mpd_wire.log import setup_logging


@pytest.fixture
def clean_logger() -> Iterator[logging.Logger]:
    """Package logger with its handlers detached for the duration of a test."""
    logger = logging.getLogger("mpd_wire")
    saved = logger.handlers[:]
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved


class TestSetupLogging:
    """Rotating file handler on the package logger."""

    def test_writes_records(self, tmp_path: Path, clean_logger: logging.Logger):
        """Records from submodules land in the log file."""
        log_path = tmp_path / "logs" / "mpd-wire.log"
        setup_logging(log_path)
        logging.getLogger("mpd_wire.connection").debug("Command: %s", "stickernames")
        for handler in clean_logger.handlers:
            handler.flush()
        assert "Command: stickernames" in log_path.read_text()

    def test_idempotent(self, tmp_path: Path, clean_logger: logging.Logger):
        """A second call does not add another handler."""
        setup_logging(tmp_path / "a.log")
        setup_logging(tmp_path / "b.log")
        assert len(clean_logger.handlers) == 1
