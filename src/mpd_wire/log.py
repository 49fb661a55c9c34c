"""Logging configuration for mpd-wire."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

_PACKAGE_LOGGER = "mpd_wire"


def setup_logging(log_path: Path, *, level: int = logging.DEBUG) -> None:
    """Send package log records to a rotating file.

    Does nothing if the package logger already has a handler, so repeated CLI callbacks are safe.
    """
    root = logging.getLogger(_PACKAGE_LOGGER)
    if root.handlers:
        return

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))

    root.setLevel(level)
    root.addHandler(handler)
