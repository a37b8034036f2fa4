"""Logging helpers."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FILE = "empathyai.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx logs every provider request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(log_dir: str = "logs", level: int | str = logging.INFO) -> str:
    """Attach file and console handlers to the ``empathyai`` logger once.

    ``level`` accepts a name such as ``"debug"``. Returns the log file path.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    path = os.path.join(log_dir, LOG_FILE)
    root = logging.getLogger("empathyai")
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if any(getattr(h, "_empathyai", False) for h in root.handlers):
        return path

    os.makedirs(log_dir, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [
        RotatingFileHandler(path, maxBytes=1_000_000, backupCount=5, encoding="utf-8"),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._empathyai = True
        root.addHandler(handler)

    root.info("Logging to %s at %s", path, logging.getLevelName(level))
    return path


def preview(text: str, limit: int = 50) -> str:
    """Shorten user text for log lines."""
    text = " ".join((text or "").split())
    return f"{text[:limit]}{'...' if len(text) > limit else ''}"
