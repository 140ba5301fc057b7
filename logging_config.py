"""
Logging setup shared by the ingestion CLI and the HTTP services.

Handlers go on the root logger; the application packages log at the chosen
level while third-party loggers (chromadb, httpx, sentence_transformers)
stay at WARNING.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

APP_LOGGERS = ("chunking", "vector_store", "retrieval", "generation", "ingestion")
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def level_from_env(default: int = logging.INFO) -> int:
    """Read LOG_LEVEL (name such as "DEBUG"); unknown names fall back to `default`."""
    name = os.environ.get("LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def _handlers(level: int, log_file: Optional[Path], stream: TextIO) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure console (and optional file) logging.

    Args:
        level: Level for the application loggers and handlers
        log_file: Optional path to a log file
        format_string: Optional custom format string
        stream: Console stream (default: stdout)

    Returns:
        The root logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    root.handlers.clear()
    for handler in _handlers(level, log_file, stream or sys.stdout):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)

    return root
