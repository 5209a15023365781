"""Logging configuration helpers for the dealings ingestion job."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Third party loggers that are too chatty at DEBUG for a single page run.
QUIET_LOGGERS = ("urllib3", "sqlalchemy.engine")


def resolve_level(level: str | int | None) -> int:
    """Translate a user provided level into a numeric log level.

    Unknown names fall back to INFO rather than failing the run.
    """

    if level is None:
        level = os.getenv("DEALINGS_INGEST_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int | None = None, *, force: bool = False) -> None:
    """Configure the root logger for console output.

    The level defaults to the ``DEALINGS_INGEST_LOG_LEVEL`` environment variable.
    ``force`` mirrors :func:`logging.basicConfig` and replaces existing handlers.
    """

    resolved_level = resolve_level(level)

    root_logger = logging.getLogger()
    if root_logger.handlers and not force:
        root_logger.setLevel(resolved_level)
    else:
        logging.basicConfig(level=resolved_level, format=LOG_FORMAT, force=force)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))


__all__ = ["configure_logging", "resolve_level", "LOG_FORMAT"]
