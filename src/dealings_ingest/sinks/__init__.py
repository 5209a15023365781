"""Sink factory for extracted records."""
from __future__ import annotations

import logging

from ..config import Settings
from .base import RecordSink
from .database import DatabaseSink
from .stream import ConsoleSink, JsonLinesSink

LOGGER = logging.getLogger(__name__)


def create_sinks(settings: Settings) -> list[RecordSink]:
    """Instantiate every sink enabled by the settings, in write order."""

    sinks: list[RecordSink] = []
    if settings.database_url:
        sinks.append(DatabaseSink(settings.database_url, timeout=settings.sink_timeout))
    if settings.json_output is not None:
        sinks.append(JsonLinesSink(settings.json_output))
    if settings.console_output:
        sinks.append(ConsoleSink())
    LOGGER.debug("Configured sinks: %s", ", ".join(sink.name for sink in sinks) or "none")
    return sinks


__all__ = ["create_sinks", "RecordSink", "ConsoleSink", "JsonLinesSink", "DatabaseSink"]
