"""Hooks that report pipeline progress without touching extraction logic."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import ExtractError, SinkError
from .models import DirectorDealing

if TYPE_CHECKING:  # pragma: no cover
    from .runner import RunSummary

LOGGER = logging.getLogger(__name__)


class PipelineObserver:
    """No-op observer. Subclass and override the hooks of interest."""

    def on_request(self, url: str) -> None:
        pass

    def on_record(self, record: DirectorDealing) -> None:
        pass

    def on_row_error(self, error: ExtractError) -> None:
        pass

    def on_sink_error(self, error: SinkError) -> None:
        pass

    def on_complete(self, summary: "RunSummary") -> None:
        pass


class LoggingObserver(PipelineObserver):
    """Trace the run through the standard logging module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or LOGGER

    def on_request(self, url: str) -> None:
        self.logger.info("Visiting %s", url)

    def on_record(self, record: DirectorDealing) -> None:
        self.logger.info(
            "Emitted %s dealing dated %s for %s", record.stock_code, record.date, record.beneficiary
        )

    def on_row_error(self, error: ExtractError) -> None:
        self.logger.warning("Skipping row: %s", error)

    def on_sink_error(self, error: SinkError) -> None:
        self.logger.error("%s", error)

    def on_complete(self, summary: "RunSummary") -> None:
        self.logger.info(
            "Ingestion finished: %d records, %d row errors, %d sink errors",
            len(summary.records),
            len(summary.row_errors),
            len(summary.sink_errors),
        )


__all__ = ["PipelineObserver", "LoggingObserver"]
