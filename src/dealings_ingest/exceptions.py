"""Error types raised or yielded by the ingestion pipeline."""
from __future__ import annotations

from typing import Any


class DealingsIngestError(Exception):
    """Base class for pipeline failures.

    ``context`` carries the details needed to debug a failure without fetching
    the page again (row index, field name, raw text, sink name...).
    """

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class FetchError(DealingsIngestError):
    """Raised when the target page cannot be retrieved."""

    def __init__(self, url: str, cause: str | BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to fetch {url}: {cause}", context={"url": url})


class FetchTimeoutError(FetchError):
    """Raised when fetching the target page exceeds the configured timeout."""


class ExtractError(DealingsIngestError):
    """A single row could not be turned into a record.

    Extraction errors are yielded as values by the extractor so that the
    remaining rows are still processed; the driver decides whether to raise.
    """

    def __init__(self, row: int, field: str, raw: str | None, cause: str | BaseException) -> None:
        self.row = row
        self.field = field
        self.raw = raw
        self.cause = cause
        super().__init__(
            f"Row {row}: could not extract {field}: {cause}",
            context={"row": row, "field": field, "raw": raw},
        )


class SinkError(DealingsIngestError):
    """Raised when writing a record to a sink fails."""

    def __init__(self, sink: str, cause: str | BaseException) -> None:
        self.sink = sink
        self.cause = cause
        super().__init__(f"Sink {sink} failed: {cause}", context={"sink": sink})


class SinkTimeoutError(SinkError):
    """Raised when a sink write exceeds the configured timeout."""


class PipelineCancelled(DealingsIngestError):
    """Raised when the cancellation event is set while the pipeline runs."""

    def __init__(self, stage: str, signal_name: str | None = None) -> None:
        self.stage = stage
        self.signal_name = signal_name
        context: dict[str, Any] = {"stage": stage}
        if signal_name is not None:
            context["signal"] = signal_name
        super().__init__(f"Ingestion cancelled during {stage}", context=context)


__all__ = [
    "DealingsIngestError",
    "FetchError",
    "FetchTimeoutError",
    "ExtractError",
    "SinkError",
    "SinkTimeoutError",
    "PipelineCancelled",
]
