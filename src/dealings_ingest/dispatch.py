"""Delivery of extracted records to the configured sinks."""
from __future__ import annotations

import logging
import threading
from typing import Sequence

from .exceptions import PipelineCancelled, SinkError, SinkTimeoutError
from .models import DirectorDealing
from .observers import PipelineObserver
from .sinks import RecordSink

LOGGER = logging.getLogger(__name__)


class SinkDispatcher:
    """Write each record to every sink, independently of the others.

    A failing sink never prevents the remaining sinks from receiving the
    record. With ``abort_on_error`` the first :class:`SinkError` is raised once
    every sink has been attempted; otherwise errors are returned to the caller.

    Writes run on the calling thread. Sinks enforce their own write timeouts
    and report them as :class:`TimeoutError` or :class:`SinkTimeoutError`.
    """

    def __init__(
        self,
        sinks: Sequence[RecordSink],
        *,
        abort_on_error: bool = False,
        observer: PipelineObserver | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.sinks = list(sinks)
        self.abort_on_error = abort_on_error
        self.observer = observer or PipelineObserver()
        self.cancel_event = cancel_event

    def __enter__(self) -> "SinkDispatcher":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self) -> None:
        for sink in self.sinks:
            try:
                sink.open()
            except (SinkError, PipelineCancelled):
                self.close()
                raise
            except Exception as exc:
                self.close()
                raise SinkError(sink.name, exc) from exc

    def close(self) -> None:
        for sink in self.sinks:
            try:
                sink.close()
            except Exception:  # pragma: no cover - defensive logging
                LOGGER.exception("Failed to close sink %s", sink.name)

    def dispatch(self, record: DirectorDealing) -> list[SinkError]:
        """Write ``record`` to every sink and return the failures."""

        errors: list[SinkError] = []
        for sink in self.sinks:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise PipelineCancelled(f"write to {sink.name}")
            try:
                sink.write(record)
            except PipelineCancelled:
                raise
            except SinkError as exc:
                error: SinkError = exc
            except TimeoutError as exc:
                error = SinkTimeoutError(sink.name, str(exc) or "write timed out")
            except Exception as exc:
                error = SinkError(sink.name, exc)
            else:
                continue
            errors.append(error)
            self.observer.on_sink_error(error)

        if errors and self.abort_on_error:
            raise errors[0]
        if len(errors) < len(self.sinks) or not self.sinks:
            self.observer.on_record(record)
        return errors


__all__ = ["SinkDispatcher"]
