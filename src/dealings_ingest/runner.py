"""Command line entry point for the directors' dealings ingestion job."""
from __future__ import annotations

import argparse
import logging
import signal
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .config import Settings
from .dispatch import SinkDispatcher
from .exceptions import (
    ExtractError,
    FetchError,
    PipelineCancelled,
    SinkError,
)
from .extractor import RecordExtractor
from .logging_utils import configure_logging
from .models import DirectorDealing
from .observers import LoggingObserver, PipelineObserver
from .sinks import RecordSink, create_sinks
from .sources import DocumentSource, create_source

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


@dataclass
class RunSummary:
    """Outcome of one ingestion run."""

    records: List[DirectorDealing] = field(default_factory=list)
    row_errors: List[ExtractError] = field(default_factory=list)
    sink_errors: List[SinkError] = field(default_factory=list)


def _check_cancelled(cancel_event: threading.Event | None, stage: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise PipelineCancelled(stage)


def run_ingestion(
    settings: Settings,
    *,
    source: DocumentSource | None = None,
    sinks: Sequence[RecordSink] | None = None,
    extractor: RecordExtractor | None = None,
    observer: PipelineObserver | None = None,
    cancel_event: threading.Event | None = None,
) -> RunSummary:
    """Fetch the dealings page, extract its rows and hand each record to the sinks.

    Row errors are collected and processing continues unless
    ``settings.continue_on_row_error`` is false, in which case the first one is
    raised. Fetch errors and store connection errors always propagate.
    """

    observer = observer or LoggingObserver()
    source = source or create_source(settings)
    sinks = create_sinks(settings) if sinks is None else sinks
    extractor = extractor or RecordExtractor(settings.stock_code, settings.selectors)
    summary = RunSummary()

    dispatcher = SinkDispatcher(
        sinks,
        abort_on_error=settings.abort_on_sink_error,
        observer=observer,
        cancel_event=cancel_event,
    )
    try:
        with dispatcher:
            _check_cancelled(cancel_event, "fetch")
            observer.on_request(settings.target_url)
            document = source.fetch(settings.target_url)
            _check_cancelled(cancel_event, "fetch")

            for result in extractor.extract(document):
                _check_cancelled(cancel_event, "extraction")
                if isinstance(result, ExtractError):
                    summary.row_errors.append(result)
                    observer.on_row_error(result)
                    if not settings.continue_on_row_error:
                        raise result
                    continue
                summary.sink_errors.extend(dispatcher.dispatch(result))
                summary.records.append(result)
    finally:
        source.close()

    observer.on_complete(summary)
    return summary


@contextmanager
def cancel_on_signals(cancel_event: threading.Event) -> Iterator[None]:
    """Cancel the run on SIGINT/SIGTERM for the duration of the block.

    The first signal sets ``cancel_event`` and raises :class:`PipelineCancelled`
    on the main thread, which aborts a blocking fetch or an open write
    transaction. Later signals only set the event so cleanup can finish.
    """

    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum, frame) -> None:
        name = signal.Signals(signum).name
        if cancel_event.is_set():
            LOGGER.warning("Received %s again, already cancelling", name)
            return
        LOGGER.warning("Received %s, cancelling ingestion", name)
        cancel_event.set()
        raise PipelineCancelled("run", signal_name=name)

    previous = {sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def parse_args(args: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging output",
    )
    parser.add_argument(
        "--html-file",
        type=Path,
        help="Extract from a saved copy of the page instead of fetching it",
    )
    parser.add_argument(
        "--json-output",
        type=Path,
        help="Append each record as a JSON line to this file",
    )
    parser.add_argument(
        "--no-console",
        action="store_true",
        help="Do not print records to stdout",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first row that cannot be parsed",
    )
    parser.add_argument(
        "--abort-on-sink-error",
        action="store_true",
        help="Stop at the first failed sink write",
    )
    return parser.parse_args(args=args)


def apply_overrides(settings: Settings, options: argparse.Namespace) -> Settings:
    """Layer command line flags over the loaded settings."""

    overrides: dict[str, object] = {}
    if options.html_file is not None:
        overrides["html_file"] = options.html_file
    if options.json_output is not None:
        overrides["json_output"] = options.json_output
    if options.no_console:
        overrides["console_output"] = False
    if options.fail_fast:
        overrides["continue_on_row_error"] = False
    if options.abort_on_sink_error:
        overrides["abort_on_sink_error"] = True
    return replace(settings, **overrides)


def main(argv: Iterable[str] | None = None) -> int:
    options = parse_args(argv)
    configure_logging(logging.DEBUG if options.verbose else None)
    try:
        settings = apply_overrides(Settings.load(), options)
    except RuntimeError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return EXIT_FAILURE

    cancel_event = threading.Event()
    try:
        with cancel_on_signals(cancel_event):
            summary = run_ingestion(settings, cancel_event=cancel_event)
    except PipelineCancelled as exc:
        LOGGER.warning("%s", exc)
        return EXIT_CANCELLED
    except (FetchError, ExtractError, SinkError) as exc:
        LOGGER.error("Ingestion failed: %s", exc)
        return EXIT_FAILURE

    if summary.row_errors or summary.sink_errors:
        LOGGER.warning("Ingestion completed with errors; see log above for details")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
