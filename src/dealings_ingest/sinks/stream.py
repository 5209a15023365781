"""Sinks that write the canonical JSON line to a text stream or file."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from ..models import DirectorDealing
from .base import RecordSink

LOGGER = logging.getLogger(__name__)


class ConsoleSink(RecordSink):
    """Print each record as a JSON line, stdout unless another stream is given."""

    name = "console"

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def write(self, record: DirectorDealing) -> None:
        print(record.to_json(), file=self.stream or sys.stdout, flush=True)


class JsonLinesSink(RecordSink):
    """Append each record as a JSON line to ``path``."""

    name = "jsonl"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._handle: TextIO | None = None

    def open(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("a", encoding="utf-8")
        LOGGER.debug("Appending records to %s", self.path)

    def write(self, record: DirectorDealing) -> None:
        if self._handle is None:
            self.open()
        self._handle.write(record.to_json() + "\n")
        self._handle.flush()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


__all__ = ["ConsoleSink", "JsonLinesSink"]
