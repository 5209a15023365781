"""Base classes for record sinks."""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import DirectorDealing


class RecordSink(ABC):
    """Destination that receives each extracted record once."""

    name = "sink"

    def open(self) -> None:
        """Acquire resources before the first write."""

    @abstractmethod
    def write(self, record: DirectorDealing) -> None:
        """Persist or display ``record``."""

    def close(self) -> None:
        """Release resources after the last write."""


__all__ = ["RecordSink"]
