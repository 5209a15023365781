"""Base classes for retrieving the dealings page."""
from __future__ import annotations

from abc import ABC, abstractmethod


class DocumentSource(ABC):
    """Abstract source that returns the HTML of a page."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """Return the HTML document found at ``url``."""

    def close(self) -> None:
        """Release any resources held by the source."""


__all__ = ["DocumentSource"]
