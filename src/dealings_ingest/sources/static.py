"""Document source backed by previously saved HTML."""
from __future__ import annotations

import logging
from pathlib import Path

from ..exceptions import FetchError
from .base import DocumentSource

LOGGER = logging.getLogger(__name__)


class StaticDocumentSource(DocumentSource):
    """Serve a fixed document, either an HTML string or a saved page on disk.

    Useful for re-running extraction against a page captured earlier.
    """

    def __init__(self, html: str | None = None, path: Path | None = None) -> None:
        if (html is None) == (path is None):
            raise ValueError("Provide exactly one of html or path")
        self.html = html
        self.path = path

    def fetch(self, url: str) -> str:
        if self.html is not None:
            return self.html
        LOGGER.debug("Reading saved document %s in place of %s", self.path, url)
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FetchError(str(self.path), exc) from exc


__all__ = ["StaticDocumentSource"]
