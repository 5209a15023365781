"""Document sources for the dealings page."""
from __future__ import annotations

import logging

from ..config import Settings
from .base import DocumentSource
from .static import StaticDocumentSource
from .web import HttpPageFetcher

LOGGER = logging.getLogger(__name__)


def create_source(settings: Settings) -> DocumentSource:
    """Instantiate the document source the settings ask for."""

    if settings.html_file is not None:
        LOGGER.debug("Selected StaticDocumentSource for %s", settings.html_file)
        return StaticDocumentSource(path=settings.html_file)
    LOGGER.debug("Selected HttpPageFetcher for %s", settings.target_url)
    return HttpPageFetcher(
        settings.allowed_domains,
        timeout=settings.fetch_timeout,
        retries=settings.fetch_retries,
        backoff=settings.fetch_backoff,
    )


__all__ = ["create_source", "DocumentSource", "HttpPageFetcher", "StaticDocumentSource"]
