"""HTTP retrieval of the dealings page."""
from __future__ import annotations

import logging
from typing import Iterable
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import ReadTimeoutError
from urllib3.util.retry import Retry

from ..exceptions import FetchError, FetchTimeoutError
from .base import DocumentSource

LOGGER = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "accept-language": "en-ZA,en;q=0.9",
    "cache-control": "max-age=0",
    "upgrade-insecure-requests": "1",
    "user-agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/141.0.0.0 Safari/537.36",
}

RETRY_STATUSES = (429, 500, 502, 503, 504)


def _is_timeout(exc: requests.ConnectionError) -> bool:
    # Read timeouts that exhaust the retry budget surface as ConnectionError.
    reason = getattr(exc.args[0], "reason", None) if exc.args else None
    return isinstance(reason, ReadTimeoutError)


class HttpPageFetcher(DocumentSource):
    """Fetch pages over HTTP, restricted to an allow-list of host names."""

    def __init__(
        self,
        allowed_domains: Iterable[str],
        *,
        timeout: float = 30.0,
        retries: int = 2,
        backoff: float = 0.5,
        session: requests.Session | None = None,
    ) -> None:
        self.allowed_domains = frozenset(domain.lower() for domain in allowed_domains)
        self.timeout = timeout
        self.session = session or requests.Session()
        # Align the session defaults with a typical browser to avoid bot detection.
        self.session.headers.update(DEFAULT_HEADERS)
        retry = Retry(
            total=retries,
            backoff_factor=backoff,
            status_forcelist=RETRY_STATUSES,
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def _check_domain(self, url: str) -> None:
        host = (urlparse(url).hostname or "").lower()
        if host not in self.allowed_domains:
            raise FetchError(url, f"forbidden domain {host!r}")

    def fetch(self, url: str) -> str:
        self._check_domain(url)
        LOGGER.debug("Requesting %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as exc:
            raise FetchTimeoutError(url, exc) from exc
        except requests.ConnectionError as exc:
            if _is_timeout(exc):
                raise FetchTimeoutError(url, exc) from exc
            raise FetchError(url, exc) from exc
        except requests.RequestException as exc:
            raise FetchError(url, exc) from exc
        # Redirects must stay inside the allow-list as well.
        self._check_domain(response.url)
        return response.text

    def close(self) -> None:
        self.session.close()


__all__ = ["HttpPageFetcher", "DEFAULT_HEADERS"]
