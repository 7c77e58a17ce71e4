"""httpx-based fetcher for the monitored URL."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds

_HTTP_LOGGERS = ("httpx", "httpcore")


class HttpFetcher:
    """Synchronous GET client. Redirects are not followed.

    A hung request stalls every later poll, so ``timeout`` is the only bound
    on a poll's duration. ``verbose`` turns on httpx/httpcore debug logging.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, verbose: bool = False) -> None:
        self._timeout = timeout
        self._client = httpx.Client(timeout=timeout, follow_redirects=False)
        level = logging.DEBUG if verbose else logging.WARNING
        for name in _HTTP_LOGGERS:
            logging.getLogger(name).setLevel(level)

    def get(self, url: str) -> httpx.Response:
        """GET ``url``. Transport failures raise ``httpx.HTTPError``."""
        resp = self._client.get(url)
        logger.debug("GET %s -> %d (%d bytes)", url, resp.status_code, len(resp.content))
        return resp

    def close(self) -> None:
        self._client.close()
