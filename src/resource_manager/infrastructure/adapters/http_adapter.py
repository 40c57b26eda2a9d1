"""Thin adapter for anonymous HTTP reads of public resource URLs."""

from typing import Protocol

import requests

from resource_manager.utils.constants import DEFAULT_HTTP_TIMEOUT


class HttpAdapterProtocol(Protocol):
    """Minimal HTTP adapter protocol (manager-facing)."""

    def head_status(self, url: str) -> int: ...


class HttpAdapter:
    """Issues unauthenticated requests; errors bubble up to the caller.

    Each call is a standalone ``requests.head``, so no connection state is
    held between calls or shared across threads.
    """

    def __init__(self, *, timeout: float = DEFAULT_HTTP_TIMEOUT) -> None:
        self._timeout = timeout

    def head_status(self, url: str) -> int:
        """Return the status code of a HEAD request to ``url``.
        Raises requests exceptions on transport failure.
        """
        response = requests.head(url, timeout=self._timeout, allow_redirects=True)
        return response.status_code
