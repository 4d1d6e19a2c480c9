# src/cotask/connectors/http_connector.py

from __future__ import annotations

"""
HTTP collaborator built on httpx.

GET requests run on a worker thread pool; the engine polls the pending
future like any other external operation. Transport details (timeouts,
redirects, status handling) live here and nowhere else.
"""

import logging
from concurrent.futures import Executor
from typing import Any

import httpx

from ..config import Settings, get_settings
from ..core.errors import OperationFailure
from ..core.external import ExternalOperation
from ..core.signals import Poll, TaskResult
from .futures_connector import FuturesCollaborator

logger = logging.getLogger(__name__)


def _make_timeout(settings: Settings) -> httpx.Timeout:
    return httpx.Timeout(
        connect=settings.http_connect_timeout,
        read=settings.http_read_timeout,
        write=10.0,
        pool=settings.http_connect_timeout,
    )


class HttpFetcher:
    """
    Fetches URLs as external operations.

    - 2xx          -> Success(body text)
    - other status -> Failure("http_status", "HTTP error: <status>")
    - network/timeouts -> Failure("network", ...)
    """

    def __init__(
            self,
            settings: Settings | None = None,
            *,
            client: httpx.Client | None = None,
            executor: Executor | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=_make_timeout(self.settings),
            follow_redirects=self.settings.http_follow_redirects,
            headers={"User-Agent": self.settings.app_name},
        )
        self._futures = FuturesCollaborator(executor, max_workers=self.settings.http_workers)

    def _get(self, url: str) -> str:
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise OperationFailure("network", f"timeout fetching {url}: {e}") from e
        except httpx.HTTPError as e:
            raise OperationFailure("network", f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise OperationFailure("http_status", f"HTTP error: {response.status_code}")

        body = response.text
        logger.info("Fetched %d bytes from %s", len(body), url)
        return body

    def start(self, request: str) -> Any:
        logger.debug("HTTP GET %s", request)
        return self._futures.start(lambda: self._get(request))

    def poll(self, handle: Any) -> Poll[TaskResult]:
        return self._futures.poll(handle)

    def fetch(self, url: str) -> ExternalOperation:
        return ExternalOperation(self, url, name=f"fetch {url}")

    def close(self) -> None:
        # Requests already on a worker thread still use the client.
        self._futures.close(wait=True)
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
