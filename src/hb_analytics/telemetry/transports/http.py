"""HTTP transport: fire-and-forget PUT to the collection endpoint."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from .base import Transport


logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json; charset=utf-8"


@dataclass
class HttpTransport(Transport):
    """
    Sends each payload as an HTTP PUT on a background task.

    The caller never awaits the request. Failures (connection errors,
    timeouts, non-2xx responses) are logged and dropped; there is no retry.

    Config:
        timeout_seconds: Per-request timeout
        method: HTTP method (default: PUT)
        client: Pre-built httpx.AsyncClient (not closed by this transport)
    """
    timeout_seconds: float = 10.0
    method: str = "PUT"
    client: httpx.AsyncClient | None = None

    # Internal state
    _owns_client: bool = field(default=False, init=False)
    _pending: set[asyncio.Task] = field(default_factory=set, init=False)
    _stats: dict = field(default_factory=dict, init=False)

    def __post_init__(self):
        self._stats = {
            "sent": 0,
            "failed": 0,
        }

    def transmit(self, url: str, body: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop, dropping delivery to {url}")
            self._stats["failed"] += 1
            return

        task = loop.create_task(self._send(url, body))
        # Keep a strong reference until the request settles
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, url: str, body: str) -> None:
        client = self._get_client()
        try:
            response = await client.request(
                self.method,
                url,
                content=body.encode("utf-8"),
                headers={"Content-Type": CONTENT_TYPE},
            )
            if response.status_code >= 400:
                logger.warning(f"Analytics endpoint returned {response.status_code} for {url}")
                self._stats["failed"] += 1
                return
            self._stats["sent"] += 1
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Analytics delivery to {url} failed: {e}")
            self._stats["failed"] += 1

    def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout_seconds)
            self._owns_client = True
        return self.client

    async def drain(self) -> None:
        """Wait until every in-flight request has settled."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
            self._owns_client = False

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    @property
    def stats(self) -> dict:
        """Get transport statistics."""
        return {
            **self._stats,
            "in_flight": self.in_flight,
        }
