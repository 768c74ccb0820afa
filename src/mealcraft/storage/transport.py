"""
Remote request transport.

RemoteBackend talks to the server only through a RemoteTransport, so
tests and other runtimes can swap the HTTP stack out. HttpxTransport
is the default implementation.

Timeouts and retries belong to the transport; the backend issues one
request per operation and waits for it to finish.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .errors import TransportError

logger = logging.getLogger("mealcraft.storage.transport")


@dataclass(frozen=True)
class TransportResponse:
    """Status and raw body of a completed request."""

    status_code: int
    content: bytes
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body as JSON. Raises ValueError on invalid content."""
        return json.loads(self.content)


class RemoteTransport(ABC):
    """Asynchronous request/response exchange with the data server."""

    @abstractmethod
    async def request(
        self, method: str, path: str, payload: Optional[dict[str, Any]] = None
    ) -> TransportResponse:
        """Send one request and return its response.

        Args:
            method: HTTP method.
            path: Server path, starting with ``/``.
            payload: JSON body, if any.

        Raises:
            TransportError: If no response could be obtained.
        """

    async def aclose(self) -> None:
        """Release any held connections."""


class HttpxTransport(RemoteTransport):
    """RemoteTransport over an httpx.AsyncClient.

    The client is created lazily on first use and reused afterwards.

    Args:
        base_url: Server root, e.g. ``https://api.example.org``.
        timeout: Per-request timeout in seconds.
        client: Pre-built client to use instead of creating one.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def request(
        self, method: str, path: str, payload: Optional[dict[str, Any]] = None
    ) -> TransportResponse:
        client = self._get_client()
        try:
            resp = await client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise TransportError(
                f"{method} {path} failed: {exc}", url=path
            ) from exc
        return TransportResponse(
            status_code=resp.status_code,
            content=resp.content,
            url=str(resp.request.url),
        )

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
