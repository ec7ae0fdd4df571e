"""Request/response transport: the only place that touches the network."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from storyfeed.errors import TransportError

if TYPE_CHECKING:
    from storyfeed.config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Response:
    """Status and body of one completed request."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        """Only 200 counts as success."""
        return self.status_code == 200


@runtime_checkable
class Transport(Protocol):
    """Minimal transport protocol: GET a URL, close when done."""

    async def get(self, url: str) -> Response:
        """Fetch ``url``.

        Raises:
            TransportError: If no response could be obtained at all.
        """
        ...

    async def aclose(self) -> None:
        """Release any pooled connections."""
        ...


class HttpxTransport:
    """Transport backed by a shared ``httpx.AsyncClient``.

    Pass ``client`` to reuse an existing client (for example one built on
    ``httpx.MockTransport``); the transport then does not own it and
    ``aclose`` leaves it open.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_s: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            headers = {"Accept": "application/json"}
            if user_agent:
                headers["User-Agent"] = user_agent
            client = httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_s),
                follow_redirects=True,
                headers=headers,
            )
        self._client = client

    @classmethod
    def from_config(cls, config: Config) -> HttpxTransport:
        """Build a transport honouring the configured timeout and user agent."""
        return cls(timeout_s=config.timeout_s, user_agent=config.user_agent)

    async def get(self, url: str) -> Response:
        """GET ``url`` and return its status and decoded body."""
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            logger.debug("GET %s failed: %s", url, exc)
            raise TransportError(
                f"Request to {url} failed: {exc}",
                hint="Check network connectivity and the configured endpoint.",
                url=url,
            ) from exc
        return Response(status_code=response.status_code, text=response.text)

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
