"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: shared doubles live here so each test
module does not grow its own transport stub.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import json
from typing import Any

from storyfeed.errors import TransportError
from storyfeed.transport import Response

INDEX_URL = "https://example.test/top.json"
ITEM_URL_TEMPLATE = "https://example.test/item/{id}.json"


def item_url(item_id: int) -> str:
    return ITEM_URL_TEMPLATE.format(id=item_id)


def item_payload(item_id: int, **overrides: Any) -> dict[str, Any]:
    """Return a record payload valid for both schema variants."""
    payload: dict[str, Any] = {
        "id": item_id,
        "title": f"Story {item_id}",
        "url": f"https://example.test/story/{item_id}",
        "score": item_id * 10,
        "by": "someone",
        "type": "story",
    }
    payload.update(overrides)
    return payload


@dataclass
class FakeTransport:
    """Transport test double serving canned responses by URL.

    Records every requested URL. Unknown URLs answer 404. A route may map to a
    ``TransportError`` to simulate a connection failure, and ``delays`` lets a
    test control completion order.
    """

    routes: dict[str, Response | TransportError] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    requested: list[str] = field(default_factory=list)
    closed: bool = False

    def serve_index(self, body: Any, status_code: int = 200) -> None:
        text = body if isinstance(body, str) else json.dumps(body)
        self.routes[INDEX_URL] = Response(status_code, text)

    def serve_item(self, item_id: int, body: Any, status_code: int = 200) -> None:
        text = body if isinstance(body, str) else json.dumps(body)
        self.routes[item_url(item_id)] = Response(status_code, text)

    def serve_items(self, ids: list[int]) -> None:
        for item_id in ids:
            self.serve_item(item_id, item_payload(item_id))

    def fail(self, url: str) -> None:
        self.routes[url] = TransportError(f"Request to {url} failed", url=url)

    @property
    def item_requests(self) -> list[str]:
        return [u for u in self.requested if u != INDEX_URL]

    async def get(self, url: str) -> Response:
        self.requested.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        route = self.routes.get(url, Response(404, "not found"))
        if isinstance(route, TransportError):
            raise route
        return route

    async def aclose(self) -> None:
        self.closed = True
