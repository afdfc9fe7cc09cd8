"""
Pytest configuration for the toolchat test suite.

Provides a recording ``httpx.MockTransport`` factory so HTTP-backed tools and
providers can be exercised without network access.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Build a transport answering by URL path.

    ``make_transport({"/v1/search": {...}})`` answers JSON bodies;
    a value of ``httpx.Response`` is returned as-is, and a callable is
    called with the request.  Unknown paths answer 404.
    """

    def _factory(routes: dict[str, Any]) -> RecordingTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            answer = routes.get(request.url.path)
            if answer is None:
                return httpx.Response(404, text="not found")
            if callable(answer):
                answer = answer(request)
            if isinstance(answer, httpx.Response):
                return answer
            return httpx.Response(200, json=answer)

        return RecordingTransport(handler)

    return _factory
