from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from newsgate.api.deps import get_http_client
from newsgate.main import create_app

BACKEND = "http://backend.test"

Reply = Union[Callable[[httpx.Request], httpx.Response], Exception]

_ENV_KEYS = (
    "BACKEND_URL",
    "PUBLIC_API_URL",
    "PUBLIC_APP_URL",
    "APP_ENV",
    "VERCEL_ENV",
    "RENDER",
    "BACKEND_TIMEOUT_MS",
    "BACKEND_MAX_RETRIES",
    "BACKEND_RETRY_BASE_MS",
    "BACKEND_RETRY_CAP_MS",
)


def json_reply(
    status_code: int = 200, body: Any = None, headers: list[tuple[str, str]] | None = None
) -> Callable[[httpx.Request], httpx.Response]:
    """Factory producing a fresh JSON response per backend call."""

    def reply(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body, headers=headers)

    return reply


def text_reply(status_code: int, text: str) -> Callable[[httpx.Request], httpx.Response]:
    def reply(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=text)

    return reply


class FakeBackend:
    """Scripted stand-in for the backend API behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Reply]] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, *replies: Reply) -> None:
        """Queue replies for a route; the last one repeats."""
        self.routes[(method.upper(), path)] = list(replies)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"success": False, "message": "no such route"})
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(reply, Exception):
            raise reply
        return reply(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls_to(self, method: str, path: str) -> list[httpx.Request]:
        return [c for c in self.calls if c.method == method and c.url.path == path]


@pytest.fixture
def backend_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("BACKEND_URL", BACKEND)
    monkeypatch.setenv("PUBLIC_APP_URL", "https://dailyvaibe.test")
    monkeypatch.setenv("BACKEND_MAX_RETRIES", "2")
    monkeypatch.setenv("BACKEND_RETRY_BASE_MS", "0")
    monkeypatch.setenv("BACKEND_RETRY_CAP_MS", "0")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client(backend_env: None, backend: FakeBackend) -> Iterator[TestClient]:
    app = create_app()

    async def _client() -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(transport=backend.transport) as c:
            yield c

    app.dependency_overrides[get_http_client] = _client
    with TestClient(app) as tc:
        yield tc
