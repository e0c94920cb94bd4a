"""
Shared test fixtures.

The TripVerse backend is replaced by an ``httpx.MockTransport`` route table
and Redis by an ``AsyncMock``, so tests run without either service.  The
app's lifespan is not run under ``ASGITransport``; the dependencies that
would read its state are overridden instead.
"""

from typing import AsyncGenerator, Callable, Union
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tripverse.api.app import create_app
from tripverse.api.dependencies import get_http_client
from tripverse.api.middleware import limiter
from tripverse.infrastructure.http_client import create_http_client
from tripverse.infrastructure.redis_client import get_redis

SESSION_COOKIE = "tripverse_session=abc123"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Route table keyed by (method, path); unknown routes answer 404."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        body: Union[dict, list, None] = None,
        status: int = 200,
        headers: Union[dict, list, None] = None,
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if body is None:
                return httpx.Response(status, headers=headers)
            return httpx.Response(status, json=body, headers=headers)

        self.routes[(method.upper(), path)] = handler

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        return handler(request)

    def last(self, method: str, path: str) -> httpx.Request:
        matches = [
            r for r in self.requests if r.method == method and r.url.path == path
        ]
        assert matches, f"no {method} {path} reached the backend"
        return matches[-1]

    def called(self, method: str, path: str) -> bool:
        return any(r.method == method and r.url.path == path for r in self.requests)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def http_client(backend) -> AsyncGenerator[httpx.AsyncClient, None]:
    client = create_http_client(transport=httpx.MockTransport(backend))
    yield client
    await client.aclose()


@pytest.fixture
def redis_mock() -> AsyncMock:
    redis = AsyncMock()
    redis.get.return_value = None
    return redis


@pytest_asyncio.fixture
async def client(http_client, redis_mock) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()

    async def _redis():
        return redis_mock

    app.dependency_overrides[get_http_client] = lambda: http_client
    app.dependency_overrides[get_redis] = _redis
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def login_as(backend):
    """Make ``/auth/me`` answer with a user of *role*; returns request headers."""

    def _login(role: str, user_id: int = 1) -> dict[str, str]:
        backend.add(
            "GET",
            "/auth/me",
            {"user": {"id": user_id, "email": f"{role}@example.com", "role": role}},
        )
        return {"Cookie": SESSION_COOKIE}

    return _login
