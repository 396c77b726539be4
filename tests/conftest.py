from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio

from rebrick import Rebrick, TTLCache
from rebrick.services import debug_logger

API_PREFIX = "/api/v3/"


class FakeRebrickable:
    """In-memory stand-in for the remote API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], httpx.Response | Exception] = {}
        self.calls: list[httpx.Request] = []

    def add(self, method: str, path: str, payload: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = httpx.Response(status, json=payload)

    def add_raw(self, method: str, path: str, content: bytes, status: int = 200) -> None:
        self.routes[(method, path)] = httpx.Response(status, content=content)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method, path)] = exc

    def calls_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.calls if r.method == method and self.path_of(r) == path]

    @staticmethod
    def path_of(request: httpx.Request) -> str:
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        return path.rstrip("/")

    @staticmethod
    def form(request: httpx.Request) -> dict[str, str]:
        return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, self.path_of(request)))
        if route is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if isinstance(route, Exception):
            raise route
        return httpx.Response(route.status_code, content=route.content, headers=route.headers)


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def fake_api() -> FakeRebrickable:
    return FakeRebrickable()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(name="test", clock=clock)


@pytest_asyncio.fixture
async def http_client(fake_api: FakeRebrickable):
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler)) as client:
        yield client


@pytest.fixture
def make_client(cache: TTLCache, http_client: httpx.AsyncClient):
    def _make(**kwargs: Any) -> Rebrick:
        return Rebrick("test-api-key", cache=cache, http_client=http_client, **kwargs)

    return _make


@pytest.fixture
def rebrick(make_client) -> Rebrick:
    return make_client()


@pytest.fixture
def reset_logging():
    yield
    logger = logging.getLogger(debug_logger.ROOT_LOGGER_NAME)
    for handler in debug_logger._handlers:
        logger.removeHandler(handler)
        handler.close()
    debug_logger._handlers.clear()
    logger.setLevel(logging.NOTSET)
