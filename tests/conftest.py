"""Shared test fixtures.

No external services: the origin is a scripted fake implementing the
OriginClient protocol and the store is the in-memory repository.
"""

import asyncio

import pytest

from offline_cache.entities import RequestEntity, ResponseEntity
from offline_cache.errors import OriginUnreachable
from offline_cache.repositories import InMemoryCacheRepository
from offline_cache.services import TaskSupervisor, WorkerConfig, WorkerMetrics

ORIGIN = "http://app.test"


def url(path: str) -> str:
    return f"{ORIGIN}{path}"


def get(path: str, **kwargs) -> RequestEntity:
    return RequestEntity(method="GET", url=url(path), **kwargs)


def navigate(path: str) -> RequestEntity:
    return RequestEntity(method="GET", url=url(path), destination="document", mode="navigate")


class FakeOrigin:
    """Scripted origin: unknown URLs and URLs marked down are unreachable."""

    def __init__(self) -> None:
        self.responses: dict[str, ResponseEntity] = {}
        self.down: set[str] = set()
        self.offline = False
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    def serve(self, path_or_url: str, body: bytes | str = b"", status: int = 200, headers=None) -> None:
        target = path_or_url if "://" in path_or_url else url(path_or_url)
        if isinstance(body, str):
            body = body.encode()
        self.responses[target] = ResponseEntity(status=status, headers=dict(headers or {}), body=body)
        self.down.discard(target)

    def fail(self, path_or_url: str) -> None:
        self.down.add(path_or_url if "://" in path_or_url else url(path_or_url))

    async def fetch(self, request: RequestEntity) -> ResponseEntity:
        self.calls.append(request.cache_key)
        if self.gate is not None:
            await self.gate.wait()
        if self.offline or request.url in self.down or request.url not in self.responses:
            raise OriginUnreachable(request.url, "offline")
        return self.responses[request.url].copy()

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def origin() -> FakeOrigin:
    """Origin serving a small site with an offline page."""
    fake = FakeOrigin()
    fake.serve("/", "<h1>home</h1>", headers={"content-type": "text/html"})
    fake.serve("/offline.html", "<h1>offline</h1>", headers={"content-type": "text/html"})
    fake.serve("/app.js", "console.log('v1')", headers={"content-type": "text/javascript"})
    return fake


@pytest.fixture
def store() -> InMemoryCacheRepository:
    return InMemoryCacheRepository()


@pytest.fixture
def metrics() -> WorkerMetrics:
    return WorkerMetrics()


@pytest.fixture
def supervisor() -> TaskSupervisor:
    return TaskSupervisor(max_concurrency=4)


@pytest.fixture
def config() -> WorkerConfig:
    return WorkerConfig(
        app_id="app",
        version="1.0.0",
        origin=ORIGIN,
        resources=("/", "/offline.html", "/app.js"),
        offline_path="/offline.html",
    )
