"""Tests for the Redis cache store against a dict-backed client double."""

import pytest
import redis

from offline_cache.entities import ResponseEntity
from offline_cache.protocols import CacheStore
from offline_cache.repositories import RedisCacheRepository


class FakePipeline:
    def __init__(self, client: "FakeRedis") -> None:
        self._client = client
        self._ops: list = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self._ops.append((name, args, kwargs))
            return self

        return queue

    def execute(self) -> list:
        return [getattr(self._client, name)(*args, **kwargs) for name, args, kwargs in self._ops]


class FakeRedis:
    """The handful of hash commands the repository uses, bytes in and out."""

    def __init__(self, healthy: bool = True) -> None:
        self.hashes: dict[bytes, dict[bytes, bytes]] = {}
        self.healthy = healthy

    @staticmethod
    def _b(value) -> bytes:
        return value if isinstance(value, bytes) else str(value).encode()

    def pipeline(self) -> FakePipeline:
        return FakePipeline(self)

    def hset(self, key, field, value) -> int:
        bucket = self.hashes.setdefault(self._b(key), {})
        is_new = self._b(field) not in bucket
        bucket[self._b(field)] = self._b(value)
        return int(is_new)

    def hsetnx(self, key, field, value) -> int:
        bucket = self.hashes.setdefault(self._b(key), {})
        if self._b(field) in bucket:
            return 0
        bucket[self._b(field)] = self._b(value)
        return 1

    def hget(self, key, field):
        return self.hashes.get(self._b(key), {}).get(self._b(field))

    def hgetall(self, key) -> dict:
        return dict(self.hashes.get(self._b(key), {}))

    def hexists(self, key, field) -> bool:
        return self._b(field) in self.hashes.get(self._b(key), {})

    def hkeys(self, key) -> list:
        return list(self.hashes.get(self._b(key), {}))

    def hlen(self, key) -> int:
        return len(self.hashes.get(self._b(key), {}))

    def hdel(self, key, field) -> int:
        bucket = self.hashes.get(self._b(key), {})
        return int(bucket.pop(self._b(field), None) is not None)

    def delete(self, key) -> int:
        return int(self.hashes.pop(self._b(key), None) is not None)

    def ping(self) -> bool:
        if not self.healthy:
            raise redis.ConnectionError("down")
        return True


@pytest.fixture
def client() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def repo(client) -> RedisCacheRepository:
    return RedisCacheRepository(redis_client=client, namespace="test")


def test_satisfies_protocol(repo):
    assert isinstance(repo, CacheStore)


def test_round_trips_binary_bodies_and_headers(repo):
    entry = ResponseEntity(status=200, headers={"content-type": "image/png"}, body=b"\x89PNG\x00\xff")
    repo.put("app-v1.0.0", "GET http://app.test/logo.png", entry)

    stored = repo.get("app-v1.0.0", "GET http://app.test/logo.png")
    assert stored == entry


def test_layout_uses_namespace(repo, client):
    repo.put("app-v1.0.0", "GET http://app.test/", ResponseEntity(status=200, body=b"home"))

    assert b"test:generations" in client.hashes
    assert b"test:gen:app-v1.0.0" in client.hashes
    assert repo.has_generation("app-v1.0.0")


def test_query_strings_are_distinct_keys(repo):
    repo.put("app-v1.0.0", "GET http://app.test/calc?x=1", ResponseEntity(status=200, body=b"1"))

    assert repo.get("app-v1.0.0", "GET http://app.test/calc?x=2") is None
    assert repo.keys("app-v1.0.0") == ["GET http://app.test/calc?x=1"]


def test_open_keeps_creation_time(repo):
    first = repo.open("app-v1.0.0")
    second = repo.open("app-v1.0.0")

    assert first.created_at == second.created_at


def test_delete_generation_removes_entries_and_registry(repo):
    repo.put("app-v1.0.0", "GET http://app.test/", ResponseEntity(status=200))
    repo.put("app-v2.0.0", "GET http://app.test/", ResponseEntity(status=200))

    assert repo.delete_generation("app-v1.0.0") is True
    assert repo.delete_generation("app-v1.0.0") is False
    assert [gen.name for gen in repo.list_generations()] == ["app-v2.0.0"]
    assert repo.count("app-v1.0.0") == 0


def test_unreadable_entry_is_treated_as_absent(repo, client):
    client.hset("test:gen:app-v1.0.0", "GET http://app.test/", b"not json")

    assert repo.get("app-v1.0.0", "GET http://app.test/") is None


def test_health_check_reports_connection_errors():
    assert RedisCacheRepository(redis_client=FakeRedis(), namespace="t").health_check() is True
    assert RedisCacheRepository(redis_client=FakeRedis(healthy=False), namespace="t").health_check() is False


def test_stats(repo):
    repo.put("app-v1.0.0", "GET http://app.test/", ResponseEntity(status=200))
    repo.put("app-v1.0.0", "GET http://app.test/a.js", ResponseEntity(status=200))

    stats = repo.get_stats()
    assert stats["backend"] == "redis"
    assert stats["namespace"] == "test"
    assert stats["generations"] == {"app-v1.0.0": 2}
    assert stats["total_entries"] == 2
