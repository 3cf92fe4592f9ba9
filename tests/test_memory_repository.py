"""Tests for the in-memory cache store."""

from offline_cache.entities import ResponseEntity
from offline_cache.protocols import CacheStore
from offline_cache.repositories import InMemoryCacheRepository


def test_satisfies_protocol(store):
    assert isinstance(store, CacheStore)


def test_get_absent_returns_none(store):
    assert store.get("app-v1.0.0", "GET http://app.test/") is None


def test_put_then_get(store):
    store.put("app-v1.0.0", "GET http://app.test/", ResponseEntity(status=200, body=b"home"))

    entry = store.get("app-v1.0.0", "GET http://app.test/")
    assert entry is not None
    assert entry.body == b"home"
    assert store.has_generation("app-v1.0.0")


def test_put_is_last_write_wins(store):
    key = "GET http://app.test/app.js"
    store.put("app-v1.0.0", key, ResponseEntity(status=200, body=b"one"))
    store.put("app-v1.0.0", key, ResponseEntity(status=200, body=b"two"))

    assert store.get("app-v1.0.0", key).body == b"two"
    assert store.count("app-v1.0.0") == 1


def test_returned_entry_is_isolated_from_later_writes(store):
    """A response already handed out is not changed by a later put."""
    key = "GET http://app.test/app.js"
    store.put("app-v1.0.0", key, ResponseEntity(status=200, headers={"etag": "1"}, body=b"one"))

    handed_out = store.get("app-v1.0.0", key)
    store.put("app-v1.0.0", key, ResponseEntity(status=200, headers={"etag": "2"}, body=b"two"))
    handed_out.headers["x-mutated"] = "yes"

    assert handed_out.body == b"one"
    assert handed_out.headers["etag"] == "1"
    assert "x-mutated" not in store.get("app-v1.0.0", key).headers


def test_generations_are_separate_namespaces(store):
    key = "GET http://app.test/"
    store.put("app-v1.0.0", key, ResponseEntity(status=200, body=b"v1"))
    store.put("app-v2.0.0", key, ResponseEntity(status=200, body=b"v2"))

    assert store.get("app-v1.0.0", key).body == b"v1"
    assert store.get("app-v2.0.0", key).body == b"v2"


def test_open_is_idempotent(store):
    first = store.open("app-v1.0.0")
    second = store.open("app-v1.0.0")

    assert first.created_at == second.created_at
    assert [gen.name for gen in store.list_generations()] == ["app-v1.0.0"]


def test_delete_generation(store):
    store.put("app-v1.0.0", "GET http://app.test/", ResponseEntity(status=200))

    assert store.delete_generation("app-v1.0.0") is True
    assert store.delete_generation("app-v1.0.0") is False
    assert store.keys("app-v1.0.0") == []
    assert not store.has_generation("app-v1.0.0")


def test_stats():
    store = InMemoryCacheRepository.create()
    store.put("app-v1.0.0", "GET http://app.test/", ResponseEntity(status=200))

    stats = store.get_stats()
    assert stats["backend"] == "memory"
    assert stats["generations"] == {"app-v1.0.0": 1}
    assert stats["total_entries"] == 1
    assert store.health_check()
