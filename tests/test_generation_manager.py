"""Tests for generation population, promotion and purging."""

import pytest

from offline_cache.entities import ResponseEntity
from offline_cache.errors import PopulationError
from offline_cache.services import GenerationManager

from .conftest import ORIGIN, url


@pytest.fixture
def manager(store, origin) -> GenerationManager:
    return GenerationManager(store=store, origin=origin, app_id="app")


@pytest.mark.asyncio
async def test_populate_stores_every_resource(manager, store, origin):
    origin.serve("/a.html", "<p>a</p>")

    count = await manager.populate("app-v1.0.0", ORIGIN, ["/a.html", "/offline.html"])

    assert count == 2
    assert store.count("app-v1.0.0") == 2
    assert sorted(store.keys("app-v1.0.0")) == [f"GET {url('/a.html')}", f"GET {url('/offline.html')}"]


@pytest.mark.asyncio
async def test_populate_failure_reports_every_failed_resource(manager, origin):
    origin.fail("/a.html")
    origin.serve("/b.html", "gone", status=404)

    with pytest.raises(PopulationError) as exc_info:
        await manager.populate("app-v2.0.0", ORIGIN, ["/a.html", "/b.html", "/offline.html"])

    assert exc_info.value.generation == "app-v2.0.0"
    assert set(exc_info.value.failures) == {url("/a.html"), url("/b.html")}
    assert exc_info.value.failures[url("/b.html")] == "status 404"


@pytest.mark.asyncio
async def test_failed_populate_leaves_other_generations_untouched(manager, store, origin):
    """A failed populate of v2 does not alter anything readable under v1."""
    await manager.populate("app-v1.0.0", ORIGIN, ["/", "/offline.html"])
    before = {key: store.get("app-v1.0.0", key) for key in store.keys("app-v1.0.0")}

    origin.serve("/", "<h1>home v2</h1>")
    origin.fail("/offline.html")
    with pytest.raises(PopulationError):
        await manager.populate("app-v2.0.0", ORIGIN, ["/", "/offline.html"])

    after = {key: store.get("app-v1.0.0", key) for key in store.keys("app-v1.0.0")}
    assert after == before
    assert store.count("app-v2.0.0") == 0


@pytest.mark.asyncio
async def test_failed_repopulate_keeps_existing_entries(manager, store, origin):
    await manager.populate("app-v1.0.0", ORIGIN, ["/", "/offline.html"])
    origin.offline = True

    with pytest.raises(PopulationError):
        await manager.populate("app-v1.0.0", ORIGIN, ["/", "/offline.html"])

    assert store.get("app-v1.0.0", f"GET {url('/')}").body == b"<h1>home</h1>"


def test_purge_others_keeps_only_current(manager, store):
    store.open("app-v1.0.0")
    store.open("app-v2.0.0")

    deleted = manager.purge_others("app-v2.0.0")

    assert deleted == ["app-v1.0.0"]
    assert [gen.name for gen in store.list_generations()] == ["app-v2.0.0"]


def test_purge_others_is_idempotent(manager, store):
    store.put("app-v1.0.0", "GET http://app.test/", ResponseEntity(status=200, body=b"old"))
    store.put("app-v2.0.0", "GET http://app.test/", ResponseEntity(status=200, body=b"new"))

    manager.purge_others("app-v2.0.0")
    second = manager.purge_others("app-v2.0.0")

    assert second == []
    assert store.get("app-v2.0.0", "GET http://app.test/").body == b"new"
    assert store.count("app-v2.0.0") == 1


def test_purge_others_with_no_generations(manager):
    assert manager.purge_others("app-v1.0.0") == []


def test_purge_ignores_other_applications(manager, store):
    store.open("other-v1.0.0")
    store.open("app-v1.0.0")

    manager.purge_others("app-v2.0.0")

    assert [gen.name for gen in store.list_generations()] == ["other-v1.0.0"]


def test_purge_ignores_apps_sharing_the_id_prefix(manager, store):
    store.open("app-admin-v3.0.0")
    store.open("app-v1.0.0")
    store.open("app-v0.9.0")

    assert manager.purge_others("app-v1.0.0") == ["app-v0.9.0"]
    assert sorted(gen.name for gen in store.list_generations()) == ["app-admin-v3.0.0", "app-v1.0.0"]
    assert manager.clear_all() == ["app-v1.0.0"]
    assert [gen.name for gen in store.list_generations()] == ["app-admin-v3.0.0"]


def test_promote_and_clear_all(manager, store):
    manager.promote("app-v1.0.0")
    store.open("other-v1.0.0")

    assert manager.current == "app-v1.0.0"
    assert manager.clear_all() == ["app-v1.0.0"]
    assert manager.current is None
    assert [gen.name for gen in store.list_generations()] == ["other-v1.0.0"]


def test_generations_sorted_by_version(manager, store):
    for name in ("app-v1.10.0", "app-v1.2.0", "other-v9.0.0"):
        store.open(name)

    assert [gen.name for gen in manager.generations()] == ["app-v1.2.0", "app-v1.10.0"]
