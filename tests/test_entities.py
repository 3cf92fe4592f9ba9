"""Tests for domain entities."""

import pytest

from offline_cache.entities import (
    CacheGeneration,
    ControlMessage,
    RequestEntity,
    ResponseEntity,
    generation_name,
    resolve_url,
)
from offline_cache.errors import InvalidGenerationName


def test_cache_key_includes_method_and_query():
    """Requests differing only in query string have different keys."""
    first = RequestEntity(method="get", url="http://app.test/calc?x=1")
    second = RequestEntity(method="GET", url="http://app.test/calc?x=2")

    assert first.cache_key == "GET http://app.test/calc?x=1"
    assert first.cache_key != second.cache_key


def test_for_path_builds_absolute_get():
    request = RequestEntity.for_path("http://app.test", "/offline.html")

    assert request.method == "GET"
    assert request.url == "http://app.test/offline.html"
    assert not request.has_query


@pytest.mark.parametrize(
    "origin",
    ["http://app.test", "http://app.test/", "http://APP.test", "http://app.test:80"],
)
def test_resolve_url_normalizes_origin_spelling(origin):
    assert resolve_url(origin, "/app.js") == "http://app.test/app.js"
    assert resolve_url(origin, "/rates", "from=eur") == "http://app.test/rates?from=eur"
    assert RequestEntity.for_path(origin, "/index.html?v=2").url == "http://app.test/index.html?v=2"


def test_resolve_url_keeps_base_path():
    assert resolve_url("http://app.test/site", "/app.js") == "http://app.test/site/app.js"
    assert resolve_url("http://app.test/site/", "/") == "http://app.test/site/"
    assert resolve_url("https://app.test:8443/site", "/a.css") == "https://app.test:8443/site/a.css"


def test_navigation_flags():
    assert RequestEntity(method="GET", url="http://app.test/", destination="document").is_navigation
    assert RequestEntity(method="GET", url="http://app.test/", mode="navigate").is_navigation
    assert not RequestEntity(method="GET", url="http://app.test/a.js", destination="script").is_navigation


def test_text_response_is_plain_text():
    response = ResponseEntity.text(503, "Resource unavailable")

    assert response.status == 503
    assert response.headers["content-type"] == "text/plain; charset=utf-8"
    assert response.body == b"Resource unavailable"
    assert not response.ok


def test_response_copy_does_not_share_headers():
    original = ResponseEntity(status=200, headers={"etag": "a"}, body=b"x")
    copied = original.copy()
    copied.headers["etag"] = "b"

    assert original.headers["etag"] == "a"


def test_generation_name_format():
    assert generation_name("m2-calculators", "1.2.0") == "m2-calculators-v1.2.0"

    with pytest.raises(InvalidGenerationName):
        generation_name("app", "latest")


def test_generation_parses_app_id_and_version():
    gen = CacheGeneration(name="m2-calculators-v1.2.0-beta.1")

    assert gen.app_id == "m2-calculators"
    assert gen.version == "1.2.0-beta.1"
    assert gen.belongs_to("m2-calculators")
    assert not gen.belongs_to("other")


def test_generation_version_ordering():
    names = ["app-v1.10.0", "app-v1.2.0", "app-v1.2.0-rc.1", "app-v0.9.9"]
    ordered = sorted((CacheGeneration(name=n) for n in names), key=lambda g: g.version_key)

    assert [g.name for g in ordered] == ["app-v0.9.9", "app-v1.2.0-rc.1", "app-v1.2.0", "app-v1.10.0"]


def test_control_message_accepts_legacy_spellings():
    assert ControlMessage(type="SKIP_WAITING").type == "skip-wait"
    assert ControlMessage(type="GET_VERSION").type == "get-version"
    assert ControlMessage(type="clear-cache").type == "clear-cache"
    assert not ControlMessage(type="get-version").expects_reply
