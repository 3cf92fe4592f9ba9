"""Intercepted request domain entity."""

from dataclasses import dataclass, field
from enum import Enum

import httpx


def resolve_url(origin: str, path: str, query: str = "") -> str:
    """Absolute URL for ``path`` under ``origin``, keeping any base path.

    Host case and default ports are normalized, so every request for the
    same resource gets the same cache key however the origin was spelled.
    """
    path, _, inline_query = path.partition("?")
    base = httpx.URL(origin)
    url = base.copy_with(path=f"{base.path.rstrip('/')}/{path.lstrip('/')}")
    query = query or inline_query
    if query:
        url = url.copy_with(query=query.encode())
    return str(url)


class RequestClass(str, Enum):
    """Handling class assigned to an intercepted request."""

    DOCUMENT = "document"
    DYNAMIC = "dynamic"
    STATIC = "static"


@dataclass(frozen=True)
class RequestEntity:
    """Domain entity for a request seen by the worker.

    Attributes:
        method: Upper-case HTTP method
        url: Absolute URL, query string included
        destination: Fetch destination ("document" for a top-level
            navigation, "script", "style", "" when unknown)
        mode: Fetch mode ("navigate", "cors", "no-cors", "" when unknown)
        headers: Request headers forwarded to the origin
        body: Request body, forwarded for non-GET methods
    """

    method: str
    url: str
    destination: str = ""
    mode: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

    @classmethod
    def for_path(cls, origin: str, path: str) -> "RequestEntity":
        """Build a GET request for a path relative to ``origin``."""
        return cls(method="GET", url=resolve_url(origin, path))

    @property
    def cache_key(self) -> str:
        """Storage key: method plus the exact absolute URL."""
        return f"{self.method} {self.url}"

    @property
    def parsed_url(self) -> httpx.URL:
        return httpx.URL(self.url)

    @property
    def path(self) -> str:
        return self.parsed_url.path

    @property
    def has_query(self) -> bool:
        return bool(self.parsed_url.query)

    @property
    def is_navigation(self) -> bool:
        """True for top-level document navigations."""
        return self.destination == "document" or self.mode == "navigate"
