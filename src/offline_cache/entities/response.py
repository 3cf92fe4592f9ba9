"""Cached or synthesized response domain entity."""

import time
from dataclasses import dataclass, field, replace

PLAIN_TEXT = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class ResponseEntity:
    """Domain entity for a response served to the client.

    Stores hand out copies of their entries, so a response returned to a
    caller is never changed by a later write to the same key.

    Attributes:
        status: HTTP status code
        headers: Response headers (lower-case names)
        body: Raw body bytes
        inserted_at: Unix timestamp of when the entry was stored or built
        set_cookies: Set-Cookie values, kept apart from ``headers`` because
            they cannot be combined into one header; never stored
    """

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    inserted_at: float = field(default_factory=time.time)
    set_cookies: tuple[str, ...] = ()

    @classmethod
    def text(cls, status: int, message: str) -> "ResponseEntity":
        """Build a plain-text response, used as the last-resort reply."""
        return cls(
            status=status,
            headers={"content-type": PLAIN_TEXT},
            body=message.encode("utf-8"),
        )

    @property
    def ok(self) -> bool:
        """Only status 200 responses are eligible for caching."""
        return self.status == 200

    def copy(self, **changes) -> "ResponseEntity":
        """Return an independent copy, optionally with fields replaced."""
        changes.setdefault("headers", dict(self.headers))
        return replace(self, **changes)

    def for_storage(self) -> "ResponseEntity":
        """Copy suitable for a cache entry: per-client cookies are dropped."""
        return self.copy(set_cookies=())
