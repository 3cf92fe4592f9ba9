"""httpx-based origin client.

Forwards intercepted requests to the origin with an ``httpx.AsyncClient``.
Transport failures become ``OriginUnreachable``; every HTTP status,
including errors, comes back as a ``ResponseEntity``.
"""

import httpx

from offline_cache.config import get_settings
from offline_cache.entities import RequestEntity, ResponseEntity
from offline_cache.errors import OriginUnreachable
from offline_cache.logger import get_logger

logger = get_logger(__name__)

# Not meaningful once the body has been read and decoded by httpx.
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "content-encoding",
        "content-length",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)

FORWARDED_REQUEST_HEADERS = frozenset(
    {
        "accept",
        "accept-language",
        "authorization",
        "content-type",
        "cookie",
        "user-agent",
    }
)


class HttpxOriginClient:
    """Origin client satisfying the OriginClient protocol.

    Example:
        ```python
        origin = HttpxOriginClient.create(timeout=5.0)
        response = await origin.fetch(RequestEntity.for_path("http://localhost:8080", "/"))
        await origin.aclose()
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the origin client.

        Args:
            client: Preconfigured async client (tests pass one with a
                MockTransport). If None, creates one.
            timeout: Transport timeout in seconds. Defaults to settings.
        """
        self._timeout = timeout or get_settings().origin_timeout
        self._client = client or httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)

    @classmethod
    def create(cls, timeout: float | None = None) -> "HttpxOriginClient":
        """Factory method to create HttpxOriginClient with defaults.

        Args:
            timeout: Transport timeout in seconds. If None, uses settings.

        Returns:
            Configured HttpxOriginClient
        """
        return cls(timeout=timeout)

    async def fetch(self, request: RequestEntity) -> ResponseEntity:
        """Forward a request to the origin.

        Args:
            request: The request to forward

        Returns:
            The origin's response, whatever its status

        Raises:
            OriginUnreachable: On connect errors, timeouts and protocol errors
        """
        forwarded = {
            name: value
            for name, value in request.headers.items()
            if name.lower() in FORWARDED_REQUEST_HEADERS
        }
        try:
            response = await self._client.request(
                request.method, request.url, headers=forwarded, content=request.body or None
            )
        except httpx.HTTPError as e:
            logger.debug("Origin fetch failed for %s: %s", request.url, e)
            raise OriginUnreachable(request.url, str(e) or type(e).__name__) from e

        headers: dict[str, str] = {}
        cookies: list[str] = []
        for name, value in response.headers.multi_items():
            name = name.lower()
            if name in HOP_BY_HOP_HEADERS:
                continue
            if name == "set-cookie":
                cookies.append(value)
            elif name in headers:
                headers[name] = f"{headers[name]}, {value}"
            else:
                headers[name] = value

        return ResponseEntity(
            status=response.status_code,
            headers=headers,
            body=response.content,
            set_cookies=tuple(cookies),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
