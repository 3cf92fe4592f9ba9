"""Origin client protocol.

Defines the interface for fetching a request from the origin resource
provider.

Implementations can include:
- httpx async client (default)
- Test doubles that script responses and failures
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import RequestEntity, ResponseEntity


@runtime_checkable
class OriginClient(Protocol):
    """Protocol for origin fetchers."""

    async def fetch(self, request: RequestEntity) -> ResponseEntity:
        """Fetch a request from the origin.

        Non-200 statuses are returned, not raised.

        Args:
            request: The request to forward

        Returns:
            The origin's response

        Raises:
            OriginUnreachable: If no response could be obtained
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
