"""Cache storage protocol.

Defines the interface for any backend that can hold named cache
generations of stored responses.

Implementations can include:
- In-process dictionaries (default)
- Redis hashes
- Any other store with atomic single-key get/put
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import CacheGeneration, ResponseEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        from offline_cache.protocols import CacheStore

        store: CacheStore = InMemoryCacheRepository()
        store: CacheStore = RedisCacheRepository.create()
        ```
    """

    def open(self, generation: str) -> CacheGeneration:
        """Create the generation if absent.

        Args:
            generation: Generation name

        Returns:
            The (possibly pre-existing) generation
        """
        ...

    def get(self, generation: str, key: str) -> ResponseEntity | None:
        """Look up an entry.

        Args:
            generation: Generation name
            key: Request cache key (method + absolute URL)

        Returns:
            A copy of the stored response, or None when absent
        """
        ...

    def put(self, generation: str, key: str, entry: ResponseEntity) -> None:
        """Store an entry, replacing any previous one (last write wins).

        Args:
            generation: Generation name, created if absent
            key: Request cache key
            entry: Response to store
        """
        ...

    def has_generation(self, generation: str) -> bool:
        """Check whether a generation exists.

        Args:
            generation: Generation name

        Returns:
            True if the generation has been opened and not deleted
        """
        ...

    def delete_generation(self, generation: str) -> bool:
        """Delete a generation and all of its entries.

        Args:
            generation: Generation name

        Returns:
            True if the generation existed, False otherwise
        """
        ...

    def list_generations(self) -> list[CacheGeneration]:
        """List every generation known to the store.

        Returns:
            Generations in no particular order
        """
        ...

    def keys(self, generation: str) -> list[str]:
        """List the cache keys stored in a generation.

        Args:
            generation: Generation name

        Returns:
            Cache keys, empty when the generation does not exist
        """
        ...

    def count(self, generation: str) -> int:
        """Count entries in a generation.

        Args:
            generation: Generation name

        Returns:
            Number of stored entries
        """
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...

    def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...
