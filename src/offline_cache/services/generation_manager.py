"""Generation manager.

The only component that creates, promotes or deletes cache generations.
Used at install time (populate) and activate time (promote and purge),
and by the clear-cache and update-cache control messages.
"""

import asyncio

from offline_cache.entities import CacheGeneration, RequestEntity, ResponseEntity, generation_prefix
from offline_cache.errors import OriginUnreachable, PopulationError
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStore, OriginClient

logger = get_logger(__name__)


class GenerationManager:
    """Owns generation naming, population and garbage collection.

    Example:
        ```python
        manager = GenerationManager(store=store, origin=origin, app_id="app")
        await manager.populate("app-v2.0.0", "http://localhost:8080", ["/", "/offline.html"])
        manager.promote("app-v2.0.0")
        manager.purge_others("app-v2.0.0")
        ```
    """

    def __init__(self, store: CacheStore, origin: OriginClient, app_id: str) -> None:
        """Initialize the generation manager.

        Args:
            store: Cache store holding every generation
            origin: Client used to fetch resources during population
            app_id: Application id; generations named ``<app_id>-...``
                belong to this manager
        """
        self._store = store
        self._origin = origin
        self._app_id = app_id
        self._prefix = generation_prefix(app_id)
        self._current: str | None = None

    @property
    def current(self) -> str | None:
        """Name of the current generation, if one has been promoted."""
        return self._current

    @property
    def prefix(self) -> str:
        return self._prefix

    def owns(self, name: str) -> bool:
        """True for ``<app_id>-v<semver>`` names of exactly this app.

        ``app-admin-v3.0.0`` shares the ``app-`` prefix but belongs to
        ``app-admin``.
        """
        return CacheGeneration(name=name).belongs_to(self._app_id)

    def generations(self) -> list[CacheGeneration]:
        """This application's generations, oldest version first."""
        owned = [gen for gen in self._store.list_generations() if self.owns(gen.name)]
        return sorted(owned, key=lambda gen: gen.version_key)

    async def _fetch_resource(self, request: RequestEntity) -> ResponseEntity:
        response = await self._origin.fetch(request)
        if not response.ok:
            raise OriginUnreachable(request.url, f"status {response.status}")
        return response

    async def populate(self, name: str, origin: str, resources: list[str] | tuple[str, ...]) -> int:
        """Fetch and store every resource into generation ``name``.

        All resources are fetched before anything is written. If any of
        them fails, nothing is written and the generation is left as it
        was, so a failed populate never changes readable content.

        Args:
            name: Generation to populate (created if absent)
            origin: Origin the resource paths are relative to
            resources: Resource paths to store

        Returns:
            Number of entries written

        Raises:
            PopulationError: If any resource could not be fetched with status 200
        """
        requests = [RequestEntity.for_path(origin, path) for path in resources]
        logger.info("Populating %s with %d resources", name, len(requests))

        results = await asyncio.gather(
            *(self._fetch_resource(request) for request in requests),
            return_exceptions=True,
        )

        failures: dict[str, str] = {}
        for request, result in zip(requests, results):
            if isinstance(result, OriginUnreachable):
                failures[request.url] = result.reason or "unreachable"
            elif isinstance(result, BaseException):
                raise result

        if failures:
            raise PopulationError(name, failures)

        self._store.open(name)
        for request, response in zip(requests, results):
            self._store.put(name, request.cache_key, response)

        logger.info("Populated %s (%d entries)", name, len(requests))
        return len(requests)

    def promote(self, name: str) -> None:
        """Mark ``name`` as the current generation."""
        self._store.open(name)
        if self._current != name:
            logger.info("Promoting generation %s (was %s)", name, self._current)
        self._current = name

    def purge_others(self, current: str) -> list[str]:
        """Delete every generation of this app except ``current``.

        Safe to call repeatedly; a second call finds nothing to delete.

        Returns:
            Names of the deleted generations
        """
        deleted = []
        for gen in self._store.list_generations():
            if self.owns(gen.name) and gen.name != current:
                if self._store.delete_generation(gen.name):
                    logger.info("Deleted stale generation %s", gen.name)
                    deleted.append(gen.name)
        return sorted(deleted)

    def clear_all(self) -> list[str]:
        """Delete every generation of this app, the current one included.

        Returns:
            Names of the deleted generations
        """
        deleted = [
            gen.name
            for gen in self._store.list_generations()
            if self.owns(gen.name) and self._store.delete_generation(gen.name)
        ]
        self._current = None
        logger.info("Cleared %d generations", len(deleted))
        return sorted(deleted)
