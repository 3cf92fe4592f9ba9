"""Cache-first serving strategy for static assets."""

from offline_cache.entities import RequestEntity, ResponseEntity
from offline_cache.errors import OriginUnreachable
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStore, OriginClient
from offline_cache.services.metrics import WorkerMetrics
from offline_cache.services.supervisor import TaskSupervisor

logger = get_logger(__name__)

RESOURCE_UNAVAILABLE = "Resource unavailable"


class CacheFirstExecutor:
    """Serve from the cache immediately and refresh it in the background.

    Business logic:
    1. Look the request up in the generation
    2. Hit: return it, then refresh the entry from the origin without
       awaiting (failures are logged and dropped)
    3. Miss: fetch from the origin; a 200 is stored and returned, anything
       else becomes a synthesized 503 text response
    """

    def __init__(
        self,
        store: CacheStore,
        origin: OriginClient,
        supervisor: TaskSupervisor,
        generation: str,
        metrics: WorkerMetrics | None = None,
    ) -> None:
        self._store = store
        self._origin = origin
        self._supervisor = supervisor
        self._generation = generation
        self._metrics = metrics or WorkerMetrics()
        self._refreshing: set[str] = set()

    async def serve(self, request: RequestEntity) -> ResponseEntity:
        cached = self._store.get(self._generation, request.cache_key)
        if cached is not None:
            self._metrics.record_hit()
            self._schedule_refresh(request)
            return cached

        self._metrics.record_miss()
        try:
            response = await self._origin.fetch(request)
        except OriginUnreachable as e:
            logger.info("Static resource unavailable: %s (%s)", request.url, e.reason)
            self._metrics.record_synthesized_error()
            return ResponseEntity.text(503, RESOURCE_UNAVAILABLE)

        if not response.ok:
            logger.info("Static resource %s answered %d, not cached", request.url, response.status)
            self._metrics.record_synthesized_error()
            return ResponseEntity.text(503, RESOURCE_UNAVAILABLE)

        self._store.put(self._generation, request.cache_key, response)
        self._metrics.record_network()
        return response

    def _schedule_refresh(self, request: RequestEntity) -> None:
        # One pending refresh per key; later hits reuse it.
        key = request.cache_key
        if key in self._refreshing:
            return
        self._refreshing.add(key)
        self._supervisor.spawn(self._refresh_once(request), name=f"refresh {key}")

    async def _refresh_once(self, request: RequestEntity) -> None:
        try:
            await self.refresh(request)
        finally:
            self._refreshing.discard(request.cache_key)

    async def refresh(self, request: RequestEntity) -> bool:
        """Re-fetch ``request`` and overwrite its entry on a 200.

        Returns:
            True if the entry was overwritten
        """
        try:
            response = await self._origin.fetch(request)
        except OriginUnreachable:
            logger.debug("Background refresh failed for %s", request.url)
            self._metrics.record_refresh(False)
            return False

        if not response.ok:
            logger.debug("Background refresh for %s got %d, keeping entry", request.url, response.status)
            self._metrics.record_refresh(False)
            return False

        # The generation may have been purged while the fetch was in flight.
        if not self._store.has_generation(self._generation):
            logger.debug("Generation %s is gone, dropping refresh of %s", self._generation, request.url)
            self._metrics.record_refresh(False)
            return False

        self._store.put(self._generation, request.cache_key, response)
        logger.debug("Cache refreshed for %s", request.url)
        self._metrics.record_refresh(True)
        return True
