"""Network-first serving strategy for documents and dynamic requests."""

from offline_cache.entities import RequestClass, RequestEntity, ResponseEntity
from offline_cache.errors import OriginUnreachable
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStore, OriginClient
from offline_cache.services.metrics import WorkerMetrics

logger = get_logger(__name__)

PAGE_UNAVAILABLE = "Page unavailable offline"
DATA_UNAVAILABLE = "Data unavailable offline"


class NetworkFirstExecutor:
    """Prefer the origin, fall back to the cache, then to the offline page.

    Business logic:
    1. Fetch from the origin
    2. 200: write through to the generation and return
    3. Non-200: a dynamic request gets the origin's response unchanged
       (not cached); a document treats it as a failure
    4. Failure: cached entry if present; otherwise the offline substitute
       for documents, a synthesized 503 text response for dynamic requests
    """

    def __init__(
        self,
        store: CacheStore,
        origin: OriginClient,
        generation: str,
        offline_key: str,
        metrics: WorkerMetrics | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            store: Cache store
            origin: Origin client
            generation: Generation read and written by this executor
            offline_key: Cache key of the offline substitute
            metrics: Shared metrics, or a private instance if None
        """
        self._store = store
        self._origin = origin
        self._generation = generation
        self._offline_key = offline_key
        self._metrics = metrics or WorkerMetrics()

    async def serve(self, request: RequestEntity, request_class: RequestClass) -> ResponseEntity:
        try:
            response = await self._origin.fetch(request)
        except OriginUnreachable as e:
            logger.info("Network unavailable for %s (%s), trying cache", request.url, e.reason)
        else:
            if response.ok:
                if request.method == "GET":
                    self._store.put(self._generation, request.cache_key, response)
                self._metrics.record_network()
                return response
            if request_class is RequestClass.DYNAMIC:
                self._metrics.record_network()
                return response
            logger.info("Document %s answered %d, trying cache", request.url, response.status)

        return self._fallback(request, request_class)

    def _fallback(self, request: RequestEntity, request_class: RequestClass) -> ResponseEntity:
        cached = self._store.get(self._generation, request.cache_key)
        if cached is not None:
            self._metrics.record_cache_fallback()
            return cached

        if request_class is RequestClass.DOCUMENT:
            offline = self._store.get(self._generation, self._offline_key)
            if offline is not None:
                self._metrics.record_offline_fallback()
                return offline
            logger.warning("Offline substitute %s missing from %s", self._offline_key, self._generation)
            self._metrics.record_synthesized_error()
            return ResponseEntity.text(503, PAGE_UNAVAILABLE)

        self._metrics.record_synthesized_error()
        return ResponseEntity.text(503, DATA_UNAVAILABLE)
