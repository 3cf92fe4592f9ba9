"""Strategy selection for intercepted requests."""

import httpx

from offline_cache.entities import RequestClass, RequestEntity, ResponseEntity
from offline_cache.logger import get_logger
from offline_cache.protocols import OriginClient
from offline_cache.services.cache_first import CacheFirstExecutor
from offline_cache.services.metrics import WorkerMetrics
from offline_cache.services.network_first import NetworkFirstExecutor

logger = get_logger(__name__)


def _origin_of(url: httpx.URL) -> tuple[str, str, int | None]:
    default_ports = {"http": 80, "https": 443}
    return (url.scheme, url.host, url.port or default_ports.get(url.scheme))


class StrategySelector:
    """Classify a request and dispatch it to the matching executor.

    - cross-origin: passed to the origin client untouched, never cached
    - document, dynamic: network-first
    - static: cache-first
    """

    def __init__(
        self,
        app_origin: str,
        origin: OriginClient,
        cache_first: CacheFirstExecutor,
        network_first: NetworkFirstExecutor,
        dynamic_prefixes: tuple[str, ...] = ("/api/",),
        metrics: WorkerMetrics | None = None,
    ) -> None:
        base = httpx.URL(app_origin)
        self._app_origin = _origin_of(base)
        self._base_path = base.path.rstrip("/")
        self._origin = origin
        self._cache_first = cache_first
        self._network_first = network_first
        self._dynamic_prefixes = tuple(dynamic_prefixes)
        self._metrics = metrics or WorkerMetrics()

    def is_same_origin(self, request: RequestEntity) -> bool:
        return _origin_of(request.parsed_url) == self._app_origin

    def app_path(self, request: RequestEntity) -> str:
        """Request path relative to the application's base path."""
        path = request.path
        if self._base_path and path.startswith(self._base_path):
            return path[len(self._base_path) :] or "/"
        return path

    def classify(self, request: RequestEntity) -> RequestClass:
        """Assign exactly one handling class; first match wins.

        Depends only on the method, the path, the query string and the
        navigation flag, never on cache contents.
        """
        if request.is_navigation:
            return RequestClass.DOCUMENT
        if request.method != "GET":
            return RequestClass.DYNAMIC
        if request.has_query or self.app_path(request).startswith(self._dynamic_prefixes):
            return RequestClass.DYNAMIC
        return RequestClass.STATIC

    async def serve(self, request: RequestEntity) -> ResponseEntity:
        """Return the response to serve for ``request``.

        Raises:
            OriginUnreachable: Only for cross-origin requests, which are
                not intercepted
        """
        if not self.is_same_origin(request):
            self._metrics.record_passthrough()
            return await self._origin.fetch(request)

        request_class = self.classify(request)
        self._metrics.record_request(request_class.value)
        logger.debug("%s %s classified as %s", request.method, request.url, request_class.value)

        if request_class is RequestClass.STATIC:
            return await self._cache_first.serve(request)
        return await self._network_first.serve(request, request_class)
