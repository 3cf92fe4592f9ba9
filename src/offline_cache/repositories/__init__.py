"""Repository layer for data access.

This layer puts external dependencies (Redis, the origin over HTTP)
behind protocol-based interfaces. Any class implementing the required
methods satisfies the protocol; nothing here inherits from it.
"""

from offline_cache.protocols import CacheStore, OriginClient

from .httpx_origin_client import HttpxOriginClient
from .memory_repository import InMemoryCacheRepository
from .redis_repository import RedisCacheRepository

__all__ = [
    "CacheStore",
    "OriginClient",
    "HttpxOriginClient",
    "InMemoryCacheRepository",
    "RedisCacheRepository",
]
