"""Redis implementation of CacheStore.

Layout under the namespace ``ns``:

- ``ns:generations`` - hash, generation name -> creation timestamp
- ``ns:gen:<name>`` - hash, cache key -> JSON-encoded entry

HSET/HGET on a single field are atomic, which is all the executors
need. A generation is deleted with one pipeline.
"""

import base64
import json
import time

import redis

from offline_cache.config import get_redis_client, get_settings
from offline_cache.entities import CacheGeneration, ResponseEntity
from offline_cache.logger import get_logger

logger = get_logger(__name__)


def _decode(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


class RedisCacheRepository:
    """Redis hash-per-generation store.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            namespace: Key prefix for every key this store writes.
        """
        self._client = redis_client or get_redis_client()
        self._namespace = namespace or get_settings().cache_namespace

    @classmethod
    def create(cls, namespace: str | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            namespace: Key prefix. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(namespace=namespace)

    @property
    def _registry_key(self) -> str:
        return f"{self._namespace}:generations"

    def _entries_key(self, generation: str) -> str:
        return f"{self._namespace}:gen:{generation}"

    @staticmethod
    def _serialize(entry: ResponseEntity) -> str:
        return json.dumps(
            {
                "status": entry.status,
                "headers": entry.headers,
                "body": base64.b64encode(entry.body).decode("ascii"),
                "inserted_at": entry.inserted_at,
            }
        )

    @staticmethod
    def _deserialize(raw: bytes | str) -> ResponseEntity:
        data = json.loads(_decode(raw))
        return ResponseEntity(
            status=int(data["status"]),
            headers=dict(data.get("headers") or {}),
            body=base64.b64decode(data.get("body", "")),
            inserted_at=float(data.get("inserted_at", 0.0)),
        )

    def open(self, generation: str) -> CacheGeneration:
        created_at = time.time()
        # HSETNX keeps the original timestamp when the generation exists.
        self._client.hsetnx(self._registry_key, generation, str(created_at))
        stored = self._client.hget(self._registry_key, generation)
        if stored is not None:
            created_at = float(_decode(stored))
        return CacheGeneration(name=generation, created_at=created_at)

    def get(self, generation: str, key: str) -> ResponseEntity | None:
        raw = self._client.hget(self._entries_key(generation), key)
        if raw is None:
            return None
        try:
            return self._deserialize(raw)
        except (ValueError, KeyError) as e:
            logger.warning("Discarding unreadable entry %s in %s: %s", key, generation, e)
            return None

    def put(self, generation: str, key: str, entry: ResponseEntity) -> None:
        pipe = self._client.pipeline()
        pipe.hsetnx(self._registry_key, generation, str(time.time()))
        pipe.hset(self._entries_key(generation), key, self._serialize(entry))
        pipe.execute()

    def has_generation(self, generation: str) -> bool:
        return bool(self._client.hexists(self._registry_key, generation))

    def delete_generation(self, generation: str) -> bool:
        pipe = self._client.pipeline()
        pipe.hdel(self._registry_key, generation)
        pipe.delete(self._entries_key(generation))
        removed, _ = pipe.execute()
        return bool(removed)

    def list_generations(self) -> list[CacheGeneration]:
        registry = self._client.hgetall(self._registry_key)
        return [
            CacheGeneration(name=_decode(name), created_at=float(_decode(created_at)))
            for name, created_at in registry.items()
        ]

    def keys(self, generation: str) -> list[str]:
        return [_decode(key) for key in self._client.hkeys(self._entries_key(generation))]

    def count(self, generation: str) -> int:
        return int(self._client.hlen(self._entries_key(generation)))

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def get_stats(self) -> dict:
        generations = {gen.name: self.count(gen.name) for gen in self.list_generations()}
        return {
            "backend": "redis",
            "namespace": self._namespace,
            "generations": generations,
            "total_entries": sum(generations.values()),
        }

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
