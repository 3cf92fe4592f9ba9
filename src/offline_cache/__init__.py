"""Offline Cache - request interception with versioned cache generations.

This package provides a layered architecture for an offline-capable
caching layer between clients and an origin:

Layers:
    - protocols: Interface contracts (CacheStore, OriginClient, LifecycleHandler)
    - repositories: Data access implementations (memory, Redis, httpx)
    - services: Strategies, generation management and the lifecycle state machine
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from offline_cache.repositories import HttpxOriginClient, InMemoryCacheRepository
    from offline_cache.services import WorkerConfig, WorkerRegistration

    registration = WorkerRegistration(
        store=InMemoryCacheRepository.create(),
        origin=HttpxOriginClient.create(),
    )
    await registration.register(WorkerConfig.from_settings(get_settings()))
    response = await registration.dispatch_fetch(request)
    ```

For HTTP API:
    ```python
    from offline_cache.api.app import app
    ```
"""

from offline_cache.config import Settings, get_redis_client, get_settings
from offline_cache.entities import (
    CacheGeneration,
    ControlMessage,
    ControlReply,
    LifecycleState,
    RequestClass,
    RequestEntity,
    ResponseEntity,
)
from offline_cache.errors import (
    InvalidGenerationName,
    InvalidTransition,
    OfflineCacheError,
    OriginUnreachable,
    PopulationError,
    UnknownControlMessage,
)
from offline_cache.handlers import WorkerHandler
from offline_cache.protocols import CacheStore, LifecycleHandler, OriginClient, ReplyChannel
from offline_cache.repositories import HttpxOriginClient, InMemoryCacheRepository, RedisCacheRepository
from offline_cache.services import (
    GenerationManager,
    LifecycleController,
    StrategySelector,
    TaskSupervisor,
    WorkerConfig,
    WorkerRegistration,
)

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "get_redis_client",
    "WorkerConfig",
    # Protocols (interfaces)
    "CacheStore",
    "LifecycleHandler",
    "OriginClient",
    "ReplyChannel",
    # Services (business logic)
    "GenerationManager",
    "LifecycleController",
    "StrategySelector",
    "TaskSupervisor",
    "WorkerRegistration",
    # Handlers (HTTP)
    "WorkerHandler",
    # Repositories (data access)
    "HttpxOriginClient",
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    # Entities (domain models)
    "CacheGeneration",
    "ControlMessage",
    "ControlReply",
    "LifecycleState",
    "RequestClass",
    "RequestEntity",
    "ResponseEntity",
    # Errors
    "OfflineCacheError",
    "InvalidGenerationName",
    "InvalidTransition",
    "OriginUnreachable",
    "PopulationError",
    "UnknownControlMessage",
]
