"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from offline_cache.config import Settings, get_settings
from offline_cache.handlers import WorkerHandler
from offline_cache.logger import get_logger, setup_logging
from offline_cache.protocols import CacheStore, OriginClient
from offline_cache.repositories import HttpxOriginClient, InMemoryCacheRepository, RedisCacheRepository
from offline_cache.services import TaskSupervisor, WorkerConfig, WorkerRegistration

logger = get_logger(__name__)


def get_handler(request: Request) -> WorkerHandler:
    """Dependency injection for WorkerHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "worker_handler", None)
    if handler is None:
        raise RuntimeError("WorkerHandler not initialized. Check lifespan setup.")
    return handler


def build_store(settings: Settings) -> CacheStore:
    """Create the configured cache store backend."""
    if settings.cache_backend == "redis":
        return RedisCacheRepository.create(namespace=settings.cache_namespace)
    return InMemoryCacheRepository.create()


def create_lifespan(
    settings: Settings | None = None,
    store: CacheStore | None = None,
    origin: OriginClient | None = None,
):
    """Build a lifespan context manager.

    Tests pass their own store and origin; the defaults come from settings.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize all layers and store them in app.state.

        1. Store and origin client (data access)
        2. Registration (business logic), owned by the handler
        3. Handler (HTTP endpoints) - app.state.worker_handler
        """
        resolved = settings or get_settings()
        setup_logging(resolved.log_level, resolved.log_format)

        cache_store = store or build_store(resolved)
        origin_client = origin or HttpxOriginClient.create(timeout=resolved.origin_timeout)
        config = WorkerConfig.from_settings(resolved)

        registration = WorkerRegistration(
            store=cache_store,
            origin=origin_client,
            supervisor=TaskSupervisor(max_concurrency=resolved.max_background_tasks),
        )
        app.state.worker_handler = WorkerHandler(registration=registration, config=config)

        logger.info("Worker for %s starting (origin %s)", config.generation_name, config.origin)
        if resolved.install_on_startup:
            controller = await registration.register(config)
            logger.info("Startup install finished: %s is %s", controller.generation, controller.state.value)

        yield

        await registration.aclose()
        await origin_client.aclose()
        del app.state.worker_handler
        logger.info("Worker shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[WorkerHandler, Depends(get_handler)]
