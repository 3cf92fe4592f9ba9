from typing import Any

from fastapi import FastAPI, Request, Response

from offline_cache.config import Settings, get_settings
from offline_cache.dto import (
    ControlMessageRequest,
    ControlReplyResponse,
    HealthCheckResponse,
    InstallRequest,
    LifecycleResponse,
    SyncRequest,
    WorkerStatusResponse,
)
from offline_cache.protocols import CacheStore, OriginClient

from .dependencies import HandlerDep, create_lifespan

CONTROL_PREFIX = "/__worker__"

INTERCEPTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    settings: Settings | None = None,
    store: CacheStore | None = None,
    origin: OriginClient | None = None,
) -> FastAPI:
    """Build the worker application.

    Args:
        settings: Settings to use. If None, loads them at startup.
        store: Cache store override (tests).
        origin: Origin client override (tests).
    """
    app = FastAPI(
        title="Offline Cache Worker",
        description="Request interception layer with cache-first and network-first strategies",
        version="0.1.0",
        lifespan=create_lifespan(settings=settings, store=store, origin=origin),
    )

    @app.get(CONTROL_PREFIX)
    async def info() -> dict[str, Any]:
        """Worker information."""
        return {
            "name": "Offline Cache Worker",
            "version": "0.1.0",
            "endpoints": {
                "status": f"{CONTROL_PREFIX}/status",
                "health": f"{CONTROL_PREFIX}/health",
                "install": f"{CONTROL_PREFIX}/install",
                "activate": f"{CONTROL_PREFIX}/activate",
                "message": f"{CONTROL_PREFIX}/message",
                "sync": f"{CONTROL_PREFIX}/sync",
            },
        }

    @app.get(f"{CONTROL_PREFIX}/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        return await handler.health_check()

    @app.get(f"{CONTROL_PREFIX}/status", response_model=WorkerStatusResponse)
    async def worker_status(handler: HandlerDep) -> WorkerStatusResponse:
        return await handler.get_status()

    @app.post(f"{CONTROL_PREFIX}/install", response_model=LifecycleResponse)
    async def install(handler: HandlerDep, request: InstallRequest | None = None) -> LifecycleResponse:
        """Install a new worker instance, optionally for another version."""
        return await handler.install(request)

    @app.post(f"{CONTROL_PREFIX}/activate", response_model=LifecycleResponse)
    async def activate(handler: HandlerDep) -> LifecycleResponse:
        """Promote the waiting instance."""
        return await handler.activate()

    @app.post(f"{CONTROL_PREFIX}/message", response_model=ControlReplyResponse)
    async def post_message(request: ControlMessageRequest, handler: HandlerDep) -> ControlReplyResponse:
        """Post a control message and return its reply."""
        return await handler.post_message(request)

    @app.post(f"{CONTROL_PREFIX}/sync", response_model=dict[str, Any])
    async def sync(request: SyncRequest, handler: HandlerDep) -> dict[str, Any]:
        """Trigger a background sync."""
        return await handler.sync(request)

    @app.api_route("/{path:path}", methods=INTERCEPTED_METHODS, include_in_schema=False)
    async def intercept(request: Request, handler: HandlerDep) -> Response:
        """Deliver every other request to the worker as a fetch event."""
        return await handler.fetch(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "offline_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
