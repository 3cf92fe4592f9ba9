"""HTTP handlers for the worker.

Handlers convert between DTOs / HTTP requests and service calls. They
handle HTTP concerns like status codes, validation, and error handling.
"""

from dataclasses import replace

from fastapi import HTTPException, Request, Response, status

from offline_cache.dto import (
    ControlMessageRequest,
    ControlReplyResponse,
    HealthCheckResponse,
    InstallRequest,
    LifecycleResponse,
    SyncRequest,
    WorkerStatusResponse,
)
from offline_cache.entities import ControlMessage, LifecycleState, RequestEntity, ResponseEntity, resolve_url
from offline_cache.errors import InvalidGenerationName, InvalidTransition, OriginUnreachable
from offline_cache.logger import get_logger
from offline_cache.services import FutureReplyChannel, WorkerConfig, WorkerRegistration

logger = get_logger(__name__)

ORIGIN_UNREACHABLE = "Origin unreachable"


class WorkerHandler:
    """HTTP handlers for worker control and request interception.

    This handler delegates to WorkerRegistration and handles
    HTTP-specific concerns like:
    - Converting incoming requests to RequestEntity and back
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        handler = WorkerHandler(registration=registration, config=config)

        @app.post("/__worker__/message", response_model=ControlReplyResponse)
        async def post_message(request: ControlMessageRequest):
            return await handler.post_message(request)
        ```
    """

    def __init__(self, registration: WorkerRegistration, config: WorkerConfig) -> None:
        """Initialize the worker handler.

        Args:
            registration: Registration driving the worker instances
            config: Configuration used for new installs
        """
        self._registration = registration
        self._config = config

    async def install(self, request: InstallRequest | None = None) -> LifecycleResponse:
        """Handle POST /__worker__/install requests.

        Raises:
            HTTPException: 422 for an invalid version
        """
        config = self._config
        if request is not None and request.version:
            try:
                config = replace(config, version=request.version)
            except InvalidGenerationName as e:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=str(e),
                ) from e

        controller = await self._registration.register(config)
        installed = controller.state is not LifecycleState.FAILED
        return LifecycleResponse(
            success=installed,
            state=controller.state.value,
            generation=controller.generation,
            message="Installed" if installed else "Install failed, previous generation kept",
        )

    async def activate(self) -> LifecycleResponse:
        """Handle POST /__worker__/activate requests.

        Raises:
            HTTPException: 409 if there is nothing to activate or the
                transition is not allowed
        """
        try:
            controller = await self._registration.activate()
        except InvalidTransition as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

        if controller is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No installed worker is waiting",
            )

        return LifecycleResponse(
            success=True,
            state=controller.state.value,
            generation=controller.generation,
            message="Activated",
        )

    async def post_message(self, request: ControlMessageRequest) -> ControlReplyResponse:
        """Handle POST /__worker__/message requests."""
        channel = FutureReplyChannel()
        await self._registration.post_message(
            ControlMessage(type=request.type, tag=request.tag, reply_channel=channel)
        )
        reply = await channel.wait()
        return ControlReplyResponse(
            type=reply.type,
            success=reply.success,
            version=reply.version,
            error=reply.error,
        )

    async def sync(self, request: SyncRequest) -> dict:
        """Handle POST /__worker__/sync requests."""
        success = await self._registration.sync(request.tag)
        return {"tag": request.tag, "success": success}

    async def get_status(self) -> WorkerStatusResponse:
        """Handle GET /__worker__/status requests.

        Raises:
            HTTPException: If the store cannot report its statistics
        """
        try:
            return WorkerStatusResponse(**self._registration.status())
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get status: {e}",
            ) from e

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /__worker__/health requests."""
        store_healthy = self._registration.store.health_check()
        return HealthCheckResponse(
            status="healthy" if store_healthy else "unhealthy",
            store_healthy=store_healthy,
            intercepting=self._registration.active is not None,
        )

    async def fetch(self, request: Request) -> Response:
        """Handle every other request by delivering it as a fetch event."""
        entity = await self.to_entity(request)
        try:
            response = await self._registration.dispatch_fetch(entity)
        except OriginUnreachable as e:
            logger.info("Pass-through failed: %s", e)
            response = ResponseEntity.text(502, ORIGIN_UNREACHABLE)
        return self.to_response(response)

    async def to_entity(self, request: Request) -> RequestEntity:
        """Map an incoming request onto the configured origin."""
        url = resolve_url(self._config.origin, request.url.path, request.url.query)

        headers = dict(request.headers)
        destination = headers.get("sec-fetch-dest", "")
        mode = headers.get("sec-fetch-mode", "")
        if not destination and not mode and request.method == "GET":
            if "text/html" in headers.get("accept", ""):
                destination = "document"

        return RequestEntity(
            method=request.method,
            url=url,
            destination=destination,
            mode=mode,
            headers=headers,
            body=await request.body(),
        )

    @staticmethod
    def to_response(response: ResponseEntity) -> Response:
        reply = Response(
            content=response.body,
            status_code=response.status,
            headers=response.headers,
        )
        for cookie in response.set_cookies:
            reply.headers.append("set-cookie", cookie)
        return reply
