"""Worker registration: the adapter at the embedding boundary.

Holds the active instance and at most one waiting instance, delivers
events to them, and decides when a waiting instance takes over.
"""

import asyncio

from offline_cache.entities import (
    SKIP_WAIT,
    ControlMessage,
    ControlReply,
    RequestEntity,
    ResponseEntity,
)
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStore, OriginClient
from offline_cache.services.generation_manager import GenerationManager
from offline_cache.services.lifecycle import LifecycleController
from offline_cache.services.metrics import WorkerMetrics
from offline_cache.services.supervisor import TaskSupervisor
from offline_cache.services.worker_config import WorkerConfig

logger = get_logger(__name__)


class WorkerRegistration:
    """Drives LifecycleController instances that share one cache store.

    Example:
        ```python
        registration = WorkerRegistration(store=store, origin=origin)
        await registration.register(config)
        response = await registration.dispatch_fetch(request)
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        origin: OriginClient,
        supervisor: TaskSupervisor | None = None,
        metrics: WorkerMetrics | None = None,
    ) -> None:
        self._store = store
        self._origin = origin
        self._supervisor = supervisor or TaskSupervisor()
        self._metrics = metrics or WorkerMetrics()
        self._lock = asyncio.Lock()
        self._managers: dict[str, GenerationManager] = {}
        self.active: LifecycleController | None = None
        self.waiting: LifecycleController | None = None

    @property
    def metrics(self) -> WorkerMetrics:
        return self._metrics

    @property
    def supervisor(self) -> TaskSupervisor:
        return self._supervisor

    @property
    def store(self) -> CacheStore:
        return self._store

    def _manager_for(self, app_id: str) -> GenerationManager:
        if app_id not in self._managers:
            self._managers[app_id] = GenerationManager(self._store, self._origin, app_id)
        return self._managers[app_id]

    async def register(self, config: WorkerConfig) -> LifecycleController:
        """Install a new instance for ``config``.

        It takes over at once when nothing is active or skip-waiting is
        set; otherwise it waits for a skip-wait message or ``release()``.
        A failed install leaves the active instance serving as before.

        Returns:
            The new instance, whatever state it ended in
        """
        controller = LifecycleController(
            config=config,
            store=self._store,
            origin=self._origin,
            generations=self._manager_for(config.app_id),
            supervisor=self._supervisor,
            metrics=self._metrics,
            transition_lock=self._lock,
            on_skip_waiting=self.promote,
        )

        if not await controller.on_install():
            return controller

        if self.waiting is not None:
            self.waiting.mark_redundant()
        self.waiting = controller

        if self.active is None or controller.skip_waiting_requested:
            await self.promote(controller)
        else:
            logger.info("%s installed, waiting for %s to be released", controller.generation, self.active.generation)
        return controller

    async def activate(self) -> LifecycleController | None:
        """Promote the waiting instance, if any."""
        if self.waiting is None:
            return None
        controller = self.waiting
        await self.promote(controller)
        return controller

    async def promote(self, controller: LifecycleController) -> None:
        """Activate ``controller`` and retire the previously active instance."""
        if controller is not self.waiting:
            logger.debug("Ignoring promotion of %s, it is not waiting", controller.generation)
            return

        await controller.on_activate()
        previous, self.active, self.waiting = self.active, controller, None
        if previous is not None and previous is not controller:
            previous.mark_redundant()

    async def release(self) -> None:
        """The last client of the active instance went away."""
        await self.activate()

    async def dispatch_fetch(self, request: RequestEntity) -> ResponseEntity:
        """Deliver a fetch event, passing it through when not intercepted.

        Raises:
            OriginUnreachable: If the request was passed through and the
                origin could not be reached
        """
        if self.active is not None:
            response = await self.active.on_fetch(request)
            if response is not None:
                return response

        self._metrics.record_passthrough()
        return await self._origin.fetch(request)

    async def post_message(self, message: ControlMessage) -> ControlReply:
        """Deliver a control message to the instance it concerns.

        skip-wait goes to the waiting instance; everything else to the
        active one, or the waiting one when nothing is active yet.
        """
        if message.type == SKIP_WAIT and self.waiting is not None:
            target = self.waiting
        else:
            target = self.active or self.waiting

        if target is None:
            reply = ControlReply(type="error", success=False, error="no worker installed")
            if message.expects_reply:
                message.reply_channel.post(reply)
            return reply

        return await target.on_message(message)

    async def sync(self, tag: str) -> bool:
        """Deliver a background sync event to the active instance."""
        if self.active is None:
            return False
        return await self.active.on_sync(tag)

    def status(self) -> dict:
        return {
            "active": self.active.status() if self.active else None,
            "waiting": self.waiting.status() if self.waiting else None,
            "generations": [
                gen.name
                for manager in self._managers.values()
                for gen in manager.generations()
            ],
            "background_tasks": self._supervisor.pending,
            "metrics": self._metrics.to_dict(),
            "store": self._store.get_stats(),
        }

    async def aclose(self) -> None:
        await self._supervisor.aclose()
