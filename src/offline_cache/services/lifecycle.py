"""Lifecycle controller: the state machine of one worker instance.

uninstalled -> installing -> installed -> activating -> active

``failed`` is reachable from installing and activating and is terminal; ``redundant``
marks an instance that a newer one has replaced. Requests are only
intercepted while active. Control messages are accepted in every state.
"""

import asyncio
from collections.abc import Awaitable, Callable

from offline_cache.entities import (
    CLEAR_CACHE,
    GET_VERSION,
    SKIP_WAIT,
    UPDATE_CACHE,
    ControlMessage,
    ControlReply,
    LifecycleState,
    RequestEntity,
    ResponseEntity,
)
from offline_cache.errors import InvalidTransition, PopulationError, UnknownControlMessage
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStore, OriginClient
from offline_cache.services.cache_first import CacheFirstExecutor
from offline_cache.services.generation_manager import GenerationManager
from offline_cache.services.metrics import WorkerMetrics
from offline_cache.services.network_first import NetworkFirstExecutor
from offline_cache.services.strategy_selector import StrategySelector
from offline_cache.services.supervisor import TaskSupervisor
from offline_cache.services.worker_config import WorkerConfig

logger = get_logger(__name__)

BACKGROUND_SYNC_TAG = "background-sync"

PromoteCallback = Callable[["LifecycleController"], Awaitable[None]]


class LifecycleController:
    """Event handlers and state of one worker instance.

    Satisfies the LifecycleHandler protocol. Everything it needs is
    injected, so several isolated instances can coexist in one process.

    Example:
        ```python
        controller = LifecycleController(config=config, store=store, origin=origin)
        if await controller.on_install():
            await controller.on_activate()
        response = await controller.on_fetch(request)
        ```
    """

    def __init__(
        self,
        config: WorkerConfig,
        store: CacheStore,
        origin: OriginClient,
        generations: GenerationManager | None = None,
        supervisor: TaskSupervisor | None = None,
        metrics: WorkerMetrics | None = None,
        transition_lock: asyncio.Lock | None = None,
        on_skip_waiting: PromoteCallback | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            config: Per-instance configuration
            store: Cache store
            origin: Origin client
            generations: Generation manager; share one between instances
                of the same app so they agree on the current generation
            supervisor: Runs background refreshes
            metrics: Request accounting
            transition_lock: Serializes install, activate and cache
                rewrites; share one between instances using the same store
            on_skip_waiting: Called when skip-wait arrives while installed.
                If None the controller activates itself.
        """
        self._config = config
        self._store = store
        self._origin = origin
        self._generations = generations or GenerationManager(store, origin, config.app_id)
        self._supervisor = supervisor or TaskSupervisor()
        self._metrics = metrics or WorkerMetrics()
        self._lock = transition_lock or asyncio.Lock()
        self._on_skip_waiting = on_skip_waiting
        self._state = LifecycleState.UNINSTALLED
        self._skip_waiting = False

        generation = config.generation_name
        self._selector = StrategySelector(
            app_origin=config.origin,
            origin=origin,
            cache_first=CacheFirstExecutor(
                store=store,
                origin=origin,
                supervisor=self._supervisor,
                generation=generation,
                metrics=self._metrics,
            ),
            network_first=NetworkFirstExecutor(
                store=store,
                origin=origin,
                generation=generation,
                offline_key=config.offline_key,
                metrics=self._metrics,
            ),
            dynamic_prefixes=config.dynamic_prefixes,
            metrics=self._metrics,
        )

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def config(self) -> WorkerConfig:
        return self._config

    @property
    def generation(self) -> str:
        """Name of the generation this instance installs and serves from."""
        return self._config.generation_name

    @property
    def current_version(self) -> str:
        """Current generation name, or this instance's if none is promoted."""
        return self._generations.current or self.generation

    @property
    def skip_waiting_requested(self) -> bool:
        return self._skip_waiting

    @property
    def selector(self) -> StrategySelector:
        return self._selector

    @property
    def generations(self) -> GenerationManager:
        return self._generations

    async def on_install(self) -> bool:
        """Populate this instance's generation from the resource list.

        A failed populate moves to ``failed``, which is terminal, and leaves
        every existing generation untouched. Retrying means installing a
        new instance.

        Returns:
            True if installed, False if population failed

        Raises:
            InvalidTransition: If not uninstalled
        """
        async with self._lock:
            if self._state is not LifecycleState.UNINSTALLED:
                raise InvalidTransition("install", self._state.value)

            self._state = LifecycleState.INSTALLING
            logger.info("Installing %s", self.generation)
            try:
                await self._generations.populate(
                    self.generation, self._config.origin, self._config.resources
                )
            except PopulationError as e:
                logger.error("Install of %s failed: %s", self.generation, e)
                self._state = LifecycleState.FAILED
                return False
            except Exception:
                self._state = LifecycleState.FAILED
                raise

            self._state = LifecycleState.INSTALLED
            if self._config.skip_waiting:
                self._skip_waiting = True
            logger.info("Installed %s", self.generation)
            return True

    async def on_activate(self) -> None:
        """Make this generation current and delete the app's other generations.

        Raises:
            InvalidTransition: If not installed
        """
        async with self._lock:
            if self._state is not LifecycleState.INSTALLED:
                raise InvalidTransition("activate", self._state.value)

            self._state = LifecycleState.ACTIVATING
            logger.info("Activating %s", self.generation)
            try:
                self._generations.promote(self.generation)
                self._generations.purge_others(self.generation)
            except Exception:
                self._state = LifecycleState.FAILED
                raise

            self._state = LifecycleState.ACTIVE
            logger.info("Activated %s", self.generation)

    async def on_fetch(self, request: RequestEntity) -> ResponseEntity | None:
        """Serve ``request``, or return None when not intercepting.

        Raises:
            OriginUnreachable: For a cross-origin request whose origin is down
        """
        if self._state is not LifecycleState.ACTIVE:
            return None
        return await self._selector.serve(request)

    async def on_message(self, message: ControlMessage) -> ControlReply:
        """Handle a control message.

        Exactly one reply is posted to the message's reply channel, if it
        has one, whether the command succeeded or not.
        """
        logger.debug("Control message %s received while %s", message.type, self._state.value)
        try:
            reply = await self._dispatch(message)
        except UnknownControlMessage as e:
            logger.warning("%s", e)
            reply = ControlReply(type="error", success=False, error=str(e))
        except Exception as e:
            logger.exception("Control message %s failed", message.type)
            reply = ControlReply(type="error", success=False, error=str(e))

        if message.expects_reply:
            message.reply_channel.post(reply)
        return reply

    async def _dispatch(self, message: ControlMessage) -> ControlReply:
        if message.type == SKIP_WAIT:
            await self._handle_skip_waiting()
            return ControlReply(type="skip-wait", success=True)

        if message.type == GET_VERSION:
            return ControlReply(type="version", success=True, version=self.current_version)

        if message.type == CLEAR_CACHE:
            async with self._lock:
                self._generations.clear_all()
            return ControlReply(type="cache-cleared", success=True)

        if message.type == UPDATE_CACHE:
            return ControlReply(type="cache-updated", success=await self._repopulate())

        raise UnknownControlMessage(message.type)

    async def _handle_skip_waiting(self) -> None:
        if self._state is not LifecycleState.INSTALLED:
            logger.debug("skip-wait ignored while %s", self._state.value)
            return

        self._skip_waiting = True
        if self._on_skip_waiting is not None:
            await self._on_skip_waiting(self)
        else:
            await self.on_activate()

    async def _repopulate(self) -> bool:
        target = self.current_version
        async with self._lock:
            try:
                await self._generations.populate(target, self._config.origin, self._config.resources)
            except PopulationError as e:
                logger.warning("Cache update of %s failed: %s", target, e)
                return False
        return True

    async def on_sync(self, tag: str) -> bool:
        """Handle a background sync event by refreshing the cached resources."""
        if tag != BACKGROUND_SYNC_TAG:
            logger.debug("Ignoring sync tag %s", tag)
            return False
        logger.info("Background sync started")
        return await self._repopulate()

    def mark_redundant(self) -> None:
        """Retire this instance after a newer one took over."""
        logger.info("%s is now redundant", self.generation)
        self._state = LifecycleState.REDUNDANT

    def status(self) -> dict:
        return {
            "state": self._state.value,
            "generation": self.generation,
            "current_generation": self._generations.current,
            "skip_waiting": self._skip_waiting,
        }
