"""Service layer for business logic.

This layer contains the interception logic and its orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Registration -> LifecycleController -> StrategySelector
                                                   -> CacheFirst / NetworkFirst -> CacheStore
                                                   -> GenerationManager         -> OriginClient

Usage:
    ```python
    from offline_cache.services import WorkerConfig, WorkerRegistration

    registration = WorkerRegistration(store=store, origin=origin)
    await registration.register(WorkerConfig.from_settings(settings))
    ```
"""

from .cache_first import CacheFirstExecutor
from .generation_manager import GenerationManager
from .lifecycle import BACKGROUND_SYNC_TAG, LifecycleController
from .metrics import WorkerMetrics
from .network_first import NetworkFirstExecutor
from .registration import WorkerRegistration
from .replies import CollectingReplyChannel, FutureReplyChannel
from .strategy_selector import StrategySelector
from .supervisor import TaskSupervisor
from .worker_config import WorkerConfig

__all__ = [
    "BACKGROUND_SYNC_TAG",
    "CacheFirstExecutor",
    "CollectingReplyChannel",
    "FutureReplyChannel",
    "GenerationManager",
    "LifecycleController",
    "NetworkFirstExecutor",
    "StrategySelector",
    "TaskSupervisor",
    "WorkerConfig",
    "WorkerMetrics",
    "WorkerRegistration",
]
