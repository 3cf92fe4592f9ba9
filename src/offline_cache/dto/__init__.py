"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract of the control
endpoints. Internal logic uses entities from the entities package.
"""

from .requests import ControlMessageRequest, InstallRequest, SyncRequest
from .responses import (
    ControlReplyResponse,
    HealthCheckResponse,
    InstanceStatus,
    LifecycleResponse,
    WorkerStatusResponse,
)

__all__ = [
    "ControlMessageRequest",
    "InstallRequest",
    "SyncRequest",
    "ControlReplyResponse",
    "HealthCheckResponse",
    "InstanceStatus",
    "LifecycleResponse",
    "WorkerStatusResponse",
]
