"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ControlReplyResponse(BaseModel):
    """Response DTO carrying a control message reply."""

    type: str = Field(..., description="Reply type, e.g. 'version' or 'cache-cleared'")
    success: bool = Field(..., description="Whether the command succeeded")
    version: str | None = Field(None, description="Current generation name, for version replies")
    error: str | None = Field(None, description="Failure description")


class InstanceStatus(BaseModel):
    """State of one worker instance."""

    state: str = Field(..., description="Lifecycle state")
    generation: str = Field(..., description="Generation this instance serves from")
    current_generation: str | None = Field(None, description="Generation currently promoted")
    skip_waiting: bool = Field(False, description="Whether skip-wait has been requested")


class WorkerStatusResponse(BaseModel):
    """Response DTO for the worker status endpoint."""

    active: InstanceStatus | None = Field(None, description="Instance intercepting requests")
    waiting: InstanceStatus | None = Field(None, description="Installed instance waiting to take over")
    generations: list[str] = Field(default_factory=list, description="Known generations, oldest first")
    background_tasks: int = Field(..., description="Background refreshes in flight", ge=0)
    metrics: dict[str, Any] = Field(default_factory=dict, description="Request accounting")
    store: dict[str, Any] = Field(default_factory=dict, description="Store statistics")


class LifecycleResponse(BaseModel):
    """Response DTO for install and activate operations."""

    success: bool = Field(..., description="Whether the transition succeeded")
    state: str = Field(..., description="Lifecycle state after the operation")
    generation: str | None = Field(None, description="Generation concerned")
    message: str = Field(..., description="Human-readable status message")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the cache store is reachable")
    intercepting: bool = Field(..., description="Whether an instance is active")
