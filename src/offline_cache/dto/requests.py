"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class ControlMessageRequest(BaseModel):
    """Request DTO for posting a control message to the worker.

    The handler converts this to a ControlMessage with a reply channel.
    """

    type: str = Field(
        ...,
        description="Message type: skip-wait, get-version, clear-cache or update-cache",
        min_length=1,
    )
    tag: str | None = Field(None, description="Optional argument, e.g. a sync tag")


class SyncRequest(BaseModel):
    """Request DTO for triggering a background sync."""

    tag: str = Field("background-sync", description="Sync tag", min_length=1)


class InstallRequest(BaseModel):
    """Request DTO for installing a worker instance."""

    version: str | None = Field(
        None,
        description="Semantic version to install (defaults to APP_VERSION)",
        min_length=1,
    )
