"""Worker lifecycle protocols.

``LifecycleHandler`` is what an embedding runtime drives: it delivers
install, activate, fetch, sync and control-message events. ``ReplyChannel``
is the port a control message replies on.
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import ControlMessage, ControlReply, RequestEntity, ResponseEntity


@runtime_checkable
class ReplyChannel(Protocol):
    """One-shot reply port attached to a control message."""

    def post(self, reply: ControlReply) -> None:
        """Deliver the reply."""
        ...


@runtime_checkable
class LifecycleHandler(Protocol):
    """Event handlers of one worker instance."""

    async def on_install(self) -> bool:
        """Populate this instance's generation. Returns success."""
        ...

    async def on_activate(self) -> None:
        """Make this instance's generation current and purge the rest."""
        ...

    async def on_fetch(self, request: RequestEntity) -> ResponseEntity | None:
        """Serve a request, or return None to leave it uninterrupted."""
        ...

    async def on_message(self, message: ControlMessage) -> ControlReply:
        """Handle a control message, replying on its channel if it has one."""
        ...

    async def on_sync(self, tag: str) -> bool:
        """Handle a background sync event. Returns success."""
        ...
