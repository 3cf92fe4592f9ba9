"""Control message and lifecycle domain entities."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

SKIP_WAIT = "skip-wait"
GET_VERSION = "get-version"
CLEAR_CACHE = "clear-cache"
UPDATE_CACHE = "update-cache"

# Spellings posted by older page scripts.
MESSAGE_ALIASES = {
    "SKIP_WAITING": SKIP_WAIT,
    "GET_VERSION": GET_VERSION,
    "CLEAR_CACHE": CLEAR_CACHE,
    "UPDATE_CACHE": UPDATE_CACHE,
}


class LifecycleState(str, Enum):
    """States of one worker instance."""

    UNINSTALLED = "uninstalled"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVE = "active"
    FAILED = "failed"
    REDUNDANT = "redundant"


@dataclass(frozen=True)
class ControlReply:
    """Reply posted back on a control message's reply channel.

    Attributes:
        type: Reply type ("version", "cache-cleared", "cache-updated",
            "skip-wait" or "error")
        success: Whether the command succeeded
        version: Current generation name, for "version" replies
        error: Failure description, when ``success`` is False
    """

    type: str
    success: bool = True
    version: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class ControlMessage:
    """Out-of-band command delivered to a worker instance.

    Attributes:
        type: Message type, normalized to its canonical spelling
        tag: Optional argument (the sync tag for background sync)
        reply_channel: Where the single reply is posted, if anywhere
    """

    type: str
    tag: str | None = None
    reply_channel: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", MESSAGE_ALIASES.get(self.type, self.type))

    @property
    def expects_reply(self) -> bool:
        return self.reply_channel is not None
