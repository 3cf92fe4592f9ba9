"""Domain entities for internal representation.

These are frozen dataclasses used by services and repositories. They are
NOT used for API contracts - use DTOs from the dto package for that.
"""

from .control import (
    CLEAR_CACHE,
    GET_VERSION,
    SKIP_WAIT,
    UPDATE_CACHE,
    ControlMessage,
    ControlReply,
    LifecycleState,
)
from .generation import CacheGeneration, generation_name, generation_prefix
from .request import RequestClass, RequestEntity, resolve_url
from .response import PLAIN_TEXT, ResponseEntity

__all__ = [
    "CacheGeneration",
    "ControlMessage",
    "ControlReply",
    "LifecycleState",
    "RequestClass",
    "RequestEntity",
    "ResponseEntity",
    "generation_name",
    "generation_prefix",
    "resolve_url",
    "PLAIN_TEXT",
    "SKIP_WAIT",
    "GET_VERSION",
    "CLEAR_CACHE",
    "UPDATE_CACHE",
]
