"""Protocol interfaces for swappable implementations.

Protocols enable:
- Swapping the store (memory -> Redis) or origin client without touching services
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .cache_store import CacheStore
from .lifecycle import LifecycleHandler, ReplyChannel
from .origin_client import OriginClient

__all__ = [
    "CacheStore",
    "LifecycleHandler",
    "OriginClient",
    "ReplyChannel",
]
