"""Reply channel implementations."""

import asyncio

from offline_cache.entities import ControlReply


class FutureReplyChannel:
    """Reply channel resolving an ``asyncio.Future``.

    Example:
        ```python
        channel = FutureReplyChannel()
        await controller.on_message(ControlMessage(type="get-version", reply_channel=channel))
        reply = await channel.wait()
        ```
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[ControlReply] = asyncio.get_running_loop().create_future()

    def post(self, reply: ControlReply) -> None:
        if self._future.done():
            raise RuntimeError("reply already posted")
        self._future.set_result(reply)

    @property
    def replied(self) -> bool:
        return self._future.done()

    async def wait(self) -> ControlReply:
        return await self._future


class CollectingReplyChannel:
    """Reply channel that records every reply it receives."""

    def __init__(self) -> None:
        self.replies: list[ControlReply] = []

    def post(self, reply: ControlReply) -> None:
        self.replies.append(reply)
