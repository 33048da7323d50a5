"""Unbounded multi-producer, single-consumer message channel."""

import asyncio
from collections.abc import AsyncIterator

from ipsweep.modules.messages import Message


class ChannelClosedError(Exception):
    """Raised when sending on a channel that has been closed."""


_CLOSED = object()


class MessageChannel:
    """FIFO queue from workers to the aggregator.

    ``send`` never blocks. Once ``close`` is called further sends raise
    ``ChannelClosedError``; the receiver still gets every message queued
    before the close, then iteration ends.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Messages sent but not yet received."""
        return self._queue.qsize() - (1 if self._closed else 0)

    def send(self, message: Message) -> None:
        if self._closed:
            raise ChannelClosedError("Message channel is closed")
        self._queue.put_nowait(message)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def receive(self) -> Message | None:
        """Wait for the next message. Returns None once closed and drained."""
        item = await self._queue.get()
        if item is _CLOSED:
            # Keep the marker for any later receive call
            self._queue.put_nowait(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    async def __aiter__(self) -> AsyncIterator[Message]:
        while True:
            message = await self.receive()
            if message is None:
                return
            yield message
