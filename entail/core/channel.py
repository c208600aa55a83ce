"""Bounded channel carrying output events from the runner to a reporter."""

import asyncio
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

T = TypeVar("T")

_CLOSED = object()


class ChannelClosed(Exception):
    """Raised when sending on a channel that was already closed."""


class EventChannel(Generic[T]):
    """Single-producer, single-consumer async channel.

    ``send`` suspends while the channel is full, so a slow consumer
    holds the producer back. Iterating the channel yields items in send
    order and stops once ``close`` has been called and the backlog is
    drained.
    """

    def __init__(self, maxsize: int = 64):
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, item: T) -> None:
        if self._closed:
            raise ChannelClosed("Cannot send on a closed channel")
        await self._queue.put(item)

    async def close(self) -> None:
        """Mark the end of the stream. Idempotent."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._drain()

    async def _drain(self) -> AsyncIterator[T]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]
