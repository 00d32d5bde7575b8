"""ActionQueue: FIFO hand-off from UI intents to the dispatcher."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Generic, TypeVar

from showdetails.errors import ConsumerActiveError

T = TypeVar("T")

logger = logging.getLogger("showdetails.action_queue")

_CLOSED = object()


class ActionQueue(Generic[T]):
    """Unbounded, many producers, exactly one consumer.

    submit() never waits. Items submitted before the consumer attaches are
    buffered and delivered first, in order. Once a consumer is bound to a
    loop, submit() from another thread is forwarded onto that loop.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._consuming = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, item: T) -> None:
        if self._closed:
            logger.debug("Dropping %r submitted after close", item)
            return
        self._put(item)

    def close(self) -> None:
        """Stop the consumer after the items already queued."""
        if self._closed:
            return
        self._closed = True
        self._put(_CLOSED)

    def _put(self, item) -> None:
        loop = self._loop
        if loop is None or _running_loop() is loop:
            self._queue.put_nowait(item)
        else:
            loop.call_soon_threadsafe(self._queue.put_nowait, item)

    async def consume(self) -> AsyncIterator[T]:
        """Yield items in submission order until close()."""
        if self._consuming:
            raise ConsumerActiveError("ActionQueue already has a consumer")
        self._consuming = True
        self._loop = asyncio.get_running_loop()
        try:
            while True:
                item = await self._queue.get()
                if item is _CLOSED:
                    return
                yield item
        finally:
            self._consuming = False
            self._loop = None

    def __len__(self) -> int:
        return self._queue.qsize()


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
