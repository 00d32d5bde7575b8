"""EffectChannel: push-based broadcast of one-shot effects.

Nothing is retained: a subscriber sees only what is emitted while it is
subscribed. map/filter derive child channels, and dispose() tears down a
channel together with everything derived from it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

Disposer = Callable[[], None]

logger = logging.getLogger("showdetails.stream")

_CLOSED = object()


class EffectChannel(Generic[T]):
    """Broadcast channel with at-most-once delivery and no replay."""

    def __init__(self) -> None:
        self._subscribers: list[Callable[[T], None]] = []
        self._listeners: list[asyncio.Queue] = []
        self._children: list[EffectChannel] = []
        self._disposed = False
        self._parent_disposer: Disposer | None = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def emit(self, value: T) -> None:
        """Deliver to every current subscriber. A raising subscriber is logged
        and skipped; the rest still receive the value."""
        if self._disposed:
            return
        for cb in list(self._subscribers):
            try:
                cb(value)
            except Exception:
                logger.exception("Effect subscriber %r failed on %r", cb, value)

    def subscribe(self, callback: Callable[[T], None]) -> Disposer:
        """Register a callback. Returns a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    async def listen(self) -> AsyncIterator[T]:
        """Async iteration over effects emitted from the first __anext__ on.

        Ends when the channel is disposed.
        """
        if self._disposed:
            return
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners.append(queue)
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    return
                yield item
        finally:
            unsubscribe()
            try:
                self._listeners.remove(queue)
            except ValueError:
                pass

    def map(self, fn: Callable[[T], U]) -> EffectChannel[U]:
        child: EffectChannel[U] = EffectChannel()
        child._parent_disposer = self._track_child(child)
        self.subscribe(lambda v: child.emit(fn(v)))
        return child

    def filter(self, fn: Callable[[T], bool]) -> EffectChannel[T]:
        child: EffectChannel[T] = EffectChannel()
        child._parent_disposer = self._track_child(child)
        self.subscribe(lambda v: child.emit(v) if fn(v) else None)
        return child

    def dispose(self) -> None:
        """Tear down this channel and all downstream children."""
        self._disposed = True
        self._subscribers.clear()
        for queue in self._listeners:
            queue.put_nowait(_CLOSED)
        self._listeners.clear()
        for child in list(self._children):
            child.dispose()
        self._children.clear()
        if self._parent_disposer is not None:
            self._parent_disposer()
            self._parent_disposer = None

    def _track_child(self, child: EffectChannel) -> Disposer:
        self._children.append(child)

        def _remove() -> None:
            try:
                self._children.remove(child)
            except ValueError:
                pass

        return _remove
