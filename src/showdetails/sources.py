"""Observed sources and the bindings that pump them into cells.

An observed source is owned by someone else (a repository, a cache, a
database observer). The session only needs two things from it: a way to
say which entity to watch, and a stream of the latest values.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Generic, Hashable, Protocol, TypeVar

from showdetails.cell import Cell

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

logger = logging.getLogger("showdetails.sources")


class ObservedSource(Protocol[T_co]):
    def start(self, key: Hashable) -> None:
        """Begin observing `key`. Calling again with the same key is a no-op."""

    def stream(self) -> AsyncIterator[T_co]:
        """Latest values for the started key; may emit zero or more times."""


class _Failure:
    __slots__ = ("error",)

    def __init__(self, error: BaseException) -> None:
        self.error = error


class InMemorySource(Generic[T]):
    """Dict-backed ObservedSource.

    publish() writes the backing value for a key. A stream first replays the
    value for the started key, if there is one, then follows updates. Use it
    from the event loop thread.
    """

    def __init__(self, initial: dict[Hashable, T] | None = None) -> None:
        self._values: dict[Hashable, T] = dict(initial) if initial else {}
        self._key: Hashable | None = None
        self._started = False
        self._listeners: list[asyncio.Queue] = []
        self.start_calls = 0

    @property
    def key(self) -> Hashable | None:
        return self._key

    def start(self, key: Hashable) -> None:
        self.start_calls += 1
        if self._started and key == self._key:
            return
        self._key = key
        self._started = True
        if key in self._values:
            self._push(self._values[key])

    def publish(self, key: Hashable, value: T) -> None:
        self._values[key] = value
        if self._started and key == self._key:
            self._push(value)

    def publish_error(self, key: Hashable, error: BaseException) -> None:
        """Make every open stream for `key` raise `error`."""
        if self._started and key == self._key:
            self._push(_Failure(error))

    def current(self, key: Hashable) -> T | None:
        return self._values.get(key)

    def _push(self, item) -> None:
        for queue in self._listeners:
            queue.put_nowait(item)

    async def stream(self) -> AsyncIterator[T]:
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners.append(queue)
        try:
            if self._started and self._key in self._values:
                yield self._values[self._key]
            while True:
                item = await queue.get()
                if isinstance(item, _Failure):
                    raise item.error
                yield item
        finally:
            self._listeners.remove(queue)


class SourceBinding(Generic[T]):
    """One observed source, fixed to one key, mirrored into a Cell.

    The cell starts at `default` and is written only by this binding's pump.
    """

    def __init__(
        self,
        name: str,
        source: ObservedSource[T],
        key: Hashable,
        default: T,
        on_error: Callable[[str, Exception], None] | None = None,
    ) -> None:
        self.name = name
        self.key = key
        self.cell: Cell[T] = Cell(default)
        self._source = source
        self._on_error = on_error
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, group: asyncio.TaskGroup) -> asyncio.Task:
        """Start the source for our key and pump it inside `group`."""
        self._source.start(self.key)
        if self._task is None:
            self._task = group.create_task(self._pump(), name=f"showdetails:{self.name}")
        return self._task

    async def _pump(self) -> None:
        try:
            async for value in self._source.stream():
                self.cell.set(value)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Source %r for key %r failed: %r", self.name, self.key, exc)
            if self._on_error is not None:
                self._on_error(self.name, exc)

    def dispose(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def __repr__(self) -> str:
        return f"SourceBinding({self.name!r}, key={self.key!r}, value={self.cell.value!r})"


@dataclass
class ShowSources:
    """The seven sources a show details session observes."""

    follow_status: ObservedSource[bool]
    show_details: ObservedSource
    show_images: ObservedSource
    related_shows: ObservedSource
    seasons: ObservedSource
    next_episode: ObservedSource
    view_stats: ObservedSource

    @classmethod
    def in_memory(cls) -> ShowSources:
        """A bundle of empty InMemorySources, one per field."""
        return cls(
            follow_status=InMemorySource(),
            show_details=InMemorySource(),
            show_images=InMemorySource(),
            related_shows=InMemorySource(),
            seasons=InMemorySource(),
            next_episode=InMemorySource(),
            view_stats=InMemorySource(),
        )
