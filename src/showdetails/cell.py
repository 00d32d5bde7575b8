"""Latest-value cells: the state every binding and the session publish into.

A Cell always holds a value (there is no "not yet emitted" state; callers
seed it with a default). Reading a cell inside a Computed or Reaction
registers the dependency; writing a different value re-runs dependents.

Thread safety: call set_scheduler() once with the owner loop's
call_soon_threadsafe. After that a .set() from any other thread is
forwarded to the owner thread. Owner-thread writes stay synchronous.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Generic, TypeVar

from showdetails._tracking import notify, track

T = TypeVar("T")

logger = logging.getLogger("showdetails.cell")

_scheduler: Callable[[Callable[[], None]], object] | None = None
_scheduler_thread: threading.Thread | None = None


def set_scheduler(scheduler) -> None:
    """Route cross-thread Cell writes through `scheduler`.

    Call from the thread that owns the event loop:

        loop = asyncio.get_running_loop()
        showdetails.set_scheduler(loop.call_soon_threadsafe)

    Pass None to go back to direct writes.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread() if scheduler is not None else None


class Cell(Generic[T]):
    """A single latest value with automatic dependency tracking."""

    __slots__ = ("_value", "_dependents")

    def __init__(self, value: T) -> None:
        self._value = value
        self._dependents: set = set()

    def get(self) -> T:
        track(self)
        return self._value

    @property
    def value(self) -> T:
        """The current value, without registering a dependency."""
        return self._value

    def set(self, value: T) -> None:
        if _scheduler is not None and threading.current_thread() is not _scheduler_thread:
            _scheduler(lambda v=value: self._set_direct(v))
        else:
            self._set_direct(value)

    def _set_direct(self, value: T) -> None:
        old = self._value
        if old is value or old == value:
            return
        self._value = value
        notify(self._dependents)

    def subscribe(self, callback: Callable[[T], None]):
        """Call `callback` with the current value now and each new value later.

        A raising callback is logged and stays subscribed; the write that
        triggered it and the other subscribers are unaffected.
        Returns the underlying reaction; .dispose() it to stop.
        """
        from showdetails.reaction import reaction

        def _deliver(value: T) -> None:
            try:
                callback(value)
            except Exception:
                logger.exception("Cell subscriber %r failed on %r", callback, value)

        return reaction(self.get, _deliver, fire_immediately=True)

    async def wait_for(self, predicate: Callable[[T], bool]) -> T:
        """Resolve with the first value (current or later) matching `predicate`."""
        future = asyncio.get_running_loop().create_future()

        def _check(value: T) -> None:
            if not future.done() and predicate(value):
                future.set_result(value)

        handle = self.subscribe(_check)
        try:
            return await future
        finally:
            handle.dispose()

    def __repr__(self) -> str:
        return f"Cell({self._value!r})"


class ReadOnlyCell(Generic[T]):
    """Read side of a Cell. Holders can observe but never write."""

    __slots__ = ("_cell",)

    def __init__(self, cell: Cell[T]) -> None:
        self._cell = cell

    def get(self) -> T:
        return self._cell.get()

    @property
    def value(self) -> T:
        return self._cell.value

    def subscribe(self, callback: Callable[[T], None]):
        return self._cell.subscribe(callback)

    async def wait_for(self, predicate: Callable[[T], bool]) -> T:
        return await self._cell.wait_for(predicate)

    def __repr__(self) -> str:
        return f"ReadOnlyCell({self._cell.value!r})"
