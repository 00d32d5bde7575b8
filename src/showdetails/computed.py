"""Computed values: derived state that caches until a dependency changes.

Computeds are lazy: a change only marks them dirty and passes the news on
to their own dependents. The function runs again on the next .get().
The loading counter's boolean is one of these.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from showdetails._tracking import current_derivation, notify, track, untrack_all

T = TypeVar("T")

_UNSET = object()


class Computed(Generic[T]):
    """A derived value that auto-tracks dependencies and caches the result."""

    __slots__ = ("_fn", "_cached", "_dirty", "_dependencies", "_dependents")

    def __init__(self, fn: Callable[[], T]) -> None:
        self._fn = fn
        self._cached: object = _UNSET
        self._dirty = True
        self._dependencies: set = set()
        self._dependents: set = set()

    def get(self) -> T:
        track(self)
        if self._dirty:
            self._recompute()
        return self._cached

    def _recompute(self) -> None:
        untrack_all(self)
        token = current_derivation.set(self)
        try:
            self._cached = self._fn()
        finally:
            current_derivation.reset(token)
        self._dirty = False

    def _run(self) -> None:
        if not self._dirty:
            self._dirty = True
            notify(self._dependents)

    def dispose(self) -> None:
        """Disconnect from everything. A later .get() starts fresh."""
        untrack_all(self)
        self._dependents.clear()
        self._dirty = True
        self._cached = _UNSET

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else f"cached={self._cached!r}"
        return f"Computed({self._fn.__name__}, {state})"


def computed(fn: Callable[[], T]) -> Computed[T]:
    """Decorator form of Computed.

        count = Cell(0)

        @computed
        def busy():
            return count.get() > 0
    """
    return Computed(fn)
