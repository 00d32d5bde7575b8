"""Reactions: eager side effects driven by cell changes.

- autorun(fn): run fn now, then again whenever anything it read changes.
  The session composes its ViewState with one of these.
- reaction(data_fn, effect_fn): re-run data_fn on change, but call
  effect_fn only when data_fn's result actually differs. Cell.subscribe
  is built on this.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from showdetails._tracking import current_derivation, untrack_all

T = TypeVar("T")


class Reaction:
    """A side effect that re-runs when its dependencies change."""

    __slots__ = ("_fn", "_dependencies", "_disposed")

    def __init__(self, fn: Callable[[], None]) -> None:
        self._fn = fn
        self._dependencies: set = set()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _run(self) -> None:
        if self._disposed:
            return
        untrack_all(self)
        token = current_derivation.set(self)
        try:
            self._fn()
        finally:
            current_derivation.reset(token)

    def dispose(self) -> None:
        self._disposed = True
        untrack_all(self)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"Reaction({getattr(self._fn, '__name__', self._fn)!r}, {state})"


class _DataReaction(Reaction):
    """reaction(data_fn, effect_fn): effect fires on a changed result only.

    effect_fn runs outside the tracking window, so cells it reads do not
    become dependencies.
    """

    __slots__ = ("_effect_fn", "_last", "_initialized")

    def __init__(self, data_fn: Callable[[], T], effect_fn: Callable[[T], None]) -> None:
        super().__init__(data_fn)
        self._effect_fn = effect_fn
        self._last: object = None
        self._initialized = False

    def _evaluate(self):
        untrack_all(self)
        token = current_derivation.set(self)
        try:
            return self._fn()
        finally:
            current_derivation.reset(token)

    def _run(self) -> None:
        if self._disposed:
            return
        value = self._evaluate()
        if not self._initialized or value != self._last:
            self._last = value
            self._initialized = True
            self._effect_fn(value)


def autorun(fn: Callable[[], None]) -> Reaction:
    """Run fn immediately, then whenever a cell it read changes.

        refreshing = Cell(False)
        log = []
        r = autorun(lambda: log.append(refreshing.get()))   # log == [False]
        refreshing.set(True)                                # log == [False, True]
        r.dispose()
    """
    r = Reaction(fn)
    r._run()
    return r


def reaction(
    data_fn: Callable[[], T],
    effect_fn: Callable[[T], None],
    *,
    fire_immediately: bool = False,
) -> Reaction:
    """Track data_fn; call effect_fn with each new, different result.

    Without fire_immediately the first result only seeds the comparison.
    """
    r = _DataReaction(data_fn, effect_fn)
    if fire_immediately:
        r._run()
    else:
        r._last = r._evaluate()
        r._initialized = True
    return r
