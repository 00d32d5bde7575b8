"""Dependency tracking and batching for the session graph.

A derivation (Computed or Reaction) is "current" while its function runs.
Every Cell or Computed read during that window records the derivation as
a dependent, so the graph is discovered by reading, not declared.

Writes inside `transaction()` only queue their dependents. The queue is
drained once the outermost transaction exits, which is what keeps a
ViewState from ever being composed out of half-applied source updates.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from showdetails.computed import Computed
    from showdetails.reaction import Reaction

    Derivation = Computed | Reaction

current_derivation: contextvars.ContextVar[Derivation | None] = contextvars.ContextVar(
    "showdetails_current_derivation", default=None
)

_depth: int = 0
_queued: set[Derivation] = set()


def track(source) -> None:
    """Record `source` as a dependency of the running derivation, if any."""
    derivation = current_derivation.get()
    if derivation is not None:
        source._dependents.add(derivation)
        derivation._dependencies.add(source)


def notify(dependents: set) -> None:
    for derivation in list(dependents):
        schedule(derivation)


def schedule(derivation: Derivation) -> None:
    """Re-run now, or queue until the enclosing transaction ends."""
    if _depth > 0:
        _queued.add(derivation)
    else:
        derivation._run()


def untrack_all(derivation: Derivation) -> None:
    """Drop every edge from `derivation` to the sources it last read."""
    for source in derivation._dependencies:
        source._dependents.discard(derivation)
    derivation._dependencies.clear()


@contextmanager
def transaction():
    """Defer derivation re-runs until the outermost block exits.

        with transaction():
            follow.set(True)
            stats.set(new_stats)
        # one recomposition here, seeing both writes
    """
    global _depth
    _depth += 1
    try:
        yield
    finally:
        _depth -= 1
        if _depth == 0:
            _drain()


def _drain() -> None:
    # Re-runs may write cells and queue more derivations; loop until quiet.
    while _queued:
        batch = list(_queued)
        _queued.clear()
        for derivation in batch:
            derivation._run()


def get_pending_count() -> int:
    """Derivations queued by an open transaction. Useful in tests."""
    return len(_queued)
