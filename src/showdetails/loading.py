"""LoadingCounter: how many refresh operations are in flight.

Only the derived boolean is meant for display. The raw count is exposed
read-only for logging and tests.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager

from showdetails.cell import Cell
from showdetails.computed import Computed
from showdetails.errors import LoaderAccountingError

logger = logging.getLogger("showdetails.loading")


class LoadingCounter:
    """Atomic in-flight counter, observed as `count > 0`.

    Every add_loader() must be paired with exactly one remove_loader(),
    on the failure path too. Going below zero is a bug in the caller and
    raises instead of clamping.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._count = 0
        self._cell: Cell[int] = Cell(0)
        self.observable: Computed[bool] = Computed(lambda: self._cell.get() > 0)

    @property
    def count(self) -> int:
        return self._count

    def add_loader(self) -> None:
        with self._lock:
            self._count += 1
            # Publish under the lock so cross-thread writes reach the cell in order.
            self._cell.set(self._count)

    def remove_loader(self) -> None:
        with self._lock:
            if self._count == 0:
                raise LoaderAccountingError("remove_loader() without a matching add_loader()")
            self._count -= 1
            count = self._count
            self._cell.set(count)
        if count == 0:
            logger.debug("All loaders released")

    @contextmanager
    def loading(self):
        """Hold one loader slot for the duration of the block."""
        self.add_loader()
        try:
            yield
        finally:
            self.remove_loader()

    def __repr__(self) -> str:
        return f"LoadingCounter(count={self._count})"
