"""SourceBindings: the session's fixed, named set of source bindings.

Reads go through the binding cells, so a derivation that calls
bindings.get("seasons") is re-run whenever that source emits.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Hashable

from showdetails._tracking import transaction
from showdetails.cell import Cell
from showdetails.sources import ObservedSource, SourceBinding


class SourceBindings:
    """Named SourceBindings for one key, created together and torn down together."""

    def __init__(
        self,
        key: Hashable,
        schema: dict[str, tuple[ObservedSource, object]],
        on_error: Callable[[str, Exception], None] | None = None,
    ) -> None:
        self.key = key
        self._bindings: dict[str, SourceBinding] = {
            name: SourceBinding(name, source, key, default, on_error)
            for name, (source, default) in schema.items()
        }

    @property
    def names(self) -> list[str]:
        return list(self._bindings)

    def binding(self, name: str) -> SourceBinding:
        return self._bindings[name]

    def cell(self, name: str) -> Cell:
        return self._bindings[name].cell

    def get(self, name: str) -> object:
        binding = self._bindings.get(name)
        return binding.cell.get() if binding is not None else None

    def update(self, values: dict) -> None:
        """Write several cells as one change. Unknown names are ignored."""
        with transaction():
            for name, value in values.items():
                binding = self._bindings.get(name)
                if binding is not None:
                    binding.cell.set(value)

    def start_all(self, group: asyncio.TaskGroup) -> list[asyncio.Task]:
        return [binding.start(group) for binding in self._bindings.values()]

    def dispose(self) -> None:
        for binding in self._bindings.values():
            binding.dispose()

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __repr__(self) -> str:
        return f"SourceBindings(key={self.key!r}, names={self.names!r})"
