"""Shared fakes: a recording ShowOperations and in-memory sources."""

import asyncio
from collections import defaultdict

import pytest

from showdetails import ShowOperations, ShowSources

OPERATION_NAMES = [
    "update_show_details",
    "update_show_images",
    "update_related_shows",
    "update_show_seasons",
    "change_show_follow_status",
    "change_season_watched_status",
    "change_season_follow_status",
]

REFRESH_NAMES = OPERATION_NAMES[:4]


class FakeOperations:
    """Records every call. Operations can be gated, failed, or given a hook."""

    def __init__(self):
        self.calls = []
        self.gates = {}
        self.failures = {}
        self.hooks = {}
        self._called = defaultdict(asyncio.Event)

    def block(self, name):
        gate = asyncio.Event()
        self.gates[name] = gate
        return gate

    def fail(self, name, error):
        self.failures[name] = error

    def on(self, name, hook):
        self.hooks[name] = hook

    def called(self, name):
        return self._called[name]

    def names(self):
        return [name for name, _ in self.calls]

    def _operation(self, name):
        async def operation(params):
            self.calls.append((name, params))
            self._called[name].set()
            gate = self.gates.get(name)
            if gate is not None:
                await gate.wait()
            error = self.failures.get(name)
            if error is not None:
                raise error
            hook = self.hooks.get(name)
            if hook is not None:
                hook(params)

        operation.__name__ = name
        return operation

    def bundle(self):
        return ShowOperations(**{name: self._operation(name) for name in OPERATION_NAMES})


@pytest.fixture
def ops():
    return FakeOperations()


@pytest.fixture
def sources():
    return ShowSources.in_memory()
