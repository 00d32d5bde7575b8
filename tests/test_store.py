"""Tests for SourceBindings."""

import asyncio

import pytest

from showdetails import InMemorySource, SourceBindings, autorun


def _bindings(**sources):
    schema = {name: (src, default) for name, (src, default) in sources.items()}
    return SourceBindings(5, schema)


class TestSourceBindings:
    def test_defaults_from_schema(self):
        b = _bindings(follow_status=(InMemorySource(), False), seasons=(InMemorySource(), ()))
        assert b.get("follow_status") is False
        assert b.get("seasons") == ()
        assert b.names == ["follow_status", "seasons"]

    def test_get_unknown_is_none(self):
        b = _bindings(follow_status=(InMemorySource(), False))
        assert b.get("nope") is None
        assert "nope" not in b

    def test_every_binding_shares_the_key(self):
        b = _bindings(a=(InMemorySource(), None), b=(InMemorySource(), None))
        assert {b.binding(n).key for n in b.names} == {5}

    def test_update_is_one_change(self):
        b = _bindings(follow_status=(InMemorySource(), False), stats=(InMemorySource(), None))
        log = []
        autorun(lambda: log.append((b.get("follow_status"), b.get("stats"))))
        b.update({"follow_status": True, "stats": 3, "unknown": 1})
        assert log == [(False, None), (True, 3)]

    def test_reactive_tracking(self):
        b = _bindings(follow_status=(InMemorySource(), False))
        log = []
        autorun(lambda: log.append(b.get("follow_status")))
        b.cell("follow_status").set(True)
        assert log == [False, True]

    @pytest.mark.asyncio
    async def test_start_all_and_dispose(self):
        follow = InMemorySource({5: True})
        stats = InMemorySource({5: "stats", 6: "other"})
        b = _bindings(follow_status=(follow, False), stats=(stats, None))
        async with asyncio.TaskGroup() as group:
            tasks = b.start_all(group)
            assert len(tasks) == 2
            await asyncio.wait_for(b.cell("stats").wait_for(lambda v: v == "stats"), 1)
            await asyncio.wait_for(b.cell("follow_status").wait_for(bool), 1)
            b.dispose()
        assert all(t.cancelled() for t in tasks)
        assert follow.key == 5 and stats.key == 5
