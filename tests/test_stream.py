"""Tests for EffectChannel: broadcast, no replay, operator chaining."""

import asyncio
import logging

import pytest

from showdetails import ClearError, EffectChannel, ShowError


class TestEmitSubscribe:
    def test_subscribe_receives_emitted_values(self):
        channel = EffectChannel()
        received = []
        channel.subscribe(received.append)
        channel.emit(ClearError())
        assert received == [ClearError()]

    def test_multiple_subscribers(self):
        channel = EffectChannel()
        a, b = [], []
        channel.subscribe(a.append)
        channel.subscribe(b.append)
        channel.emit("x")
        assert a == ["x"]
        assert b == ["x"]

    def test_late_subscriber_sees_nothing_past(self):
        channel = EffectChannel()
        channel.emit(ShowError(RuntimeError("missed")))
        received = []
        channel.subscribe(received.append)
        assert received == []

    def test_unsubscribe(self):
        channel = EffectChannel()
        received = []
        unsub = channel.subscribe(received.append)
        channel.emit(1)
        unsub()
        channel.emit(2)
        assert received == [1]

    def test_unsubscribe_idempotent(self):
        channel = EffectChannel()
        unsub = channel.subscribe(lambda v: None)
        unsub()
        unsub()

    def test_failing_subscriber_does_not_block_others(self, caplog):
        channel = EffectChannel()
        received = []

        def broken(value):
            raise RuntimeError("render failed")

        channel.subscribe(broken)
        channel.subscribe(received.append)
        with caplog.at_level(logging.ERROR, logger="showdetails.stream"):
            channel.emit("x")

        assert received == ["x"]
        assert "Effect subscriber" in caplog.text


class TestOperators:
    def test_filter_errors_only(self):
        channel = EffectChannel()
        errors = channel.filter(lambda e: isinstance(e, ShowError))
        received = []
        errors.subscribe(received.append)
        boom = RuntimeError("boom")
        channel.emit(ClearError())
        channel.emit(ShowError(boom))
        assert received == [ShowError(boom)]

    def test_map_then_filter(self):
        channel = EffectChannel()
        messages = channel.map(lambda e: getattr(e, "cause", None)).filter(lambda c: c is not None)
        received = []
        messages.subscribe(lambda c: received.append(str(c)))
        channel.emit(ClearError())
        channel.emit(ShowError(ValueError("offline")))
        assert received == ["offline"]


class TestDispose:
    def test_emit_after_dispose_is_noop(self):
        channel = EffectChannel()
        received = []
        channel.subscribe(received.append)
        channel.dispose()
        channel.emit(1)
        assert received == []
        assert channel.disposed

    def test_dispose_propagates_to_children(self):
        parent = EffectChannel()
        child = parent.map(lambda v: v)
        grandchild = child.filter(lambda v: True)
        parent.dispose()
        assert child.disposed
        assert grandchild.disposed

    def test_child_dispose_does_not_affect_parent(self):
        parent = EffectChannel()
        child = parent.map(lambda v: v)
        received = []
        parent.subscribe(received.append)
        child.dispose()
        parent.emit(1)
        assert received == [1]
        assert not parent.disposed


class TestListen:
    @pytest.mark.asyncio
    async def test_listen_yields_in_order(self):
        channel = EffectChannel()
        received = []

        async def consume():
            async for effect in channel.listen():
                received.append(effect)
                if len(received) == 2:
                    return

        task = asyncio.ensure_future(consume())
        await asyncio.sleep(0)
        channel.emit("a")
        channel.emit("b")
        await asyncio.wait_for(task, 1)
        assert received == ["a", "b"]

    @pytest.mark.asyncio
    async def test_listen_ends_on_dispose(self):
        channel = EffectChannel()
        received = []

        async def consume():
            async for effect in channel.listen():
                received.append(effect)

        task = asyncio.ensure_future(consume())
        await asyncio.sleep(0)
        channel.emit("a")
        channel.dispose()
        await asyncio.wait_for(task, 1)
        assert received == ["a"]
