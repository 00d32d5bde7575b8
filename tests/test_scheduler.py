"""Tests for cross-thread Cell writes routed through set_scheduler()."""

import asyncio
import threading

import pytest

import showdetails.cell as _cell_mod
from showdetails import Cell, LoadingCounter, reaction, set_scheduler


@pytest.fixture
def restore_scheduler():
    old = _cell_mod._scheduler, _cell_mod._scheduler_thread
    yield
    _cell_mod._scheduler, _cell_mod._scheduler_thread = old


class TestSetScheduler:
    def test_owner_thread_is_synchronous(self, restore_scheduler):
        calls = []
        set_scheduler(lambda f: (calls.append(f), f()))
        c = Cell(0)
        c.set(42)
        assert c.get() == 42
        assert calls == []

    def test_background_thread_marshals(self, restore_scheduler):
        calls = []
        set_scheduler(lambda f: (calls.append(f), f()))
        c = Cell(0)
        done = threading.Event()

        def bg():
            c.set(99)
            done.set()

        threading.Thread(target=bg).start()
        done.wait(timeout=2)
        assert len(calls) == 1
        assert c.get() == 99

    def test_no_scheduler_is_direct(self, restore_scheduler):
        set_scheduler(None)
        assert _cell_mod._scheduler_thread is None
        c = Cell(0)
        c.set(42)
        assert c.get() == 42


class TestLoopScheduler:
    @pytest.mark.asyncio
    async def test_thread_writes_land_on_loop(self, restore_scheduler):
        loop = asyncio.get_running_loop()
        set_scheduler(loop.call_soon_threadsafe)
        c = Cell(False)
        seen_on = []
        reaction(lambda: c.get(), lambda v: seen_on.append(threading.current_thread()))

        thread = threading.Thread(target=lambda: c.set(True))
        thread.start()
        thread.join()
        assert c.value is False  # queued, not yet applied

        await asyncio.wait_for(c.wait_for(bool), 1)
        assert seen_on == [threading.current_thread()]

    @pytest.mark.asyncio
    async def test_loading_counter_from_worker_threads(self, restore_scheduler):
        loop = asyncio.get_running_loop()
        set_scheduler(loop.call_soon_threadsafe)
        counter = LoadingCounter()
        busy = []
        reaction(lambda: counter.observable.get(), busy.append)

        def worker():
            with counter.loading():
                pass

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for _ in range(5):
            await asyncio.sleep(0)
        assert counter.count == 0
        assert counter.observable.get() is False
        assert len(busy) % 2 == 0
        assert not busy or busy[-1] is False
