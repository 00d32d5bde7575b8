"""Tests for Computed values."""

from showdetails import Cell, Computed, autorun, computed


class TestComputed:
    def test_lazy_eval(self):
        call_count = 0
        count = Cell(2)

        def busy():
            nonlocal call_count
            call_count += 1
            return count.get() > 0

        c = Computed(busy)
        assert call_count == 0
        assert c.get() is True
        assert call_count == 1

    def test_caches_until_dirty(self):
        call_count = 0
        count = Cell(2)

        def busy():
            nonlocal call_count
            call_count += 1
            return count.get() > 0

        c = Computed(busy)
        c.get()
        c.get()
        assert call_count == 1

    def test_invalidation(self):
        count = Cell(1)
        c = Computed(lambda: count.get() > 0)
        assert c.get() is True
        count.set(0)
        assert c.get() is False

    def test_dynamic_dependencies(self):
        use_poster = Cell(True)
        poster = Cell("poster.jpg")
        backdrop = Cell("backdrop.jpg")

        c = Computed(lambda: poster.get() if use_poster.get() else backdrop.get())
        assert c.get() == "poster.jpg"

        use_poster.set(False)
        assert c.get() == "backdrop.jpg"
        assert c not in poster._dependents

    def test_chained(self):
        watched = Cell(3)
        total = Cell(10)
        remaining = Computed(lambda: total.get() - watched.get())
        finished = Computed(lambda: remaining.get() == 0)
        assert finished.get() is False
        watched.set(10)
        assert finished.get() is True

    def test_dispose(self):
        count = Cell(1)
        c = Computed(lambda: count.get() * 2)
        c.get()
        c.dispose()
        count.set(5)
        assert c.get() == 10

    def test_propagates_to_reactions(self):
        count = Cell(0)
        busy = Computed(lambda: count.get() > 0)
        log = []
        autorun(lambda: log.append(busy.get()))
        count.set(1)
        count.set(2)
        count.set(0)
        # 1 -> 2 re-runs the autorun too, with an unchanged result
        assert log == [False, True, True, False]


class TestComputedDecorator:
    def test_decorator_factory(self):
        count = Cell(0)

        @computed
        def busy():
            return count.get() > 0

        assert busy.get() is False
        count.set(4)
        assert busy.get() is True
