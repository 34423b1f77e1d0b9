"""Unit tests for axis_profile.utils timing and history helpers."""

import time

import numpy as np
import pytest

from axis_profile.utils.history import History
from axis_profile.utils.timing import LoopTimer, Timer, now, sleep_for, sleep_until
from axis_profile.utils.warmup import warmup_jit


class TestTimer:
    """Tests for the elapsed-time stopwatch."""

    def test_zero_before_start(self):
        timer = Timer()
        assert not timer.running
        assert timer.get() == 0.0

    def test_positive_and_monotonic(self):
        timer = Timer()
        timer.start()
        first = timer.get()
        for _ in range(10000):
            timer.get()
        assert timer.running
        assert timer.get() > 0.0
        assert timer.get() >= first

    def test_reset_restarts(self):
        timer = Timer()
        timer.start()
        sleep_for(0.05)
        before = timer.get()
        timer.reset()
        assert timer.get() < before
        assert timer.get() < 0.1


class TestSleep:
    """Tests for blocking delay primitives."""

    def test_sleep_for_duration(self):
        start = now()
        sleep_for(0.2)
        assert now() - start == pytest.approx(0.2, abs=0.02)

    def test_sleep_until_deadline(self):
        start = now()
        sleep_until(start + 0.1)
        assert now() >= start + 0.1
        assert now() - start < 0.15

    def test_past_deadline_returns_immediately(self):
        start = now()
        sleep_until(start - 1.0)
        sleep_for(-1.0)
        sleep_for(0.0)
        assert now() - start < 0.01


class TestLoopTimer:
    """Tests for fixed-period loop pacing."""

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            LoopTimer(0.0)

    def test_paces_loop(self):
        loop = LoopTimer(0.005)
        loop.start()
        start = time.perf_counter()
        for _ in range(10):
            loop.wait_for_next_tick()
        elapsed = time.perf_counter() - start
        assert loop.loop_count == 10
        assert elapsed >= 0.045

    def test_overrun_counted(self):
        loop = LoopTimer(0.002)
        loop.start()
        time.sleep(0.02)
        loop.wait_for_next_tick()
        assert loop.overrun_count == 1


class TestHistory:
    """Tests for the fixed-period sample history."""

    def test_go_back_counts_periods(self):
        hist = History(200, 0.01)
        for i in range(100):
            hist.update(i)
        for k in range(100):
            assert hist.go_back(k * 0.01) == 99 - k

    def test_go_back_clamps_to_oldest(self):
        hist = History(200, 0.01)
        for i in range(100):
            hist.update(i)
        assert hist.go_back(5.0) == 0.0
        assert hist.go_back(-1.0) == 99.0

    def test_capacity_rounded_to_power_of_two(self):
        assert History(200, 0.01).capacity == 256
        assert History(1, 0.01).capacity == 1

    def test_wraps_when_full(self):
        hist = History(4, 0.1)
        for i in range(10):
            hist.update(float(i))
        assert len(hist) == 4
        assert np.array_equal(hist.to_array(), [6.0, 7.0, 8.0, 9.0])
        assert hist.latest() == 9.0
        assert hist.go_back(0.1) == 8.0
        assert hist.go_back(10.0) == 6.0

    def test_empty_raises(self):
        hist = History(8, 0.01)
        with pytest.raises(IndexError):
            hist.latest()

    def test_reset(self):
        hist = History(8, 0.01)
        hist.update(1.0)
        hist.reset()
        assert len(hist) == 0
        assert hist.to_array().size == 0

    @pytest.mark.parametrize("capacity,period", [(0, 0.01), (8, 0.0), (8, -1.0)])
    def test_rejects_invalid_config(self, capacity, period):
        with pytest.raises(ValueError):
            History(capacity, period)


def test_warmup_jit_compiles():
    assert warmup_jit() >= 0.0
