# SPDX-License-Identifier: MIT
"""Tests for the asyncio interval timer and debouncer."""

import asyncio

import pytest

from notesync.timers import Debouncer, IntervalTimer

pytest_plugins = ("pytest_asyncio",)


class TestIntervalTimer:
    @pytest.mark.asyncio
    async def test_ticks_until_stopped(self):
        calls = []

        async def tick():
            calls.append(1)

        timer = IntervalTimer(tick, 10)
        timer.start()
        await asyncio.sleep(0.08)
        timer.stop()
        seen = len(calls)
        await asyncio.sleep(0.05)

        assert seen >= 2
        assert len(calls) == seen
        assert not timer.is_running

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_task(self):
        calls = []

        async def tick():
            calls.append(1)

        timer = IntervalTimer(tick, 30)
        timer.start()
        timer.start()
        await asyncio.sleep(0.045)
        timer.stop()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_failing_tick_keeps_running(self):
        calls = []

        async def tick():
            calls.append(1)
            raise RuntimeError("boom")

        timer = IntervalTimer(tick, 10)
        timer.start()
        await asyncio.sleep(0.06)
        assert timer.is_running
        timer.stop()
        assert len(calls) >= 2


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_burst_runs_once_with_last_args(self):
        calls = []

        async def save(value):
            calls.append(value)

        debounced = Debouncer(save, 30)
        for i in range(5):
            debounced(i)
            await asyncio.sleep(0.005)
        assert debounced.pending
        await asyncio.sleep(0.08)

        assert calls == [4]
        assert not debounced.pending

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_call(self):
        calls = []

        async def save(value):
            calls.append(value)

        debounced = Debouncer(save, 20)
        debounced("x")
        debounced.cancel()
        await asyncio.sleep(0.05)

        assert calls == []

    @pytest.mark.asyncio
    async def test_flush_runs_immediately(self):
        calls = []

        async def save(value):
            calls.append(value)

        debounced = Debouncer(save, 10_000)
        debounced("now")
        await debounced.flush()

        assert calls == ["now"]
        assert not debounced.pending

    @pytest.mark.asyncio
    async def test_flush_without_pending_is_noop(self):
        async def save():
            raise AssertionError("should not run")

        await Debouncer(save, 10).flush()

    @pytest.mark.asyncio
    async def test_callback_errors_are_logged(self):
        async def save():
            raise OSError("disk full")

        debounced = Debouncer(save, 10_000)
        debounced()
        await debounced.flush()
