# SPDX-License-Identifier: MIT
"""Tests for the autosave trigger."""

import asyncio

import pytest

from notesync.autosave import AutosaveTrigger

pytest_plugins = ("pytest_asyncio",)


class Target:
    def __init__(self, dirty=True, fail=None):
        self.dirty = dirty
        self.fail = fail
        self.saves = 0

    def should_save(self):
        return self.dirty

    async def save(self):
        self.saves += 1
        if self.fail:
            raise self.fail


class TestAutosaveTrigger:
    @pytest.mark.asyncio
    async def test_saves_while_dirty(self):
        target = Target()
        trigger = AutosaveTrigger(target.should_save, target.save, interval_ms=10)
        trigger.start()
        await asyncio.sleep(0.06)
        trigger.stop()
        assert target.saves >= 2

    @pytest.mark.asyncio
    async def test_clean_document_is_not_saved(self):
        target = Target(dirty=False)
        trigger = AutosaveTrigger(target.should_save, target.save, interval_ms=10)
        trigger.start()
        await asyncio.sleep(0.05)
        trigger.stop()
        assert target.saves == 0

    @pytest.mark.asyncio
    async def test_stop_prevents_trailing_save(self):
        target = Target()
        trigger = AutosaveTrigger(target.should_save, target.save, interval_ms=20)
        trigger.start()
        trigger.stop()
        await asyncio.sleep(0.05)
        assert target.saves == 0
        assert not trigger.is_running
        assert not trigger.enabled

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        target = Target()
        trigger = AutosaveTrigger(target.should_save, target.save, interval_ms=30)
        trigger.start()
        trigger.start()
        await asyncio.sleep(0.045)
        trigger.stop()
        assert target.saves == 1

    @pytest.mark.asyncio
    async def test_save_errors_do_not_stop_timer(self):
        target = Target(fail=OSError("disk full"))
        trigger = AutosaveTrigger(target.should_save, target.save, interval_ms=10)
        trigger.start()
        await asyncio.sleep(0.05)
        assert trigger.is_running
        trigger.stop()
        assert target.saves >= 2

    @pytest.mark.asyncio
    async def test_save_now_raises(self):
        target = Target(fail=OSError("disk full"))
        trigger = AutosaveTrigger(target.should_save, target.save)
        with pytest.raises(OSError):
            await trigger.save_now()

    @pytest.mark.asyncio
    async def test_toggle_and_set_interval(self):
        target = Target(dirty=False)
        trigger = AutosaveTrigger(target.should_save, target.save, interval_ms=1000)
        trigger.toggle(True)
        assert trigger.is_running and trigger.enabled
        trigger.set_interval(500)
        assert trigger.interval_ms == 500
        assert trigger.is_running
        trigger.toggle(False)
        assert not trigger.is_running

    def test_defaults(self):
        trigger = AutosaveTrigger(lambda: False, None)
        assert trigger.interval_ms == 2000
        assert not trigger.enabled
