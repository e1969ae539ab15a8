# SPDX-License-Identifier: MIT
"""Autosave Trigger: periodically saves while there is something to save."""

from typing import Awaitable, Callable, Optional

from notesync.debug_logger import get_logger
from notesync.models import DEFAULT_AUTOSAVE_INTERVAL_MS
from notesync.timers import IntervalTimer


class AutosaveTrigger:
    """Calls `on_save` every interval while `should_save()` holds.

    Args:
        should_save: Polled each tick (typically "a dirty file is open")
        on_save: Async save routine
        interval_ms: Tick period
        name: Label used in the debug log
    """

    def __init__(
        self,
        should_save: Callable[[], bool],
        on_save: Callable[[], Awaitable[None]],
        interval_ms: int = DEFAULT_AUTOSAVE_INTERVAL_MS,
        name: str = "",
    ):
        self.should_save = should_save
        self.on_save = on_save
        self.name = name
        self.enabled = False
        self._timer = IntervalTimer(self._tick, interval_ms, name="autosave")

    @property
    def interval_ms(self) -> int:
        return self._timer.interval_ms

    @property
    def is_running(self) -> bool:
        return self._timer.is_running

    def start(self) -> None:
        self.enabled = True
        self._timer.start()

    def stop(self) -> None:
        self.enabled = False
        self._timer.stop()

    def toggle(self, enabled: bool) -> None:
        if enabled:
            self.start()
        else:
            self.stop()

    def set_interval(self, interval_ms: int) -> None:
        self._timer.set_interval(interval_ms)

    async def save_now(self) -> None:
        """Save immediately; errors propagate to the caller."""
        await self.on_save()

    async def _tick(self) -> Optional[bool]:
        if not self.should_save():
            return None
        try:
            await self.on_save()
        except Exception as e:
            get_logger().error("autosave", e)
            get_logger().autosave(self.name, False)
            return False
        get_logger().autosave(self.name, True)
        return True
