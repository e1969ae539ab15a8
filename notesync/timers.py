# SPDX-License-Identifier: MIT
"""asyncio timer primitives: a restartable interval and a trailing debounce."""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Tuple

from notesync.debug_logger import get_logger

AsyncCallback = Callable[..., Awaitable[Any]]


class IntervalTimer:
    """Calls an async callback every `interval_ms` until stopped.

    Ticks never overlap: the next sleep starts after the callback returns.
    Exceptions from the callback are logged and the timer keeps running.
    """

    def __init__(self, callback: AsyncCallback, interval_ms: int, name: str = "interval"):
        self._callback = callback
        self.interval_ms = interval_ms
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking; an already running timer is replaced, not doubled."""
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def set_interval(self, interval_ms: int) -> None:
        self.interval_ms = interval_ms
        if self.is_running:
            self.start()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_ms / 1000)
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:  # keep ticking
                get_logger().error(f"{self.name}_tick", e)


class Debouncer:
    """Coalesces bursts of calls into one trailing call.

    Only the arguments of the last call in a burst are used; skipped calls
    are not queued or accumulated.
    """

    def __init__(self, callback: AsyncCallback, wait_ms: int, name: str = "debounce"):
        self._callback = callback
        self.wait_ms = wait_ms
        self.name = name
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending_args: Optional[Tuple[Any, ...]] = None
        self._running: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._pending_args = args
        self._handle = loop.call_later(self.wait_ms / 1000, self._fire)

    def _fire(self) -> None:
        self._handle = None
        args, self._pending_args = self._pending_args, None
        self._running = asyncio.get_running_loop().create_task(
            self._invoke(args), name=self.name
        )

    async def _invoke(self, args: Optional[Tuple[Any, ...]]) -> None:
        try:
            await self._callback(*(args or ()))
        except Exception as e:
            get_logger().error(self.name, e)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending_args = None

    async def flush(self) -> None:
        """Run the pending call now instead of waiting out the quiet period."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            args, self._pending_args = self._pending_args, None
            await self._invoke(args)
        if self._running is not None and not self._running.done():
            await self._running
