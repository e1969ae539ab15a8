# SPDX-License-Identifier: MIT
"""Idle/activity tracking: when did the user last touch the editor?"""

from typing import Optional

from notesync.clock import Clock, now_ms
from notesync.models import DEFAULT_IDLE_THRESHOLD_MS


class ActivityTracker:
    """Stamps user interaction and answers "is the user idle?"."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or now_ms
        self.last_activity = self._clock()

    def record_activity(self) -> None:
        self.last_activity = self._clock()

    def idle_for_ms(self) -> int:
        return self._clock() - self.last_activity

    def is_idle(self, threshold_ms: int = DEFAULT_IDLE_THRESHOLD_MS) -> bool:
        return self.idle_for_ms() > threshold_ms
