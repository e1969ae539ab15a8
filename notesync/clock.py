# SPDX-License-Identifier: MIT
"""Wall-clock source in epoch milliseconds, swappable in tests."""

import time
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000
