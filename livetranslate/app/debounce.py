from __future__ import annotations

import time
from typing import Callable


class Debouncer:
    """
    Trailing-edge debounce polled from the UI tick.
    touch() restarts the quiet period; due() returns True exactly once after it elapses.
    """
    def __init__(self, interval_sec: float = 0.5, clock: Callable[[], float] = time.monotonic) -> None:
        if interval_sec < 0:
            raise ValueError("interval_sec must be >= 0")
        self.interval_sec = float(interval_sec)
        self.clock = clock
        self._deadline: float | None = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def touch(self) -> None:
        self._deadline = self.clock() + self.interval_sec

    def cancel(self) -> None:
        self._deadline = None

    def due(self) -> bool:
        if self._deadline is None or self.clock() < self._deadline:
            return False
        self._deadline = None
        return True
