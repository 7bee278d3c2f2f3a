"""Millisecond stopwatch that can be paused and resumed."""

from __future__ import annotations

import time
from typing import Callable

_EPOCH = time.monotonic()
_TICK_MASK = 0xFFFFFFFF


def _default_clock() -> int:
    return int((time.monotonic() - _EPOCH) * 1000) & _TICK_MASK


class Timer:
    """Counts elapsed milliseconds from a clock returning integer ticks."""

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or _default_clock
        self._start_ticks = 0
        self._paused_ticks = 0
        self._paused = False
        self._started = False

    def start(self) -> None:
        self._started = True
        self._paused = False
        self._start_ticks = self._clock()
        self._paused_ticks = 0

    def stop(self) -> None:
        self._started = False
        self._paused = False
        self._start_ticks = 0
        self._paused_ticks = 0

    def pause(self) -> None:
        if self._started and not self._paused:
            self._paused = True
            self._paused_ticks = (self._clock() - self._start_ticks) & _TICK_MASK
            self._start_ticks = 0

    def resume(self) -> None:
        if self._paused:
            self._paused = False
            self._start_ticks = (self._clock() - self._paused_ticks) & _TICK_MASK
            self._paused_ticks = 0

    def ticks(self) -> int:
        """Milliseconds counted so far; 0 when the timer is not running."""
        if not self._started:
            return 0
        if self._paused:
            return self._paused_ticks
        return (self._clock() - self._start_ticks) & _TICK_MASK

    def is_started(self) -> bool:
        return self._started

    def is_paused(self) -> bool:
        return self._paused and self._started