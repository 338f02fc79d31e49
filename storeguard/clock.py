"""Whole-second time sources used to age cached collections."""

from __future__ import annotations

import math
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall clock rounded up to whole seconds."""

    def now(self) -> int:
        return math.ceil(time.time())


class ManualClock:
    """Clock that only moves when told to, for deterministic tests."""

    def __init__(self, start: int = 0) -> None:
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += seconds
        return self._now

    def set(self, value: int) -> None:
        self._now = value


__all__ = ["Clock", "SystemClock", "ManualClock"]
