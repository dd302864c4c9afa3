"""
Tick sources for the sale host.

A tick is a monotonically increasing ordinal (block height, epoch number).
`ManualClock` is the in-process implementation used by tests and the replay
tool; production hosts plug in anything with a `now()` method.
"""

from __future__ import annotations

import threading
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int: ...


class ManualClock:
    """Clock advanced explicitly by the caller. Never moves backwards."""

    def __init__(self, tick: int = 0) -> None:
        if not isinstance(tick, int) or isinstance(tick, bool) or tick < 0:
            raise ValueError(f"tick must be a non-negative int: {tick!r}")
        self._tick = tick
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            return self._tick

    def advance(self, delta: int = 1) -> int:
        if delta < 0:
            raise ValueError(f"clock cannot move backwards (delta={delta})")
        with self._lock:
            self._tick += delta
            return self._tick

    def advance_to(self, tick: int) -> int:
        with self._lock:
            if tick < self._tick:
                raise ValueError(f"clock cannot move backwards: {tick} < {self._tick}")
            self._tick = tick
            return self._tick

    def __repr__(self) -> str:
        return f"ManualClock(tick={self._tick})"
