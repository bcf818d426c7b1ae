"""Millisecond software timer driven by a wrapping 32-bit tick counter."""

from __future__ import annotations

import time
from typing import Callable, Optional

_MASK32 = 0xFFFFFFFF


def _millis() -> int:
    return int(time.monotonic() * 1000) & _MASK32


class Timer:
    """A one-shot timeout measured in milliseconds.

    The timer is inactive until :meth:`start` is called. A started timer
    expires once the clock passes the stored deadline.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
        self._clock = clock or _millis
        self._timeout_ms = 0
        self._next_timeout = 0

    def _now(self) -> int:
        return self._clock() & _MASK32

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def set_timeout(self, timeout_ms: int) -> None:
        """Set the duration used by the next :meth:`start`."""
        self._timeout_ms = timeout_ms & _MASK32

    def trigger_time_in_sec(self) -> int:
        """Whole seconds left until the deadline."""
        return ((self._next_timeout - self._now()) & _MASK32) // 1000

    def is_active(self) -> bool:
        return self._next_timeout != 0

    def reset(self) -> None:
        self._next_timeout = 0

    def check(self) -> bool:
        """True once the clock has passed the deadline."""
        return self._now() > self._next_timeout

    def start(self) -> None:
        self._next_timeout = (self._now() + self._timeout_ms) & _MASK32