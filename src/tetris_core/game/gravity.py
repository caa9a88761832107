from __future__ import annotations

import time
from typing import Callable, Optional

# Zero-argument callable returning monotonic milliseconds
Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GravityScheduler:
    """Decides when the falling piece should descend by one row.

    The owner polls :meth:`tick` every ``tick_ms`` milliseconds. A tick is due
    once at least ``interval_ms`` have passed since the last descent. The
    scheduler only reports due ticks while armed.
    """

    def __init__(self, interval_ms: int = 1000, tick_ms: int = 50, clock: Optional[Clock] = None) -> None:
        if interval_ms <= 0 or tick_ms <= 0:
            raise ValueError(f"gravity periods must be positive, got interval={interval_ms} tick={tick_ms}")
        self.interval_ms = int(interval_ms)
        self.tick_ms = int(tick_ms)
        self.clock = clock or monotonic_ms
        self._armed = False
        self._last_descent_ms = 0.0

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        if not self._armed:
            self._armed = True
            self._last_descent_ms = self.clock()

    def disarm(self) -> None:
        self._armed = False

    def tick(self) -> bool:
        if not self._armed:
            return False
        now = self.clock()
        if now - self._last_descent_ms >= self.interval_ms:
            self._last_descent_ms = now
            return True
        return False
