# Fixed-interval tick driver, independent of how often frames are delivered.
from __future__ import annotations

import logging
import threading
import time
from typing import Callable


logger = logging.getLogger(__name__)

DEFAULT_FRAME_MS = 16


class TickDriver:
    """
    Fires ``callback`` once per elapsed interval while ``is_running()`` holds.

    ``advance(now)`` is meant to be called on every frame with a monotonic
    timestamp in milliseconds. When the game is not running the last-fired
    timestamp is cleared, so resuming never fires against a stale time and
    ticks missed while paused are never replayed.

    ``interval_ms`` may be a number or a zero-argument callable; it is read
    on every frame so a variable speed can be plugged in later.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        interval_ms: float | Callable[[], float],
        is_running: Callable[[], bool],
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.callback = callback
        self.interval_ms = interval_ms
        self.is_running = is_running
        self.clock = clock if clock is not None else _monotonic_ms
        self.last_fired: float | None = None
        self.ticks_fired = 0

    def current_interval(self) -> float:
        interval = self.interval_ms() if callable(self.interval_ms) else self.interval_ms
        if interval <= 0:
            raise ValueError("interval_ms must be > 0")
        return float(interval)

    def advance(self, now: float | None = None) -> bool:
        """Process one frame. Returns True if a tick fired."""
        if now is None:
            now = self.clock()

        if not self.is_running():
            self.last_fired = None
            return False

        if self.last_fired is None:
            self.last_fired = now
            return False

        interval = self.current_interval()
        if now - self.last_fired < interval:
            return False

        self.callback()
        self.ticks_fired += 1
        # Step by one interval rather than resetting to the frame time, so the
        # tick rate tracks the interval instead of rounding up to whole frames.
        # Any backlog bigger than one interval is dropped.
        self.last_fired += interval
        if now - self.last_fired >= interval:
            self.last_fired = now
        return True

    def stop(self) -> None:
        """Forget the last-fired timestamp. Safe to call repeatedly."""
        self.last_fired = None

    def run(self, stop_event: threading.Event, frame_ms: float = DEFAULT_FRAME_MS) -> int:
        """Blocking frame loop for headless use. Returns the number of ticks fired."""
        fired_before = self.ticks_fired
        try:
            while not stop_event.is_set():
                self.advance()
                time.sleep(frame_ms / 1000.0)
        finally:
            self.stop()
        fired = self.ticks_fired - fired_before
        logger.debug("Tick loop stopped after %d ticks", fired)
        return fired


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0
