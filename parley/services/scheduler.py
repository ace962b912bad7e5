"""
Deferred callbacks for standup expiry and send-later delivery.

Callbacks only wake the store; the store reapers decide what is due, so a
callback that fires late, early or twice is harmless.
"""

import logging
import threading
import time
from typing import Callable, List

logger = logging.getLogger(__name__)


class Scheduler:
    """Runs callbacks at absolute epoch-second times on daemon timers."""

    def __init__(self, clock: Callable[[], float] = time.time, enabled: bool = True):
        self.clock = clock
        self.enabled = enabled
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def call_at(self, when: float, callback: Callable[[], None]) -> None:
        if not self.enabled:
            return

        delay = max(0.0, when - self.clock())
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()
        logger.debug(f"Scheduled callback in {delay:.2f}s")

    def cancel_all(self) -> None:
        with self._lock:
            for timer in self._timers:
                timer.cancel()
            self._timers.clear()
