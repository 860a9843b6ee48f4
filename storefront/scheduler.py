"""Keyed, cancellable delayed callbacks.

Used for debouncing the catalog search and for expiring notifications. A new
schedule under a key cancels whatever was pending under that key, so only the
most recent callback per key can fire.
"""
import logging
import threading
from typing import Callable, Dict, Hashable

logger = logging.getLogger(__name__)


class CallbackScheduler:

    def __init__(self, timer_factory: Callable[..., threading.Timer] = threading.Timer):
        self._timer_factory = timer_factory
        self._timers: Dict[Hashable, threading.Timer] = {}
        self._lock = threading.Lock()

    def schedule(self, key: Hashable, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` after ``delay`` seconds unless superseded or cancelled."""

        def fire():
            with self._lock:
                if self._timers.get(key) is not timer:
                    return
                del self._timers[key]
            logger.debug(f"Firing scheduled callback {key!r}")
            callback()

        with self._lock:
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()
                logger.debug(f"Superseded pending callback {key!r}")
            timer = self._timer_factory(delay, fire)
            timer.daemon = True
            self._timers[key] = timer
        timer.start()

    def cancel(self, key: Hashable) -> bool:
        with self._lock:
            timer = self._timers.pop(key, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def pending(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._timers
