"""Cancellable delayed calls."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DebouncedCall:
    """Run ``func`` once after ``delay`` seconds of quiet.

    Each ``trigger()`` cancels the outstanding timer and starts a new one, so a
    burst of triggers results in a single call. At most one call is pending.
    """

    def __init__(self, delay: float, func: Callable[[], None], timer_factory=threading.Timer):
        self.delay = delay
        self.func = func
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def trigger(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self._timer_factory(self.delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer that already started running cannot be cancelled; drop it if superseded.
            if generation != self._generation:
                return
            self._timer = None
        try:
            self.func()
        except Exception as e:
            logger.error(f"Debounced call failed: {type(e).__name__}: {str(e)}")
