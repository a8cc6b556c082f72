"""Fixed-interval background runner for reminder scans."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Call ``callback`` immediately on start, then every ``interval`` seconds.

    A failing callback is logged and the loop keeps running.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "periodic-task"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self) -> None:
        while True:
            try:
                self.callback()
            except Exception as e:
                logger.error(f"{self.name} tick failed: {type(e).__name__}: {str(e)}")
            if self._stop.wait(self.interval):
                return
