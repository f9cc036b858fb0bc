"""Repeating background timer used to refresh the store's clock."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Invoke ``callback`` every ``interval`` seconds on a daemon thread.

    Ticks run one after another on the same thread and never overlap. The
    first tick fires one interval after :meth:`start`.
    """

    def __init__(self, interval: float, callback: Callable[[], None], *, name: str = "refresh") -> None:
        if not 0 < interval <= threading.TIMEOUT_MAX:
            raise ValueError(f"Timer interval out of range: {interval!r}")
        self.interval = interval
        self._callback = callback
        self._name = name
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    def start(self) -> None:
        with self._lock:
            if self._thread and self._thread.is_alive():
                return
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(stop_event,),
                name=self._name,
                daemon=True,
            )
            self._thread = thread
            self._stop_event = stop_event
            thread.start()
            logger.debug("Timer %s started at %.3fs.", self._name, self.interval)

    def stop(self) -> None:
        thread: Optional[threading.Thread] = None
        with self._lock:
            if not self._thread or not self._stop_event:
                return
            self._stop_event.set()
            thread = self._thread
            self._thread = None
            self._stop_event = None
        # A tick that stops its own timer must not wait for itself.
        if thread and thread is not threading.current_thread():
            thread.join(timeout=10)
        logger.debug("Timer %s stopped.", self._name)

    def is_running(self) -> bool:
        with self._lock:
            return bool(self._thread and self._thread.is_alive())

    def _run(self, stop_event: threading.Event) -> None:
        while True:
            try:
                if stop_event.wait(self.interval):
                    return
            except (OverflowError, ValueError):
                logger.exception("Timer %s cannot wait %rs; stopping.", self._name, self.interval)
                return
            try:
                self._callback()
            except Exception:
                logger.exception("Timer %s callback failed.", self._name)
