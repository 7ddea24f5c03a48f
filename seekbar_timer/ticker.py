"""Periodic tick sources the engine arms while a countdown is running.

A ticker exposes ``arm(callback, interval)`` and ``disarm()``. ``disarm``
never blocks, so it may be called from inside the callback itself.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ThreadTicker:
    """Fires the callback from a daemon thread until disarmed."""

    def __init__(self, name: str = "timer-tick") -> None:
        self.name = name
        self._lock = threading.Lock()
        self._cancel: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._cancel is not None

    def arm(self, callback: Callable[[], None], interval: float) -> None:
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
            cancel = threading.Event()
            self._cancel = cancel
            self._thread = threading.Thread(
                target=self._run,
                args=(callback, interval, cancel),
                name=self.name,
                daemon=True,
            )
            self._thread.start()

    def disarm(self) -> None:
        with self._lock:
            if self._cancel is None:
                return
            self._cancel.set()
            self._cancel = None

    def join(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self, callback: Callable[[], None], interval: float, cancel: threading.Event) -> None:
        while not cancel.wait(interval):
            try:
                callback()
            except Exception:
                logger.exception("tick callback failed")


class TkTicker:
    """Fires the callback from a Tk event loop with ``after``."""

    def __init__(self, widget) -> None:
        self.widget = widget
        self._after_id: Optional[str] = None
        self._generation = 0
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self, callback: Callable[[], None], interval: float) -> None:
        self.disarm()
        self._armed = True
        self._schedule(callback, int(interval * 1000), self._generation)

    def disarm(self) -> None:
        # Bumping the generation also stops a callback that is running now.
        self._generation += 1
        self._armed = False
        if self._after_id is not None:
            self.widget.after_cancel(self._after_id)
            self._after_id = None

    def _schedule(self, callback: Callable[[], None], delay_ms: int, generation: int) -> None:
        self._after_id = self.widget.after(delay_ms, self._fire, callback, delay_ms, generation)

    def _fire(self, callback: Callable[[], None], delay_ms: int, generation: int) -> None:
        self._after_id = None
        if generation != self._generation:
            return
        try:
            callback()
        finally:
            if generation == self._generation:
                self._schedule(callback, delay_ms, generation)
