import enum
import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_MINUTES = 5


class InvalidDuration(ValueError):
    """Raised when a timer length is not a positive whole number of minutes."""


class TimerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(frozen=True)
class EngineSnapshot:
    total_seconds: int
    current_seconds: int
    state: TimerState

    @property
    def is_running(self) -> bool:
        return self.state is TimerState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.state is TimerState.IDLE and self.current_seconds > 0


Listener = Callable[[EngineSnapshot], None]


class TimerEngine:
    """Countdown state machine shared by every host surface.

    All operations are serialized by a single lock so a tick source running
    on its own thread can race with UI callbacks safely. Listeners are
    called after the lock is released, on the thread that made the change.
    """

    TICK_INTERVAL = 1.0

    def __init__(self, minutes: int = DEFAULT_MINUTES, ticker=None) -> None:
        self.total_seconds = _minutes_to_seconds(minutes)
        self.current_seconds = 0
        self.state = TimerState.IDLE
        self._lock = threading.Lock()
        self._ticker = ticker
        self._armed = False
        self._run_id = 0
        self._change_listeners: list[Listener] = []
        self._completion_listeners: list[Listener] = []

    def attach_ticker(self, ticker) -> None:
        with self._lock:
            self._disarm()
            self._ticker = ticker
            if self.state is TimerState.RUNNING:
                self._arm()

    def add_change_listener(self, callback: Listener) -> None:
        self._change_listeners.append(callback)

    def add_completion_listener(self, callback: Listener) -> None:
        self._completion_listeners.append(callback)

    def snapshot(self) -> EngineSnapshot:
        with self._lock:
            return self._snapshot()

    def start(self) -> None:
        with self._lock:
            snap = self._start()
        self._changed(snap)

    def stop(self) -> None:
        with self._lock:
            snap = self._stop()
        self._changed(snap)

    def toggle(self) -> None:
        with self._lock:
            if self.state is TimerState.RUNNING:
                snap = self._stop()
            else:
                snap = self._start()
        self._changed(snap)

    def reset(self) -> None:
        with self._lock:
            self._reset()
            snap = self._snapshot()
        logger.debug("timer reset")
        self._changed(snap)

    def set_duration(self, minutes: int) -> None:
        total = _minutes_to_seconds(minutes)
        with self._lock:
            self.total_seconds = total
            self._reset()
            snap = self._snapshot()
        logger.debug("timer length set to %s minutes", minutes)
        self._changed(snap)

    def tick(self) -> bool:
        """Advance one second. Returns True when this tick finished the countdown."""
        with self._lock:
            snap = self._advance()
        return self._ticked(snap)

    def _tick_for_run(self, run_id: int) -> None:
        # Ticks armed for an earlier run are dropped.
        with self._lock:
            snap = self._advance() if run_id == self._run_id else None
        self._ticked(snap)

    def _start(self) -> Optional[EngineSnapshot]:
        if self.state is not TimerState.IDLE:
            logger.debug("start ignored in state %s", self.state.value)
            return None
        self.state = TimerState.RUNNING
        self._run_id += 1
        self._arm()
        logger.debug("timer started at %ss of %ss", self.current_seconds, self.total_seconds)
        return self._snapshot()

    def _stop(self) -> Optional[EngineSnapshot]:
        if self.state is not TimerState.RUNNING:
            logger.debug("stop ignored in state %s", self.state.value)
            return None
        self._disarm()
        self.state = TimerState.IDLE
        logger.debug("timer paused at %ss", self.current_seconds)
        return self._snapshot()

    def _reset(self) -> None:
        self._disarm()
        self._run_id += 1
        self.current_seconds = 0
        self.state = TimerState.IDLE

    def _advance(self) -> Optional[EngineSnapshot]:
        if self.state is not TimerState.RUNNING:
            return None
        self.current_seconds += 1
        if self.current_seconds >= self.total_seconds:
            self.current_seconds = self.total_seconds
            self.state = TimerState.COMPLETED
            self._disarm()
        return self._snapshot()

    def _ticked(self, snap: Optional[EngineSnapshot]) -> bool:
        if snap is None:
            return False
        self._changed(snap)
        if snap.state is not TimerState.COMPLETED:
            return False
        logger.info("countdown of %ss completed", snap.total_seconds)
        self._notify(self._completion_listeners, snap)
        return True

    def _arm(self) -> None:
        if self._ticker is None or self._armed:
            return
        self._ticker.arm(partial(self._tick_for_run, self._run_id), self.TICK_INTERVAL)
        self._armed = True

    def _disarm(self) -> None:
        if not self._armed:
            return
        self._armed = False
        self._ticker.disarm()

    def _snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(self.total_seconds, self.current_seconds, self.state)

    def _changed(self, snap: Optional[EngineSnapshot]) -> None:
        if snap is not None:
            self._notify(self._change_listeners, snap)

    def _notify(self, listeners: list[Listener], snap: EngineSnapshot) -> None:
        for callback in list(listeners):
            try:
                callback(snap)
            except Exception:
                logger.exception("timer listener %r failed", callback)


def _minutes_to_seconds(minutes: int) -> int:
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        raise InvalidDuration(f"timer length must be a positive number of minutes, got {minutes!r}")
    return minutes * 60
