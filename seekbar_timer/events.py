"""Input events shared by the host surfaces and their mapping onto the engine."""

import enum
import re
from dataclasses import dataclass
from typing import Optional

from .engine import InvalidDuration, TimerEngine

MAX_MINUTES = 999

# Also compiled by the browser page, so it must stay valid JavaScript.
MINUTES_PATTERN = r"^\s*(-?\d+)\s*(?:m|min|mins|minutes?)?\s*$"
_MINUTES_RE = re.compile(MINUTES_PATTERN, re.IGNORECASE)


class Command(enum.Enum):
    START = "start"
    PAUSE = "pause"
    RESET = "reset"
    SET_DURATION = "set_duration"
    TOGGLE = "toggle"
    QUIT = "quit"


@dataclass(frozen=True)
class InputEvent:
    command: Command
    minutes: Optional[int] = None


START = InputEvent(Command.START)
PAUSE = InputEvent(Command.PAUSE)
RESET = InputEvent(Command.RESET)
TOGGLE = InputEvent(Command.TOGGLE)
QUIT = InputEvent(Command.QUIT)

# Application window: Escape resets, the seek bar has no reset key so Escape quits.
WINDOW_KEYS = {"space": TOGGLE, "Escape": RESET, "r": RESET}
SEEKBAR_KEYS = {"space": TOGGLE, "Escape": QUIT}


def dispatch(engine: TimerEngine, event: InputEvent) -> bool:
    """Apply a host event to the engine. Returns False when the host should exit."""
    command = event.command
    if command is Command.QUIT:
        return False
    if command is Command.START:
        engine.start()
    elif command is Command.PAUSE:
        engine.stop()
    elif command is Command.RESET:
        engine.reset()
    elif command is Command.TOGGLE:
        engine.toggle()
    elif command is Command.SET_DURATION:
        if event.minutes is None:
            raise InvalidDuration("set duration event is missing minutes")
        engine.set_duration(event.minutes)
    return True


def event_for_key(keymap: dict, keysym: str) -> Optional[InputEvent]:
    return keymap.get(keysym)


def parse_minutes(text: str) -> int:
    """Parse a typed timer length such as ``"5"``, ``" 10 "`` or ``"25min"``."""
    match = _MINUTES_RE.match(text or "")
    if not match:
        raise InvalidDuration(f"not a number of minutes: {text!r}")
    minutes = int(match.group(1))
    if minutes <= 0:
        raise InvalidDuration("timer length must be at least one minute")
    if minutes > MAX_MINUTES:
        raise InvalidDuration(f"timer length must not exceed {MAX_MINUTES} minutes")
    return minutes


def set_duration_event(text: str) -> InputEvent:
    return InputEvent(Command.SET_DURATION, parse_minutes(text))
