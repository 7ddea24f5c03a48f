"""Countdown timer engine with window, seek bar, browser and console hosts."""

from .engine import EngineSnapshot, InvalidDuration, TimerEngine, TimerState
from .events import Command, InputEvent, dispatch
from .view import ColorBand, RenderSnapshot, project

__version__ = "0.1.0"

__all__ = [
    "ColorBand",
    "Command",
    "EngineSnapshot",
    "InputEvent",
    "InvalidDuration",
    "RenderSnapshot",
    "TimerEngine",
    "TimerState",
    "dispatch",
    "project",
]
