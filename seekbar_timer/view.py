"""Pure projection of an engine snapshot into what a host draws."""

import enum
from dataclasses import dataclass

from .engine import EngineSnapshot

MID_THRESHOLD = 0.5
HIGH_THRESHOLD = 0.8

COMPLETION_TITLE = "Timer"
COMPLETION_MESSAGE = "Time's up!"


class ColorBand(enum.Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


BAND_COLORS = {
    ColorBand.LOW: "#00FF00",
    ColorBand.MID: "#FFFF00",
    ColorBand.HIGH: "#FF0000",
}
TROUGH_COLOR = "#404040"
PAUSED_COLOR = "#808080"

# The bar pulses between these opacities while running in the HIGH band.
BLINK_INTERVAL = 0.5
BLINK_MIN_OPACITY = 0.3
BLINK_MAX_OPACITY = 1.0


@dataclass(frozen=True)
class RenderSnapshot:
    remaining_seconds: int
    progress_fraction: float
    color_band: ColorBand
    formatted_time: str
    paused: bool = False
    running: bool = False

    @property
    def color(self) -> str:
        if self.paused:
            return PAUSED_COLOR
        return BAND_COLORS[self.color_band]

    @property
    def blinking(self) -> bool:
        return self.running and self.color_band is ColorBand.HIGH


def color_band(fraction: float) -> ColorBand:
    if fraction >= HIGH_THRESHOLD:
        return ColorBand.HIGH
    if fraction >= MID_THRESHOLD:
        return ColorBand.MID
    return ColorBand.LOW


def format_remaining(seconds: int) -> str:
    seconds = max(int(seconds), 0)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def percent_label(fraction: float) -> str:
    return f"{int(fraction * 100):3d}% Complete"


def blink_opacity(base: float, dimmed: bool) -> float:
    """Window opacity for one blink phase, scaled from the configured base."""
    return base * (BLINK_MIN_OPACITY if dimmed else BLINK_MAX_OPACITY)


def project(snapshot: EngineSnapshot) -> RenderSnapshot:
    total = snapshot.total_seconds
    current = snapshot.current_seconds
    remaining = max(0, total - current)
    fraction = min(max(current / total, 0.0), 1.0)
    return RenderSnapshot(
        remaining_seconds=remaining,
        progress_fraction=fraction,
        color_band=color_band(fraction),
        formatted_time=format_remaining(remaining),
        paused=snapshot.is_paused,
        running=snapshot.is_running,
    )
