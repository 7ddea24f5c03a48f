import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from .alarm import preset_or_default
from .engine import DEFAULT_MINUTES
from .layout import EDGES

logger = logging.getLogger(__name__)

CONFIG_ENV = "SEEKBAR_TIMER_CONFIG"
DEFAULT_CONFIG_FILE = Path.home() / ".seekbar_timer.json"


@dataclass
class Settings:
    """User preferences. Timer progress itself is never stored."""

    minutes: int = DEFAULT_MINUTES
    edge: str = "bottom"
    thickness: int = 8
    opacity: float = 0.8
    sound: str = "Time's Up"
    host: str = "127.0.0.1"
    port: int = 0

    def validated(self) -> "Settings":
        defaults = Settings()
        if isinstance(self.minutes, bool) or not isinstance(self.minutes, int) or self.minutes <= 0:
            logger.warning("ignoring invalid minutes %r in settings", self.minutes)
            self.minutes = defaults.minutes
        if self.edge not in EDGES:
            logger.warning("ignoring unknown edge %r in settings", self.edge)
            self.edge = defaults.edge
        if isinstance(self.thickness, bool) or not isinstance(self.thickness, int) or not 1 <= self.thickness <= 200:
            logger.warning("ignoring invalid thickness %r in settings", self.thickness)
            self.thickness = defaults.thickness
        if not isinstance(self.opacity, (int, float)) or not 0.1 <= self.opacity <= 1.0:
            logger.warning("ignoring invalid opacity %r in settings", self.opacity)
            self.opacity = defaults.opacity
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 0 <= self.port <= 65535:
            logger.warning("ignoring invalid port %r in settings", self.port)
            self.port = defaults.port
        if self.sound != preset_or_default(self.sound):
            logger.warning("unknown alarm sound %r in settings", self.sound)
            self.sound = defaults.sound
        return self


def config_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV)
    return Path(env_path) if env_path else DEFAULT_CONFIG_FILE


def load_settings(path: Optional[Path] = None) -> Settings:
    settings = _read_file(config_path(path))
    _apply_environment(settings)
    return settings.validated()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    target = config_path(path)
    target.write_text(json.dumps(asdict(settings), indent=2))
    logger.debug("settings written to %s", target)
    return target


def remember_minutes(minutes: int, path: Optional[Path] = None) -> Path:
    """Store a new default timer length, leaving the other stored preferences alone.

    Environment and command line overrides are not written back.
    """
    target = config_path(path)
    settings = _read_file(target).validated()
    settings.minutes = minutes
    return save_settings(settings, target)


def _read_file(target: Path) -> Settings:
    settings = Settings()
    if target.exists():
        try:
            data = json.loads(target.read_text())
        except json.JSONDecodeError:
            logger.warning("settings file %s is not valid JSON, removing it", target)
            target.unlink(missing_ok=True)
            data = {}
        if isinstance(data, dict):
            known = {f.name for f in fields(Settings)}
            for key, value in data.items():
                if key in known:
                    setattr(settings, key, value)
    return settings


def _apply_environment(settings: Settings) -> None:
    minutes = os.environ.get("SEEKBAR_TIMER_MINUTES")
    if minutes:
        try:
            settings.minutes = int(minutes)
        except ValueError:
            logger.warning("ignoring SEEKBAR_TIMER_MINUTES=%r", minutes)
    edge = os.environ.get("SEEKBAR_TIMER_EDGE")
    if edge:
        settings.edge = edge.lower()
