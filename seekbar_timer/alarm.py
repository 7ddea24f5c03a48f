import io
import logging
import math
import struct
from typing import Optional

try:
    import simpleaudio as sa  # type: ignore
except ImportError:  # pragma: no cover
    sa = None

try:
    from pygame import mixer  # type: ignore
except ImportError:  # pragma: no cover
    mixer = None

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

# Each step is (frequencies in Hz, duration in ms); no frequencies is a rest.
ALARM_PRESETS = {
    "Time's Up": [((880, 1320), 200), ((), 80), ((880, 1320), 200), ((), 80), ((1046,), 400)],
    "Gentle Chime": [((659,), 240), ((), 60), ((784,), 240), ((), 60), ((1046,), 360)],
    "Beeper": [((1000,), 120), ((), 120), ((1000,), 120), ((), 120), ((1000,), 120)],
}
DEFAULT_ALARM = "Time's Up"


def synthesize(pattern: list[tuple[tuple[int, ...], int]], sample_rate: int = SAMPLE_RATE) -> bytes:
    """Render a tone pattern to 16-bit little-endian mono PCM."""
    frames = bytearray()
    for freqs, duration_ms in pattern:
        samples = max(int(sample_rate * (duration_ms / 1000.0)), 1)
        if not freqs:
            frames.extend(b"\x00\x00" * samples)
            continue
        for n in range(samples):
            t = n / sample_rate
            # Raised-cosine fade in to avoid clicks.
            envelope = 0.5 - 0.5 * math.cos(min(n / samples, 1.0) * math.pi)
            sample = sum(math.sin(2 * math.pi * freq * t) for freq in freqs) / len(freqs)
            frames.extend(struct.pack("<h", int(32767 * envelope * sample * 0.85)))
    return bytes(frames)


def wrap_wave(pcm: bytes, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Prefix PCM data with a RIFF/WAVE header (mono, 16 bit)."""
    data_size = len(pcm)
    header = b"RIFF" + struct.pack("<I", data_size + 36) + b"WAVE"
    fmt_chunk = b"fmt " + struct.pack("<IHHIIHH", 16, 1, 1, sample_rate, sample_rate * 2, 2, 16)
    data_chunk = b"data" + struct.pack("<I", data_size)
    return header + fmt_chunk + data_chunk + pcm


class AlarmPlayer:
    """Plays the completion alarm through pygame's mixer or simpleaudio."""

    def __init__(self) -> None:
        self._cache: dict[str, bytes] = {}
        self._mixer_initialized = False
        self._mixer_channel = None
        self._active_sound = None
        self._play_obj = None

    @property
    def available(self) -> bool:
        return mixer is not None or sa is not None

    def pcm(self, name: str) -> bytes:
        name = preset_or_default(name)
        cached = self._cache.get(name)
        if cached is None:
            cached = synthesize(ALARM_PRESETS[name])
            self._cache[name] = cached
        return cached

    def play(self, name: str = DEFAULT_ALARM) -> bool:
        """Start the alarm. Returns False when no audio backend could play it."""
        self.stop()
        pcm = self.pcm(name)

        if self._ensure_mixer():
            try:
                self._active_sound = mixer.Sound(file=io.BytesIO(wrap_wave(pcm)))
                channel = self._active_sound.play(loops=0)
                if channel is not None:
                    self._mixer_channel = channel
                    return True
            except Exception as exc:  # pragma: no cover - platform specific
                logger.warning("unable to play alarm via mixer: %s", exc)
                self._active_sound = None
                self._mixer_channel = None

        if sa is not None:
            try:
                self._play_obj = sa.play_buffer(pcm, 1, 2, SAMPLE_RATE)
                return True
            except Exception as exc:  # pragma: no cover - depends on audio device
                logger.warning("unable to play alarm via simpleaudio: %s", exc)
                self._play_obj = None

        logger.debug("no audio backend available for alarm %r", name)
        return False

    def stop(self) -> None:
        if mixer is not None and self._mixer_channel is not None:
            try:
                if mixer.get_init():
                    self._mixer_channel.stop()
            except Exception as exc:  # pragma: no cover - platform specific
                logger.debug("stopping mixer channel failed: %s", exc)
            finally:
                self._mixer_channel = None
                self._active_sound = None
        if sa is not None and self._play_obj is not None:
            try:
                self._play_obj.stop()
            except Exception as exc:  # pragma: no cover - platform specific
                logger.debug("stopping simpleaudio playback failed: %s", exc)
            finally:
                self._play_obj = None

    def _ensure_mixer(self) -> bool:
        if mixer is None:
            return False
        if not self._mixer_initialized or not mixer.get_init():
            try:
                mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)  # pragma: no cover - system audio
                self._mixer_initialized = True
            except Exception as exc:  # pragma: no cover - platform dependent
                logger.warning("unable to initialise audio playback: %s", exc)
                self._mixer_initialized = False
                return False
        return mixer.get_init() is not None


def preset_or_default(name: Optional[str]) -> str:
    return name if isinstance(name, str) and name in ALARM_PRESETS else DEFAULT_ALARM
