import logging
import threading
from typing import Callable, Optional

from PIL import Image, ImageDraw

from .view import TROUGH_COLOR, RenderSnapshot

logger = logging.getLogger(__name__)

ICON_SIZE = 64
FRAME_COLOR = "#C0C0C0"
EDGE_LIGHT = "#FFFFFF"


def render_icon(render: Optional[RenderSnapshot] = None, size: int = ICON_SIZE) -> "Image.Image":
    """Draw a tray icon: a framed bar filled to the current progress."""
    image = Image.new("RGB", (size, size), FRAME_COLOR)
    draw = ImageDraw.Draw(image)
    margin = size // 8
    top = size // 3
    bottom = size - size // 3
    draw.rectangle((margin, top, size - margin - 1, bottom), fill=TROUGH_COLOR, outline=EDGE_LIGHT)
    if render is not None and render.progress_fraction > 0:
        inner = size - 2 * margin - 2
        right = margin + 1 + int(inner * render.progress_fraction)
        draw.rectangle((margin + 1, top + 1, right, bottom - 1), fill=render.color)
    return image


class TrayIcon:
    """System tray icon for the application window.

    Menu callbacks run on the tray thread; they must only hand work over to
    the UI thread.
    """

    def __init__(
        self,
        on_show: Callable[[], None],
        on_toggle: Callable[[], None],
        on_reset: Callable[[], None],
        on_quit: Callable[[], None],
        title: str = "Seekbar Timer",
    ) -> None:
        self.title = title
        self._on_show = on_show
        self._on_toggle = on_toggle
        self._on_reset = on_reset
        self._on_quit = on_quit
        self._icon = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._icon is not None

    def start(self) -> bool:
        try:
            import pystray
        except ImportError:
            logger.debug("pystray is not available, running without a tray icon")
            return False

        self._icon = pystray.Icon(
            "seekbar_timer",
            render_icon(),
            self.title,
            menu=pystray.Menu(
                pystray.MenuItem("Show", lambda _icon, _item: self._on_show(), default=True),
                pystray.MenuItem("Start / Pause", lambda _icon, _item: self._on_toggle()),
                pystray.MenuItem("Reset", lambda _icon, _item: self._on_reset()),
                pystray.MenuItem("Exit", lambda _icon, _item: self._on_quit()),
            ),
        )
        self._thread = threading.Thread(target=self._icon.run, name="tray-icon", daemon=True)
        self._thread.start()
        return True

    def update(self, render: RenderSnapshot) -> None:
        if self._icon is None:
            return
        self._icon.icon = render_icon(render)
        self._icon.title = f"{self.title} - {render.formatted_time}"

    def stop(self) -> None:
        if self._icon is None:
            return
        self._icon.stop()
        self._icon = None
