import logging
import webbrowser
from typing import Optional

from flask import Flask, render_template
from werkzeug.serving import make_server

from .config import Settings
from .engine import TimerEngine
from .events import MAX_MINUTES, MINUTES_PATTERN
from .view import (
    BAND_COLORS,
    COMPLETION_MESSAGE,
    HIGH_THRESHOLD,
    MID_THRESHOLD,
    PAUSED_COLOR,
    TROUGH_COLOR,
    ColorBand,
    project,
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Flask app serving the self-contained browser timer page."""
    settings = settings or Settings()
    app = Flask(__name__)
    app.config["TIMER_SETTINGS"] = settings

    def page():
        # The page starts from the same initial projection as the native hosts.
        initial = project(TimerEngine(settings.minutes).snapshot())
        return render_template(
            "timer.html",
            minutes=settings.minutes,
            initial=initial,
            mid_threshold=MID_THRESHOLD,
            high_threshold=HIGH_THRESHOLD,
            colors={band.value: color for band, color in BAND_COLORS.items()},
            low=ColorBand.LOW.value,
            mid=ColorBand.MID.value,
            high=ColorBand.HIGH.value,
            trough=TROUGH_COLOR,
            paused_color=PAUSED_COLOR,
            completion_message=COMPLETION_MESSAGE,
            max_minutes=MAX_MINUTES,
            minutes_pattern=MINUTES_PATTERN,
        )

    app.add_url_rule("/", "index", page)
    app.add_url_rule("/timer.html", "timer", page)
    return app


def serve(settings: Optional[Settings] = None, open_browser: bool = True) -> None:
    settings = settings or Settings()
    app = create_app(settings)
    # Port 0 lets the OS pick a free port.
    server = make_server(settings.host, settings.port, app)
    url = f"http://{settings.host}:{server.server_port}/timer.html"
    logger.info("serving timer page at %s", url)
    if open_browser and not webbrowser.open(url):
        logger.warning("could not open a browser, open %s manually", url)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("shutting down")
    finally:
        server.server_close()
