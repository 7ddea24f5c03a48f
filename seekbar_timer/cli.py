import logging
import time
from pathlib import Path
from typing import Optional

import click

from .config import Settings, load_settings
from .engine import InvalidDuration, TimerEngine, TimerState
from .events import MAX_MINUTES, parse_minutes
from .layout import EDGES
from .view import COMPLETION_MESSAGE, ColorBand, RenderSnapshot, project

logger = logging.getLogger(__name__)

BAND_STYLES = {
    ColorBand.LOW: "green",
    ColorBand.MID: "yellow",
    ColorBand.HIGH: "red",
}


def text_bar(render: RenderSnapshot, width: int = 30) -> str:
    filled = int(width * render.progress_fraction)
    bar = click.style("#" * filled, fg=BAND_STYLES[render.color_band]) + "-" * (width - filled)
    return f"[{bar}] {render.formatted_time}"


def _minutes_option(_ctx, _param, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return parse_minutes(value)
    except InvalidDuration as exc:
        raise click.BadParameter(str(exc))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: $SEEKBAR_TIMER_CONFIG or ~/.seekbar_timer.json).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_file: Optional[Path]) -> None:
    """Countdown timer shown as a window, a screen-edge seek bar or a web page."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = load_settings(config_file)


@cli.command()
@click.option("-m", "--minutes", callback=_minutes_option, help=f"Timer length, 1-{MAX_MINUTES} minutes.")
@click.pass_obj
def run(settings: Settings, minutes: Optional[int]) -> None:
    """Count down in the terminal."""
    engine = TimerEngine(minutes or settings.minutes)
    logger.debug("console countdown of %s seconds", engine.snapshot().total_seconds)
    engine.start()
    click.echo(text_bar(project(engine.snapshot())), nl=False)
    try:
        while engine.snapshot().state is TimerState.RUNNING:
            time.sleep(1)
            engine.tick()
            click.echo("\r" + text_bar(project(engine.snapshot())), nl=False)
    except KeyboardInterrupt:
        engine.stop()
        click.echo()
        click.secho("Timer stopped early.", fg="yellow")
        raise SystemExit(1)
    click.echo("\a")
    click.secho(COMPLETION_MESSAGE, bold=True)


@cli.command()
@click.option("-m", "--minutes", callback=_minutes_option, help="Initial timer length in minutes.")
@click.pass_obj
def window(settings: Settings, minutes: Optional[int]) -> None:
    """Open the timer window."""
    from .app_window import main

    if minutes:
        settings.minutes = minutes
    main(settings)


@cli.command()
@click.option("-m", "--minutes", callback=_minutes_option, help="Initial timer length in minutes.")
@click.option("--edge", type=click.Choice(EDGES), default=None, help="Screen edge to dock the bar on.")
@click.option("--thickness", type=click.IntRange(1, 200), default=None, help="Bar thickness in pixels.")
@click.pass_obj
def bar(settings: Settings, minutes: Optional[int], edge: Optional[str], thickness: Optional[int]) -> None:
    """Show the timer as a thin bar along a screen edge."""
    from .seekbar import main

    if minutes:
        settings.minutes = minutes
    if edge:
        settings.edge = edge
    if thickness:
        settings.thickness = thickness
    main(settings)


@cli.command()
@click.option("--port", type=click.IntRange(0, 65535), default=None, help="Port to listen on (0 picks a free one).")
@click.option("--no-browser", is_flag=True, help="Do not open a browser.")
@click.pass_obj
def web(settings: Settings, port: Optional[int], no_browser: bool) -> None:
    """Serve the timer page and open it in a browser."""
    from .web import serve

    if port is not None:
        settings.port = port
    serve(settings, open_browser=not no_browser)


def main() -> None:
    cli(prog_name="seekbar-timer")
