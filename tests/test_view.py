import pytest

from seekbar_timer.engine import EngineSnapshot, TimerEngine, TimerState
from seekbar_timer.view import (
    BAND_COLORS,
    PAUSED_COLOR,
    ColorBand,
    blink_opacity,
    color_band,
    format_remaining,
    percent_label,
    project,
)


def test_fresh_engine_projects_full_time():
    render = project(TimerEngine().snapshot())
    assert render.remaining_seconds == 300
    assert render.progress_fraction == 0.0
    assert render.color_band is ColorBand.LOW
    assert render.formatted_time == "05:00"


def test_halfway_resolves_to_mid_band(engine, ticker):
    engine.start()
    ticker.fire(150)
    render = project(engine.snapshot())
    assert render.remaining_seconds == 150
    assert render.formatted_time == "02:30"
    assert render.progress_fraction == 0.5
    assert render.color_band is ColorBand.MID


def test_eighty_percent_is_high_band(ticker):
    engine = TimerEngine(minutes=1, ticker=ticker)
    engine.start()
    ticker.fire(48)
    render = project(engine.snapshot())
    assert render.progress_fraction == pytest.approx(0.8)
    assert render.color_band is ColorBand.HIGH
    assert render.color == BAND_COLORS[ColorBand.HIGH]


@pytest.mark.parametrize(
    "fraction, band",
    [
        (0.0, ColorBand.LOW),
        (0.499, ColorBand.LOW),
        (0.5, ColorBand.MID),
        (0.799, ColorBand.MID),
        (0.8, ColorBand.HIGH),
        (1.0, ColorBand.HIGH),
    ],
)
def test_color_band_thresholds(fraction, band):
    assert color_band(fraction) is band


@pytest.mark.parametrize(
    "seconds, text",
    [(0, "00:00"), (59, "00:59"), (60, "01:00"), (299, "04:59"), (6000, "100:00"), (-5, "00:00")],
)
def test_format_remaining(seconds, text):
    assert format_remaining(seconds) == text


def test_completed_snapshot_projects_zero_remaining():
    render = project(EngineSnapshot(60, 60, TimerState.COMPLETED))
    assert render.remaining_seconds == 0
    assert render.progress_fraction == 1.0
    assert render.formatted_time == "00:00"


def test_progress_is_monotonic_while_running(ticker):
    engine = TimerEngine(minutes=2, ticker=ticker)
    engine.start()
    fractions = []
    for _ in range(120):
        ticker.fire()
        fractions.append(project(engine.snapshot()).progress_fraction)
    assert fractions == sorted(fractions)
    assert fractions[-1] == 1.0


def test_progress_is_zero_after_reset(engine, ticker):
    engine.start()
    ticker.fire(100)
    engine.reset()
    assert project(engine.snapshot()).progress_fraction == 0.0


def test_projection_does_not_touch_engine(engine, ticker):
    engine.start()
    ticker.fire(3)
    before = engine.snapshot()
    for _ in range(10):
        project(before)
    assert engine.snapshot() == before


def test_percent_label():
    assert percent_label(0.0) == "  0% Complete"
    assert percent_label(0.5) == " 50% Complete"
    assert percent_label(1.0) == "100% Complete"


def test_paused_timer_uses_paused_color(engine, ticker):
    engine.start()
    ticker.fire(200)
    engine.stop()
    render = project(engine.snapshot())
    assert render.paused
    assert render.color == PAUSED_COLOR
    assert render.color_band is ColorBand.MID
    assert not render.blinking


def test_idle_at_zero_is_not_paused():
    render = project(TimerEngine().snapshot())
    assert not render.paused
    assert render.color == BAND_COLORS[ColorBand.LOW]


@pytest.mark.parametrize(
    "current, state, blinking",
    [
        (47, TimerState.RUNNING, False),
        (48, TimerState.RUNNING, True),
        (48, TimerState.IDLE, False),
        (60, TimerState.COMPLETED, False),
    ],
)
def test_blinks_only_while_running_in_high_band(current, state, blinking):
    assert project(EngineSnapshot(60, current, state)).blinking is blinking


def test_blink_opacity_scales_configured_opacity():
    assert blink_opacity(0.8, dimmed=False) == pytest.approx(0.8)
    assert blink_opacity(0.8, dimmed=True) == pytest.approx(0.24)
