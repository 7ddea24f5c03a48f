from unittest.mock import patch

from click.testing import CliRunner

from seekbar_timer.cli import cli, text_bar
from seekbar_timer.config import Settings, save_settings
from seekbar_timer.engine import EngineSnapshot, TimerState
from seekbar_timer.view import project


@patch("seekbar_timer.cli.time.sleep")
def test_run_counts_down_to_completion(mock_sleep):
    result = CliRunner().invoke(cli, ["run", "--minutes", "1"])
    assert result.exit_code == 0, result.output
    assert mock_sleep.call_count == 60
    assert "00:00" in result.output
    assert result.output.rstrip().endswith("Time's up!")


@patch("seekbar_timer.cli.time.sleep")
def test_run_uses_configured_minutes(mock_sleep, isolated_settings):
    save_settings(Settings(minutes=2))
    result = CliRunner().invoke(cli, ["run"])
    assert result.exit_code == 0, result.output
    assert mock_sleep.call_count == 120


@patch("seekbar_timer.cli.time.sleep", side_effect=KeyboardInterrupt)
def test_run_interrupted(mock_sleep):
    result = CliRunner().invoke(cli, ["run", "-m", "1"])
    assert result.exit_code == 1
    assert "Timer stopped early." in result.output


def test_run_rejects_bad_minutes():
    result = CliRunner().invoke(cli, ["run", "--minutes", "0"])
    assert result.exit_code == 2
    assert "at least one minute" in result.output


def test_bar_rejects_unknown_edge():
    result = CliRunner().invoke(cli, ["bar", "--edge", "middle"])
    assert result.exit_code == 2


@patch("seekbar_timer.web.serve")
def test_web_passes_port_and_browser_flag(mock_serve):
    result = CliRunner().invoke(cli, ["web", "--port", "8123", "--no-browser"])
    assert result.exit_code == 0, result.output
    settings = mock_serve.call_args.args[0]
    assert settings.port == 8123
    assert mock_serve.call_args.kwargs == {"open_browser": False}


def test_text_bar():
    render = project(EngineSnapshot(60, 30, TimerState.RUNNING))
    line = text_bar(render, width=10)
    assert line.endswith("-----] 00:30")
    assert "#####" in line
