import json
from dataclasses import asdict

from seekbar_timer.config import Settings, config_path, load_settings, remember_minutes, save_settings


def test_missing_file_gives_defaults(isolated_settings):
    assert not isolated_settings.exists()
    assert load_settings() == Settings()


def test_round_trip(isolated_settings):
    save_settings(Settings(minutes=25, edge="top", thickness=12, opacity=0.5))
    loaded = load_settings()
    assert loaded.minutes == 25
    assert loaded.edge == "top"
    assert loaded.thickness == 12
    assert loaded.opacity == 0.5


def test_explicit_path_wins_over_environment(tmp_path):
    target = tmp_path / "other.json"
    save_settings(Settings(minutes=3), target)
    assert config_path(target) == target
    assert load_settings(target).minutes == 3


def test_corrupt_file_is_removed(isolated_settings):
    isolated_settings.write_text("{not json")
    assert load_settings() == Settings()
    assert not isolated_settings.exists()


def test_invalid_values_fall_back_to_defaults(isolated_settings):
    isolated_settings.write_text(
        json.dumps({"minutes": -4, "edge": "middle", "thickness": 0, "opacity": 7, "port": 70000})
    )
    assert load_settings() == Settings()


def test_unknown_keys_are_ignored(isolated_settings):
    isolated_settings.write_text(json.dumps({"minutes": 9, "current_seconds": 120}))
    settings = load_settings()
    assert settings.minutes == 9
    assert not hasattr(settings, "current_seconds")


def test_environment_overrides(isolated_settings, monkeypatch):
    save_settings(Settings(minutes=10, edge="bottom"))
    monkeypatch.setenv("SEEKBAR_TIMER_MINUTES", "15")
    monkeypatch.setenv("SEEKBAR_TIMER_EDGE", "Left")
    settings = load_settings()
    assert settings.minutes == 15
    assert settings.edge == "left"


def test_bad_environment_minutes_are_ignored(monkeypatch):
    monkeypatch.setenv("SEEKBAR_TIMER_MINUTES", "soon")
    assert load_settings().minutes == Settings().minutes


def test_remember_minutes_keeps_stored_preferences(isolated_settings):
    save_settings(Settings(edge="top", thickness=12))
    remember_minutes(42)
    stored = json.loads(isolated_settings.read_text())
    assert stored["minutes"] == 42
    assert stored["edge"] == "top"
    assert stored["thickness"] == 12


def test_remember_minutes_does_not_store_environment_overrides(isolated_settings, monkeypatch):
    save_settings(Settings(edge="top"))
    monkeypatch.setenv("SEEKBAR_TIMER_EDGE", "left")
    monkeypatch.setenv("SEEKBAR_TIMER_MINUTES", "7")
    assert load_settings().edge == "left"
    remember_minutes(15)
    stored = json.loads(isolated_settings.read_text())
    assert stored["edge"] == "top"
    assert stored["minutes"] == 15


def test_remember_minutes_without_file_writes_defaults(isolated_settings):
    remember_minutes(3)
    stored = json.loads(isolated_settings.read_text())
    assert stored == {**asdict(Settings()), "minutes": 3}
