import pytest

from seekbar_timer.config import Settings
from seekbar_timer.engine import TimerEngine
from seekbar_timer.web import create_app


class FakeTicker:
    """Records arm/disarm calls; ticks are fired by hand with ``fire()``."""

    def __init__(self):
        self.callback = None
        self.interval = None
        self.arm_count = 0
        self.disarm_count = 0

    @property
    def armed(self):
        return self.callback is not None

    def arm(self, callback, interval):
        self.callback = callback
        self.interval = interval
        self.arm_count += 1

    def disarm(self):
        self.callback = None
        self.disarm_count += 1

    def fire(self, times=1):
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("SEEKBAR_TIMER_CONFIG", str(tmp_path / "settings.json"))
    monkeypatch.delenv("SEEKBAR_TIMER_MINUTES", raising=False)
    monkeypatch.delenv("SEEKBAR_TIMER_EDGE", raising=False)
    return tmp_path / "settings.json"


@pytest.fixture()
def ticker():
    return FakeTicker()


@pytest.fixture()
def engine(ticker):
    return TimerEngine(ticker=ticker)


@pytest.fixture()
def flask_app():
    application = create_app(Settings(minutes=25))
    application.config["TESTING"] = True
    return application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()
