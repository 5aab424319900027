import json
from contextlib import contextmanager

import pytest

from ansiweather.cache import CacheStore
from ansiweather.config import Config


class FakeLock:
    """In-memory stand-in for FileLock; records what was taken."""

    def __init__(self):
        self.events = []

    def acquire(self, mode):
        self.events.append(("acquire", mode))
        return mode

    def release(self, handle):
        self.events.append(("release", handle))

    @contextmanager
    def held(self, mode):
        handle = self.acquire(mode)
        try:
            yield handle
        finally:
            self.release(handle)


class FakeResponse:
    def __init__(self, status_code=200, content=b""):
        self.status_code = status_code
        self.content = content


def conditions_body(city="Ann Arbor", temp_f=66.3, temp_c=19.1, weather="Partly Cloudy", humidity="65%"):
    return json.dumps({
        "response": {"version": "0.1"},
        "current_observation": {
            "display_location": {"city": city},
            "temp_f": temp_f,
            "temp_c": temp_c,
            "weather": weather,
            "relative_humidity": humidity,
            "observation_epoch": "1377000000",
        },
    }).encode()


@pytest.fixture
def cfg():
    return Config(api_key="k3y", city="Ann Arbor", state="MI", lock_timeout=2.0)


@pytest.fixture
def fake_lock():
    return FakeLock()


@pytest.fixture
def store(tmp_path):
    return CacheStore(tmp_path / "cache" / "conditions.json", lock_timeout=2.0)
