import os

import pytest

from ansiweather import fetch_weather
from ansiweather.cache import CacheMetadata
from ansiweather.errors import LockError, LockTimeout, NetworkError, RemoteError, StorageError
from ansiweather.weather import get_weather_data

from conftest import FakeResponse, conditions_body

NOW = 1_700_000_000.0
CACHED = b'{"cached": true}'
FETCHED = b'{"fetched": true}'


class FakeStore:
    path = "fake/conditions.json"

    def __init__(self, meta, body=CACHED, write_error=None, read_error=None):
        self.meta = meta
        self.body = body
        self.read_error = read_error
        self.write_error = write_error
        self.calls = []
        self.written = []

    def stat(self):
        self.calls.append("stat")
        return self.meta

    def read(self):
        self.calls.append("read")
        if self.read_error:
            raise self.read_error
        return self.body

    def write(self, body):
        self.calls.append("write")
        if self.write_error:
            raise self.write_error
        self.written.append(body)


class FakeFetch:
    def __init__(self, body=FETCHED, exc=None):
        self.body = body
        self.exc = exc
        self.calls = 0

    def __call__(self, cfg):
        self.calls += 1
        if self.exc:
            raise self.exc
        return self.body


def run(cfg, store, fetch):
    return get_weather_data(cfg, store=store, fetch=fetch, clock=lambda: NOW)


def test_absent_cache_fetches_once_and_writes_once(cfg):
    store = FakeStore(CacheMetadata(False, None))
    fetch = FakeFetch()
    assert run(cfg, store, fetch) == FETCHED
    assert fetch.calls == 1
    assert store.calls == ["stat", "write"]
    assert store.written == [FETCHED]


def test_fresh_cache_is_read_without_fetching(cfg):
    store = FakeStore(CacheMetadata(True, NOW - 60))
    fetch = FakeFetch()
    assert run(cfg, store, fetch) == CACHED
    assert fetch.calls == 0
    assert store.calls == ["stat", "read"]


def test_stale_cache_is_refetched(cfg):
    store = FakeStore(CacheMetadata(True, NOW - 600))
    fetch = FakeFetch()
    assert run(cfg, store, fetch) == FETCHED
    assert fetch.calls == 1
    assert store.calls == ["stat", "write"]


def test_fetch_failure_leaves_no_cache_behind(cfg, store):
    fetch = FakeFetch(exc=NetworkError("unreachable"))
    with pytest.raises(NetworkError):
        get_weather_data(cfg, store=store, fetch=fetch)
    assert not os.path.exists(store.path)


def test_stale_data_is_not_a_fallback(cfg):
    store = FakeStore(CacheMetadata(True, NOW - 600))
    with pytest.raises(NetworkError):
        run(cfg, store, FakeFetch(exc=NetworkError("down")))
    assert "read" not in store.calls


def test_http_404_surfaces_as_remote_error(monkeypatch, cfg, store):
    monkeypatch.setattr(
        fetch_weather.requests, "get",
        lambda url, **kw: FakeResponse(404, b"<html>not found</html>"),
    )
    with pytest.raises(RemoteError) as ei:
        get_weather_data(cfg, store=store)
    assert ei.value.body == b"<html>not found</html>"
    assert not os.path.exists(store.path)


@pytest.mark.parametrize("err", [StorageError("disk full"), LockTimeout("busy"), LockError("no lock file")])
def test_write_failure_still_returns_fetched_data(cfg, caplog, err):
    store = FakeStore(CacheMetadata(False, None), write_error=err)
    assert run(cfg, store, FakeFetch()) == FETCHED
    assert "could not update cache" in caplog.text


def test_end_to_end_with_real_store(monkeypatch, cfg, store):
    body = conditions_body()
    calls = []

    def fake_get(url, **kw):
        calls.append(url)
        return FakeResponse(200, body)

    monkeypatch.setattr(fetch_weather.requests, "get", fake_get)

    assert get_weather_data(cfg, store=store) == body
    assert get_weather_data(cfg, store=store) == body
    assert len(calls) == 1
    assert store.read() == body


@pytest.mark.parametrize("err", [StorageError("vanished"), LockTimeout("busy")])
def test_fresh_read_failure_aborts(cfg, err):
    store = FakeStore(CacheMetadata(True, NOW - 60), read_error=err)
    fetch = FakeFetch()
    with pytest.raises(type(err)):
        run(cfg, store, fetch)
    assert fetch.calls == 0
    assert "write" not in store.calls
