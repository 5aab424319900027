# ~/ansiweather/ansiweather/errors.py
"""Error kinds surfaced by ansiweather. The CLI turns any of them into exit code 1."""


class WeatherError(Exception):
    pass


class ConfigError(WeatherError):
    pass


class StorageError(WeatherError):
    """stat/open/read/write failure on the cache file (other than "not there yet")"""


class LockError(WeatherError):
    pass


class NetworkError(WeatherError):
    """Transport failure talking to the weather API"""


class RemoteError(WeatherError):
    """Weather API answered with something other than 200"""

    def __init__(self, status, body=b""):
        self.status = status
        self.body = body
        text = body.decode("utf-8", "replace") if isinstance(body, bytes) else str(body)
        super().__init__(f"weather API returned HTTP {status}: {text[:200]}")


class ParseError(WeatherError):
    pass


class TimeoutExceeded(WeatherError):
    pass


class LockTimeout(TimeoutExceeded):
    pass


class FetchTimeout(TimeoutExceeded):
    pass
