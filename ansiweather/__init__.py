from .errors import (
    ConfigError,
    FetchTimeout,
    LockError,
    LockTimeout,
    NetworkError,
    ParseError,
    RemoteError,
    StorageError,
    TimeoutExceeded,
    WeatherError,
)
from .weather import get_weather_data

__version__ = "0.2.0"
