# ~/ansiweather/ansiweather/config.py
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

CONFIG_PATH = Path(os.path.expanduser("~/.config/ansiweather.yaml"))
API_KEY_ENV = "ANSIWEATHER_API_KEY"

UNITS = ("imperial", "metric")


@dataclass(frozen=True)
class Config:
    api_key: str = ""
    cache_seconds: int = 10 * 60  # accepted, but staleness uses policy.STALE_AFTER
    city: str = "Seattle"
    state: str = "WA"
    units: str = "imperial"
    fetch_timeout: float = 6.0
    lock_timeout: Optional[float] = 10.0


DEFAULT = Config()


def load(path=None, environ=None):
    """Read the YAML config into a Config. A missing file means defaults."""
    path = Path(path) if path else CONFIG_PATH
    environ = os.environ if environ is None else environ

    raw = {}
    try:
        st = path.stat()
    except FileNotFoundError:
        st = None
    except OSError as e:
        raise ConfigError(f"{path}: {e}") from e

    if st is not None:
        if not path.is_file():
            raise ConfigError(f"{path}: config is not a regular file")
        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"{path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: invalid YAML: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{path}: expected a mapping at top level")
        if not raw.get("api_key") and not environ.get(API_KEY_ENV):
            raise ConfigError(f"{path}: api_key is not set")

    cfg = from_mapping(raw, source=path)
    env_key = environ.get(API_KEY_ENV)
    if env_key:
        cfg = replace(cfg, api_key=env_key)
    return cfg


def from_mapping(raw, source="config"):
    values = {}

    api_key = raw.get("api_key")
    if api_key is not None:
        values["api_key"] = str(api_key)

    cache_seconds = raw.get("cache_seconds")
    if cache_seconds is not None:
        if isinstance(cache_seconds, bool) or not isinstance(cache_seconds, int) or cache_seconds < 0:
            raise ConfigError(f"{source}: cache_seconds must be a non-negative integer")
        # 0 keeps the default
        if cache_seconds > 0:
            values["cache_seconds"] = cache_seconds

    for key in ("city", "state"):
        v = raw.get(key)
        if v:
            values[key] = str(v)

    units = raw.get("units")
    if units:
        if units not in UNITS:
            raise ConfigError(f"{source}: units must be one of {', '.join(UNITS)}")
        values["units"] = units

    fetch_timeout = raw.get("fetch_timeout")
    if fetch_timeout is not None:
        values["fetch_timeout"] = _positive(fetch_timeout, "fetch_timeout", source)

    if "lock_timeout" in raw:
        lt = raw["lock_timeout"]
        values["lock_timeout"] = None if lt is None else _positive(lt, "lock_timeout", source)

    return Config(**values)


def _positive(value, name, source):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{source}: {name} must be a positive number of seconds")
    return float(value)


def save_default(path=None):
    """Write a starter config. Returns False if one already exists."""
    path = Path(path) if path else CONFIG_PATH
    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"{path}: {e}") from e
    default = {
        "api_key": "",
        "cache_seconds": DEFAULT.cache_seconds,
        "city": DEFAULT.city,
        "state": DEFAULT.state,
        "units": DEFAULT.units,
        "fetch_timeout": DEFAULT.fetch_timeout,
        "lock_timeout": DEFAULT.lock_timeout,
    }
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except FileExistsError:
        # created since the exists() check
        return False
    except OSError as e:
        raise ConfigError(f"{path}: {e}") from e
    try:
        with os.fdopen(fd, "w") as f:
            yaml.dump(default, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"{path}: {e}") from e
    return True
