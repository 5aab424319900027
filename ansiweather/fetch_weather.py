# ~/ansiweather/ansiweather/fetch_weather.py
import logging
from urllib.parse import quote

import requests

from .errors import ConfigError, FetchTimeout, NetworkError, RemoteError

log = logging.getLogger(__name__)

# api_key, state, city
CONDITIONS_URL = "http://api.wunderground.com/api/{key}/conditions/q/{state}/{city}.json"


def conditions_url(cfg):
    city = cfg.city.strip().replace(" ", "_")
    return CONDITIONS_URL.format(
        key=quote(cfg.api_key, safe=""),
        state=quote(cfg.state.strip(), safe=""),
        city=quote(city, safe=""),
    )


def fetch_conditions(cfg):
    """One GET against the conditions endpoint. Returns the raw 200 body."""
    if not cfg.api_key:
        raise ConfigError("api_key is not set")

    url = conditions_url(cfg)
    log.info("fetching conditions for %s, %s", cfg.city, cfg.state)
    try:
        r = requests.get(url, timeout=cfg.fetch_timeout)
    except requests.Timeout as e:
        raise FetchTimeout(f"weather API did not answer within {cfg.fetch_timeout:g}s") from e
    except requests.RequestException as e:
        raise NetworkError(f"weather fetch failed: {e}") from e

    if r.status_code != 200:
        raise RemoteError(r.status_code, r.content)
    return r.content
