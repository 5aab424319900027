# ~/ansiweather/ansiweather/weather.py
import logging
import time

from .cache import CacheStore
from .errors import LockError, LockTimeout, StorageError
from .fetch_weather import fetch_conditions
from .policy import Freshness, decide

log = logging.getLogger(__name__)


def get_weather_data(cfg, store=None, fetch=fetch_conditions, clock=time.time):
    """
    Raw conditions JSON for cfg's location.

    A fresh cache is served as-is. An absent or stale one is refetched
    synchronously; a failed fetch propagates even when stale data exists.
    Saving the new body is best-effort and never hides the fetched data.
    """
    if store is None:
        store = CacheStore(lock_timeout=cfg.lock_timeout)

    meta = store.stat()
    state = decide(meta, clock())
    log.debug("cache %s is %s", store.path, state.value)

    if state is Freshness.FRESH:
        return store.read()

    body = fetch(cfg)
    try:
        store.write(body)
    except (StorageError, LockError, LockTimeout) as e:
        log.warning("could not update cache: %s", e)
    return body
