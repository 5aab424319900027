# ~/ansiweather/ansiweather/policy.py
import enum

# Fixed on purpose; Config.cache_seconds is not consulted here.
STALE_AFTER = 5 * 60


class Freshness(enum.Enum):
    ABSENT = "absent"
    FRESH = "fresh"
    STALE = "stale"


def decide(meta, now, threshold=STALE_AFTER):
    """Classify cache metadata. `now` and `meta.mtime` are epoch seconds."""
    if not meta.exists:
        return Freshness.ABSENT
    if now - meta.mtime > threshold:
        return Freshness.STALE
    return Freshness.FRESH
