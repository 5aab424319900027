# ~/ansiweather/ansiweather/render.py
import argparse
import json
import logging
import sys
import time
from datetime import datetime, timezone

from . import config
from .cache import CacheStore
from .conditions import parse_conditions
from .errors import WeatherError
from .policy import STALE_AFTER, decide
from .weather import get_weather_data

log = logging.getLogger(__name__)

COLORS = {
    "clear": "\033[0m",
    "dash": "\033[34m",
    "data": "\033[33;1m",
    "delim": "\033[35m",
    "text": "\033[36;1m",
}

CHARS = {"dash": ",", "delim": ":"}


def color(name, shell=False):
    code = COLORS[name]
    if shell:
        # zsh: zero-width so the prompt length is computed correctly
        return "%{" + code + "%}"
    return code


def format_conditions(d, shell=False):
    c = lambda name: color(name, shell)
    out = c("text") + d.city
    out += c("delim") + CHARS["delim"]
    out += c("data") + " " + d.temp + " "
    out += c("dash") + CHARS["dash"]
    out += c("text") + " Humidity"
    out += c("delim") + CHARS["delim"]
    out += c("data") + " " + d.humidity
    if shell:
        out += "%"
    out += c("clear")
    return out


def status_snapshot(cfg, store, now=None):
    now = time.time() if now is None else now
    meta = store.stat()
    return {
        "ts": datetime.fromtimestamp(now, timezone.utc).isoformat().replace("+00:00", "Z"),
        "cache": str(store.path),
        "lock": str(store.lock_path),
        "exists": meta.exists,
        "age_s": round(now - meta.mtime, 1) if meta.exists else None,
        "state": decide(meta, now).value,
        "stale_after_s": STALE_AFTER,
        "cache_seconds": cfg.cache_seconds,  # configured, not used for staleness
    }


def build_parser():
    p = argparse.ArgumentParser(prog="ansiweather", description="Current weather as one colored line")
    p.add_argument("--shell", action="store_true",
                   help="Escape ANSI color sequences so they are ignored for length purposes")
    p.add_argument("--config", metavar="PATH", help=f"Config file (default {config.CONFIG_PATH})")
    p.add_argument("--init-config", action="store_true", help="Write a default config file and exit")
    p.add_argument("--status", action="store_true", help="Print cache status as JSON and exit")
    p.add_argument("-v", "--verbose", action="count", default=0)
    return p


def main(argv=None, store=None):
    args = build_parser().parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s: %(message)s", stream=sys.stderr)

    try:
        if args.init_config:
            path = args.config or config.CONFIG_PATH
            if config.save_default(path):
                print(f"wrote {path}")
            else:
                print(f"{path} already exists, leaving it alone")
            return 0

        cfg = config.load(args.config)
        if store is None:
            store = CacheStore(lock_timeout=cfg.lock_timeout)

        if args.status:
            print(json.dumps(status_snapshot(cfg, store), indent=2))
            return 0

        body = get_weather_data(cfg, store=store)
        print(format_conditions(parse_conditions(body, cfg.units), shell=args.shell))
        return 0
    except WeatherError as e:
        print(f"ansiweather: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
