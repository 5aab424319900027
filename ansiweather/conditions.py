# ~/ansiweather/ansiweather/conditions.py
import json
from collections import namedtuple

from .errors import ParseError

Conditions = namedtuple("Conditions", ["city", "temp", "conditions", "humidity"])

_TEMP_FIELD = {"imperial": ("temp_f", "°F"), "metric": ("temp_c", "°C")}


def parse_conditions(body, units="imperial"):
    """Map a conditions response body onto the display record."""
    try:
        j = json.loads(body)
    except (TypeError, ValueError) as e:
        raise ParseError(f"weather API returned invalid JSON: {e}") from e

    co = j.get("current_observation") if isinstance(j, dict) else None
    if not isinstance(co, dict):
        raise ParseError(f"weather API: {_api_error(j)}")

    field, suffix = _TEMP_FIELD[units]
    raw_temp = co.get(field)
    try:
        temp = f"{float(raw_temp):.2f}{suffix}"
    except (TypeError, ValueError, OverflowError):
        temp = "--" + suffix

    loc = co.get("display_location")
    return Conditions(
        city=_text(loc.get("city") if isinstance(loc, dict) else None),
        temp=temp,
        conditions=_text(co.get("weather")),
        humidity=_text(co.get("relative_humidity")),
    )


def _text(value):
    return "" if value is None else str(value)


def _api_error(j):
    resp = j.get("response") if isinstance(j, dict) else None
    err = resp.get("error") if isinstance(resp, dict) else None
    desc = err.get("description") if isinstance(err, dict) else None
    return str(desc) if desc else "no current_observation in response"
