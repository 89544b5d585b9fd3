# panchang/core/validators.py
from __future__ import annotations

import re
from datetime import datetime, date, time
from typing import Any, Dict, List, Optional, Tuple, TypedDict, Union
from zoneinfo import ZoneInfo

# ───────────────────────── errors ─────────────────────────

class ValidationError(ValueError):
    """Structured input error (has .errors()); the only failure surfaced to callers."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        elif isinstance(details, list):
            self._details = details
            super().__init__(self._details[0]["msg"] if self._details else "validation_error")
        else:
            self._details = [{"loc": [], "msg": "validation_error", "type": "value_error"}]
            super().__init__("validation_error")

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


# ───────────────────────── helpers ─────────────────────────

def _err(loc: List[str] | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _as_float(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    try:
        if v is None:
            return None
        x = float(v)
        if x != x or x in (float("inf"), float("-inf")):
            return None
        return x
    except (TypeError, ValueError):
        return None

def _truthy(val: Any) -> Optional[bool]:
    if isinstance(val, bool):
        return val
    if val is None:
        return None
    s = str(val).strip().lower()
    if s in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "f", "no", "n", "off"}:
        return False
    return None

def validate_iana_tz(tz: str, loc: Optional[List[str]] = None) -> str:
    try:
        ZoneInfo(tz)
    except Exception:
        raise ValidationError([{
            "loc": loc or ["tz"],
            "msg": "must be a valid IANA zone like 'Asia/Kolkata'",
            "type": "value_error",
        }])
    return tz


# ───────────────────────── atomic parsers ─────────────────────────

_TIME_RE = re.compile(r"^\s*(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?\s*$")

# Local offsets and element end estimates move instants a few days either
# side of the civil date; keep both inside datetime's range.
MIN_YEAR, MAX_YEAR = 2, 9998

def parse_date(s: Any) -> date:
    if not isinstance(s, str):
        raise ValidationError(_err("date", "required string 'YYYY-MM-DD'", "type_error.str"))
    try:
        d = datetime.strptime(s.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(_err("date", "date must be a valid 'YYYY-MM-DD'", "value_error.date"))
    if not (MIN_YEAR <= d.year <= MAX_YEAR):
        raise ValidationError(_err("date", f"year must be between {MIN_YEAR} and {MAX_YEAR}", "value_error.date"))
    return d

def parse_time(s: Any) -> time:
    """Accept 'HH:MM' or 'HH:MM:SS' (00:00:00..23:59:59)."""
    if not isinstance(s, str):
        raise ValidationError(_err("time", "time must be a string 'HH:MM[:SS]'", "type_error.str"))
    m = _TIME_RE.match(s)
    if not m:
        raise ValidationError(_err("time", "time must be 'HH:MM' or 'HH:MM:SS'", "value_error.time"))
    hh = int(m.group("h")); mm = int(m.group("m")); ss = int(m.group("s") or 0)
    if not (0 <= hh <= 23 and 0 <= mm <= 59 and 0 <= ss <= 59):
        raise ValidationError(_err("time", "time fields out of range", "value_error.time"))
    return time(hh, mm, ss)

def parse_latlon(lat: Any, lon: Any, lat_key="latitude", lon_key="longitude") -> Tuple[float, float]:
    lat_f = _as_float(lat); lon_f = _as_float(lon)
    if lat_f is None or lon_f is None:
        raise ValidationError(_err([lat_key, lon_key], "latitude/longitude must be finite numbers", "type_error.float"))
    if not (-90.0 <= lat_f <= 90.0):
        raise ValidationError(_err(lat_key, "latitude must be between -90 and 90"))
    if not (-180.0 <= lon_f <= 180.0):
        raise ValidationError(_err(lon_key, "longitude must be between -180 and 180"))
    return float(lat_f), float(lon_f)

def parse_utc_offset(v: Any) -> Optional[float]:
    """Offset in hours (e.g. 5.5); quarter-hour resolution, within ±14 h."""
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    x = _as_float(v)
    if x is None:
        raise ValidationError(_err("utc_offset", "utc_offset must be a number of hours", "type_error.float"))
    if not (-14.0 <= x <= 14.0):
        raise ValidationError(_err("utc_offset", "utc_offset must be between -14 and 14 hours"))
    if abs(x * 4 - round(x * 4)) > 1e-9:
        raise ValidationError(_err("utc_offset", "utc_offset must be a multiple of 0.25 hours"))
    return x


# ───────────────────────── panchang payload ─────────────────────────

class PanchangPayload(TypedDict, total=False):
    date: date
    time: Optional[time]
    latitude: float
    longitude: float
    city: Optional[str]
    tz: Optional[str]
    utc_offset: Optional[float]
    verify: Optional[bool]

def parse_panchang_payload(body: Dict[str, Any]) -> PanchangPayload:
    """
    Normalize inputs for compute_panchang / the HTTP shell.

    Required: date, latitude, longitude.
    Optional: time, city (display hint), tz (IANA) or utc_offset (hours), verify.
    tz and utc_offset are mutually exclusive.
    """
    if not isinstance(body, dict):
        raise ValidationError("payload must be an object")

    d = parse_date(body.get("date"))
    lat, lon = parse_latlon(
        body.get("latitude", body.get("lat")),
        body.get("longitude", body.get("lon")),
    )

    t_raw = body.get("time")
    t = parse_time(t_raw) if t_raw not in (None, "") else None

    city = body.get("city") or body.get("city_hint")
    if city is not None and not isinstance(city, str):
        raise ValidationError(_err("city", "city must be a string", "type_error.str"))

    tz = body.get("tz") or body.get("timezone")
    if tz is not None:
        if not isinstance(tz, str) or not tz.strip():
            raise ValidationError(_err("tz", "must be a string (IANA)", "value_error"))
        tz = validate_iana_tz(tz.strip(), ["tz"])

    off = parse_utc_offset(body.get("utc_offset"))
    if tz is not None and off is not None:
        raise ValidationError(_err(["tz", "utc_offset"], "provide either tz or utc_offset, not both"))

    verify = _truthy(body.get("verify"))

    return PanchangPayload(
        date=d, time=t, latitude=lat, longitude=lon,
        city=(city.strip() or None) if isinstance(city, str) else None,
        tz=tz, utc_offset=off, verify=verify,
    )
