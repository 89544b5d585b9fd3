# panchang/core/timescales.py
# -----------------------------------------------------------------------------
# Civil instant & coordinate boundary for the Panchang engine.
#
# Public API:
#   GeoCoordinate(latitude, longitude)                 -> frozen, range-checked
#   estimate_utc_offset_hours(longitude)               -> int   (round(lon/15))
#   resolve_tzinfo(day, coord, tz_name, utc_offset)    -> datetime.timezone
#   build_instant(day, clock, tzinfo)                  -> aware datetime
#   julian_day(instant)                                -> float (JD, UT)
#   julian_centuries(jd)                               -> float (T from J2000.0)
#
# Guarantees:
#   • Instants are timezone-aware with a FIXED offset (datetime.timezone); an
#     IANA zone is resolved to its offset at local noon of the civil date.
#   • JD uses ERFA cal2jd for the calendar part (valid Gregorian dates from
#     -4799) plus the UTC day fraction; no POSIX timestamp math.
#   • UT is used as the dynamical time scale (ΔT ignored at this precision).
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo
import math

import erfa  # pyERFA

from panchang.core.validators import ValidationError, _err

__all__ = [
    "J2000",
    "GeoCoordinate",
    "estimate_utc_offset_hours",
    "resolve_tzinfo",
    "build_instant",
    "julian_day",
    "julian_centuries",
    "offset_hours",
]

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0


# ───────────────────────────── Coordinate ─────────────────────────────

@dataclass(frozen=True)
class GeoCoordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        lat, lon = float(self.latitude), float(self.longitude)
        if not math.isfinite(lat) or not -90.0 <= lat <= 90.0:
            raise ValidationError(_err("latitude", "latitude must be between -90 and 90"))
        if not math.isfinite(lon) or not -180.0 <= lon <= 180.0:
            raise ValidationError(_err("longitude", "longitude must be between -180 and 180"))
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


# ───────────────────────────── Offsets ─────────────────────────────

def estimate_utc_offset_hours(longitude: float) -> int:
    """Nominal zone offset from longitude: round(lon / 15), within ±12."""
    return max(-12, min(12, int(round(float(longitude) / 15.0))))


def resolve_tzinfo(
    day: date,
    coord: GeoCoordinate,
    tz_name: Optional[str] = None,
    utc_offset: Optional[float] = None,
) -> timezone:
    """
    Fixed-offset tzinfo for a civil day.

    Precedence: explicit IANA zone, explicit offset (hours), longitude estimate.
    """
    if tz_name:
        noon = datetime.combine(day, time(12, 0)).replace(tzinfo=ZoneInfo(tz_name))
        off = noon.utcoffset() or timedelta(0)
        return timezone(off, tz_name)
    if utc_offset is not None:
        return timezone(timedelta(minutes=round(float(utc_offset) * 60)))
    return timezone(timedelta(hours=estimate_utc_offset_hours(coord.longitude)))


def offset_hours(instant: datetime) -> float:
    off = instant.utcoffset()
    return (off.total_seconds() / 3600.0) if off is not None else 0.0


def build_instant(day: date, clock: time, tzinfo: timezone) -> datetime:
    return datetime.combine(day, clock).replace(tzinfo=tzinfo)


# ───────────────────────────── Julian dates ─────────────────────────────

def julian_day(instant: datetime) -> float:
    """JD (UT) of an aware datetime via ERFA cal2jd + UTC day fraction."""
    if instant.tzinfo is None:
        raise ValueError("instant must be timezone-aware")
    u = instant.astimezone(timezone.utc)
    djm0, djm = erfa.cal2jd(u.year, u.month, u.day)
    seconds = u.hour * 3600 + u.minute * 60 + u.second + u.microsecond / 1e6
    # cal2jd returns JD at 0h as (2400000.5, MJD)
    return math.fsum((float(djm0), float(djm), seconds / 86400.0))


def julian_centuries(jd: float) -> float:
    return (float(jd) - J2000) / DAYS_PER_CENTURY
