# panchang/core/solar.py
"""
Sunrise / sunset / solar noon from a declination + hour-angle model.

    δ   = 23.44° · sin(360/365 · (284 + N))            (Cooper)
    EoT = 9.87 sin 2B − 7.53 cos B − 1.5 sin B  [min],  B = 360/365 · (N − 81)
    noon(civil) = 12:00 − EoT + 4 min · (15 · utc_offset − longitude)
    cos H = −tan φ · tan δ

When |tan φ · tan δ| ≥ 1 there is no rise or set; the result carries the
``polar_day`` / ``polar_night`` sentinel with sunrise/sunset left as None.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Optional
import math

from panchang.core.timescales import GeoCoordinate

__all__ = [
    "POLAR_DAY",
    "POLAR_NIGHT",
    "SolarTimes",
    "solar_declination",
    "equation_of_time_minutes",
    "solar_times",
]

POLAR_DAY = "polar_day"
POLAR_NIGHT = "polar_night"

_FULL_DAY = timedelta(hours=24)


@dataclass(frozen=True)
class SolarTimes:
    date: date
    solar_noon: datetime
    day_length: timedelta
    night_length: timedelta
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    polar: Optional[str] = None     # None | POLAR_DAY | POLAR_NIGHT

    @property
    def has_sunrise(self) -> bool:
        return self.polar is None

    def to_dict(self) -> Dict[str, Any]:
        def iso(dt: Optional[datetime]) -> Optional[str]:
            return dt.isoformat(timespec="seconds") if dt is not None else None
        return {
            "sunrise": iso(self.sunrise),
            "sunset": iso(self.sunset),
            "solar_noon": iso(self.solar_noon),
            "day_length": _hm(self.day_length),
            "night_length": _hm(self.night_length),
            "day_length_seconds": int(round(self.day_length.total_seconds())),
            "polar": self.polar,
        }


def _hm(td: timedelta) -> str:
    mins = int(round(td.total_seconds() / 60.0))
    return f"{mins // 60}h {mins % 60:02d}m"


def solar_declination(day_of_year: int) -> float:
    return 23.44 * math.sin(math.radians(360.0 / 365.0 * (284 + day_of_year)))


def equation_of_time_minutes(day_of_year: int) -> float:
    b = math.radians(360.0 / 365.0 * (day_of_year - 81))
    return 9.87 * math.sin(2.0 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def solar_times(day: date, coord: GeoCoordinate, tzinfo: timezone) -> SolarTimes:
    """Solar day for a civil date at ``coord``, expressed in ``tzinfo``."""
    n = day.timetuple().tm_yday
    decl = solar_declination(n)
    off = datetime.combine(day, time(12, 0)).replace(tzinfo=tzinfo).utcoffset() or timedelta(0)
    off_h = off.total_seconds() / 3600.0

    noon_min = 720.0 - equation_of_time_minutes(n) + 4.0 * (15.0 * off_h - coord.longitude)
    midnight = datetime.combine(day, time(0, 0)).replace(tzinfo=tzinfo)
    noon = midnight + timedelta(minutes=noon_min)

    x = -math.tan(math.radians(coord.latitude)) * math.tan(math.radians(decl))
    if x >= 1.0:
        return SolarTimes(date=day, solar_noon=noon, day_length=timedelta(0),
                          night_length=_FULL_DAY, polar=POLAR_NIGHT)
    if x <= -1.0:
        return SolarTimes(date=day, solar_noon=noon, day_length=_FULL_DAY,
                          night_length=timedelta(0), polar=POLAR_DAY)

    half = timedelta(minutes=4.0 * math.degrees(math.acos(x)))
    return SolarTimes(
        date=day,
        solar_noon=noon,
        day_length=2 * half,
        night_length=_FULL_DAY - 2 * half,
        sunrise=noon - half,
        sunset=noon + half,
    )
