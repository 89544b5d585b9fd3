# panchang/core/calendar.py
"""Masa / Ayana / Ritu / Samvat and Moon phase for a computed instant."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Dict
import math

from panchang.core import ephemeris as eph
from panchang.core.timescales import julian_centuries
from panchang.core.constants import (
    ELONGATION_RATE_DEG_PER_DAY,
    MASA_NAMES,
    MOON_PHASES,
    RASHI_SPAN_DEG,
    RITU_NAMES,
    sector_index,
    wrap_deg,
)

__all__ = [
    "CalendarContext",
    "masa_index",
    "ayana_for",
    "ritu_for",
    "samvat_years",
    "moon_phase",
    "illumination_percent",
    "calendar_context",
]

UTTARAYANA = "Uttarayana"
DAKSHINAYANA = "Dakshinayana"


@dataclass(frozen=True)
class CalendarContext:
    masa: str
    ayana: str
    ritu: str
    vikram_samvat: int
    shaka_samvat: int
    moon_phase: str
    illumination: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def masa_index(sidereal_sun_at_new_moon: float) -> int:
    # Sun in Meena at the new moon opens Chaitra.
    sign = sector_index(sidereal_sun_at_new_moon, RASHI_SPAN_DEG, 12)
    return (sign + 1) % 12


def ayana_for(tropical_sun: float) -> str:
    s = wrap_deg(tropical_sun)
    return UTTARAYANA if (s >= 270.0 or s < 90.0) else DAKSHINAYANA


def ritu_for(sidereal_sun: float) -> str:
    sign = sector_index(sidereal_sun, RASHI_SPAN_DEG, 12)
    return RITU_NAMES[((sign + 1) % 12) // 2]


def samvat_years(day: date, masa_idx: int):
    """(Vikram, Shaka). Jan-Mar days still in Pausha..Phalguna belong to the old year."""
    vikram = day.year + 57
    if day.month <= 3 and masa_idx >= 9:
        vikram -= 1
    return vikram, vikram - 135


def moon_phase(elongation: float) -> str:
    return MOON_PHASES[sector_index(wrap_deg(elongation + 22.5), 45.0, 8)]


def illumination_percent(elongation: float) -> float:
    return round((1.0 - math.cos(math.radians(elongation))) / 2.0 * 100.0, 1)


def calendar_context(day: date, jd: float, sun_tropical: float, elongation: float) -> CalendarContext:
    """
    ``day`` is the civil date of the query; ``elongation`` is Moon − Sun in degrees.

    The preceding new moon is back-solved linearly from the elongation and
    the solar sign there (always Lahiri sidereal) names the amanta month.
    """
    jd_new_moon = jd - wrap_deg(elongation) / ELONGATION_RATE_DEG_PER_DAY
    sun_at_nm = eph.longitudes_at_jd(jd_new_moon, "sidereal").sun
    m = masa_index(sun_at_nm)
    sidereal_sun = wrap_deg(sun_tropical - eph.lahiri_ayanamsa(julian_centuries(jd)))
    vikram, shaka = samvat_years(day, m)
    return CalendarContext(
        masa=MASA_NAMES[m],
        ayana=ayana_for(sun_tropical),
        ritu=ritu_for(sidereal_sun),
        vikram_samvat=vikram,
        shaka_samvat=shaka,
        moon_phase=moon_phase(elongation),
        illumination=illumination_percent(elongation),
    )
