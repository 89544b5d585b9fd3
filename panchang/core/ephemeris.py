# -*- coding: utf-8 -*-
"""
Low-precision solar & lunar longitudes (ecliptic of date).

Series
------
Sun  : mean longitude L0 (Meeus 25.2) + equation of centre on the mean
       anomaly M (three sine terms). Accuracy ~0.01°.
Moon : mean longitude L' = F + Ω plus the six largest periodic terms in
       M', D, M and F (equation of centre, evection, variation, annual
       equation, reduction to the ecliptic). Accuracy ~0.3°.

Delaunay arguments (M, M', D, F, Ω) come from ERFA's IERS 2003 fundamental
argument polynomials; everything else is plain float math.

Sidereal values subtract a linear-quadratic Lahiri ayanamsa.

Public API:
    longitudes(instant, zodiac="sidereal") -> Longitudes
    longitudes_at_jd(jd, zodiac="sidereal") -> Longitudes
    lahiri_ayanamsa(T) -> float
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict
import math

import erfa  # pyERFA

from panchang.core.constants import wrap_deg
from panchang.core.timescales import julian_day, julian_centuries

__all__ = ["Longitudes", "longitudes", "longitudes_at_jd", "lahiri_ayanamsa"]

_D2R = math.pi / 180.0
_ZODIACS = ("sidereal", "tropical")


@dataclass(frozen=True)
class Longitudes:
    sun: float             # deg [0,360), per requested zodiac
    moon: float            # deg [0,360), per requested zodiac
    sun_tropical: float
    moon_tropical: float
    ayanamsa: float        # deg; 0.0 when zodiac == "tropical"
    zodiac: str
    jd: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def lahiri_ayanamsa(T: float) -> float:
    """Lahiri (Chitrapaksha) ayanamsa in degrees; 23°51'11" at J2000, ~50.29"/yr."""
    return 23.85306 + 1.396971 * T + 0.000308 * T * T


def _sun_tropical(T: float, M: float) -> float:
    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T * T
    C = (
        (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M)
        + (0.019993 - 0.000101 * T) * math.sin(2.0 * M)
        + 0.000289 * math.sin(3.0 * M)
    )
    return wrap_deg(L0 + C)


def _moon_tropical(T: float, M: float) -> float:
    Mp = erfa.fal03(T)     # Moon mean anomaly
    F = erfa.faf03(T)      # argument of latitude
    D = erfa.fad03(T)      # mean elongation from the Sun
    Om = erfa.faom03(T)    # mean longitude of the ascending node
    Lp = (F + Om) / _D2R
    corr = (
        6.288774 * math.sin(Mp)
        + 1.274027 * math.sin(2.0 * D - Mp)
        + 0.658314 * math.sin(2.0 * D)
        + 0.213618 * math.sin(2.0 * Mp)
        - 0.185116 * math.sin(M)
        - 0.114332 * math.sin(2.0 * F)
    )
    return wrap_deg(Lp + corr)


def longitudes_at_jd(jd: float, zodiac: str = "sidereal") -> Longitudes:
    z = (zodiac or "sidereal").strip().lower()
    if z not in _ZODIACS:
        raise ValueError(f"zodiac must be one of {_ZODIACS}, got {zodiac!r}")
    T = julian_centuries(jd)
    M = erfa.falp03(T)     # Sun mean anomaly
    sun_t = _sun_tropical(T, M)
    moon_t = _moon_tropical(T, M)
    aya = lahiri_ayanamsa(T) if z == "sidereal" else 0.0
    return Longitudes(
        sun=wrap_deg(sun_t - aya),
        moon=wrap_deg(moon_t - aya),
        sun_tropical=sun_t,
        moon_tropical=moon_t,
        ayanamsa=aya,
        zodiac=z,
        jd=float(jd),
    )


def longitudes(instant: datetime, zodiac: str = "sidereal") -> Longitudes:
    """Sun & Moon longitudes for an aware datetime."""
    return longitudes_at_jd(julian_day(instant), zodiac)
