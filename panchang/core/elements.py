# panchang/core/elements.py
"""
Longitudes → the Panchang elements (Tithi, Nakshatra, Yoga, Karana, Vara)
plus the Moon's Rashi.

Each element also carries the instant its governing angle reaches the next
sector boundary. The crossing is back-solved linearly from the mean daily
motion of that angle:

    tithi / karana : elongation (Moon − Sun)   ≈ 12.19 °/day
    nakshatra/rashi: Moon longitude            ≈ 13.18 °/day
    yoga           : Sun + Moon longitude      ≈ 14.16 °/day

so ``end`` is an estimate with the same fidelity as the series feeding it.
End instants keep the tzinfo of the query instant (caller's civil time).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from panchang.core.constants import (
    AMAVASYA,
    AMAVASYA_DEITY,
    ELONGATION_RATE_DEG_PER_DAY,
    KARANA_FIXED,
    KARANA_MOVABLE,
    KARANA_SPAN_DEG,
    MOON_RATE_DEG_PER_DAY,
    NAKSHATRA_SPAN_DEG,
    NAKSHATRAS,
    PAKSHA_NAMES,
    RASHI_SPAN_DEG,
    RASHIS,
    TITHI_DEITIES,
    TITHI_NAMES,
    TITHI_SANSKRIT,
    TITHI_SPAN_DEG,
    WEEKDAYS,
    YOGA_RATE_DEG_PER_DAY,
    YOGAS,
    sector_index,
    wrap_deg,
)

__all__ = [
    "PanchangElement",
    "Rashi",
    "Vara",
    "Elements",
    "resolve_elements",
    "tithi_names",
    "karana_names",
    "vara_for",
]


# ───────────────────────────── records ─────────────────────────────

def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat(timespec="seconds") if dt is not None else None


@dataclass(frozen=True)
class PanchangElement:
    kind: str                  # "tithi" | "nakshatra" | "yoga" | "karana"
    index: int                 # tithi 1..30; others 0-based
    name: str
    sanskrit: str
    next_name: str
    end: datetime
    paksha: Optional[str] = None
    lord: Optional[str] = None
    deity: Optional[str] = None
    meaning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "index": self.index,
            "name": self.name,
            "sanskrit": self.sanskrit,
            "end": _iso(self.end),
            "next": self.next_name,
        }
        for k in ("paksha", "lord", "deity", "meaning"):
            v = getattr(self, k)
            if v is not None:
                out[k] = v
        return out


@dataclass(frozen=True)
class Rashi:
    index: int
    name: str
    sanskrit: str
    english: str
    element: str
    ruling_planet: str
    end: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "sanskrit": self.sanskrit,
            "english": self.english,
            "element": self.element,
            "ruling_planet": self.ruling_planet,
            "end": _iso(self.end),
        }


@dataclass(frozen=True)
class Vara:
    index: int                 # 0 = Sunday
    name: str
    sanskrit: str
    lord: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "name": self.name, "sanskrit": self.sanskrit, "lord": self.lord}


@dataclass(frozen=True)
class Elements:
    tithi: PanchangElement
    nakshatra: PanchangElement
    yoga: PanchangElement
    karana: PanchangElement
    rashi: Rashi
    vara: Vara
    elongation: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tithi": self.tithi.to_dict(),
            "nakshatra": self.nakshatra.to_dict(),
            "yoga": self.yoga.to_dict(),
            "karana": self.karana.to_dict(),
            "vara": self.vara.to_dict(),
            "rashi": self.rashi.to_dict(),
        }


# ───────────────────────────── name lookups ─────────────────────────────

def tithi_names(index: int) -> Tuple[str, str, str]:
    """(name, sanskrit, paksha) for a 1..30 tithi index."""
    i = ((int(index) - 1) % 30) + 1
    paksha = PAKSHA_NAMES[0] if i <= 15 else PAKSHA_NAMES[1]
    if i == 30:
        return AMAVASYA[0], AMAVASYA[1], paksha
    ordinal = i if i <= 15 else i - 15
    return TITHI_NAMES[ordinal - 1], TITHI_SANSKRIT[ordinal - 1], paksha


def karana_names(index: int) -> Tuple[str, str]:
    """(name, sanskrit) for a 0..59 karana index (absolute position index+1)."""
    k = int(index) % 60
    fixed = KARANA_FIXED.get(k + 1)
    if fixed is not None:
        return fixed
    # positions 2..57 cycle Bava..Vishti
    return KARANA_MOVABLE[(k - 1) % 7]


def vara_for(instant: datetime) -> Vara:
    idx = (instant.weekday() + 1) % 7  # Python Monday=0 → Sunday-first
    name, sanskrit, lord = WEEKDAYS[idx]
    return Vara(index=idx, name=name, sanskrit=sanskrit, lord=lord)


# ───────────────────────────── boundary crossing ─────────────────────────────

def _crossing(instant: datetime, angle: float, span: float, idx: int, rate: float) -> datetime:
    boundary = (idx + 1) * span
    delta = max(0.0, boundary - angle)
    return instant + timedelta(days=delta / rate)


# ───────────────────────────── resolver ─────────────────────────────

def _tithi(elong: float, instant: datetime) -> PanchangElement:
    i0 = sector_index(elong, TITHI_SPAN_DEG, 30)
    index = i0 + 1
    name, sanskrit, paksha = tithi_names(index)
    deity = AMAVASYA_DEITY if index == 30 else TITHI_DEITIES[(index - 1) % 15]
    return PanchangElement(
        kind="tithi", index=index, name=name, sanskrit=sanskrit,
        next_name=tithi_names(index + 1)[0],
        end=_crossing(instant, elong, TITHI_SPAN_DEG, i0, ELONGATION_RATE_DEG_PER_DAY),
        paksha=paksha, deity=deity,
    )


def _nakshatra(moon: float, instant: datetime) -> PanchangElement:
    i = sector_index(moon, NAKSHATRA_SPAN_DEG, 27)
    name, sanskrit, lord, deity = NAKSHATRAS[i]
    return PanchangElement(
        kind="nakshatra", index=i, name=name, sanskrit=sanskrit,
        next_name=NAKSHATRAS[(i + 1) % 27][0],
        end=_crossing(instant, moon, NAKSHATRA_SPAN_DEG, i, MOON_RATE_DEG_PER_DAY),
        lord=lord, deity=deity,
    )


def _yoga(sun: float, moon: float, instant: datetime) -> PanchangElement:
    combined = wrap_deg(sun + moon)
    i = sector_index(combined, NAKSHATRA_SPAN_DEG, 27)
    name, sanskrit, meaning = YOGAS[i]
    return PanchangElement(
        kind="yoga", index=i, name=name, sanskrit=sanskrit,
        next_name=YOGAS[(i + 1) % 27][0],
        end=_crossing(instant, combined, NAKSHATRA_SPAN_DEG, i, YOGA_RATE_DEG_PER_DAY),
        meaning=meaning,
    )


def _karana(elong: float, instant: datetime) -> PanchangElement:
    k = sector_index(elong, KARANA_SPAN_DEG, 60)
    name, sanskrit = karana_names(k)
    return PanchangElement(
        kind="karana", index=k, name=name, sanskrit=sanskrit,
        next_name=karana_names(k + 1)[0],
        end=_crossing(instant, elong, KARANA_SPAN_DEG, k, ELONGATION_RATE_DEG_PER_DAY),
    )


def _rashi(moon: float, instant: datetime) -> Rashi:
    i = sector_index(moon, RASHI_SPAN_DEG, 12)
    name, sanskrit, english, element, ruler = RASHIS[i]
    return Rashi(
        index=i, name=name, sanskrit=sanskrit, english=english,
        element=element, ruling_planet=ruler,
        end=_crossing(instant, moon, RASHI_SPAN_DEG, i, MOON_RATE_DEG_PER_DAY),
    )


def resolve_elements(sun_longitude: float, moon_longitude: float, instant: datetime) -> Elements:
    """
    Map Sun/Moon longitudes at ``instant`` to the Panchang elements.

    Longitudes outside [0, 360) are wrapped rather than rejected.
    """
    sun = wrap_deg(sun_longitude)
    moon = wrap_deg(moon_longitude)
    elong = wrap_deg(moon - sun)
    return Elements(
        tithi=_tithi(elong, instant),
        nakshatra=_nakshatra(moon, instant),
        yoga=_yoga(sun, moon, instant),
        karana=_karana(elong, instant),
        rashi=_rashi(moon, instant),
        vara=vara_for(instant),
        elongation=elong,
    )
