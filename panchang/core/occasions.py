# panchang/core/occasions.py
"""
Vrat / festival annotation from (tithi, masa, weekday).

Rules are table driven. Festival dates follow the amanta month scheme
(month ends on Amavasya), so Krishna-paksha entries like Janmashtami sit
in the month preceding their purnimanta name.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from panchang.core.constants import AMAVASYA, PAKSHA_NAMES
from panchang.core.muhurat import weekday_index

__all__ = ["Occasion", "occasions", "MASA_FESTIVALS", "WEEKDAY_VRATS"]

VRAT = "vrat"
FESTIVAL = "festival"

SHUKLA, KRISHNA = PAKSHA_NAMES
_AMAVASYA = AMAVASYA[0]


@dataclass(frozen=True)
class Occasion:
    name: str
    kind: str   # "vrat" | "festival"

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "kind": self.kind}


# (paksha, tithi, festival); paksha None matches either half.
MASA_FESTIVALS: Dict[str, Tuple[Tuple[Optional[str], str, str], ...]] = {
    "Chaitra": (
        (SHUKLA, "Pratipada", "Gudi Padwa / Ugadi"),
        (SHUKLA, "Navami", "Ram Navami"),
        (SHUKLA, "Purnima", "Hanuman Jayanti"),
    ),
    "Vaishakha": (
        (SHUKLA, "Tritiya", "Akshaya Tritiya"),
        (SHUKLA, "Purnima", "Buddha Purnima"),
    ),
    "Jyeshtha": (
        (SHUKLA, "Dashami", "Ganga Dussehra"),
    ),
    "Ashadha": (
        (SHUKLA, "Dwitiya", "Rath Yatra"),
        (SHUKLA, "Ekadashi", "Devshayani Ekadashi"),
        (SHUKLA, "Purnima", "Guru Purnima"),
    ),
    "Shravana": (
        (SHUKLA, "Panchami", "Nag Panchami"),
        (SHUKLA, "Purnima", "Raksha Bandhan"),
        (KRISHNA, "Ashtami", "Krishna Janmashtami"),
    ),
    "Bhadrapada": (
        (SHUKLA, "Chaturthi", "Ganesh Chaturthi"),
    ),
    "Ashwin": (
        (SHUKLA, "Pratipada", "Navaratri begins"),
        (SHUKLA, "Dashami", "Dussehra"),
        (KRISHNA, "Chaturthi", "Karva Chauth"),
        (KRISHNA, "Trayodashi", "Dhanteras"),
        (KRISHNA, "Chaturdashi", "Naraka Chaturdashi"),
        (KRISHNA, _AMAVASYA, "Diwali"),
    ),
    "Kartika": (
        (SHUKLA, "Pratipada", "Govardhan Puja"),
        (SHUKLA, "Dwitiya", "Bhai Dooj"),
        (SHUKLA, "Purnima", "Kartik Purnima / Guru Nanak Jayanti"),
    ),
    "Margashirsha": (
        (SHUKLA, "Panchami", "Vivah Panchami"),
        (SHUKLA, "Ekadashi", "Gita Jayanti"),
    ),
    "Pausha": (),
    "Magha": (
        (SHUKLA, "Panchami", "Vasant Panchami"),
        (KRISHNA, "Chaturdashi", "Maha Shivaratri"),
    ),
    "Phalguna": (
        (SHUKLA, "Purnima", "Holika Dahan"),
    ),
}

WEEKDAY_VRATS: Tuple[str, ...] = (
    "Ravivar Vrat",
    "Somvar Vrat",
    "Mangalvar Vrat",
    "Budhvar Vrat",
    "Guruvar Vrat",
    "Shukravar Vrat",
    "Shanivar Vrat",
)


def _tithi_rules(tithi: str, paksha: Optional[str]) -> List[str]:
    out: List[str] = []
    if tithi == "Ekadashi":
        out.append("Ekadashi Vrat")
    elif tithi == "Chaturthi":
        out.append("Sankashti Chaturthi" if paksha == KRISHNA else "Vinayaka Chaturthi")
    elif tithi == "Purnima":
        out.append("Purnima Vrat")
    elif tithi == _AMAVASYA:
        out.append("Amavasya")
    elif tithi == "Trayodashi":
        out.append("Pradosh Vrat")
    elif tithi == "Chaturdashi" and paksha == KRISHNA:
        out.append("Masik Shivaratri")
    return out


def occasions(
    tithi_name: str,
    masa_name: Optional[str],
    weekday: Union[int, str],
    paksha: Optional[str] = None,
) -> List[Occasion]:
    """
    Occasions for a day, in rule order: tithi vrats, masa festivals, weekday vrat.

    Without ``paksha`` the half is inferred only where the tithi name implies it
    (Purnima → Shukla, Amavasya → Krishna); festival entries that need a
    specific paksha otherwise still match on tithi alone.
    """
    tithi = (tithi_name or "").strip()
    if paksha is None:
        if tithi == "Purnima":
            paksha = SHUKLA
        elif tithi == _AMAVASYA:
            paksha = KRISHNA

    seen = set()
    out: List[Occasion] = []

    def add(name: str, kind: str) -> None:
        if name not in seen:
            seen.add(name)
            out.append(Occasion(name, kind))

    for name in _tithi_rules(tithi, paksha):
        add(name, VRAT)

    for p, t, name in MASA_FESTIVALS.get(masa_name or "", ()):
        if t == tithi and (p is None or paksha is None or p == paksha):
            add(name, FESTIVAL)

    add(WEEKDAY_VRATS[weekday_index(weekday)], VRAT)
    return out
