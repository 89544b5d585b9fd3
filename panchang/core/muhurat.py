"""Rahu Kaal / Yamaganda / Gulika octants and the sunrise/noon anchored muhurats."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple, Union

from panchang.core.constants import WEEKDAYS
from panchang.core.solar import SolarTimes

__all__ = [
    "MuhuratWindow",
    "RAHU_OCTANT",
    "YAMAGANDA_OCTANT",
    "GULIKA_OCTANT",
    "weekday_index",
    "octant",
    "muhurat_windows",
]

# 1-based daylight octant per weekday, Sunday..Saturday.
RAHU_OCTANT: Tuple[int, ...] = (8, 2, 7, 5, 6, 4, 3)
YAMAGANDA_OCTANT: Tuple[int, ...] = (5, 4, 3, 2, 1, 7, 6)
GULIKA_OCTANT: Tuple[int, ...] = (7, 6, 5, 4, 3, 2, 1)

ABHIJIT_HALF = timedelta(minutes=12)
BRAHMA_START_BEFORE_SUNRISE = timedelta(minutes=96)
BRAHMA_LENGTH = timedelta(minutes=48)
AMRIT_LENGTH = timedelta(minutes=60)
DUR_OFFSET_AFTER_NOON = timedelta(minutes=30)
DUR_LENGTH = timedelta(minutes=48)

AUSPICIOUS = "auspicious"
INAUSPICIOUS = "inauspicious"


@dataclass(frozen=True)
class MuhuratWindow:
    label: str
    kind: str
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "kind": self.kind,
            "start": self.start.isoformat(timespec="seconds"),
            "end": self.end.isoformat(timespec="seconds"),
        }


def weekday_index(weekday: Union[int, str]) -> int:
    """0 = Sunday. Accepts an int or an English weekday name (case-insensitive)."""
    if isinstance(weekday, bool):
        raise ValueError("weekday must be an int or a weekday name")
    if isinstance(weekday, int):
        if not 0 <= weekday <= 6:
            raise ValueError(f"weekday index out of range: {weekday}")
        return weekday
    key = str(weekday).strip().lower()
    for i, (name, sanskrit, _lord) in enumerate(WEEKDAYS):
        if key in (name.lower(), name[:3].lower(), sanskrit.lower()):
            return i
    raise ValueError(f"unknown weekday: {weekday!r}")


def octant(sunrise: datetime, day_length: timedelta, n: int) -> Tuple[datetime, datetime]:
    """The ``n``-th (1-based) eighth of daylight."""
    seg = day_length / 8
    start = sunrise + (n - 1) * seg
    return start, start + seg


def muhurat_windows(solar: SolarTimes, weekday: Union[int, str]) -> List[MuhuratWindow]:
    """
    Daily muhurat windows, ordered by start time.

    Without a sunrise (polar sentinel) only the noon-anchored windows exist.
    """
    wd = weekday_index(weekday)
    noon = solar.solar_noon
    out: List[MuhuratWindow] = [
        MuhuratWindow("Abhijit Muhurat", AUSPICIOUS, noon - ABHIJIT_HALF, noon + ABHIJIT_HALF),
        MuhuratWindow("Dur Muhurat", INAUSPICIOUS,
                      noon + DUR_OFFSET_AFTER_NOON, noon + DUR_OFFSET_AFTER_NOON + DUR_LENGTH),
    ]

    if solar.has_sunrise:
        sr = solar.sunrise
        for label, table in (
            ("Rahu Kaal", RAHU_OCTANT),
            ("Yamaganda Kaal", YAMAGANDA_OCTANT),
            ("Gulika Kaal", GULIKA_OCTANT),
        ):
            start, end = octant(sr, solar.day_length, table[wd])
            out.append(MuhuratWindow(label, INAUSPICIOUS, start, end))

        brahma_start = sr - BRAHMA_START_BEFORE_SUNRISE
        out.append(MuhuratWindow("Brahma Muhurat", AUSPICIOUS, brahma_start, brahma_start + BRAHMA_LENGTH))
        out.append(MuhuratWindow("Amrit Kaal", AUSPICIOUS, sr - AMRIT_LENGTH, sr))

    out.sort(key=lambda w: (w.start, w.label))
    return out
