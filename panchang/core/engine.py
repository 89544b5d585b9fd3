# panchang/core/engine.py
"""
Panchang orchestrator.

    compute_panchang(date, latitude, longitude, city_hint=None, time=None,
                     tz=None, utc_offset=None)                  -> dict
    compute_record(instant, coordinate, city_hint, config)     -> PanchangRecord

Flow per request:
  1) VERIFY (optional) is submitted to the verification pool first.
  2) COMPUTE runs synchronously: longitudes → elements, solar day →
     muhurats, calendar context → occasions.
  3) ASSEMBLE waits for VERIFY at most ``verify_timeout_seconds`` and
     folds the outcome into the record. Any VERIFY failure only lowers
     ``verified``.

Only ``ValidationError`` escapes ``compute_panchang`` for bad input;
``PanchangError`` signals a broken configuration.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields as dc_fields, replace
from datetime import date as _date, datetime, time as _time
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from panchang.core import ephemeris as eph
from panchang.core import verification
from panchang.core.calendar import CalendarContext, calendar_context
from panchang.core.constants import TABLES_VERSION
from panchang.core.elements import Elements, resolve_elements
from panchang.core.muhurat import MuhuratWindow, muhurat_windows
from panchang.core.occasions import Occasion, occasions
from panchang.core.solar import SolarTimes, solar_times
from panchang.core.timescales import (
    GeoCoordinate,
    build_instant,
    offset_hours,
    resolve_tzinfo,
)
from panchang.core.validators import parse_panchang_payload
from panchang.utils.config import config_path, load_config

__all__ = [
    "PanchangError",
    "EngineConfig",
    "load_engine_config",
    "PanchangRecord",
    "compute_record",
    "compute_panchang",
]

log = logging.getLogger(__name__)


class PanchangError(ValueError):
    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(f"{code}: {message}")


# ───────────────────────────── Config ─────────────────────────────

DEFAULT_VERIFY_URL = (
    "https://www.drikpanchang.com/panchang/day-panchang.html"
    "?date={day}/{month}/{year}&city={city}&lang=en"
)
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; panchang-backend)"


def _bool_env(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class EngineConfig:
    zodiac: str = "sidereal"
    verify_enabled: bool = False
    verify_url: str = DEFAULT_VERIFY_URL
    verify_timeout_seconds: float = 8.0
    verify_retries: int = 1
    verify_user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        z = str(self.zodiac).strip().lower()
        if z not in ("sidereal", "tropical"):
            raise PanchangError("config_invalid", f"zodiac must be 'sidereal' or 'tropical', got {self.zodiac!r}")
        object.__setattr__(self, "zodiac", z)
        if not float(self.verify_timeout_seconds) > 0:
            raise PanchangError("config_invalid", "verify_timeout_seconds must be > 0")
        if int(self.verify_retries) not in (0, 1):
            raise PanchangError("config_invalid", "verify_retries must be 0 or 1")
        if "{day}" not in self.verify_url:
            raise PanchangError("config_invalid", "verify_url must contain {day}/{month}/{year} placeholders")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            zodiac=os.getenv("PANCHANG_ZODIAC", "sidereal"),
            verify_enabled=_bool_env("PANCHANG_VERIFY", False),
            verify_url=os.getenv("PANCHANG_VERIFY_URL", DEFAULT_VERIFY_URL),
            verify_timeout_seconds=float(os.getenv("PANCHANG_VERIFY_TIMEOUT", "8")),
            verify_retries=int(os.getenv("PANCHANG_VERIFY_RETRIES", "1")),
            verify_user_agent=os.getenv("PANCHANG_VERIFY_USER_AGENT", DEFAULT_USER_AGENT),
        )

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "EngineConfig":
        if not overrides:
            return self
        known = {f.name for f in dc_fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise PanchangError("config_invalid", f"unknown engine keys: {', '.join(unknown)}")
        return replace(self, **dict(overrides))


def load_engine_config(path: Optional[str] = None) -> EngineConfig:
    """Env defaults, then the YAML ``engine:`` section when the config file exists."""
    cfg = EngineConfig.from_env()
    p = path or config_path()
    if not os.path.exists(p):
        return cfg
    data = load_config(p)
    return cfg.with_overrides(data.get("engine") or {})


# ───────────────────────────── Record ─────────────────────────────

def _method_label(zodiac: str) -> str:
    ref = "sidereal/Lahiri" if zodiac == "sidereal" else "tropical"
    return (
        f"low-precision series (Meeus solar, ERFA-argument lunar); {ref}; "
        f"mean-motion boundary estimates; {TABLES_VERSION}"
    )


@dataclass(frozen=True)
class PanchangRecord:
    instant: datetime
    coordinate: GeoCoordinate
    city_hint: Optional[str]
    longitudes: eph.Longitudes
    elements: Elements
    solar: SolarTimes
    muhurats: Tuple[MuhuratWindow, ...]
    occasions: Tuple[Occasion, ...]
    calendar: CalendarContext
    verification: Dict[str, Any] = field(default_factory=dict)
    verified: bool = False
    computation_method: str = ""

    def to_dict(self) -> Dict[str, Any]:
        els = self.elements.to_dict()
        return {
            "date": self.instant.date().isoformat(),
            "instant": self.instant.isoformat(timespec="seconds"),
            "location": {
                **self.coordinate.to_dict(),
                "city": self.city_hint,
                "utc_offset": offset_hours(self.instant),
            },
            **els,
            "sun": self.solar.to_dict(),
            "muhurats": [w.to_dict() for w in self.muhurats],
            "occasions": [o.to_dict() for o in self.occasions],
            "calendar": self.calendar.to_dict(),
            "longitudes": {
                "sun": round(self.longitudes.sun, 6),
                "moon": round(self.longitudes.moon, 6),
                "ayanamsa": round(self.longitudes.ayanamsa, 6),
                "zodiac": self.longitudes.zodiac,
                "jd": round(self.longitudes.jd, 8),
            },
            "computation_method": self.computation_method,
            "verified": self.verified,
            "verification": self.verification,
        }


# ───────────────────────────── Orchestration ─────────────────────────────

def _computed_names(els: Elements) -> Dict[str, str]:
    return {
        "tithi": els.tithi.name,
        "nakshatra": els.nakshatra.name,
        "yoga": els.yoga.name,
        "karana": els.karana.name,
        "vara": els.vara.name,
    }


def compute_record(
    instant: datetime,
    coordinate: GeoCoordinate,
    city_hint: Optional[str] = None,
    config: Optional[EngineConfig] = None,
    verify: Optional[bool] = None,
) -> PanchangRecord:
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise PanchangError("naive_instant", "instant must carry a fixed UTC offset")
    cfg = config or load_engine_config()
    do_verify = cfg.verify_enabled if verify is None else bool(verify)
    day = instant.date()

    pending = verification.submit(day, city_hint, cfg) if do_verify else None

    lon = eph.longitudes(instant, cfg.zodiac)
    els = resolve_elements(lon.sun, lon.moon, instant)
    solar = solar_times(day, coordinate, instant.tzinfo)
    windows = muhurat_windows(solar, els.vara.index)
    cal = calendar_context(day, lon.jd, lon.sun_tropical, els.elongation)
    occ = occasions(els.tithi.name, cal.masa, els.vara.index, els.tithi.paksha)

    result = verification.await_result(pending, cfg.verify_timeout_seconds) if pending is not None else None
    summary = verification.summarise(result, _computed_names(els))
    verified = (
        summary["status"] == verification.STATUS_COMPLETED
        and bool(summary["fields"])
        and all(v["matched"] for v in summary["fields"].values())
    )
    log.debug("computed %s @ %s: tithi=%s verified=%s", day, coordinate, els.tithi.name, verified)

    return PanchangRecord(
        instant=instant,
        coordinate=coordinate,
        city_hint=city_hint,
        longitudes=lon,
        elements=els,
        solar=solar,
        muhurats=tuple(windows),
        occasions=tuple(occ),
        calendar=cal,
        verification=summary,
        verified=verified,
        computation_method=_method_label(cfg.zodiac),
    )


def compute_panchang(
    date: Union[str, _date],
    latitude: float,
    longitude: float,
    city_hint: Optional[str] = None,
    time: Union[str, _time, None] = None,
    tz: Optional[str] = None,
    utc_offset: Optional[float] = None,
    verify: Optional[bool] = None,
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    """
    Panchang for a civil date at a location, as a JSON-serialisable dict.

    ``time`` defaults to local sunrise (12:00 when the sun does not rise
    or set that day). The zone is ``tz`` (IANA), else ``utc_offset`` hours,
    else ``round(longitude / 15)``.
    """
    payload = parse_panchang_payload({
        "date": date.isoformat() if isinstance(date, _date) else date,
        "latitude": latitude,
        "longitude": longitude,
        "time": time.strftime("%H:%M:%S") if isinstance(time, _time) else time,
        "city": city_hint,
        "tz": tz,
        "utc_offset": utc_offset,
        "verify": verify,
    })
    coord = GeoCoordinate(payload["latitude"], payload["longitude"])
    day = payload["date"]
    tzinfo = resolve_tzinfo(day, coord, payload.get("tz"), payload.get("utc_offset"))

    clock = payload.get("time")
    if clock is not None:
        instant = build_instant(day, clock, tzinfo)
    else:
        solar = solar_times(day, coord, tzinfo)
        if solar.has_sunrise:
            instant = solar.sunrise.replace(microsecond=0)
        else:
            instant = build_instant(day, _time(12, 0), tzinfo)

    record = compute_record(instant, coord, payload.get("city"), config, payload.get("verify"))
    return record.to_dict()
