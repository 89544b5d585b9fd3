# tests/test_engine.py
from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from panchang.core import ephemeris, verification
from panchang.core.constants import ELONGATION_RATE_DEG_PER_DAY
from panchang.core.engine import (
    EngineConfig,
    PanchangError,
    compute_panchang,
    compute_record,
    load_engine_config,
)
from panchang.core.timescales import GeoCoordinate
from panchang.core.validators import ValidationError

IST = timezone(timedelta(hours=5, minutes=30))
DELHI = (28.6139, 77.2090)
OFF = EngineConfig()


def test_idempotent_json():
    a = compute_panchang("2024-01-25", *DELHI, city_hint="Delhi", tz="Asia/Kolkata", config=OFF)
    b = compute_panchang("2024-01-25", *DELHI, city_hint="Delhi", tz="Asia/Kolkata", config=OFF)
    assert json.dumps(a, sort_keys=True) == json.dumps(b, sort_keys=True)


def test_record_shape_and_defaults():
    rec = compute_panchang("2024-01-25", *DELHI, tz="Asia/Kolkata", config=OFF)
    for key in ("tithi", "nakshatra", "yoga", "karana", "vara", "rashi", "sun",
                "muhurats", "occasions", "calendar", "computation_method", "verified", "verification"):
        assert key in rec
    # default query time is local sunrise
    assert rec["instant"] == rec["sun"]["sunrise"]
    assert rec["location"]["utc_offset"] == 5.5
    assert rec["verified"] is False
    assert rec["verification"]["status"] == "disabled"


def test_pausha_purnima_2024():
    rec = compute_panchang("2024-01-25", *DELHI, time="06:00", tz="Asia/Kolkata", config=OFF)
    assert rec["tithi"]["name"] == "Purnima"
    assert rec["calendar"]["masa"] == "Pausha"
    assert rec["calendar"]["vikram_samvat"] == 2080
    assert "Purnima Vrat" in [o["name"] for o in rec["occasions"]]
    assert rec["vara"]["name"] == "Thursday"


def test_offset_estimated_from_longitude():
    rec = compute_panchang("2024-01-25", *DELHI, time="12:00", config=OFF)
    assert rec["location"]["utc_offset"] == 5.0
    assert rec["instant"].endswith("+05:00")


def test_explicit_utc_offset():
    rec = compute_panchang("2024-01-25", *DELHI, time="12:00", utc_offset=5.5, config=OFF)
    assert rec["instant"] == "2024-01-25T12:00:00+05:30"


def test_polar_night_defaults_to_noon():
    rec = compute_panchang("2024-12-21", 85.0, 10.0, config=OFF)
    assert rec["sun"]["polar"] == "polar_night"
    assert rec["sun"]["sunrise"] is None
    assert rec["instant"].startswith("2024-12-21T12:00:00")
    assert {m["label"] for m in rec["muhurats"]} == {"Abhijit Muhurat", "Dur Muhurat"}


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(date="2024-13-01", latitude=28.6, longitude=77.2),
        dict(date="2024-01-25", latitude=95.0, longitude=77.2),
        dict(date="2024-01-25", latitude=28.6, longitude=-190.0),
        dict(date="2024-01-25", latitude=28.6, longitude=77.2, time="25:00"),
        dict(date="2024-01-25", latitude=28.6, longitude=77.2, tz="Mars/Olympus"),
        dict(date="2024-01-25", latitude=28.6, longitude=77.2, tz="Asia/Kolkata", utc_offset=5.5),
        dict(date="2024-01-25", latitude=28.6, longitude=77.2, utc_offset=5.3),
        dict(date="0001-01-01", latitude=10.0, longitude=170.0),
        dict(date="9999-12-30", latitude=28.6, longitude=77.2),
    ],
)
def test_invalid_inputs_raise_validation_error(kwargs):
    with pytest.raises(ValidationError) as ei:
        compute_panchang(config=OFF, **kwargs)
    assert ei.value.errors()


@pytest.mark.parametrize(
    "day,lon",
    [("0002-01-01", 170.0), ("9998-12-31", -170.0), ("9998-12-31", 179.0)],
)
def test_extreme_accepted_years_compute(day, lon):
    rec = compute_panchang(day, 10.0, lon, config=OFF)
    assert rec["date"] == day
    assert datetime.fromisoformat(rec["tithi"]["end"]) >= datetime.fromisoformat(rec["instant"])


# ───────────────────────── boundary scenario (linear ephemeris) ─────────────────────────

def test_delhi_ekadashi_boundary(monkeypatch, linear_ephemeris):
    epoch = datetime(2024, 1, 21, 0, 0, tzinfo=IST)
    fake = linear_ephemeris(epoch=epoch, sun0=0.0, moon0=125.0)
    monkeypatch.setattr(ephemeris, "longitudes", fake)

    rec = compute_panchang("2024-01-21", *DELHI, time="06:00", tz="Asia/Kolkata", config=OFF)
    assert rec["tithi"]["name"] == "Ekadashi"
    assert rec["tithi"]["paksha"] == "Shukla"
    assert rec["tithi"]["next"] == "Dwadashi"

    end = datetime.fromisoformat(rec["tithi"]["end"])
    crossing = epoch + timedelta(days=(132.0 - 125.0) / ELONGATION_RATE_DEG_PER_DAY)
    assert abs((end - crossing).total_seconds()) <= 1.0

    after = compute_panchang("2024-01-21", *DELHI, time=(end + timedelta(seconds=1)).strftime("%H:%M:%S"),
                             tz="Asia/Kolkata", config=OFF)
    before = compute_panchang("2024-01-21", *DELHI, time=(end - timedelta(seconds=1)).strftime("%H:%M:%S"),
                              tz="Asia/Kolkata", config=OFF)
    assert after["tithi"]["name"] == "Dwadashi"
    assert before["tithi"]["name"] == "Ekadashi"


# ───────────────────────── verification wiring ─────────────────────────

def _instant():
    return datetime(2024, 1, 25, 6, 0, tzinfo=IST)


def test_verified_when_all_fields_match(monkeypatch):
    coord = GeoCoordinate(*DELHI)
    base = compute_record(_instant(), coord, "Delhi", OFF)
    observed = {
        "tithi": base.elements.tithi.name,
        "nakshatra": base.elements.nakshatra.name,
        "yoga": base.elements.yoga.name,
        "karana": base.elements.karana.name,
        "vara": base.elements.vara.name,
    }
    monkeypatch.setattr(verification, "observe", lambda day, city, cfg: verification.Observed("stub", observed))

    rec = compute_record(_instant(), coord, "Delhi", EngineConfig(verify_enabled=True))
    assert rec.verified is True
    assert rec.verification["status"] == "completed"
    assert all(v["matched"] for v in rec.verification["fields"].values())


def test_mismatch_keeps_record_unverified(monkeypatch):
    monkeypatch.setattr(
        verification, "observe",
        lambda day, city, cfg: verification.Observed("stub", {"tithi": "Pratipada"}),
    )
    rec = compute_record(_instant(), GeoCoordinate(*DELHI), None, EngineConfig(verify_enabled=True))
    assert rec.verified is False
    assert rec.verification["fields"]["tithi"]["matched"] is False
    assert rec.elements.tithi.name == "Purnima"


def test_unavailable_source_never_fails_request(monkeypatch):
    monkeypatch.setattr(
        verification, "observe",
        lambda day, city, cfg: verification.Unavailable("stub", "timeout"),
    )
    rec = compute_panchang("2024-01-25", *DELHI, tz="Asia/Kolkata", verify=True, config=OFF)
    assert rec["verified"] is False
    assert rec["verification"]["reason"] == "timeout"
    assert rec["tithi"]["name"]


# ───────────────────────── config ─────────────────────────

def test_config_validation():
    with pytest.raises(PanchangError):
        EngineConfig(zodiac="draconic")
    with pytest.raises(PanchangError):
        EngineConfig(verify_retries=3)
    with pytest.raises(PanchangError):
        EngineConfig(verify_timeout_seconds=0)


def test_env_then_yaml_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PANCHANG_VERIFY", "1")
    monkeypatch.setenv("PANCHANG_VERIFY_TIMEOUT", "5")
    p = tmp_path / "cfg.yaml"
    p.write_text("engine:\n  zodiac: tropical\n  verify_retries: 0\n", encoding="utf-8")
    cfg = load_engine_config(str(p))
    assert cfg.verify_enabled is True
    assert cfg.verify_timeout_seconds == 5.0
    assert cfg.zodiac == "tropical"
    assert cfg.verify_retries == 0


def test_unknown_yaml_key_rejected(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("engine:\n  colour: blue\n", encoding="utf-8")
    with pytest.raises(PanchangError) as ei:
        load_engine_config(str(p))
    assert ei.value.code == "config_invalid"


def test_tropical_zodiac_changes_longitudes():
    sid = compute_panchang("2024-01-25", *DELHI, time="06:00", tz="Asia/Kolkata", config=OFF)
    trop = compute_panchang("2024-01-25", *DELHI, time="06:00", tz="Asia/Kolkata",
                            config=EngineConfig(zodiac="tropical"))
    assert trop["longitudes"]["ayanamsa"] == 0.0
    assert sid["longitudes"]["ayanamsa"] > 23.0
    assert "tropical" in trop["computation_method"]
