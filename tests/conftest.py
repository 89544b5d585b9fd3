# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the Panchang suite.

- Registers Hypothesis profiles for local dev and CI.
- Freezes the process TZ to UTC (all instants carry explicit offsets).
- Keeps verification off unless a test turns it on.
- Provides a Flask test client and a linear fake ephemeris.
"""

import os
from datetime import datetime, timezone

import pytest
from hypothesis import settings, HealthCheck


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=120,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Global fixtures
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def freeze_tz_env():
    prev = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    try:
        yield
    finally:
        if prev is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = prev


@pytest.fixture(autouse=True)
def no_verification_env(monkeypatch):
    monkeypatch.setenv("PANCHANG_VERIFY", "0")
    monkeypatch.delenv("PANCHANG_ZODIAC", raising=False)


@pytest.fixture()
def client():
    from panchang.main import create_app
    app = create_app()
    app.testing = True
    return app.test_client()


# ──────────────────────────────────────────────────────────────────────────────
# Linear fake ephemeris
# ──────────────────────────────────────────────────────────────────────────────

class LinearEphemeris:
    """
    Sun and Moon moving at exactly the engine's mean rates from an epoch,
    so element boundaries predicted from those rates are exact.
    """

    def __init__(self, epoch: datetime, sun0: float, moon0: float):
        from panchang.core.constants import MOON_RATE_DEG_PER_DAY, SUN_RATE_DEG_PER_DAY
        self.epoch = epoch
        self.sun0 = sun0
        self.moon0 = moon0
        self.sun_rate = SUN_RATE_DEG_PER_DAY
        self.moon_rate = MOON_RATE_DEG_PER_DAY

    def days(self, instant: datetime) -> float:
        return (instant - self.epoch).total_seconds() / 86400.0

    def __call__(self, instant: datetime, zodiac: str = "sidereal"):
        from panchang.core.constants import wrap_deg
        from panchang.core.ephemeris import Longitudes
        from panchang.core.timescales import julian_day
        d = self.days(instant)
        sun = wrap_deg(self.sun0 + self.sun_rate * d)
        moon = wrap_deg(self.moon0 + self.moon_rate * d)
        return Longitudes(
            sun=sun, moon=moon, sun_tropical=wrap_deg(sun + 24.0), moon_tropical=wrap_deg(moon + 24.0),
            ayanamsa=24.0, zodiac=zodiac, jd=julian_day(instant),
        )


@pytest.fixture()
def linear_ephemeris():
    def make(epoch: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc), sun0: float = 0.0, moon0: float = 0.0):
        return LinearEphemeris(epoch, sun0, moon0)
    return make
