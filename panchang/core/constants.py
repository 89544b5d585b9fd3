# -*- coding: utf-8 -*-
"""
Panchang: core constants & small helpers

Purpose
-------
Single source of truth for:
- Tithi / Nakshatra / Yoga / Karana / Rashi lookup tables
- weekday (Vara) names and rulers
- lunar month (Masa), Ritu and moon-phase names
- mean angular rates used for boundary back-solving
- tiny angle helpers (wrap / sector index)

Design
------
- Pure-Python, no external dependencies.
- Safe to import from any core module.
- Tables are tuples (immutable); helpers are pure.
"""

from __future__ import annotations
from typing import Dict, Tuple
import math

__all__ = [
    # spans & rates
    "TITHI_SPAN_DEG", "KARANA_SPAN_DEG", "NAKSHATRA_SPAN_DEG", "RASHI_SPAN_DEG",
    "SUN_RATE_DEG_PER_DAY", "MOON_RATE_DEG_PER_DAY", "ELONGATION_RATE_DEG_PER_DAY",
    "YOGA_RATE_DEG_PER_DAY",
    # tables
    "TITHI_NAMES", "TITHI_SANSKRIT", "TITHI_DEITIES", "PAKSHA_NAMES",
    "AMAVASYA", "AMAVASYA_DEITY",
    "NAKSHATRAS", "YOGAS", "KARANA_MOVABLE", "KARANA_FIXED", "RASHIS",
    "WEEKDAYS", "MASA_NAMES", "RITU_NAMES", "MOON_PHASES",
    # helpers
    "wrap_deg", "sector_index",
    # version tag
    "TABLES_VERSION",
]

TABLES_VERSION: str = "tables-1.0.0"

# ── sector spans ─────────────────────────────────────────────────────────────
TITHI_SPAN_DEG: float = 12.0
KARANA_SPAN_DEG: float = 6.0
NAKSHATRA_SPAN_DEG: float = 360.0 / 27.0  # 13°20'
RASHI_SPAN_DEG: float = 30.0

# ── mean daily motions (deg/day) ─────────────────────────────────────────────
# Sun: 360 / 365.2422; Moon: 360 / 27.321582 (sidereal month).
SUN_RATE_DEG_PER_DAY: float = 0.985647
MOON_RATE_DEG_PER_DAY: float = 13.176396
ELONGATION_RATE_DEG_PER_DAY: float = MOON_RATE_DEG_PER_DAY - SUN_RATE_DEG_PER_DAY  # ≈12.19
YOGA_RATE_DEG_PER_DAY: float = MOON_RATE_DEG_PER_DAY + SUN_RATE_DEG_PER_DAY

# ── Tithi ────────────────────────────────────────────────────────────────────
# Index 1..15 within a paksha. 15 is overridden by Purnima / Amavasya.
TITHI_NAMES: Tuple[str, ...] = (
    "Pratipada", "Dwitiya", "Tritiya", "Chaturthi", "Panchami",
    "Shashthi", "Saptami", "Ashtami", "Navami", "Dashami",
    "Ekadashi", "Dwadashi", "Trayodashi", "Chaturdashi", "Purnima",
)
TITHI_SANSKRIT: Tuple[str, ...] = (
    "प्रतिपदा", "द्वितीया", "तृतीया", "चतुर्थी", "पञ्चमी",
    "षष्ठी", "सप्तमी", "अष्टमी", "नवमी", "दशमी",
    "एकादशी", "द्वादशी", "त्रयोदशी", "चतुर्दशी", "पूर्णिमा",
)
AMAVASYA: Tuple[str, str] = ("Amavasya", "अमावस्या")

# Presiding deity per tithi ordinal (1..15); Amavasya → Pitrs.
TITHI_DEITIES: Tuple[str, ...] = (
    "Agni", "Brahma", "Gauri", "Ganesha", "Naga",
    "Kartikeya", "Surya", "Shiva", "Durga", "Yama",
    "Vishvedevas", "Vishnu", "Kama", "Shiva", "Chandra",
)
AMAVASYA_DEITY: str = "Pitrs"

PAKSHA_NAMES: Tuple[str, str] = ("Shukla", "Krishna")

# ── Nakshatra: (name, sanskrit, lord, deity) ─────────────────────────────────
NAKSHATRAS: Tuple[Tuple[str, str, str, str], ...] = (
    ("Ashwini", "अश्विनी", "Ketu", "Ashwini Kumaras"),
    ("Bharani", "भरणी", "Venus", "Yama"),
    ("Krittika", "कृत्तिका", "Sun", "Agni"),
    ("Rohini", "रोहिणी", "Moon", "Brahma"),
    ("Mrigashirsha", "मृगशिरा", "Mars", "Soma"),
    ("Ardra", "आर्द्रा", "Rahu", "Rudra"),
    ("Punarvasu", "पुनर्वसु", "Jupiter", "Aditi"),
    ("Pushya", "पुष्य", "Saturn", "Brihaspati"),
    ("Ashlesha", "आश्लेषा", "Mercury", "Nagas"),
    ("Magha", "मघा", "Ketu", "Pitrs"),
    ("Purva Phalguni", "पूर्व फाल्गुनी", "Venus", "Bhaga"),
    ("Uttara Phalguni", "उत्तर फाल्गुनी", "Sun", "Aryaman"),
    ("Hasta", "हस्त", "Moon", "Savitar"),
    ("Chitra", "चित्रा", "Mars", "Vishvakarma"),
    ("Swati", "स्वाति", "Rahu", "Vayu"),
    ("Vishakha", "विशाखा", "Jupiter", "Indra-Agni"),
    ("Anuradha", "अनुराधा", "Saturn", "Mitra"),
    ("Jyeshtha", "ज्येष्ठा", "Mercury", "Indra"),
    ("Mula", "मूल", "Ketu", "Nirriti"),
    ("Purva Ashadha", "पूर्वाषाढ़ा", "Venus", "Apas"),
    ("Uttara Ashadha", "उत्तराषाढ़ा", "Sun", "Vishvedevas"),
    ("Shravana", "श्रवण", "Moon", "Vishnu"),
    ("Dhanishta", "धनिष्ठा", "Mars", "Vasus"),
    ("Shatabhisha", "शतभिषा", "Rahu", "Varuna"),
    ("Purva Bhadrapada", "पूर्व भाद्रपद", "Jupiter", "Aja Ekapada"),
    ("Uttara Bhadrapada", "उत्तर भाद्रपद", "Saturn", "Ahir Budhnya"),
    ("Revati", "रेवती", "Mercury", "Pushan"),
)

# ── Yoga: (name, sanskrit, meaning) ──────────────────────────────────────────
YOGAS: Tuple[Tuple[str, str, str], ...] = (
    ("Vishkambha", "विष्कम्भ", "Obstacles"),
    ("Priti", "प्रीति", "Love"),
    ("Ayushman", "आयुष्मान", "Longevity"),
    ("Saubhagya", "सौभाग्य", "Fortune"),
    ("Shobhana", "शोभन", "Splendour"),
    ("Atiganda", "अतिगण्ड", "Great obstacles"),
    ("Sukarma", "सुकर्मा", "Good deeds"),
    ("Dhriti", "धृति", "Resolve"),
    ("Shula", "शूल", "Spear"),
    ("Ganda", "गण्ड", "Obstacles"),
    ("Vriddhi", "वृद्धि", "Growth"),
    ("Dhruva", "ध्रुव", "Fixed"),
    ("Vyaghata", "व्याघात", "Beating"),
    ("Harshana", "हर्षण", "Joy"),
    ("Vajra", "वज्र", "Diamond"),
    ("Siddhi", "सिद्धि", "Accomplishment"),
    ("Vyatipata", "व्यतीपात", "Calamity"),
    ("Variyana", "वरीयान", "Comfort"),
    ("Parigha", "परिघ", "Iron rod"),
    ("Shiva", "शिव", "Auspicious"),
    ("Siddha", "सिद्ध", "Accomplished"),
    ("Sadhya", "साध्य", "Achievable"),
    ("Shubha", "शुभ", "Auspicious"),
    ("Shukla", "शुक्ल", "Bright"),
    ("Brahma", "ब्रह्म", "Creator"),
    ("Indra", "इन्द्र", "King of gods"),
    ("Vaidhriti", "वैधृति", "Holding back"),
)

# ── Karana ───────────────────────────────────────────────────────────────────
KARANA_MOVABLE: Tuple[Tuple[str, str], ...] = (
    ("Bava", "बव"), ("Balava", "बालव"), ("Kaulava", "कौलव"), ("Taitila", "तैतिल"),
    ("Garaja", "गर"), ("Vanija", "वणिज"), ("Vishti", "विष्टि"),
)
# Absolute half-tithi position (1..60) → fixed karana.
KARANA_FIXED: Dict[int, Tuple[str, str]] = {
    1: ("Kimstughna", "किंस्तुघ्न"),
    58: ("Shakuni", "शकुनि"),
    59: ("Chatushpada", "चतुष्पाद"),
    60: ("Naga", "नाग"),
}

# ── Rashi: (name, sanskrit, english, element, ruling planet) ─────────────────
RASHIS: Tuple[Tuple[str, str, str, str, str], ...] = (
    ("Mesha", "मेष", "Aries", "Fire", "Mars"),
    ("Vrishabha", "वृषभ", "Taurus", "Earth", "Venus"),
    ("Mithuna", "मिथुन", "Gemini", "Air", "Mercury"),
    ("Karka", "कर्क", "Cancer", "Water", "Moon"),
    ("Simha", "सिंह", "Leo", "Fire", "Sun"),
    ("Kanya", "कन्या", "Virgo", "Earth", "Mercury"),
    ("Tula", "तुला", "Libra", "Air", "Venus"),
    ("Vrishchika", "वृश्चिक", "Scorpio", "Water", "Mars"),
    ("Dhanu", "धनु", "Sagittarius", "Fire", "Jupiter"),
    ("Makara", "मकर", "Capricorn", "Earth", "Saturn"),
    ("Kumbha", "कुम्भ", "Aquarius", "Air", "Saturn"),
    ("Meena", "मीन", "Pisces", "Water", "Jupiter"),
)

# ── Vara: Sunday-first (name, sanskrit, ruler) ───────────────────────────────
WEEKDAYS: Tuple[Tuple[str, str, str], ...] = (
    ("Sunday", "Ravivara", "Sun"),
    ("Monday", "Somavara", "Moon"),
    ("Tuesday", "Mangalavara", "Mars"),
    ("Wednesday", "Budhavara", "Mercury"),
    ("Thursday", "Guruvara", "Jupiter"),
    ("Friday", "Shukravara", "Venus"),
    ("Saturday", "Shanivara", "Saturn"),
)

# ── calendar context ─────────────────────────────────────────────────────────
MASA_NAMES: Tuple[str, ...] = (
    "Chaitra", "Vaishakha", "Jyeshtha", "Ashadha", "Shravana", "Bhadrapada",
    "Ashwin", "Kartika", "Margashirsha", "Pausha", "Magha", "Phalguna",
)
RITU_NAMES: Tuple[str, ...] = (
    "Vasanta", "Grishma", "Varsha", "Sharad", "Hemanta", "Shishira",
)
MOON_PHASES: Tuple[str, ...] = (
    "New Moon", "Waxing Crescent", "First Quarter", "Waxing Gibbous",
    "Full Moon", "Waning Gibbous", "Third Quarter", "Waning Crescent",
)


# ── helpers ──────────────────────────────────────────────────────────────────
def wrap_deg(x: float) -> float:
    """Normalize an angle to [0, 360)."""
    r = math.fmod(float(x), 360.0)
    if r < 0.0:
        r += 360.0
    # fmod of a tiny negative can round up to exactly 360
    return 0.0 if r >= 360.0 or abs(r) < 1e-12 else r


def sector_index(angle: float, span: float, count: int) -> int:
    """0-based sector containing ``angle``, clamped to ``[0, count-1]``."""
    idx = int(math.floor(wrap_deg(angle) / span))
    return min(max(idx, 0), count - 1)
