# panchang/core/verification.py
"""
Cross-check computed element names against a public Panchang page.

The fetch runs on a small module-level thread pool so the caller can start
it before computing and bound its wait with ``Future.result(timeout=...)``.
Every failure mode (timeout, network, HTTP status, unparseable page) ends
up as an ``Unavailable`` result; nothing raises out of this module.

Public API:
    build_url(template, day, city)           -> str
    fetch_page(url, timeout, retries, ua)    -> str     (raises requests errors)
    extract_fields(html)                     -> {field: observed name}
    normalise_name(field, value)             -> comparison key
    compare_fields(computed, observed)       -> {field: {computed, observed, matched}}
    observe(day, city, config)               -> Observed | Unavailable
    submit(day, city, config)                -> Future
    await_result(future, timeout)            -> Observed | Unavailable
    summarise(result, computed)              -> verification dict
"""
from __future__ import annotations

import html as _html
import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union
from urllib.parse import quote

import requests
from prometheus_client import Counter

if TYPE_CHECKING:  # pragma: no cover
    from panchang.core.engine import EngineConfig

__all__ = [
    "FIELDS",
    "Observed",
    "Unavailable",
    "VerificationResult",
    "build_url",
    "fetch_page",
    "extract_fields",
    "normalise_name",
    "compare_fields",
    "observe",
    "submit",
    "await_result",
    "summarise",
]

log = logging.getLogger(__name__)

FIELDS: Tuple[str, ...] = ("tithi", "nakshatra", "yoga", "karana", "vara")

STATUS_COMPLETED = "completed"
STATUS_UNAVAILABLE = "unavailable"
STATUS_DISABLED = "disabled"

VERIFY_OUTCOMES = Counter(
    "panchang_verification_total", "Verification attempts by outcome", ["status"]
)

_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix="panchang-verify")


# ───────────────────────────── results ─────────────────────────────

@dataclass(frozen=True)
class Observed:
    source: str
    fields: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Unavailable:
    source: Optional[str]
    reason: str


VerificationResult = Union[Observed, Unavailable]


# ───────────────────────────── fetch ─────────────────────────────

def build_url(template: str, day: date, city: Optional[str]) -> str:
    return template.format(
        day=f"{day.day:02d}",
        month=f"{day.month:02d}",
        year=f"{day.year:04d}",
        city=quote((city or "").strip()),
    )


def _get_once(url: str, headers: Dict[str, str], timeout: Tuple[float, float]) -> str:
    r = requests.get(url, headers=headers, timeout=timeout)
    r.raise_for_status()
    return r.text


def _retryable(exc: requests.RequestException) -> bool:
    if isinstance(exc, requests.HTTPError):
        return exc.response is not None and exc.response.status_code >= 500
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


def fetch_page(url: str, timeout: float, retries: int = 1, user_agent: str = "") -> str:
    """GET ``url``; retries at most once on network errors or 5xx."""
    headers = {"User-Agent": user_agent} if user_agent else {}
    limits = (min(3.0, float(timeout)), float(timeout))
    extra = max(0, min(1, int(retries)))
    for attempt in range(extra):
        try:
            return _get_once(url, headers, limits)
        except requests.RequestException as e:
            if not _retryable(e):
                raise
            log.debug("verification fetch attempt %d failed: %r", attempt + 1, e)
    return _get_once(url, headers, limits)


# ───────────────────────────── extraction ─────────────────────────────

_LABELS: Dict[str, Tuple[str, ...]] = {
    "tithi": ("Tithi",),
    "nakshatra": ("Nakshatra",),
    "yoga": ("Yoga",),
    "karana": ("Karana",),
    "vara": ("Weekday", "Vara", "Vaara"),
}

_TAIL = re.compile(r"\s+(?:upto|up to|till|until)\b|\s+[-–]\s|\s*[(,]|\s+\d", re.IGNORECASE)
_PAKSHA_PREFIX = re.compile(r"^(?:shukla|krishna)\s+(?:paksha\s+)?", re.IGNORECASE)


def _script_pattern(name: str) -> re.Pattern:
    return re.compile(
        r"drikp_g_%s_name_?\s*=\s*['\"]([^'\"]+)['\"]" % name, re.IGNORECASE
    )


def _cell_pattern(label: str) -> re.Pattern:
    return re.compile(
        r"<td[^>]*>\s*(?:<[^>]+>\s*)*%s\s*(?:<[^>]+>\s*)*</td>\s*<td[^>]*>\s*(?:<[^>]+>\s*)*([^<]+)" % label,
        re.IGNORECASE,
    )


_SCRIPT_PATTERNS = {f: _script_pattern(f) for f in FIELDS}
_CELL_PATTERNS = {f: tuple(_cell_pattern(lbl) for lbl in labels) for f, labels in _LABELS.items()}


def _clean(raw: str, fld: str) -> str:
    text = _html.unescape(raw).strip()
    text = _TAIL.split(text, 1)[0].strip()
    if fld == "tithi":
        text = _PAKSHA_PREFIX.sub("", text)
    return text


def extract_fields(page: str) -> Dict[str, str]:
    """Element names found in ``page``; script variables win over table cells."""
    out: Dict[str, str] = {}
    for fld in FIELDS:
        m = _SCRIPT_PATTERNS[fld].search(page)
        if m is None:
            for pat in _CELL_PATTERNS[fld]:
                m = pat.search(page)
                if m is not None:
                    break
        if m is not None:
            value = _clean(m.group(1), fld)
            if value:
                out[fld] = value
    return out


# ───────────────────────────── comparison ─────────────────────────────

# Post-fold spellings that still differ between sources.
_ALIASES: Dict[str, str] = {
    "mrigasir": "mrigasirs",
    "viskumb": "viskamb",
    "amavasai": "amavasy",
    "kolav": "kaulav",
    "taitul": "taitil",
    "gar": "garaj",
    "kintugn": "kimstugn",
    "satabisak": "satabis",
}

_VARA_BASES: Dict[str, str] = {
    "ravi": "sunday", "aditya": "sunday",
    "som": "monday", "soma": "monday", "chandra": "monday",
    "mangal": "tuesday", "mangala": "tuesday",
    "bud": "wednesday", "buda": "wednesday",
    "guru": "thursday", "brihaspati": "thursday",
    "sukra": "friday",
    "sani": "saturday", "bhauma": "tuesday",
}
_VARA_SUFFIX = re.compile(r"(?:vasara|vara|var)$")


def _fold(value: str) -> str:
    s = re.sub(r"[^a-z]", "", (value or "").lower())
    s = s.replace("w", "v")
    s = re.sub(r"([bcdgjkpst])h", r"\1", s)
    s = s.replace("ee", "i").replace("oo", "u").replace("aa", "a")
    if len(s) > 3 and s.endswith("a"):
        s = s[:-1]
    return _ALIASES.get(s, s)


def normalise_name(fld: str, value: str) -> str:
    """Comparison key: case, punctuation and common transliteration variants folded."""
    if fld == "vara":
        s = re.sub(r"[^a-z]", "", (value or "").lower())
        if s in _VARA_BASES.values():
            return s
        s = s.replace("w", "v").replace("dh", "d").replace("sh", "s")
        base = _VARA_SUFFIX.sub("", s)
        return _VARA_BASES.get(base, base)
    return _fold(value)


def compare_fields(computed: Dict[str, str], observed: Dict[str, str]) -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for fld in FIELDS:
        if fld not in computed:
            continue
        seen = observed.get(fld)
        matched = seen is not None and normalise_name(fld, computed[fld]) == normalise_name(fld, seen)
        out[fld] = {"computed": computed[fld], "observed": seen, "matched": matched}
    return out


# ───────────────────────────── orchestration ─────────────────────────────

def observe(day: date, city: Optional[str], config: "EngineConfig") -> VerificationResult:
    url = build_url(config.verify_url, day, city)
    try:
        page = fetch_page(url, config.verify_timeout_seconds, config.verify_retries, config.verify_user_agent)
    except requests.Timeout:
        return Unavailable(url, "timeout")
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        return Unavailable(url, f"http_status_{status}")
    except requests.RequestException as e:
        return Unavailable(url, f"network_error: {type(e).__name__}")

    fields = extract_fields(page)
    if not fields:
        return Unavailable(url, "parse_failure")
    return Observed(url, fields)


def submit(day: date, city: Optional[str], config: "EngineConfig") -> "Future[VerificationResult]":
    return _EXECUTOR.submit(observe, day, city, config)


def await_result(future: "Future[VerificationResult]", timeout: float) -> VerificationResult:
    try:
        return future.result(timeout=timeout)
    except FutureTimeout:
        future.cancel()
        return Unavailable(None, "timeout")
    except Exception as e:  # observe() is total; this guards programming errors only
        log.exception("verification worker failed")
        return Unavailable(None, f"error: {type(e).__name__}")


def summarise(result: Optional[VerificationResult], computed: Dict[str, str]) -> Dict[str, Any]:
    """Verification block of the record; ``None`` means verification was not requested."""
    if result is None:
        VERIFY_OUTCOMES.labels(status=STATUS_DISABLED).inc()
        return {"status": STATUS_DISABLED, "source": None, "reason": None, "fields": {}}

    if isinstance(result, Unavailable):
        log.warning("verification unavailable: %s (source=%s)", result.reason, result.source)
        VERIFY_OUTCOMES.labels(status=STATUS_UNAVAILABLE).inc()
        return {"status": STATUS_UNAVAILABLE, "source": result.source, "reason": result.reason, "fields": {}}

    fields = compare_fields(computed, result.fields)
    mismatched = sorted(f for f, v in fields.items() if not v["matched"])
    if mismatched:
        log.info("verification completed with mismatches: %s", ", ".join(mismatched))
    else:
        log.info("verification completed; all %d fields matched", len(fields))
    VERIFY_OUTCOMES.labels(status=STATUS_COMPLETED).inc()
    return {"status": STATUS_COMPLETED, "source": result.source, "reason": None, "fields": fields}
