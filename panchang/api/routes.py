# panchang/api/routes.py
"""
Panchang API routes
- /api/panchang   GET (query string) or POST (JSON body)
- /api/health     liveness + version
- /api/config     effective engine settings

Validation failures answer 422 with the structured error list; a broken
engine configuration answers 400 with its error code.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from panchang.version import VERSION
from panchang.core.constants import TABLES_VERSION
from panchang.core.engine import EngineConfig, PanchangError, compute_panchang, load_engine_config
from panchang.core.validators import ValidationError

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)

_PANCHANG_KEYS = (
    "date", "latitude", "lat", "longitude", "lon", "time",
    "city", "city_hint", "tz", "timezone", "utc_offset", "verify",
)


# ───────────────────────── helpers ─────────────────────────
def _json_error(code: str, details: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    return jsonify(out), http


def _engine_config() -> EngineConfig:
    cfg = current_app.config.get("ENGINE_CONFIG")
    if cfg is None:
        cfg = load_engine_config()
        current_app.config["ENGINE_CONFIG"] = cfg
    return cfg


def _request_body() -> Dict[str, Any]:
    if request.method == "GET":
        return {k: v for k, v in request.args.items() if k in _PANCHANG_KEYS}
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        raise ValidationError("JSON body must be an object")
    return body


# ───────────────────────── health / ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION}), 200


@api.get("/api/config")
def config_info():
    try:
        cfg = _engine_config()
    except PanchangError as e:
        return _json_error(e.code, str(e), 400)
    return jsonify({
        "ok": True,
        "engine": asdict(cfg),
        "tables_version": TABLES_VERSION,
        "version": VERSION,
    }), 200


# ───────────────────────── panchang ─────────────────────────
@api.route("/api/panchang", methods=["GET", "POST"])
def panchang_endpoint():
    try:
        body = _request_body()
        record = compute_panchang(
            body.get("date"),
            body.get("latitude", body.get("lat")),
            body.get("longitude", body.get("lon")),
            city_hint=body.get("city") or body.get("city_hint"),
            time=body.get("time"),
            tz=body.get("tz") or body.get("timezone"),
            utc_offset=body.get("utc_offset"),
            verify=body.get("verify"),
            config=_engine_config(),
        )
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 422)
    except PanchangError as e:
        log.error("panchang engine error: %s", e)
        return _json_error(e.code, str(e), 400)
    return jsonify({"ok": True, "panchang": record}), 200
