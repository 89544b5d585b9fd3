# panchang/main.py
from __future__ import annotations

import logging
import os
import traceback
from time import perf_counter
from typing import Final

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from panchang.api.routes import api as _routes_bp
from panchang.core.engine import PanchangError, load_engine_config
from panchang.core.validators import ValidationError
from panchang.version import VERSION

# ───────────────────────── metrics ─────────────────────────
MET_REQUESTS: Final = Counter("panchang_api_requests_total", "API requests", ["route"])
GAUGE_APP_UP: Final = Gauge("panchang_app_up", "1 if app is running")
REQ_LATENCY: Final = Histogram("panchang_request_seconds", "API request latency", ["route"])

_TRACKED_ROUTES = ("/", "/health", "/healthz", "/metrics", "/api/health", "/api/config", "/api/panchang")


# ───────────────────────── helpers: logging & errors ─────────────────────────
def _configure_logging(app: Flask) -> None:
    gerr = logging.getLogger("gunicorn.error")
    if gerr.handlers:
        app.logger.handlers = gerr.handlers
        app.logger.setLevel(gerr.level)
    else:
        logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))


def _register_errors(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        app.logger.info("validation error at %s %s: %s", request.method, request.path, e)
        return jsonify(ok=False, error="validation_error", details=e.errors()), 422

    @app.errorhandler(PanchangError)
    def _engine(e: PanchangError):
        app.logger.error("engine error at %s %s: %s", request.method, request.path, e)
        return jsonify(ok=False, error=e.code, message=str(e)), 400

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        app.logger.warning("HTTP %s at %s %s: %s", e.code, request.method, request.path, e.description)
        return jsonify(
            ok=False,
            error="http_error",
            code=e.code,
            name=e.name,
            message=e.description,
            path=request.path,
        ), e.code

    @app.errorhandler(Exception)
    def _any(e: Exception):
        tb = traceback.format_exc()
        app.logger.error("UNHANDLED %s at %s %s\n%s", type(e).__name__, request.method, request.path, tb)
        return jsonify(
            ok=False,
            error="internal_error",
            type=type(e).__name__,
            message=str(e),
            path=request.path,
        ), 500


# ───────────────────────── health & metrics ─────────────────────────
def _register_health(app: Flask) -> None:
    @app.route("/", methods=["GET"])
    def root():
        return jsonify(ok=True, service="panchang-backend", health="/health", version=VERSION), 200

    @app.route("/health", methods=["GET"])
    @app.route("/healthz", methods=["GET"])
    def health():
        return jsonify(ok=True, status="ok"), 200


def _metrics_auth_ok() -> bool:
    auth = request.authorization
    user = os.getenv("METRICS_USER", "")
    pw = os.getenv("METRICS_PASS", "")
    return bool(
        auth and auth.type == "basic" and auth.username == user and auth.password == pw and user and pw
    )


def _register_metrics(app: Flask) -> None:
    @app.route("/metrics", methods=["GET"])
    def metrics_endpoint():
        if not _metrics_auth_ok():
            return Response("Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="metrics"'})
        GAUGE_APP_UP.set(1.0)
        return Response(generate_latest(REGISTRY), mimetype=CONTENT_TYPE_LATEST)


# ───────────────────────── app factory ─────────────────────────
def create_app() -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore

    _configure_logging(app)

    # A bad engine config fails at startup rather than on first request.
    app.config["ENGINE_CONFIG"] = load_engine_config()

    for route in _TRACKED_ROUTES:
        MET_REQUESTS.labels(route=route).inc(0)
    GAUGE_APP_UP.set(1.0)

    @app.before_request
    def _before():
        p = request.path or ""
        if p in _TRACKED_ROUTES:
            MET_REQUESTS.labels(route=p).inc()
            request._t0 = perf_counter()

    @app.after_request
    def _after(resp):
        p = request.path or ""
        t0 = getattr(request, "_t0", None)
        if t0 is not None and p != "/metrics":
            REQ_LATENCY.labels(route=p).observe(perf_counter() - t0)
        return resp

    _register_health(app)
    _register_errors(app)
    _register_metrics(app)
    app.register_blueprint(_routes_bp)

    # CORS for browser UIs
    CORS(
        app,
        resources={r"/.*": {"origins": os.environ.get("CORS_ALLOW_ORIGIN") or "*"}},
        supports_credentials=False,
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=600,
    )

    app.logger.info(
        "App initialized; version=%s zodiac=%s verify_enabled=%s",
        VERSION, app.config["ENGINE_CONFIG"].zodiac, app.config["ENGINE_CONFIG"].verify_enabled,
    )
    return app


# ───────────────────────── app instance ─────────────────────────
app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
