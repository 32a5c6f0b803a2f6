# synastry_app/main.py
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

from synastry_app.api.routes import api as _routes_bp
from synastry_app.core.constants import ENGINE_VERSION
from synastry_app.utils.config import load_config
from synastry_app.version import VERSION

# ───────────────────────── Prometheus ─────────────────────────
MET_REQUESTS: Final = Counter("synastry_api_requests_total", "API requests", ["route", "method"])
MET_RESPONSES: Final = Counter("synastry_api_responses_total", "API responses by status", ["route", "status"])
GAUGE_APP_UP: Final = Gauge("synastry_app_up", "1 if app is running")
REQ_LATENCY: Final = Histogram("synastry_request_seconds", "API request latency", ["route"])

_SEEDED_ROUTES = (
    "/api/synastry",
    "/api/synastry/catalog",
    "/api/synastry/samples",
    "/api/health",
    "/api/config",
    "/health",
    "/healthz",
)

# ───────────────────────── helpers: logging & errors ─────────────────────────
def _configure_logging(app: Flask) -> None:
    gerr = logging.getLogger("gunicorn.error")
    if gerr.handlers:
        app.logger.handlers = gerr.handlers
        app.logger.setLevel(gerr.level)
    else:
        logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

def _register_errors(app: Flask) -> None:
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
        return jsonify(ok=True, service="synastry-backend", health="/health"), 200

    @app.route("/health", methods=["GET"])
    @app.route("/healthz", methods=["GET"])
    def health():
        return jsonify(ok=True, status="ok", version=VERSION, engine=ENGINE_VERSION), 200

def _metrics_auth_ok() -> bool:
    auth = request.authorization
    user = os.getenv("METRICS_USER", "")
    pw = os.getenv("METRICS_PASS", "")
    return bool(
        auth and auth.type == "basic" and auth.username == user and auth.password == pw and user and pw
    )

def _register_metrics(app: Flask) -> None:
    for route in _SEEDED_ROUTES:
        REQ_LATENCY.labels(route=route).observe(0.0)
    GAUGE_APP_UP.set(1.0)

    def _route_label() -> str | None:
        rule = request.url_rule
        if rule is None or rule.rule == "/metrics":
            return None
        return rule.rule

    @app.before_request
    def _before():
        route = _route_label()
        if route is not None:
            MET_REQUESTS.labels(route=route, method=request.method).inc()
            request.environ["synastry.t0"] = perf_counter()

    @app.after_request
    def _after(resp):
        route = _route_label()
        t0 = request.environ.get("synastry.t0")
        if route is not None and t0 is not None:
            REQ_LATENCY.labels(route=route).observe(perf_counter() - t0)
            MET_RESPONSES.labels(route=route, status=str(resp.status_code)).inc()
        return resp

    @app.route("/metrics", methods=["GET"])
    def metrics_endpoint():
        if not _metrics_auth_ok():
            return Response("Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="metrics"'})
        GAUGE_APP_UP.set(1.0)
        return Response(generate_latest(REGISTRY), mimetype=CONTENT_TYPE_LATEST)

# ───────────────────────── app factory ─────────────────────────
def create_app(config_path: str | None = None) -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore

    _configure_logging(app)
    app.cfg = load_config(config_path)  # type: ignore[attr-defined]

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
        "App initialized; version=%s engine=%s locale=%s",
        VERSION, ENGINE_VERSION, app.cfg.get("locale", "en"),  # type: ignore[attr-defined]
    )
    return app

# ───────────────────────── app instance ─────────────────────────
app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
