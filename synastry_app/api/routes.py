# synastry_app/api/routes.py
"""
Synastry service API routes
- Comparison: POST /api/synastry
- Reference data: /api/synastry/catalog, /api/synastry/samples
- Ops: /api/health, /api/config

Notes:
- Bodies are validated by core.validators; the engine itself never re-validates.
- Validation failures answer 400 with pydantic-style `details`.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from synastry_app.version import VERSION
from synastry_app.core.aspects import ASPECT_CATALOG
from synastry_app.core.constants import ENGINE_VERSION, LIFE_AREAS, TRACKED_BODIES
from synastry_app.core.phrases import DEFAULT_LOCALE, SUPPORTED_LOCALES, normalize_locale
from synastry_app.core.synastry import run_synastry_api
from synastry_app.core.validators import ValidationError

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)

DEBUG_VERBOSE = os.getenv("SYNASTRY_DEBUG_VERBOSE", "0").lower() in ("1", "true", "yes", "on")


# ───────────────────────── helpers ─────────────────────────
def _json_error(code: str, details: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    return jsonify(out), http


def _cfg() -> Dict[str, Any]:
    return getattr(current_app, "cfg", None) or {}


def _default_locale() -> str:
    return normalize_locale(_cfg().get("locale") or DEFAULT_LOCALE)


# ───────────────────────── health / ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION, "engine": ENGINE_VERSION}), 200


@api.get("/api/config")
def config_info():
    cfg = _cfg()
    return jsonify(
        {
            "ok": True,
            "service": cfg.get("service_name", "synastry-backend"),
            "version": VERSION,
            "engine": ENGINE_VERSION,
            "default_locale": _default_locale(),
            "supported_locales": list(SUPPORTED_LOCALES),
            "samples_available": len(cfg.get("samples") or []),
        }
    ), 200


# ───────────────────────── reference data ─────────────────────────
@api.get("/api/synastry/catalog")
def catalog():
    loc = normalize_locale(request.args.get("locale") or _default_locale())
    return jsonify(
        {
            "ok": True,
            "locale": loc,
            "aspects": [d.as_dict(loc) for d in ASPECT_CATALOG],
            "tracked_bodies": list(TRACKED_BODIES),
            "life_areas": {str(h): area for h, area in LIFE_AREAS.items()},
        }
    ), 200


@api.get("/api/synastry/samples")
def samples():
    return jsonify({"ok": True, "samples": list(_cfg().get("samples") or [])}), 200


# ───────────────────────── synastry ─────────────────────────
@api.post("/api/synastry")
def synastry():
    body = request.get_json(silent=True)
    if body is None:
        return _json_error("bad_request", "JSON body must be an object", 400)

    try:
        result = run_synastry_api(body, default_locale=_default_locale())
    except ValidationError as e:
        log.info("synastry validation failed: %s", e)
        return _json_error("validation_error", e.errors(), 400)
    except Exception as e:
        log.exception("synastry computation failed")
        return _json_error("synastry_internal", str(e) if DEBUG_VERBOSE else "synastry_failed", 500)

    return jsonify({"ok": True, "result": result}), 200
