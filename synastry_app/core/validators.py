# synastry_app/core/validators.py
from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypedDict, Union

from synastry_app.core.chart import Chart, PlanetPosition
from synastry_app.core.constants import HOUSE_COUNT, canonical_body
from synastry_app.core.phrases import normalize_locale

# ───────────────────────── errors ─────────────────────────

class ValidationError(ValueError):
    """Structured validator error compatible with routes.py (has .errors())."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        elif isinstance(details, list):
            self._details = details
            super().__init__(self._details[0]["msg"] if self._details else "validation_error")
        else:
            self._details = [{"loc": [], "msg": "validation_error", "type": "value_error"}]
            super().__init__("validation_error")

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


# ───────────────────────── helpers ─────────────────────────

Loc = List[Union[str, int]]

def _err(loc: Loc | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _as_float(v: Any) -> Optional[float]:
    """Finite float or None; booleans are not numbers here."""
    if v is None or isinstance(v, bool):
        return None
    try:
        x = float(v)
    except (TypeError, ValueError, OverflowError):
        return None
    return x if math.isfinite(x) else None

def _first(body: Mapping[str, Any], *keys: str) -> Tuple[Optional[str], Any]:
    for k in keys:
        if k in body and body[k] is not None:
            return k, body[k]
    return None, None

def _require_float(v: Any, loc: Loc, what: str) -> float:
    x = _as_float(v)
    if x is None:
        raise ValidationError(_err(loc, f"{what} must be a finite number", "type_error.float"))
    return x


# ───────────────────────── planets ─────────────────────────

def _position(name: Any, lon: Any, speed: Any, loc: Loc) -> PlanetPosition:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(_err(loc + ["planet"], "required string", "value_error"))
    canon = canonical_body(name)
    if canon is None:
        raise ValidationError(_err(loc + ["planet"], f"unknown body '{name}'", "value_error.body"))
    longitude = _require_float(lon, loc + ["longitude"], "longitude")
    spd = 0.0 if speed is None else _require_float(speed, loc + ["speed"], "speed")
    return PlanetPosition(canon, longitude, spd)

def _positions_from(raw: Any, loc: Loc) -> List[PlanetPosition]:
    out: List[PlanetPosition] = []
    if isinstance(raw, Mapping):
        # {"Sun": 12.3} or {"Sun": {"longitude": 12.3, "speed": 0.98}}
        for name, v in raw.items():
            if isinstance(v, Mapping):
                _, lon = _first(v, "longitude", "lon")
                out.append(_position(name, lon, v.get("speed"), loc + [str(name)]))
            else:
                out.append(_position(name, v, None, loc + [str(name)]))
    elif isinstance(raw, (list, tuple)):
        for i, item in enumerate(raw):
            if not isinstance(item, Mapping):
                raise ValidationError(_err(loc + [i], "must be an object", "type_error.dict"))
            _, name = _first(item, "planet", "name", "body")
            _, lon = _first(item, "longitude", "lon")
            out.append(_position(name, lon, item.get("speed"), loc + [i]))
    else:
        raise ValidationError(_err(loc, "must be an array or an object", "type_error"))

    seen: Dict[str, int] = {}
    for i, p in enumerate(out):
        if p.planet in seen:
            raise ValidationError(_err(loc, f"duplicate body '{p.planet}'", "value_error.duplicate"))
        seen[p.planet] = i
    return out


# ───────────────────────── chart ─────────────────────────

def parse_chart(payload: Any, loc: str = "chart") -> Chart:
    """
    Build a Chart from a JSON-like mapping.

    Accepted keys:
    - planets | positions | planetPositions: list of {planet|name|body, longitude|lon, speed?}
      or a mapping name → longitude / name → {longitude, speed}
    - house_cusps | houseCusps | cusps: exactly twelve finite numbers
    - ascendant | asc | asc_deg: finite number
    - label (optional)

    Node spellings ("North Node", "True Node", "Mean Node", "South Node") map to
    Rahu / Ketu. The engine never re-validates what comes out of here.
    """
    base: Loc = [loc]
    if not isinstance(payload, Mapping):
        raise ValidationError(_err(base, "chart must be an object", "type_error.dict"))

    key, raw_planets = _first(payload, "planets", "positions", "planetPositions")
    if key is None:
        raise ValidationError(_err(base + ["planets"], "required", "value_error.missing"))
    positions = _positions_from(raw_planets, base + [key])

    key, raw_cusps = _first(payload, "house_cusps", "houseCusps", "cusps")
    if key is None:
        raise ValidationError(_err(base + ["house_cusps"], "required", "value_error.missing"))
    if not isinstance(raw_cusps, (list, tuple)) or len(raw_cusps) != HOUSE_COUNT:
        raise ValidationError(_err(base + [key], f"must be an array of {HOUSE_COUNT} numbers", "value_error.cusps"))
    cusps = [_require_float(c, base + [key, i], "cusp") for i, c in enumerate(raw_cusps)]

    key, raw_asc = _first(payload, "ascendant", "asc", "asc_deg")
    if key is None:
        raise ValidationError(_err(base + ["ascendant"], "required", "value_error.missing"))
    ascendant = _require_float(raw_asc, base + [key], "ascendant")

    label = payload.get("label")
    if label is not None and not isinstance(label, str):
        raise ValidationError(_err(base + ["label"], "must be a string", "type_error.str"))

    return Chart.build(positions, ascendant, cusps, label)


# ───────────────────────── synastry request ─────────────────────────

class SynastryPayload(TypedDict):
    chart_a: Chart
    chart_b: Chart
    locale: str

def parse_synastry_payload(body: Any) -> SynastryPayload:
    """Normalize a /api/synastry body: chart_a/chart_b (or chart1/chart2), locale?"""
    if not isinstance(body, Mapping):
        raise ValidationError("payload must be an object")

    charts: Dict[str, Chart] = {}
    errors: List[Dict[str, Any]] = []
    for name, alias in (("chart_a", "chart1"), ("chart_b", "chart2")):
        key, raw = _first(body, name, alias)
        if key is None:
            errors.append(_err(name, "required object", "value_error.missing"))
            continue
        try:
            charts[name] = parse_chart(raw, loc=key)
        except ValidationError as e:
            errors.extend(e.errors())
    if errors:
        raise ValidationError(errors)

    locale = body.get("locale")
    if locale is not None and not isinstance(locale, str):
        raise ValidationError(_err("locale", "must be a string", "type_error.str"))

    return {
        "chart_a": charts["chart_a"],
        "chart_b": charts["chart_b"],
        "locale": normalize_locale(locale),
    }


__all__ = [
    "ValidationError",
    "parse_chart",
    "parse_synastry_payload",
]
