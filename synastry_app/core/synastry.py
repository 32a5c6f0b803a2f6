# synastry_app/core/synastry.py
# -*- coding: utf-8 -*-
"""
Synastry (dual-chart) comparison engine

Public APIs
-----------
compute_synastry(
    chart_a, chart_b, *,
    locale="en",
) -> SynastryAnalysisResult

ascendant_connections(chart_a, chart_b, *, locale="en") -> tuple[SynastryAspect, ...]

key_findings(aspects, overlays_1_in_2, *, locale="en") -> tuple[str, ...]

run_synastry_api(body: dict, *, default_locale=None) -> dict
    Thin adapter used by POST /api/synastry: validates the raw body, computes,
    serializes.

Notes & Conventions
-------------------
- Pure: no I/O, no globals read, no mutation. Equal inputs → equal results.
- Inter-chart aspects only (A bodies × B bodies); natal aspects are not computed.
- Aspects are sorted by descending strength with a stable sort, so ties keep
  the enumeration order (A body order × B body order × catalog order).
- Harmonious / challenging subsets hold the same SynastryAspect objects as the
  full list.
- Ascendant connections are B-onto-A only: chart B positions within 10° of
  chart A's ascendant.
- Scoring is HEURISTIC ONLY and flagged as such in meta.

Returned Top-level Keys (as_dict)
---------------------------------
{
  "meta": {...},                 # engine version, locale, counts, notes
  "aspects": [...],              # sorted by strength
  "harmonious_aspects": [...],
  "challenging_aspects": [...],
  "overlays": { "A_in_B": [...], "B_in_A": [...] },
  "categories": [...],           # five, fixed order
  "overall_compatibility": float,
  "key_findings": [...],
  "special": { "sun_moon": [...], "venus_mars": [...], "ascendant": [...] }
}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from synastry_app.core.aspects import (
    ASPECTS_BY_KEY,
    SynastryAspect,
    aspect_strength,
    detect_aspects,
)
from synastry_app.core.chart import Chart
from synastry_app.core.constants import (
    ANGULAR_HOUSES,
    ASCENDANT,
    ASCENDANT_ORB_DEG,
    ATTRACTION_PAIR,
    ENGINE_VERSION,
    HOUSE_FINDINGS,
    LUMINARY_PAIR,
    MAX_KEY_FINDINGS,
    TOP_ASPECT_FINDINGS,
    orb_deg,
)
from synastry_app.core.houses import HouseOverlay, compute_overlays
from synastry_app.core.scoring import (
    CompatibilityCategory,
    compute_categories,
    overall_compatibility,
)
from synastry_app.core.validators import parse_synastry_payload
from synastry_app.core import phrases

log = logging.getLogger(__name__)

__all__ = [
    "SynastryAnalysisResult",
    "compute_synastry",
    "ascendant_connections",
    "key_findings",
    "run_synastry_api",
]


# ───────────────────────────── Result ────────────────────────────────────────

@dataclass(frozen=True)
class SynastryAnalysisResult:
    aspects: Tuple[SynastryAspect, ...]
    harmonious_aspects: Tuple[SynastryAspect, ...]
    challenging_aspects: Tuple[SynastryAspect, ...]
    house_overlays_1_in_2: Tuple[HouseOverlay, ...]
    house_overlays_2_in_1: Tuple[HouseOverlay, ...]
    compatibility_categories: Tuple[CompatibilityCategory, ...]
    overall_compatibility: float
    key_findings: Tuple[str, ...]
    sun_moon_aspects: Tuple[SynastryAspect, ...]
    venus_mars_aspects: Tuple[SynastryAspect, ...]
    ascendant_connections: Tuple[SynastryAspect, ...]
    locale: str = phrases.DEFAULT_LOCALE

    def category(self, key: str) -> CompatibilityCategory:
        for c in self.compatibility_categories:
            if c.key == key:
                return c
        raise KeyError(key)

    def as_dict(self) -> Dict[str, Any]:
        loc = self.locale

        def _aspects(xs: Iterable[SynastryAspect]) -> List[Dict[str, Any]]:
            return [a.as_dict(loc) for a in xs]

        return {
            "meta": {
                "engine": ENGINE_VERSION,
                "locale": loc,
                "counts": {
                    "aspects": len(self.aspects),
                    "harmonious": len(self.harmonious_aspects),
                    "challenging": len(self.challenging_aspects),
                    "ascendant_connections": len(self.ascendant_connections),
                },
                "heuristic": True,
                "notes": [
                    "scores are heuristic aggregates; not claims of predictive validity",
                    "ascendant connections are computed for chart B onto chart A's ascendant only",
                ],
            },
            "aspects": _aspects(self.aspects),
            "harmonious_aspects": _aspects(self.harmonious_aspects),
            "challenging_aspects": _aspects(self.challenging_aspects),
            "overlays": {
                "A_in_B": [o.as_dict() for o in self.house_overlays_1_in_2],
                "B_in_A": [o.as_dict() for o in self.house_overlays_2_in_1],
            },
            "categories": [c.as_dict() for c in self.compatibility_categories],
            "overall_compatibility": float(self.overall_compatibility),
            "key_findings": list(self.key_findings),
            "special": {
                "sun_moon": _aspects(self.sun_moon_aspects),
                "venus_mars": _aspects(self.venus_mars_aspects),
                "ascendant": _aspects(self.ascendant_connections),
            },
        }


# ───────────────────────────── Assembly helpers ──────────────────────────────

def ascendant_connections(
    chart_a: Chart,
    chart_b: Chart,
    *,
    locale: str = phrases.DEFAULT_LOCALE,
) -> Tuple[SynastryAspect, ...]:
    """Chart B positions conjunct chart A's ascendant within ASCENDANT_ORB_DEG."""
    conj = ASPECTS_BY_KEY["conjunction"]
    out: List[SynastryAspect] = []
    for pos in chart_b.positions:
        orb = orb_deg(chart_a.ascendant, pos.longitude, 0.0)
        if orb <= ASCENDANT_ORB_DEG:
            out.append(SynastryAspect(
                planet1=ASCENDANT,
                planet1_chart=1,
                planet2=pos.planet,
                planet2_chart=2,
                definition=conj,
                orb=orb,
                applying=False,  # the ascendant carries no speed
                strength=aspect_strength(orb, ASCENDANT_ORB_DEG),
                interpretation=phrases.ascendant_interpretation(pos.planet, 1, locale),
            ))
    return tuple(out)


def key_findings(
    aspects: Tuple[SynastryAspect, ...],
    overlays_1_in_2: Tuple[HouseOverlay, ...],
    *,
    locale: str = phrases.DEFAULT_LOCALE,
) -> Tuple[str, ...]:
    """Top aspects by strength, then angular-house placements of chart 1 in chart 2."""
    findings = [
        phrases.strong_aspect_finding(a.aspect, a.planet1, a.planet2, locale)
        for a in aspects[:TOP_ASPECT_FINDINGS]
    ]
    angular = [o for o in overlays_1_in_2 if o.house in ANGULAR_HOUSES][:HOUSE_FINDINGS]
    findings.extend(
        phrases.house_activation_finding(o.planet, o.house, o.life_area, locale) for o in angular
    )
    return tuple(findings[:MAX_KEY_FINDINGS])


# ───────────────────────────── Core API ──────────────────────────────────────

def compute_synastry(
    chart_a: Chart,
    chart_b: Chart,
    *,
    locale: str = phrases.DEFAULT_LOCALE,
) -> SynastryAnalysisResult:
    """
    Compare two charts: inter-chart aspects, house overlays in both directions,
    five compatibility categories and an overall percentage.
    """
    loc = phrases.normalize_locale(locale)

    detected = detect_aspects(chart_a, chart_b, locale=loc)
    ordered = tuple(sorted(detected, key=lambda a: a.strength, reverse=True))  # stable

    harmonious = tuple(a for a in ordered if a.is_harmonious)
    challenging = tuple(a for a in ordered if a.is_challenging)

    overlays_1_in_2 = compute_overlays(chart_a, chart_b, 1, locale=loc)
    overlays_2_in_1 = compute_overlays(chart_b, chart_a, 2, locale=loc)

    sun_moon = tuple(a for a in ordered if a.connects(LUMINARY_PAIR))
    venus_mars = tuple(a for a in ordered if a.connects(ATTRACTION_PAIR))

    result = SynastryAnalysisResult(
        aspects=ordered,
        harmonious_aspects=harmonious,
        challenging_aspects=challenging,
        house_overlays_1_in_2=overlays_1_in_2,
        house_overlays_2_in_1=overlays_2_in_1,
        compatibility_categories=compute_categories(ordered, locale=loc),
        overall_compatibility=overall_compatibility(harmonious, challenging),
        key_findings=key_findings(ordered, overlays_1_in_2, locale=loc),
        sun_moon_aspects=sun_moon,
        venus_mars_aspects=venus_mars,
        ascendant_connections=ascendant_connections(chart_a, chart_b, locale=loc),
        locale=loc,
    )
    log.debug(
        "synastry computed: aspects=%d harmonious=%d challenging=%d overall=%.2f",
        len(ordered), len(harmonious), len(challenging), result.overall_compatibility,
    )
    return result


# ───────────────────────────── HTTP-layer adapter ────────────────────────────

def run_synastry_api(
    body: Any,
    *,
    default_locale: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Thin API adapter around the pure engine.
    - body: raw request payload (chart_a|chart1, chart_b|chart2, locale?)
    - default_locale: used when the body carries no locale
    Raises validators.ValidationError on malformed input, with the errors of
    both charts collected.
    """
    if isinstance(body, Mapping) and body.get("locale") is None and default_locale:
        body = {**body, "locale": default_locale}
    payload = parse_synastry_payload(body)
    result = compute_synastry(payload["chart_a"], payload["chart_b"], locale=payload["locale"])
    return result.as_dict()
