# synastry_app/core/constants.py
# -*- coding: utf-8 -*-
"""
Synastry core constants & small helpers

Purpose
-------
Single source of truth for:
- body names, tracked synastry set & node aliases
- benefic / malefic classification (conjunction scoring)
- house life-area labels and angular houses
- scoring constants (category caps, weights, ε guard)
- tiny angle helpers (wrap / separation / orb)

Design
------
- Pure-Python, no external dependencies.
- Safe to import from any core module.
- Functions are pure; constants are immutable (tuples / frozensets / mappings
  that callers never mutate).
"""

from __future__ import annotations
from typing import Dict, FrozenSet, Tuple
import math

__all__ = [
    # bodies
    "SUN", "MOON", "MERCURY", "VENUS", "MARS", "JUPITER", "SATURN", "RAHU", "KETU",
    "ASCENDANT", "TRACKED_BODIES", "KNOWN_BODIES", "BODY_ALIASES",
    "BENEFICS", "MALEFICS", "LUMINARY_PAIR", "ATTRACTION_PAIR",
    # houses
    "HOUSE_COUNT", "LIFE_AREAS", "ANGULAR_HOUSES", "FALLBACK_HOUSE",
    # scoring
    "CATEGORY_MAX_SCORE", "PAIR_WEIGHT", "SINGLE_BODY_WEIGHT", "OVERALL_EPSILON",
    "ASCENDANT_ORB_DEG", "MAX_KEY_FINDINGS", "TOP_ASPECT_FINDINGS", "HOUSE_FINDINGS",
    # helpers
    "wrap_deg", "abs_sep_deg", "orb_deg", "canonical_body",
    # version tag
    "ENGINE_VERSION",
]

# ── version tag ───────────────────────────────────────────────────────────────
ENGINE_VERSION: str = "synastry-1.0.0"

# ── canonical bodies ─────────────────────────────────────────────────────────
SUN = "Sun"
MOON = "Moon"
MERCURY = "Mercury"
VENUS = "Venus"
MARS = "Mars"
JUPITER = "Jupiter"
SATURN = "Saturn"
RAHU = "Rahu"   # north (mean) lunar node
KETU = "Ketu"   # south lunar node

# Chart point used as "planet1" for ascendant connections.
ASCENDANT = "ASC"

# Enumeration order matters: it is the tie-break order of the stable sort.
TRACKED_BODIES: Tuple[str, ...] = (
    SUN, MOON, MARS, MERCURY, JUPITER, VENUS, SATURN, RAHU, KETU,
)

# Bodies a chart may legitimately carry; only TRACKED_BODIES enter aspect detection.
KNOWN_BODIES: Tuple[str, ...] = TRACKED_BODIES + ("Uranus", "Neptune", "Pluto")

# Lower-cased user spellings → canonical name.
BODY_ALIASES: Dict[str, str] = {
    **{b.lower(): b for b in KNOWN_BODIES},
    "north node": RAHU,
    "true node": RAHU,
    "mean node": RAHU,
    "node": RAHU,
    "south node": KETU,
    "surya": SUN,
    "chandra": MOON,
    "mangal": MARS,
    "budha": MERCURY,
    "guru": JUPITER,
    "brihaspati": JUPITER,
    "shukra": VENUS,
    "shani": SATURN,
}

BENEFICS: FrozenSet[str] = frozenset({MOON, MERCURY, VENUS, JUPITER})
MALEFICS: FrozenSet[str] = frozenset({MARS, SATURN, RAHU, KETU})

LUMINARY_PAIR: FrozenSet[str] = frozenset({SUN, MOON})
ATTRACTION_PAIR: FrozenSet[str] = frozenset({VENUS, MARS})

# ── houses ───────────────────────────────────────────────────────────────────
HOUSE_COUNT: int = 12
FALLBACK_HOUSE: int = 1

LIFE_AREAS: Dict[int, str] = {
    1: "Self, Identity, Appearance",
    2: "Wealth, Values, Family",
    3: "Communication, Siblings",
    4: "Home, Mother, Emotions",
    5: "Romance, Children, Creativity",
    6: "Health, Service, Enemies",
    7: "Partnership, Marriage",
    8: "Transformation, Joint Resources",
    9: "Higher Learning, Dharma",
    10: "Career, Status, Father",
    11: "Gains, Friends, Aspirations",
    12: "Spirituality, Loss, Liberation",
}

# Houses whose overlays make it into the key findings.
ANGULAR_HOUSES: FrozenSet[int] = frozenset({1, 5, 7, 10})

# ── scoring ──────────────────────────────────────────────────────────────────
CATEGORY_MAX_SCORE: float = 10.0
PAIR_WEIGHT: float = 10.0          # luminary / attraction pairs
SINGLE_BODY_WEIGHT: float = 5.0    # Mercury / Saturn / Jupiter contacts
OVERALL_EPSILON: float = 0.01      # keeps H / (H + C) finite when both are 0

ASCENDANT_ORB_DEG: float = 10.0

MAX_KEY_FINDINGS: int = 5
TOP_ASPECT_FINDINGS: int = 3
HOUSE_FINDINGS: int = 2

# ── tiny angle helpers (no external imports) ──────────────────────────────────
def wrap_deg(x: float) -> float:
    """
    Wrap any angle to [0, 360).
    """
    x = math.fmod(float(x), 360.0)
    if x < 0.0:
        x += 360.0
    # tiny negatives round up to exactly 360.0
    return 0.0 if x >= 360.0 else x

def abs_sep_deg(a: float, b: float) -> float:
    """
    Smallest separation on the circle between angles a and b, in [0, 180].
    Symmetric: abs_sep_deg(a, b) == abs_sep_deg(b, a).
    """
    d = wrap_deg(float(a) - float(b))
    return d if d <= 180.0 else 360.0 - d

def orb_deg(lon1: float, lon2: float, target_deg: float) -> float:
    """
    Deviation of the measured separation of lon1/lon2 from an aspect's exact angle.

    The result is folded so it never exceeds 180° (an orb measured "the long way
    around" collapses to its minimal equivalent).
    """
    orb = abs(abs_sep_deg(lon1, lon2) - float(target_deg))
    return min(orb, 360.0 - orb)

def canonical_body(name: str) -> str | None:
    """Canonical body name for a user spelling, or None when unknown."""
    return BODY_ALIASES.get(str(name).strip().lower())
