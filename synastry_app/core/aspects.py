# synastry_app/core/aspects.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Literal, Optional, Tuple

from synastry_app.core.chart import Chart, PlanetPosition
from synastry_app.core.constants import (
    BENEFICS,
    MALEFICS,
    TRACKED_BODIES,
    orb_deg,
)
from synastry_app.core import phrases

__all__ = [
    "AspectNature",
    "AspectDefinition",
    "ASPECT_CATALOG",
    "ASPECTS_BY_KEY",
    "SynastryAspect",
    "aspect_strength",
    "is_applying",
    "scoring_class",
    "classify_aspect",
    "detect_aspects",  # PURE geometry + classification (tuple of aspects)
]

# ─────────────────────────────────────────────────────────────────────────────
# Aspect catalog
# ─────────────────────────────────────────────────────────────────────────────

AspectNature = Literal["major", "harmonious", "challenging", "minor"]

@dataclass(frozen=True)
class AspectDefinition:
    key: str
    angle_deg: float
    max_orb_deg: float
    nature: AspectNature
    symbol: str

    def as_dict(self, locale: str = phrases.DEFAULT_LOCALE) -> Dict[str, Any]:
        return {
            "aspect": self.key,
            "aspect_name": phrases.aspect_name(self.key, locale),
            "angle": float(self.angle_deg),
            "max_orb": float(self.max_orb_deg),
            "nature": self.nature,
            "symbol": self.symbol,
        }

# Enumeration order is part of the contract (stable-sort tie-break).
ASPECT_CATALOG: Tuple[AspectDefinition, ...] = (
    AspectDefinition("conjunction", 0.0, 10.0, "major", "☌"),
    AspectDefinition("opposition", 180.0, 10.0, "challenging", "☍"),
    AspectDefinition("trine", 120.0, 8.0, "harmonious", "△"),
    AspectDefinition("square", 90.0, 8.0, "challenging", "□"),
    AspectDefinition("sextile", 60.0, 6.0, "harmonious", "⚹"),
    AspectDefinition("quincunx", 150.0, 3.0, "minor", "⚻"),
    AspectDefinition("semisextile", 30.0, 3.0, "minor", "⚺"),
)

ASPECTS_BY_KEY: Dict[str, AspectDefinition] = {d.key: d for d in ASPECT_CATALOG}

CONJUNCTION = ASPECTS_BY_KEY["conjunction"]

# ─────────────────────────────────────────────────────────────────────────────
# Strength & motion
# ─────────────────────────────────────────────────────────────────────────────

def aspect_strength(orb: float, max_orb: float) -> float:
    """1.0 at exact, tapering linearly to 0.0 at the orb limit (clipped to [0, 1])."""
    if max_orb <= 0.0:
        return 0.0
    return max(0.0, min(1.0, (float(max_orb) - float(orb)) / float(max_orb)))

def is_applying(pos1: PlanetPosition, pos2: PlanetPosition, angle_deg: float) -> bool:
    """
    True when the aspect tightens over the next day.

    Both bodies are advanced one day at their current speed and the orb is
    recomputed; a smaller projected orb means applying. Stations inside the
    one-day window are not modelled.
    """
    now = orb_deg(pos1.longitude, pos2.longitude, angle_deg)
    later = orb_deg(pos1.projected(), pos2.projected(), angle_deg)
    return later < now

def scoring_class(planet1: str, planet2: str, definition: AspectDefinition) -> Optional[str]:
    """
    "harmonious", "challenging" or None for the compatibility aggregates.

    Conjunctions depend on the bodies: harmonious when a benefic meets a
    non-malefic, challenging when both are malefic, otherwise unscored.
    """
    if definition.nature in ("harmonious", "challenging"):
        return definition.nature
    if definition.key != CONJUNCTION.key:
        return None
    pair = (planet1, planet2)
    if any(p in MALEFICS for p in pair):
        return "challenging" if all(p in MALEFICS for p in pair) else None
    if any(p in BENEFICS for p in pair):
        return "harmonious"
    return None

# ─────────────────────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SynastryAspect:
    planet1: str
    planet1_chart: int
    planet2: str
    planet2_chart: int
    definition: AspectDefinition
    orb: float                 # |separation - exact|, never above definition.max_orb_deg
    applying: bool
    strength: float            # 1 exact → 0 at the orb limit
    interpretation: str

    @property
    def aspect(self) -> str:
        return self.definition.key

    @property
    def nature(self) -> AspectNature:
        return self.definition.nature

    @property
    def scoring(self) -> Optional[str]:
        return scoring_class(self.planet1, self.planet2, self.definition)

    @property
    def is_harmonious(self) -> bool:
        return self.scoring == "harmonious"

    @property
    def is_challenging(self) -> bool:
        return self.scoring == "challenging"

    def involves(self, body: str) -> bool:
        return body in (self.planet1, self.planet2)

    def connects(self, pair: Iterable[str]) -> bool:
        """True for a cross-chart contact between the two distinct bodies of `pair`."""
        return {self.planet1, self.planet2} == set(pair) and self.planet1 != self.planet2

    def as_dict(self, locale: str = phrases.DEFAULT_LOCALE) -> Dict[str, Any]:
        return {
            "planet1": self.planet1,
            "planet1_chart": int(self.planet1_chart),
            "planet2": self.planet2,
            "planet2_chart": int(self.planet2_chart),
            **self.definition.as_dict(locale),
            "orb": float(self.orb),
            "applying": bool(self.applying),
            "strength": float(self.strength),
            "scoring": self.scoring,
            "interpretation": self.interpretation,
        }

# ─────────────────────────────────────────────────────────────────────────────
# PURE detection API (NO side effects)
# ─────────────────────────────────────────────────────────────────────────────

def _tracked(chart: Chart, bodies: Iterable[str]) -> Iterator[PlanetPosition]:
    for name in bodies:
        pos = chart.position(name)
        if pos is not None:  # absent bodies are skipped silently
            yield pos

def _candidates(
    chart_a: Chart,
    chart_b: Chart,
    bodies: Tuple[str, ...],
    catalog: Tuple[AspectDefinition, ...],
) -> Iterator[Tuple[PlanetPosition, PlanetPosition, AspectDefinition, float]]:
    for a in _tracked(chart_a, bodies):
        for b in _tracked(chart_b, bodies):
            for definition in catalog:
                orb = orb_deg(a.longitude, b.longitude, definition.angle_deg)
                if orb <= definition.max_orb_deg:
                    yield a, b, definition, orb

def classify_aspect(
    pos1: PlanetPosition,
    pos2: PlanetPosition,
    definition: AspectDefinition,
    orb: float,
    *,
    locale: str = phrases.DEFAULT_LOCALE,
    charts: Tuple[int, int] = (1, 2),
) -> SynastryAspect:
    """Annotate a candidate with strength, motion and interpretation."""
    return SynastryAspect(
        planet1=pos1.planet,
        planet1_chart=charts[0],
        planet2=pos2.planet,
        planet2_chart=charts[1],
        definition=definition,
        orb=orb,
        applying=is_applying(pos1, pos2, definition.angle_deg),
        strength=aspect_strength(orb, definition.max_orb_deg),
        interpretation=phrases.aspect_interpretation(pos1.planet, pos2.planet, definition.nature, locale),
    )

def detect_aspects(
    chart_a: Chart,
    chart_b: Chart,
    *,
    locale: str = phrases.DEFAULT_LOCALE,
    bodies: Tuple[str, ...] = TRACKED_BODIES,
    catalog: Tuple[AspectDefinition, ...] = ASPECT_CATALOG,
) -> Tuple[SynastryAspect, ...]:
    """
    Every (body in A, body in B, definition) triple within orb, classified.

    Order follows the enumeration (A bodies × B bodies × catalog). A pair may
    match more than one definition; nothing is de-duplicated.
    """
    return tuple(
        classify_aspect(a, b, definition, orb, locale=locale)
        for a, b, definition, orb in _candidates(chart_a, chart_b, bodies, catalog)
    )
