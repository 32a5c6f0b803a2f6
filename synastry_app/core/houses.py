# synastry_app/core/houses.py
"""
House overlays: where one chart's planets land in the other chart's houses.

  • find_house        longitude + 12 cusps → house number (1..12)
  • life_area         house number → static life-area label
  • compute_overlays  every position of a source chart, placed in a target chart

Intervals are forward-wrap: house i+1 spans [cusp[i], cusp[(i+1) % 12]). When
cusp[i] > cusp[i+1] the interval crosses 0°/360° and containment becomes an
"or" test. Cusp data that cannot place a longitude (fewer than twelve cusps,
duplicated cusps) yields house 1 instead of an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from synastry_app.core.chart import Chart
from synastry_app.core.constants import (
    FALLBACK_HOUSE,
    HOUSE_COUNT,
    LIFE_AREAS,
    abs_sep_deg,
    wrap_deg,
)
from synastry_app.core import phrases

__all__ = ["HouseOverlay", "find_house", "life_area", "compute_overlays"]


@dataclass(frozen=True)
class HouseOverlay:
    planet: str
    source_chart: int
    house: int                                  # house of the *other* chart
    life_area: str
    interpretation: str
    cusp_distance_deg: Optional[float] = None   # distance to the nearest target cusp

    def as_dict(self) -> Dict[str, Any]:
        return {
            "planet": self.planet,
            "source_chart": int(self.source_chart),
            "house": int(self.house),
            "life_area": self.life_area,
            "interpretation": self.interpretation,
            "cusp_distance_deg": (
                float(self.cusp_distance_deg) if self.cusp_distance_deg is not None else None
            ),
        }


def find_house(longitude: float, cusps_deg: Sequence[float]) -> int:
    """Find 1..12 using forward-wrap intervals [cusp[i], cusp[i+1]); falls back to 1."""
    if len(cusps_deg) < HOUSE_COUNT:
        return FALLBACK_HOUSE
    cusp = [wrap_deg(c) for c in cusps_deg[:HOUSE_COUNT]]
    lon = wrap_deg(longitude)
    for i in range(HOUSE_COUNT):
        a, b = cusp[i], cusp[(i + 1) % HOUSE_COUNT]
        if a > b:
            # wraps over 360
            if lon >= a or lon < b:
                return i + 1
        elif a <= lon < b:
            return i + 1
    return FALLBACK_HOUSE


def life_area(house: int) -> str:
    return LIFE_AREAS.get(int(house), "General")


def _nearest_cusp(longitude: float, cusps_deg: Sequence[float]) -> Optional[float]:
    if not cusps_deg:
        return None
    return min(abs_sep_deg(longitude, c) for c in cusps_deg)


def compute_overlays(
    source: Chart,
    target: Chart,
    source_chart: int,
    *,
    locale: str = phrases.DEFAULT_LOCALE,
) -> Tuple[HouseOverlay, ...]:
    """One overlay per source position (source order), placed in target's houses."""
    out = []
    for pos in source.positions:
        house = find_house(pos.longitude, target.house_cusps)
        area = life_area(house)
        out.append(HouseOverlay(
            planet=pos.planet,
            source_chart=source_chart,
            house=house,
            life_area=area,
            interpretation=phrases.overlay_interpretation(pos.planet, house, area, source_chart, locale),
            cusp_distance_deg=_nearest_cusp(pos.longitude, target.house_cusps),
        ))
    return tuple(out)
