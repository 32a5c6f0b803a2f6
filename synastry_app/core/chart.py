# synastry_app/core/chart.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from synastry_app.core.constants import wrap_deg

__all__ = ["PlanetPosition", "Chart"]


@dataclass(frozen=True)
class PlanetPosition:
    planet: str
    longitude: float       # ecliptic longitude, degrees
    speed: float = 0.0     # degrees/day; negative = retrograde

    @property
    def retrograde(self) -> bool:
        return self.speed < 0.0

    def projected(self, days: float = 1.0) -> float:
        """Longitude after `days` of linear motion at the current speed."""
        return wrap_deg(self.longitude + self.speed * days)


@dataclass(frozen=True)
class Chart:
    """
    Read-only chart handed over by the chart-construction collaborator.

    - positions: one PlanetPosition per body, in the collaborator's order
    - ascendant: longitude of the ascendant (deg)
    - house_cusps: cusp[i] is the start of house i+1 (normally twelve values)
    """
    positions: Tuple[PlanetPosition, ...]
    ascendant: float
    house_cusps: Tuple[float, ...]
    label: Optional[str] = None
    _index: Dict[str, PlanetPosition] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # freeze whatever sequence types the caller handed in
        object.__setattr__(self, "positions", tuple(self.positions))
        object.__setattr__(self, "house_cusps", tuple(float(c) for c in self.house_cusps))
        object.__setattr__(self, "ascendant", float(self.ascendant))
        index: Dict[str, PlanetPosition] = {}
        for p in self.positions:
            index.setdefault(p.planet, p)
        object.__setattr__(self, "_index", index)

    @classmethod
    def build(
        cls,
        positions: Iterable[PlanetPosition],
        ascendant: float,
        house_cusps: Iterable[float],
        label: Optional[str] = None,
    ) -> "Chart":
        return cls(tuple(positions), ascendant, tuple(house_cusps), label)

    def position(self, planet: str) -> Optional[PlanetPosition]:
        """Position of `planet`, or None if the chart does not carry it."""
        return self._index.get(planet)
