# synastry_app/core/scoring.py
"""
Compatibility scoring (HEURISTIC ONLY).

Five categories, each built from a filtered slice of the classified aspect list
and capped at CATEGORY_MAX_SCORE:

  emotional_bond   Sun↔Moon contacts, harmonious or conjunct     Σ strength × 10
  romance          Venus↔Mars contacts, harmonious or conjunct   Σ strength × 10
  communication    harmonious contacts involving Mercury         Σ strength × 5
  stability        harmonious contacts involving Saturn          Σ strength × 5
  growth           harmonious contacts involving Jupiter         Σ strength × 5

Overall percentage = 100 · H / (H + C + ε), clamped to [0, 100], where H and C
are the summed strengths of harmonious and challenging aspects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Tuple

from synastry_app.core.aspects import SynastryAspect
from synastry_app.core.constants import (
    ATTRACTION_PAIR,
    CATEGORY_MAX_SCORE,
    JUPITER,
    LUMINARY_PAIR,
    MERCURY,
    OVERALL_EPSILON,
    PAIR_WEIGHT,
    SATURN,
    SINGLE_BODY_WEIGHT,
)
from synastry_app.core import phrases

__all__ = [
    "CompatibilityCategory",
    "CATEGORY_KEYS",
    "category_score",
    "compute_categories",
    "overall_compatibility",
]


@dataclass(frozen=True)
class CompatibilityCategory:
    key: str
    name: str
    score: float
    max_score: float
    description: str
    icon: str

    @property
    def percent(self) -> float:
        return 100.0 * self.score / self.max_score if self.max_score > 0 else 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "score": float(self.score),
            "max_score": float(self.max_score),
            "percent": float(self.percent),
            "description": self.description,
            "icon": self.icon,
        }


def _pair_contact(a: SynastryAspect) -> bool:
    return a.nature == "harmonious" or a.aspect == "conjunction"


# key, icon, weight, selector; display order
_CATEGORY_RULES: Tuple[Tuple[str, str, float, Callable[[SynastryAspect], bool]], ...] = (
    ("emotional_bond", "favorite", PAIR_WEIGHT,
     lambda a: a.connects(LUMINARY_PAIR) and _pair_contact(a)),
    ("romance", "favorite_border", PAIR_WEIGHT,
     lambda a: a.connects(ATTRACTION_PAIR) and _pair_contact(a)),
    ("communication", "chat_bubble", SINGLE_BODY_WEIGHT,
     lambda a: a.is_harmonious and a.involves(MERCURY)),
    ("stability", "shield", SINGLE_BODY_WEIGHT,
     lambda a: a.is_harmonious and a.involves(SATURN)),
    ("growth", "trending_up", SINGLE_BODY_WEIGHT,
     lambda a: a.is_harmonious and a.involves(JUPITER)),
)

CATEGORY_KEYS: Tuple[str, ...] = tuple(rule[0] for rule in _CATEGORY_RULES)


def category_score(aspects: Iterable[SynastryAspect], weight: float) -> float:
    """Σ strength × weight, capped at CATEGORY_MAX_SCORE."""
    total = sum(a.strength * weight for a in aspects)
    return max(0.0, min(CATEGORY_MAX_SCORE, total))


def compute_categories(
    aspects: Iterable[SynastryAspect],
    *,
    locale: str = phrases.DEFAULT_LOCALE,
) -> Tuple[CompatibilityCategory, ...]:
    """The five categories, always in CATEGORY_KEYS order."""
    pool = tuple(aspects)
    out = []
    for key, icon, weight, selector in _CATEGORY_RULES:
        name, description = phrases.category_text(key, locale)
        out.append(CompatibilityCategory(
            key=key,
            name=name,
            score=category_score((a for a in pool if selector(a)), weight),
            max_score=CATEGORY_MAX_SCORE,
            description=description,
            icon=icon,
        ))
    return tuple(out)


def overall_compatibility(
    harmonious: Iterable[SynastryAspect],
    challenging: Iterable[SynastryAspect],
) -> float:
    """100 · H / (H + C + ε); 0.0 when neither kind is present."""
    h = sum(a.strength for a in harmonious)
    c = sum(a.strength for a in challenging)
    pct = 100.0 * h / (h + c + OVERALL_EPSILON)
    return max(0.0, min(100.0, pct))
