# synastry_app/core/phrases.py
"""
Phrasebook for human-readable synastry text.

Every function takes the locale explicitly; nothing here reads ambient state.
Lookups fall back to English for unknown locales and for keys a locale does
not translate.
"""

from __future__ import annotations

from typing import Dict, Tuple

__all__ = [
    "DEFAULT_LOCALE",
    "SUPPORTED_LOCALES",
    "normalize_locale",
    "planet_name",
    "aspect_name",
    "house_ordinal",
    "aspect_interpretation",
    "ascendant_interpretation",
    "overlay_interpretation",
    "category_text",
    "strong_aspect_finding",
    "house_activation_finding",
]

DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES: Tuple[str, ...] = ("en", "ne")

_PLANET_NAMES: Dict[str, Dict[str, str]] = {
    "en": {},  # canonical names are already English
    "ne": {
        "Sun": "सूर्य",
        "Moon": "चन्द्र",
        "Mercury": "बुध",
        "Venus": "शुक्र",
        "Mars": "मंगल",
        "Jupiter": "बृहस्पति",
        "Saturn": "शनि",
        "Rahu": "राहु",
        "Ketu": "केतु",
        "Uranus": "युरेनस",
        "Neptune": "नेप्च्युन",
        "Pluto": "प्लुटो",
        "ASC": "लग्न",
    },
}

_ASPECT_NAMES: Dict[str, Dict[str, str]] = {
    "en": {
        "conjunction": "Conjunction",
        "opposition": "Opposition",
        "trine": "Trine",
        "square": "Square",
        "sextile": "Sextile",
        "quincunx": "Quincunx",
        "semisextile": "Semi-Sextile",
    },
    "ne": {
        "conjunction": "युति",
    },
}

_INTERPRETATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "harmonious": "{p1} and {p2} work together harmoniously, creating mutual understanding and support.",
        "challenging": "{p1} and {p2} create tension that requires conscious effort to integrate.",
        "major": "{p1} and {p2} are closely connected, amplifying each other's energies.",
        "minor": "{p1} and {p2} have a subtle connection that adds nuance to the relationship.",
        "ascendant": "{planet} conjunct Person {chart}'s Ascendant creates a strong personal connection.",
        "overlay": "Person {chart}'s {planet} falls in the {house} house, influencing {area}.",
        "strong_aspect": "Strong {aspect} between {p1} and {p2}",
        "house_activation": "{planet} activates the {house} house of {area}",
    },
}

# key → (name, description)
_CATEGORIES: Dict[str, Dict[str, Tuple[str, str]]] = {
    "en": {
        "emotional_bond": ("Emotional Bond", "Emotional understanding and nurturing"),
        "romance": ("Romance & Attraction", "Physical attraction and passion"),
        "communication": ("Communication", "Mental connection and dialogue"),
        "stability": ("Long-term Stability", "Commitment and endurance"),
        "growth": ("Growth & Evolution", "Mutual expansion and learning"),
    },
}


def normalize_locale(locale: str | None) -> str:
    """'NE', 'ne-NP', None → a supported locale code ('en' when unknown)."""
    code = str(locale or "").strip().lower().replace("_", "-").split("-")[0]
    return code if code in SUPPORTED_LOCALES else DEFAULT_LOCALE


def _lookup(table: Dict[str, Dict[str, str]], key: str, locale: str) -> str | None:
    loc = normalize_locale(locale)
    hit = table.get(loc, {}).get(key)
    if hit is None and loc != DEFAULT_LOCALE:
        hit = table.get(DEFAULT_LOCALE, {}).get(key)
    return hit


def planet_name(planet: str, locale: str) -> str:
    return _lookup(_PLANET_NAMES, planet, locale) or planet


def aspect_name(key: str, locale: str) -> str:
    return _lookup(_ASPECT_NAMES, key, locale) or key.title()


def house_ordinal(house: int) -> str:
    """1 → '1st', 2 → '2nd', 11 → '11th'."""
    if 10 <= house % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(house % 10, "th")
    return f"{house}{suffix}"


def _template(key: str, locale: str) -> str:
    tpl = _lookup(_INTERPRETATIONS, key, locale)
    if tpl is None:
        raise KeyError(f"no phrase template '{key}'")
    return tpl


def aspect_interpretation(planet1: str, planet2: str, nature: str, locale: str) -> str:
    return _template(nature, locale).format(
        p1=planet_name(planet1, locale),
        p2=planet_name(planet2, locale),
    )


def ascendant_interpretation(planet: str, chart_num: int, locale: str) -> str:
    return _template("ascendant", locale).format(planet=planet_name(planet, locale), chart=chart_num)


def overlay_interpretation(planet: str, house: int, life_area: str, chart_num: int, locale: str) -> str:
    return _template("overlay", locale).format(
        chart=chart_num,
        planet=planet_name(planet, locale),
        house=house_ordinal(house),
        area=life_area.lower(),
    )


def category_text(key: str, locale: str) -> Tuple[str, str]:
    """(name, description) for a compatibility category key."""
    loc = normalize_locale(locale)
    hit = _CATEGORIES.get(loc, {}).get(key) or _CATEGORIES[DEFAULT_LOCALE].get(key)
    if hit is None:
        raise KeyError(f"unknown compatibility category '{key}'")
    return hit


def strong_aspect_finding(aspect_key: str, planet1: str, planet2: str, locale: str) -> str:
    return _template("strong_aspect", locale).format(
        aspect=aspect_name(aspect_key, locale),
        p1=planet_name(planet1, locale),
        p2=planet_name(planet2, locale),
    )


def house_activation_finding(planet: str, house: int, life_area: str, locale: str) -> str:
    return _template("house_activation", locale).format(
        planet=planet_name(planet, locale),
        house=house_ordinal(house),
        area=life_area.lower(),
    )
