# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the synastry suite.

- Registers Hypothesis profiles for local dev and CI.
- Adds a 'slow' marker.
- Chart builders shared by engine and endpoint tests.
- Flask test client with metrics credentials set.
"""

import os
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

import pytest
from hypothesis import settings, HealthCheck

from synastry_app.core.chart import Chart, PlanetPosition


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=200,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Chart builders
# ──────────────────────────────────────────────────────────────────────────────

EQUAL_CUSPS: Tuple[float, ...] = tuple(float(30 * i) for i in range(12))

BodySpec = Union[float, Tuple[float, float]]


def make_chart(
    bodies: Dict[str, BodySpec],
    *,
    ascendant: float = 0.0,
    cusps: Optional[Sequence[float]] = None,
    label: Optional[str] = None,
) -> Chart:
    """{'Sun': 10.0, 'Moon': (20.0, 13.1)} → Chart; tuples carry (longitude, speed)."""
    positions = []
    for name, spec in bodies.items():
        lon, speed = spec if isinstance(spec, tuple) else (spec, 0.0)
        positions.append(PlanetPosition(name, float(lon), float(speed)))
    return Chart.build(positions, ascendant, cusps if cusps is not None else EQUAL_CUSPS, label)


def chart_payload(
    bodies: Iterable[Tuple[str, float]],
    *,
    ascendant: float = 0.0,
    cusps: Optional[Sequence[float]] = None,
) -> Dict[str, object]:
    return {
        "ascendant": ascendant,
        "house_cusps": list(cusps if cusps is not None else EQUAL_CUSPS),
        "planets": [{"planet": n, "longitude": lon, "speed": 0.0} for n, lon in bodies],
    }


@pytest.fixture
def chart_factory():
    return make_chart


@pytest.fixture
def empty_chart() -> Chart:
    return make_chart({})


@pytest.fixture
def couple() -> Tuple[Chart, Chart]:
    """A pair with a mix of harmonious, challenging and minor contacts."""
    a = make_chart(
        {
            "Sun": (100.0, 0.98),
            "Moon": (45.0, 13.2),
            "Mercury": (110.0, 1.4),
            "Venus": (210.0, 1.2),
            "Mars": (10.0, 0.6),
            "Jupiter": (250.0, 0.1),
            "Saturn": (300.0, -0.03),
            "Rahu": (20.0, -0.05),
            "Ketu": (200.0, -0.05),
        },
        ascendant=15.0,
        cusps=[15 + 30 * i for i in range(12)],
    )
    b = make_chart(
        {
            "Sun": (220.0, 1.0),
            "Moon": (102.0, 12.8),
            "Mercury": (230.0, 1.1),
            "Venus": (12.0, 1.0),
            "Mars": (190.0, 0.7),
            "Jupiter": (165.0, 0.2),
            "Saturn": (40.0, 0.05),
            "Rahu": (300.0, -0.05),
            "Ketu": (120.0, -0.05),
            "Pluto": (100.0, 0.01),
        },
        ascendant=190.0,
        cusps=[(190 + 30 * i) % 360 for i in range(12)],
    )
    return a, b


# ──────────────────────────────────────────────────────────────────────────────
# Flask client
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("METRICS_USER", "metrics")
    monkeypatch.setenv("METRICS_PASS", "secret")
    monkeypatch.delenv("SYNASTRY_SAMPLES", raising=False)
    monkeypatch.delenv("SYNASTRY_LOCALE", raising=False)
    from synastry_app.main import create_app

    app = create_app()
    app.testing = True
    return app.test_client()
