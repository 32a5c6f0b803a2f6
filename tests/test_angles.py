# tests/test_angles.py
from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from synastry_app.core.constants import abs_sep_deg, canonical_body, orb_deg, wrap_deg

angles = st.floats(min_value=-1e4, max_value=1e4, allow_nan=False, allow_infinity=False)
targets = st.sampled_from([0.0, 30.0, 60.0, 90.0, 120.0, 150.0, 180.0])


# ─────────────────────────────────────────────────────────────────────────────
# Unit tests
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw, expected", [
    (0.0, 0.0),
    (360.0, 0.0),
    (370.0, 10.0),
    (-10.0, 350.0),
    (-720.0, 0.0),
    (725.5, 5.5),
])
def test_wrap_deg_examples(raw: float, expected: float) -> None:
    assert wrap_deg(raw) == pytest.approx(expected, abs=1e-9)

def test_wrap_deg_tiny_negative_stays_below_360() -> None:
    assert 0.0 <= wrap_deg(-1e-15) < 360.0

def test_separation_wraps_across_zero() -> None:
    assert abs_sep_deg(359.0, 1.0) == pytest.approx(2.0)
    assert abs_sep_deg(1.0, 359.0) == pytest.approx(2.0)
    assert abs_sep_deg(0.0, 180.0) == pytest.approx(180.0)

def test_orb_wraparound_conjunction() -> None:
    assert orb_deg(359.0, 1.0, 0.0) == pytest.approx(2.0)

def test_orb_against_target() -> None:
    assert orb_deg(10.0, 190.0, 180.0) == pytest.approx(0.0)
    assert orb_deg(0.0, 95.0, 90.0) == pytest.approx(5.0)
    assert orb_deg(0.0, 265.0, 90.0) == pytest.approx(5.0)

@pytest.mark.parametrize("raw, canon", [
    ("sun", "Sun"),
    ("  MOON ", "Moon"),
    ("North Node", "Rahu"),
    ("true node", "Rahu"),
    ("Mean Node", "Rahu"),
    ("south node", "Ketu"),
    ("Shukra", "Venus"),
    ("pluto", "Pluto"),
])
def test_canonical_body_aliases(raw: str, canon: str) -> None:
    assert canonical_body(raw) == canon

def test_canonical_body_unknown() -> None:
    assert canonical_body("Chiron") is None


# ─────────────────────────────────────────────────────────────────────────────
# Properties
# ─────────────────────────────────────────────────────────────────────────────

@given(x=angles)
def test_wrap_range(x: float) -> None:
    assert 0.0 <= wrap_deg(x) < 360.0

@given(a=angles, b=angles)
def test_separation_symmetric_and_bounded(a: float, b: float) -> None:
    d = abs_sep_deg(a, b)
    assert 0.0 <= d <= 180.0
    assert d == pytest.approx(abs_sep_deg(b, a), abs=1e-9)

@given(a=angles, b=angles, t=targets)
def test_orb_symmetric_and_bounded(a: float, b: float, t: float) -> None:
    o = orb_deg(a, b, t)
    assert 0.0 <= o <= 180.0
    assert o == pytest.approx(orb_deg(b, a, t), abs=1e-9)

@given(a=angles, k=st.integers(min_value=-5, max_value=5))
def test_separation_invariant_under_full_turns(a: float, k: int) -> None:
    assert abs_sep_deg(a, a + 360.0 * k) == pytest.approx(0.0, abs=1e-6)
