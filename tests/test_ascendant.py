# tests/test_ascendant.py
from __future__ import annotations

import math

import pytest
from hypothesis import given, strategies as st

from astrohouses.core.angles import shortest_distance
from astrohouses.core.ascendant import ascendant, midheaven, oriented_ascendant, rising_point

OBL = 23.4


@pytest.mark.parametrize("lst,expected", [
    (0.0, 90.0),     # 0° Aries culminating → 0° Cancer rising
    (90.0, 180.0),   # 0° Cancer culminating → 0° Libra rising
    (180.0, 270.0),
    (270.0, 0.0),
])
def test_equatorial_ascendant_at_cardinal_sidereal_times(lst, expected):
    assert shortest_distance(ascendant(lst, 0.0, OBL), expected) < 1e-9


def test_ascendant_matches_closed_form():
    lst, lat = 120.0, 40.0
    r = math.radians
    y = math.cos(r(lst))
    x = -(math.sin(r(lst)) * math.cos(r(OBL)) + math.tan(r(lat)) * math.sin(r(OBL)))
    expected = math.degrees(math.atan2(y, x)) % 360.0
    assert ascendant(lst, lat, OBL) == pytest.approx(expected, abs=1e-12)


def test_ascendant_normalizes_sidereal_time():
    assert ascendant(480.0, 35.0, OBL) == pytest.approx(ascendant(120.0, 35.0, OBL), abs=1e-9)
    assert ascendant(-240.0, 35.0, OBL) == pytest.approx(ascendant(120.0, 35.0, OBL), abs=1e-9)


@given(
    st.floats(min_value=0.0, max_value=360.0),
    st.floats(min_value=-90.0, max_value=90.0),
    st.floats(min_value=0.001, max_value=89.999),
)
def test_ascendant_total_even_at_poles(lst, lat, obl):
    a = ascendant(lst, lat, obl)
    assert not math.isnan(a)
    assert 0.0 <= a < 360.0


def test_midheaven_is_normalized_sidereal_time():
    assert midheaven(120.0) == 120.0
    assert midheaven(480.0) == pytest.approx(120.0)
    assert midheaven(-30.0) == pytest.approx(330.0)


def test_oriented_ascendant_flips_points_west_of_mc():
    assert oriented_ascendant(10.0, 100.0) == pytest.approx(190.0)
    assert oriented_ascendant(190.0, 100.0) == pytest.approx(190.0)


def test_rising_point_at_ramc_is_the_ascendant():
    assert rising_point(75.0, 51.5, OBL) == pytest.approx(ascendant(75.0, 51.5, OBL))
