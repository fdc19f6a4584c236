# tests/test_validators.py
from __future__ import annotations

import math

import pytest

from astrohouses.core.validators import (
    HouseSystemError,
    InvalidParameterError,
    InvalidSystemError,
    LatitudeLimitExceeded,
    ValidationError,
    check_latitude_limit,
    parse_house_system,
    validate_altitude,
    validate_cusps,
    validate_inputs,
)


# ───────────────────────── system labels ─────────────────────────

@pytest.mark.parametrize("label,canon", [
    ("placidus", "placidus"),
    ("Placidus", "placidus"),
    ("whole_sign", "whole_sign"),
    ("Whole Sign", "whole_sign"),
    ("whole-sign", "whole_sign"),
    ("whole", "whole_sign"),
    ("EQUAL", "equal"),
    ("Regiomontanus", "regiomontanus"),
    ("polich-page", "topocentric"),
])
def test_house_system_aliases(label, canon):
    assert parse_house_system(label) == canon


@pytest.mark.parametrize("label", ["tropical", "", "   ", None, 7])
def test_unknown_system_is_rejected(label):
    with pytest.raises(InvalidSystemError) as ei:
        parse_house_system(label)
    assert ei.value.errors()[0]["loc"] == ["system"]


def test_unknown_system_suggests_close_matches():
    with pytest.raises(InvalidSystemError) as ei:
        parse_house_system("placidas")
    assert "placidus" in ei.value.suggestions
    assert "Did you mean" in str(ei.value)


# ───────────────────────── numeric domains ─────────────────────────

def test_valid_inputs_are_coerced():
    out = validate_inputs("koch", 400, 40, 23.4)
    assert out == {"system": "koch", "lst": 400.0, "latitude": 40.0, "obliquity": 23.4}


@pytest.mark.parametrize("lst", [-1e9, 0.0, 1e9])
def test_lst_accepts_any_finite_magnitude(lst):
    assert validate_inputs("equal", lst, 0.0, 23.4)["lst"] == lst


@pytest.mark.parametrize("param,args", [
    ("lst", ("equal", math.nan, 0.0, 23.4)),
    ("lst", ("equal", math.inf, 0.0, 23.4)),
    ("lst", ("equal", "45", 0.0, 23.4)),
    ("lst", ("equal", True, 0.0, 23.4)),
    ("latitude", ("equal", 0.0, 120.0, 23.4)),
    ("latitude", ("equal", 0.0, -90.5, 23.4)),
    ("latitude", ("equal", 0.0, math.nan, 23.4)),
    ("latitude", ("equal", 0.0, None, 23.4)),
    ("obliquity", ("equal", 0.0, 0.0, 0.0)),
    ("obliquity", ("equal", 0.0, 0.0, 90.0)),
    ("obliquity", ("equal", 0.0, 0.0, -23.4)),
    ("obliquity", ("equal", 0.0, 0.0, math.inf)),
])
def test_out_of_domain_parameters_are_named(param, args):
    with pytest.raises(InvalidParameterError) as ei:
        validate_inputs(*args)
    err = ei.value
    assert err.param == param
    assert param in str(err)
    assert err.expected in str(err)
    assert err.errors()[0]["loc"] == [param]


def test_latitude_bounds_are_inclusive():
    assert validate_inputs("equal", 0.0, 90.0, 23.4)["latitude"] == 90.0
    assert validate_inputs("equal", 0.0, -90.0, 23.4)["latitude"] == -90.0


def test_system_is_checked_before_numbers():
    with pytest.raises(InvalidSystemError):
        validate_inputs("tropical", math.nan, 120.0, 0.0)


def test_altitude_domain():
    assert validate_altitude(0) == 0.0
    assert validate_altitude(8848.0) == 8848.0
    with pytest.raises(InvalidParameterError):
        validate_altitude(-1.0)
    with pytest.raises(InvalidParameterError):
        validate_altitude(math.nan)


def test_cusp_sequences_must_have_twelve_finite_entries():
    assert validate_cusps([0] * 12) == [0.0] * 12
    with pytest.raises(InvalidParameterError):
        validate_cusps([0.0] * 11)
    with pytest.raises(InvalidParameterError):
        validate_cusps([0.0] * 11 + [math.nan])
    with pytest.raises(InvalidParameterError):
        validate_cusps("0" * 12)


# ───────────────────────── taxonomy ─────────────────────────

def test_latitude_limit_is_distinct_from_invalid_parameter():
    assert not issubclass(LatitudeLimitExceeded, InvalidParameterError)
    assert not issubclass(LatitudeLimitExceeded, ValidationError)
    assert issubclass(LatitudeLimitExceeded, HouseSystemError)
    assert issubclass(InvalidSystemError, ValueError)
    assert issubclass(InvalidParameterError, ValueError)


def test_check_latitude_limit_only_applies_to_time_division_systems():
    check_latitude_limit("regiomontanus", 80.0)
    check_latitude_limit("equal", -89.0)
    check_latitude_limit("placidus", 60.0)
    with pytest.raises(LatitudeLimitExceeded) as ei:
        check_latitude_limit("koch", -60.0001)
    assert ei.value.latitude == pytest.approx(-60.0001)
    assert ei.value.errors()[0]["type"] == "value_error.latitude_limit"
