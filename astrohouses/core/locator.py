# astrohouses/core/locator.py
"""
Body → house placement over a CuspSet, plus per-house tallies and cusp diagnostics.

House i spans the half-open forward arc [cusp[i], cusp[i+1 mod 12]). Arcs that wrap past
0° are tested as `lon >= start or lon < end`. Houses are tried in order from house 1 and
the first match wins; a sub-epsilon miss at a boundary falls back to house 1.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping

from astrohouses.core.angles import forward_separation, normalize
from astrohouses.core.constants import DEGREES_PER_SIGN, HOUSES_COUNT, ZODIAC_SIGNS
from astrohouses.core.validators import InvalidParameterError, parse_ecliptic_longitude, validate_cusps


def _in_arc(lon: float, start: float, end: float) -> bool:
    if start < end:
        return start <= lon < end
    if start > end:
        return lon >= start or lon < end
    return False  # zero-width house

def _locate_normalized(lon: float, cusps: List[float]) -> int:
    for i in range(HOUSES_COUNT):
        if _in_arc(lon, cusps[i], cusps[(i + 1) % HOUSES_COUNT]):
            return i + 1
    return 1

def _prepare(cusps: Any) -> List[float]:
    return [normalize(c) for c in validate_cusps(cusps)]


# --------------------------- locator ---------------------------

def locate(longitude: float, cusps: List[float]) -> int:
    """House number (1..12) containing ecliptic `longitude`."""
    lon = normalize(parse_ecliptic_longitude(longitude))
    return _locate_normalized(lon, _prepare(cusps))

def assign_houses(positions: Mapping[str, float], cusps: List[float]) -> Dict[str, int]:
    """{name: house} for every body, in the mapping's iteration order."""
    ordered = _prepare(cusps)
    return {
        name: _locate_normalized(normalize(parse_ecliptic_longitude(lon, name)), ordered)
        for name, lon in positions.items()
    }

def planets_in_house(house: int, positions: Mapping[str, float], cusps: List[float]) -> List[str]:
    if isinstance(house, bool) or not isinstance(house, int) or not (1 <= house <= HOUSES_COUNT):
        raise InvalidParameterError("house", house, f"an integer between 1 and {HOUSES_COUNT}")
    return [name for name, h in assign_houses(positions, cusps).items() if h == house]


# --------------------------- aggregator ---------------------------

def aggregate(positions: Mapping[str, float], cusps: List[float]) -> List[int]:
    """
    Bodies per house, index 0 = house 1.

    Pure counting; dignity or aspect weighting belongs to the caller.
    """
    counts = [0] * HOUSES_COUNT
    for house in assign_houses(positions, cusps).values():
        counts[house - 1] += 1
    return counts


# --------------------------- cusp diagnostics ---------------------------

def sign_index(lon_deg: float) -> int:
    """0..11 (0=Aries,...,11=Pisces)."""
    return int(math.floor(normalize(lon_deg) / DEGREES_PER_SIGN)) % 12

def house_spans(cusps: List[float]) -> List[float]:
    """Forward width of each house; sums to 360 for any ordered CuspSet."""
    c = _prepare(cusps)
    return [forward_separation(c[i], c[(i + 1) % HOUSES_COUNT]) for i in range(HOUSES_COUNT)]

def analyze_interceptions(cusps: List[float]) -> Dict[str, Any]:
    """
    Intercepted signs (a whole sign inside one house, holding no cusp) and duplicated
    signs (holding two or more cusps).
    """
    c = _prepare(cusps)
    counts = [0] * 12
    for x in c:
        counts[sign_index(x)] += 1

    intercepted: List[Dict[str, Any]] = []
    for s in range(12):
        if counts[s] != 0:
            continue
        edge = 1e-8  # stay clear of the sign boundaries themselves
        first = _locate_normalized(normalize(s * DEGREES_PER_SIGN + edge), c)
        last = _locate_normalized(normalize((s + 1) * DEGREES_PER_SIGN - edge), c)
        if first == last:
            intercepted.append({"sign": ZODIAC_SIGNS[s], "house": first})

    return {
        "intercepted_signs": intercepted,
        "duplicated_signs": [ZODIAC_SIGNS[i] for i, n in enumerate(counts) if n >= 2],
        "cusp_signs": [ZODIAC_SIGNS[sign_index(x)] for x in c],
    }

def analyze_house_sizes(cusps: List[float]) -> Dict[str, Any]:
    spans = house_spans(cusps)
    mean = sum(spans) / HOUSES_COUNT
    std = math.sqrt(sum((s - mean) ** 2 for s in spans) / HOUSES_COUNT)
    dev = [abs(s - DEGREES_PER_SIGN) for s in spans]
    return {
        "spans_deg": spans,
        "mean_deg": mean,
        "std_deg": std,
        "min_deg": min(spans),
        "max_deg": max(spans),
        "total_abs_deviation_deg": sum(dev),
    }


__all__ = [
    "locate",
    "assign_houses",
    "planets_in_house",
    "aggregate",
    "sign_index",
    "house_spans",
    "analyze_interceptions",
    "analyze_house_sizes",
]
