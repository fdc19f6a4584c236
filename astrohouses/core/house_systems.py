# astrohouses/core/house_systems.py
"""
House engines: one pure function per convention.

Every engine returns a CuspSet: 12 longitudes in [0, 360), index 0 = house 1,
ordered so that the cyclic forward gaps sum to 360. Cusps 4..9 are always the
exact opposites of cusps 10..3.

Families
- sign/ascendant based: whole_sign, equal (take the ascendant longitude)
- ecliptic trisection: porphyry (takes ascendant and midheaven longitudes)
- time division: placidus, topocentric, koch, morinus (±60° latitude guard)
- space division: regiomontanus, campanus (no guard)

Quadrant engines take ASC from the ascendant solver and MC = LST, then clamp
their intermediate cusps into the MC→ASC and ASC→IC quadrants. Near the poles
and at extreme obliquities that clamp is what keeps the CuspSet ordered; it is
never reported as an error.
"""

from __future__ import annotations

import logging
import math
import os
from typing import List, Optional, Tuple

from astrohouses.core.angles import (
    asind_clamped,
    atan2d,
    clamp_to_arc,
    cosd,
    forward_separation,
    normalize,
    shortest_distance,
    sind,
    tand,
)
from astrohouses.core.ascendant import ascendant, midheaven, oriented_ascendant, rising_point
from astrohouses.core.constants import DEFAULT_OBLIQUITY_DEG, EARTH_RADIUS_M, HOUSES_COUNT
from astrohouses.core.validators import check_latitude_limit, validate_altitude

logger = logging.getLogger(__name__)

# Fixed-point solver knobs (env-tunable for ops / testing)
PLACIDUS_MAX_ITERS = int(os.getenv("PLACIDUS_MAX_ITERS", "50"))
PLACIDUS_TOL_DEG = float(os.getenv("PLACIDUS_TOL_DEG", "1e-9"))

# --------------------------- common cusp helpers ---------------------------

def _blank() -> List[Optional[float]]:
    return [None] * HOUSES_COUNT

def _fill_opposites(cusps: List[Optional[float]]) -> List[float]:
    """Fill cusps 4..9 as the exact 180° opposites of cusps 10..3."""
    pairs = [(9, 3), (10, 4), (11, 5), (0, 6), (1, 7), (2, 8)]
    for a, b in pairs:
        cusps[b] = normalize(cusps[a] + 180.0)  # type: ignore[operator]
    return [float(normalize(c)) for c in cusps]  # type: ignore[arg-type]

def _quadrant_angles(lst: float, latitude: float, obliquity: float) -> Tuple[float, float]:
    mc = midheaven(lst)
    asc = oriented_ascendant(ascendant(lst, latitude, obliquity), mc)
    return asc, mc

def _assemble_quadrants(asc: float, mc: float, c11: float, c12: float, c2: float, c3: float) -> List[float]:
    """Clamp the four intermediate cusps into their quadrants, then fill opposites."""
    ic = normalize(mc + 180.0)
    cusps = _blank()
    cusps[0], cusps[9] = asc, mc
    cusps[10] = clamp_to_arc(c11, mc, asc)
    cusps[11] = clamp_to_arc(c12, cusps[10], asc)
    cusps[1] = clamp_to_arc(c2, asc, ic)
    cusps[2] = clamp_to_arc(c3, cusps[1], ic)
    return _fill_opposites(cusps)

def _lon_of_ra(ra: float, obliquity: float) -> float:
    """Ecliptic longitude of the ecliptic point with right ascension `ra`."""
    return atan2d(sind(ra), cosd(ra) * cosd(obliquity))

def _decl_of_lon(lon: float, obliquity: float) -> float:
    return asind_clamped(sind(obliquity) * sind(lon))

def _ascensional_difference(decl: float, latitude: float) -> float:
    # |tan φ · tan δ| > 1 means circumpolar; clamp to a right angle with the argument's sign
    return asind_clamped(tand(latitude) * tand(decl))

# --------------------------- sign / ascendant based ---------------------------

def whole_sign_houses(asc: float) -> List[float]:
    """House 1 starts at 0° of the ascendant's sign; +30° per house."""
    first = math.floor(normalize(asc) / 30.0) * 30.0
    return [normalize(first + 30.0 * i) for i in range(HOUSES_COUNT)]

def equal_houses(asc: float) -> List[float]:
    """House 1 is the ascendant itself; +30° per house."""
    return [normalize(asc + 30.0 * i) for i in range(HOUSES_COUNT)]

# --------------------------- ecliptic trisection ---------------------------

def porphyry_houses(asc: float, mc: float) -> List[float]:
    """Trisect the ecliptic arcs MC→ASC and ASC→IC; the other quadrants are their opposites."""
    A = normalize(asc)
    M = normalize(mc)
    I = normalize(M + 180.0)
    upper = forward_separation(M, A)
    lower = forward_separation(A, I)
    cusps = _blank()
    cusps[0], cusps[9] = A, M
    cusps[10] = normalize(M + upper / 3.0)
    cusps[11] = normalize(M + 2.0 * upper / 3.0)
    cusps[1] = normalize(A + lower / 3.0)
    cusps[2] = normalize(A + 2.0 * lower / 3.0)
    return _fill_opposites(cusps)

# --------------------------- time division ---------------------------

def _semi_arc_cusp(ramc: float, latitude: float, obliquity: float, frac: float,
                   *, nocturnal: bool, _diag: Optional[dict] = None, label: str = "") -> float:
    """
    Ecliptic point whose hour angle is `frac` of its own semi-arc.

    Diurnal (houses 11/12):   RA = RAMC + frac·(90 + AD)
    Nocturnal (houses 3/2):   RA = RAMC + 180 − frac·(90 − AD)

    AD depends on the declination of the point being sought, so the cusp is found by
    fixed-point iteration seeded from AD = 0.
    """
    def ra_for(ad: float) -> float:
        if nocturnal:
            return ramc + 180.0 - frac * (90.0 - ad)
        return ramc + frac * (90.0 + ad)

    lon = _lon_of_ra(ra_for(0.0), obliquity)
    step = 0.0
    it = 0
    while it < PLACIDUS_MAX_ITERS:
        it += 1
        ad = _ascensional_difference(_decl_of_lon(lon, obliquity), latitude)
        nxt = _lon_of_ra(ra_for(ad), obliquity)
        step = shortest_distance(nxt, lon)
        lon = nxt
        if step < PLACIDUS_TOL_DEG:
            break
    else:
        logger.debug("semi-arc iteration for %s stopped after %d steps (last step %.3e°)", label, it, step)

    if _diag is not None:
        _diag[label] = {"iters": it, "last_step_deg": step, "converged": step < PLACIDUS_TOL_DEG}
    return lon

def _placidus_core(lst: float, latitude: float, obliquity: float, *, _diag: Optional[dict] = None) -> List[float]:
    asc, mc = _quadrant_angles(lst, latitude, obliquity)
    ramc = normalize(lst)

    def cusp(frac: float, nocturnal: bool, label: str) -> float:
        return _semi_arc_cusp(ramc, latitude, obliquity, frac, nocturnal=nocturnal, _diag=_diag, label=label)

    return _assemble_quadrants(
        asc, mc,
        c11=cusp(1.0 / 3.0, False, "C11"),
        c12=cusp(2.0 / 3.0, False, "C12"),
        c2=cusp(2.0 / 3.0, True, "C2"),
        c3=cusp(1.0 / 3.0, True, "C3"),
    )

def placidus_houses(lst: float, latitude: float, obliquity: float = DEFAULT_OBLIQUITY_DEG,
                    *, _diag: Optional[dict] = None) -> List[float]:
    """Trisect each point's own diurnal/nocturnal semi-arc. Refused beyond ±60°."""
    check_latitude_limit("placidus", latitude)
    return _placidus_core(lst, latitude, obliquity, _diag=_diag)

def topocentric_latitude(latitude: float, altitude: float = 0.0) -> float:
    """
    Latitude pushed poleward by the observer's horizon dip.

    distance_to_horizon = sqrt(2·R·h + h²) on a spherical Earth of radius R;
    correction = atan2(distance_to_horizon, R) · cos φ. Zero altitude → no correction.
    """
    if altitude <= 0.0:
        return latitude
    horizon = math.sqrt(2.0 * EARTH_RADIUS_M * altitude + altitude * altitude)
    correction = math.degrees(math.atan2(horizon, EARTH_RADIUS_M)) * cosd(latitude)
    adjusted = latitude + math.copysign(correction, latitude)
    return max(-90.0, min(90.0, adjusted))

def topocentric_houses(lst: float, latitude: float, obliquity: float = DEFAULT_OBLIQUITY_DEG,
                       altitude: float = 0.0) -> List[float]:
    """Placidus on the altitude-adjusted latitude; the ±60° guard applies to the adjusted value."""
    alt = validate_altitude(altitude)
    phi = topocentric_latitude(latitude, alt)
    check_latitude_limit("topocentric", phi)
    return _placidus_core(lst, phi, obliquity)

def koch_houses(lst: float, latitude: float, obliquity: float = DEFAULT_OBLIQUITY_DEG) -> List[float]:
    """
    Trisect the MC's diurnal semi-arc in oblique ascension.

    OAMC = RAMC − J, J = ascensional difference of the MC; each intermediate cusp is the
    point rising (pole φ) at OAMC shifted by thirds of 90 + J.
    """
    check_latitude_limit("koch", latitude)
    asc, mc = _quadrant_angles(lst, latitude, obliquity)
    ramc = normalize(lst)
    decl_mc = _decl_of_lon(_lon_of_ra(ramc, obliquity), obliquity)
    J = _ascensional_difference(decl_mc, latitude)
    oamc = ramc - J
    dx = (90.0 + J) / 3.0
    h11 = oamc + dx - 90.0
    h12 = h11 + dx
    h1 = h12 + dx
    h2 = h1 + dx
    h3 = h2 + dx
    return _assemble_quadrants(
        asc, mc,
        c11=rising_point(h11, latitude, obliquity),
        c12=rising_point(h12, latitude, obliquity),
        c2=rising_point(h2, latitude, obliquity),
        c3=rising_point(h3, latitude, obliquity),
    )

def morinus_houses(lst: float, latitude: float, obliquity: float = DEFAULT_OBLIQUITY_DEG) -> List[float]:
    """Equator divided in 30° steps from RAMC, each step projected to the ecliptic. Refused beyond ±60°."""
    check_latitude_limit("morinus", latitude)
    asc, mc = _quadrant_angles(lst, latitude, obliquity)
    ramc = normalize(lst)

    def cusp(step: float) -> float:
        F = ramc + step
        return atan2d(sind(F) * cosd(obliquity), cosd(F))

    return _assemble_quadrants(asc, mc, c11=cusp(30.0), c12=cusp(60.0), c2=cusp(120.0), c3=cusp(150.0))

# --------------------------- space division ---------------------------

def regiomontanus_houses(lst: float, latitude: float, obliquity: float = DEFAULT_OBLIQUITY_DEG) -> List[float]:
    """
    Celestial equator divided in 30° steps from RAMC.

    House circle H (30, 60, 120, 150) has pole P = atan2(tan φ · sin H, 1); its cusp is the
    point rising under that pole at RAMC + H − 90.
    """
    asc, mc = _quadrant_angles(lst, latitude, obliquity)
    ramc = normalize(lst)

    def block(H: float) -> float:
        pole = math.degrees(math.atan2(tand(latitude) * sind(H), 1.0))
        return rising_point(ramc + H - 90.0, pole, obliquity)

    return _assemble_quadrants(asc, mc, c11=block(30.0), c12=block(60.0), c2=block(120.0), c3=block(150.0))

def campanus_houses(lst: float, latitude: float, obliquity: float = DEFAULT_OBLIQUITY_DEG) -> List[float]:
    """
    Prime vertical divided in 30° steps.

    House circle H meets the equator at RAMC + atan2(cos φ · sin H, cos H) with pole
    asin(sin φ · sin H); its cusp is the point rising there under that pole.
    """
    asc, mc = _quadrant_angles(lst, latitude, obliquity)
    ramc = normalize(lst)

    def block(H: float) -> float:
        offset = math.degrees(math.atan2(cosd(latitude) * sind(H), cosd(H)))
        pole = asind_clamped(sind(latitude) * sind(H))
        return rising_point(ramc + offset - 90.0, pole, obliquity)

    return _assemble_quadrants(asc, mc, c11=block(30.0), c12=block(60.0), c2=block(120.0), c3=block(150.0))


__all__ = [
    "whole_sign_houses",
    "equal_houses",
    "porphyry_houses",
    "placidus_houses",
    "topocentric_latitude",
    "topocentric_houses",
    "koch_houses",
    "morinus_houses",
    "regiomontanus_houses",
    "campanus_houses",
    "PLACIDUS_MAX_ITERS",
    "PLACIDUS_TOL_DEG",
]
