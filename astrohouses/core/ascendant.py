# astrohouses/core/ascendant.py
"""
Ascendant / midheaven solver.

The ascendant is the ecliptic point on the eastern horizon. With sidereal time
θ (the RAMC), latitude φ and obliquity ε:

    ASC = atan2( cos θ, -(sin θ · cos ε + tan φ · sin ε) )

The same relation gives the ecliptic point rising at any oblique ascension under
any pole, which is how Koch/Regiomontanus/Campanus place their intermediate cusps
(see `rising_point`).
"""

from __future__ import annotations

from astrohouses.core.angles import atan2d, cosd, normalize, signed_difference, sind, tand


def rising_point(ramc: float, pole: float, obliquity: float) -> float:
    """Ecliptic longitude on the eastern horizon of pole `pole` when the meridian RA is `ramc`."""
    y = cosd(ramc)
    x = -(sind(ramc) * cosd(obliquity) + tand(pole) * sind(obliquity))
    return atan2d(y, x)


def ascendant(lst: float, latitude: float, obliquity: float) -> float:
    """
    Ecliptic longitude of the ascendant, normalized to [0, 360).

    Never raises: at |latitude| → 90 the result is whatever the two-argument
    arctangent yields for the degenerate ratio.
    """
    return rising_point(normalize(lst), latitude, obliquity)


def midheaven(lst: float) -> float:
    """The midheaven is taken equal to local sidereal time."""
    return normalize(lst)


def oriented_ascendant(asc: float, mc: float) -> float:
    """
    Flip `asc` by 180° when it falls west of the MC.

    Beyond the arctic circle the raw formula can return the setting point; quadrant
    systems need the MC→ASC quadrant to span at most 180°.
    """
    if signed_difference(asc, mc) < 0.0:
        return normalize(asc + 180.0)
    return normalize(asc)


__all__ = ["ascendant", "midheaven", "oriented_ascendant", "rising_point"]
