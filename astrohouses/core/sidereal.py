# astrohouses/core/sidereal.py
# -----------------------------------------------------------------------------
# Sidereal time and obliquity from Julian dates (ERFA / IAU 2006-2000A).
#
# Feeds the house engines when callers hold a moment rather than a ready LST:
#   UTC datetime → (JD_UT1, JD_TT)          (erfa.dtf2d → utctai → taitt, utcut1)
#   GAST                                    (erfa.gst06a)
#   LST = GAST + east longitude
#   true obliquity = mean (erfa.obl06) + nutation in obliquity (erfa.nut06a)
# -----------------------------------------------------------------------------

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Tuple

import erfa  # pyERFA

from astrohouses.core.angles import normalize
from astrohouses.core.validators import InvalidParameterError, parse_longitude

__all__ = [
    "julian_dates_from_utc",
    "gast_deg",
    "local_sidereal_time_deg",
    "mean_obliquity_deg",
    "true_obliquity_deg",
]

# IERS keeps |UT1 − UTC| below 0.9 s
_DUT1_LIMIT_S = 0.9


def _split_jd(jd: float) -> Tuple[float, float]:
    d = math.floor(jd)
    return d, jd - d


def julian_dates_from_utc(moment: datetime, dut1_seconds: float = 0.0) -> Tuple[float, float]:
    """
    (JD_UT1, JD_TT) for an aware datetime. Naive datetimes are taken as UTC.
    """
    if not math.isfinite(dut1_seconds) or abs(dut1_seconds) > _DUT1_LIMIT_S:
        raise InvalidParameterError("dut1", dut1_seconds, f"within ±{_DUT1_LIMIT_S} s")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    sec = utc.second + utc.microsecond / 1e6
    utc1, utc2 = erfa.dtf2d("UTC", utc.year, utc.month, utc.day, utc.hour, utc.minute, sec)
    tai1, tai2 = erfa.utctai(utc1, utc2)
    tt1, tt2 = erfa.taitt(tai1, tai2)
    ut11, ut12 = erfa.utcut1(utc1, utc2, float(dut1_seconds))
    return float(ut11) + float(ut12), float(tt1) + float(tt2)


def gast_deg(jd_ut1: float, jd_tt: float) -> float:
    """Greenwich apparent sidereal time in degrees, [0, 360)."""
    d1u, d2u = _split_jd(jd_ut1)
    d1t, d2t = _split_jd(jd_tt)
    return normalize(math.degrees(float(erfa.gst06a(d1u, d2u, d1t, d2t))))


def local_sidereal_time_deg(jd_ut1: float, jd_tt: float, longitude: float) -> float:
    """LST (= RAMC) in degrees for an east-positive geographic longitude."""
    return normalize(gast_deg(jd_ut1, jd_tt) + parse_longitude(longitude))


def mean_obliquity_deg(jd_tt: float) -> float:
    d1, d2 = _split_jd(jd_tt)
    return math.degrees(float(erfa.obl06(d1, d2)))


def true_obliquity_deg(jd_tt: float) -> float:
    d1, d2 = _split_jd(jd_tt)
    eps0 = float(erfa.obl06(d1, d2))
    _dpsi, deps = erfa.nut06a(d1, d2)
    return math.degrees(eps0 + float(deps))
