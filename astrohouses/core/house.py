# astrohouses/core/house.py
from __future__ import annotations

"""
House calculation façade.

What this module guarantees:
- Validation before computation: system label, lst, latitude, obliquity, altitude,
  in that order. No partial result is ever returned.
- Slug-based normalization of user-facing house-system names ("Whole Sign" → whole_sign).
- A uniform result: 12 houses with sign/degree breakdown plus the four angular points
  as references into those houses.
- A transparent polar-latitude policy for the time-division systems:
    "reject"   → LatitudeLimitExceeded propagates to the caller
    "fallback" → walk a deterministic chain (env/config augmentable) and report warnings

Back-end:
    astrohouses.core.house_systems (one pure function per convention)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Final, List, Optional, Tuple
import json
import logging
import math
import os

from astrohouses.core import house_systems as engines
from astrohouses.core import locator
from astrohouses.core.ascendant import ascendant, midheaven, oriented_ascendant
from astrohouses.core.constants import (
    DEGREES_PER_SIGN,
    HOUSE_NAMES,
    HOUSES_COUNT,
    SUPPORTED_HOUSE_SYSTEMS,
    ZODIAC_SIGNS,
)
from astrohouses.core.sidereal import julian_dates_from_utc, local_sidereal_time_deg, true_obliquity_deg
from astrohouses.core.validators import (
    HouseCalculationError,
    InvalidParameterError,
    InvalidSystemError,
    LatitudeLimitExceeded,
    ValidationError,
    parse_house_system,
    validate_altitude,
    validate_inputs,
)
from astrohouses.utils.config import POLAR_POLICIES, HouseSettings, load_config
from astrohouses.utils.metrics import record_calculation, record_fallback, record_rejection
from astrohouses.version import VERSION

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Environment / policy knobs
# ──────────────────────────────────────────────────────────────────────────────
POLAR_POLICY: Final[str] = os.getenv("ASTRO_POLAR_POLICY", "fallback").strip().lower()

# Optional JSON for custom fallback chains
#   ASTRO_HOUSES_FALLBACK_JSON='{"placidus":["regiomontanus","porphyry","equal"]}'
_FALLBACK_JSON: Optional[str] = os.getenv("ASTRO_HOUSES_FALLBACK_JSON")

# Boot warnings (non-fatal) surfaced on every policy result
_BOOT_WARNINGS: List[str] = []

_DEFAULT_FALLBACK_CHAINS: Final[Dict[str, List[str]]] = {
    "placidus":    ["porphyry", "equal", "whole_sign"],
    "koch":        ["porphyry", "equal", "whole_sign"],
    "morinus":     ["porphyry", "equal", "whole_sign"],
    # the raw latitude may still be inside the Placidus domain
    "topocentric": ["placidus", "porphyry", "equal", "whole_sign"],
}

# Systems that never hit a latitude limit; always appended to a chain
_ROBUST_TAIL: Final[Tuple[str, ...]] = ("equal", "whole_sign")


def _env_fallback_chains() -> Dict[str, List[str]]:
    if not _FALLBACK_JSON:
        return {}
    try:
        mapping = json.loads(_FALLBACK_JSON)
        return {
            parse_house_system(k): [parse_house_system(x) for x in v]
            for k, v in mapping.items()
            if isinstance(v, list)
        }
    except (ValueError, AttributeError, TypeError) as e:
        msg = f"ASTRO_HOUSES_FALLBACK_JSON ignored: {type(e).__name__}: {e}"
        logger.warning(msg)
        _BOOT_WARNINGS.append(msg)
        return {}


_ENV_FALLBACK_CHAINS: Final[Dict[str, List[str]]] = _env_fallback_chains()


def _dedupe(seq: List[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for s in seq:
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


def canonicalize_system(name: str) -> str:
    """External helper: map user-facing input → canonical system label."""
    return parse_house_system(name)


def list_supported_house_systems() -> List[str]:
    return list(SUPPORTED_HOUSE_SYSTEMS)


# ──────────────────────────────────────────────────────────────────────────────
# Result shape
# ──────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class HouseCusp:
    house: int
    name: str
    cusp: float
    sign: int
    sign_name: str
    degree: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "house": self.house,
            "name": self.name,
            "cusp": self.cusp,
            "sign": self.sign,
            "sign_name": self.sign_name,
            "degree": self.degree,
        }


@dataclass(frozen=True)
class HouseResult:
    system: str
    houses: Tuple[HouseCusp, ...]
    input: Dict[str, float]
    calculated_at: str
    warnings: List[str] = field(default_factory=list)

    @property
    def cusps(self) -> List[float]:
        return [h.cusp for h in self.houses]

    @property
    def ascendant(self) -> HouseCusp:
        return self.houses[0]

    @property
    def midheaven(self) -> HouseCusp:
        return self.houses[9]

    @property
    def descendant(self) -> HouseCusp:
        return self.houses[6]

    @property
    def nadir(self) -> HouseCusp:
        return self.houses[3]

    def angular_houses(self) -> Dict[str, HouseCusp]:
        return {
            "ascendant": self.ascendant,
            "midheaven": self.midheaven,
            "descendant": self.descendant,
            "nadir": self.nadir,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "system": self.system,
            "houses": [h.to_dict() for h in self.houses],
            "angular_houses": {k: v.to_dict() for k, v in self.angular_houses().items()},
            "input": dict(self.input),
            "calculated_at": self.calculated_at,
            "warnings": list(self.warnings),
            "engine_version": VERSION,
        }


def format_houses(cusps: List[float]) -> Tuple[HouseCusp, ...]:
    out: List[HouseCusp] = []
    for i, c in enumerate(cusps):
        sign = locator.sign_index(c)
        out.append(HouseCusp(
            house=i + 1,
            name=HOUSE_NAMES[i],
            cusp=c,
            sign=sign,
            sign_name=ZODIAC_SIGNS[sign],
            degree=math.fmod(c, DEGREES_PER_SIGN),
        ))
    return tuple(out)


# ──────────────────────────────────────────────────────────────────────────────
# Calculator
# ──────────────────────────────────────────────────────────────────────────────
class HouseCalculator:
    """
    Validate → dispatch → format. Stateless apart from its settings, so one
    instance can serve any number of threads.
    """

    def __init__(self, settings: Optional[HouseSettings] = None):
        self.settings = settings or HouseSettings(polar_policy=POLAR_POLICY)

    @classmethod
    def from_config(cls, path: str) -> "HouseCalculator":
        return cls(HouseSettings.from_config(load_config(path)))

    # ---- dispatch
    @staticmethod
    def _compute_cusps(system: str, lst: float, latitude: float, obliquity: float, altitude: float) -> List[float]:
        if system in ("whole_sign", "equal", "porphyry"):
            raw_asc = ascendant(lst, latitude, obliquity)
            if system == "whole_sign":
                return engines.whole_sign_houses(raw_asc)
            if system == "equal":
                return engines.equal_houses(raw_asc)
            mc = midheaven(lst)
            return engines.porphyry_houses(oriented_ascendant(raw_asc, mc), mc)
        if system == "placidus":
            return engines.placidus_houses(lst, latitude, obliquity)
        if system == "koch":
            return engines.koch_houses(lst, latitude, obliquity)
        if system == "regiomontanus":
            return engines.regiomontanus_houses(lst, latitude, obliquity)
        if system == "campanus":
            return engines.campanus_houses(lst, latitude, obliquity)
        if system == "morinus":
            return engines.morinus_houses(lst, latitude, obliquity)
        if system == "topocentric":
            return engines.topocentric_houses(lst, latitude, obliquity, altitude)
        raise InvalidSystemError(system)

    def calculate_houses(
        self,
        system: Optional[str],
        lst: float,
        latitude: float,
        obliquity: Optional[float] = None,
        altitude: Optional[float] = None,
    ) -> HouseResult:
        """
        Compute one house chart.

        Raises:
          InvalidSystemError: unknown system label
          InvalidParameterError: lst/latitude/obliquity/altitude out of domain
          LatitudeLimitExceeded: placidus/koch/morinus/topocentric beyond ±60°
        """
        try:
            args = validate_inputs(
                system if system is not None else self.settings.default_system,
                lst,
                latitude,
                obliquity if obliquity is not None else self.settings.obliquity_deg,
            )
            alt = validate_altitude(altitude if altitude is not None else 0.0)
        except InvalidSystemError:
            record_rejection("invalid_system")
            raise
        except ValidationError:
            record_rejection("invalid_parameter")
            raise

        sys_name = args["system"]
        try:
            cusps = self._compute_cusps(sys_name, args["lst"], args["latitude"], args["obliquity"], alt)
        except LatitudeLimitExceeded as e:
            record_rejection("latitude_limit")
            logger.warning("house system %s refused at latitude %.4f (limit ±%g)", e.system, e.latitude, e.limit)
            raise

        if len(cusps) != HOUSES_COUNT or not all(math.isfinite(c) for c in cusps):
            raise HouseCalculationError(sys_name, f"engine returned {cusps!r}")

        warnings: List[str] = []
        if alt > 0.0 and sys_name != "topocentric":
            warnings.append(f"altitude is only used by topocentric houses; ignored for {sys_name}")

        record_calculation(sys_name)
        logger.debug("%s houses lst=%.6f lat=%.6f obl=%.6f alt=%.1f → %s",
                     sys_name, args["lst"], args["latitude"], args["obliquity"], alt, cusps)
        return HouseResult(
            system=sys_name,
            houses=format_houses(cusps),
            input={
                "lst": args["lst"],
                "latitude": args["latitude"],
                "obliquity": args["obliquity"],
                "altitude": alt,
            },
            calculated_at=datetime.now(timezone.utc).isoformat(),
            warnings=warnings,
        )

    # ---- fallbacks
    def fallback_chain(self, requested: str) -> List[str]:
        """requested → config chain → env chain → default chain → robust tail."""
        requested = parse_house_system(requested)
        configured = [parse_house_system(s) for s in self.settings.fallback_chains.get(requested, [])]
        chain = (
            [requested]
            + configured
            + _ENV_FALLBACK_CHAINS.get(requested, [])
            + _DEFAULT_FALLBACK_CHAINS.get(requested, [])
            + list(_ROBUST_TAIL)
        )
        return _dedupe(chain)

    # ---- placement
    def locate(self, longitude: float, cusps: List[float]) -> int:
        return locator.locate(longitude, cusps)

    def aggregate(self, positions: Dict[str, float], cusps: List[float]) -> List[int]:
        return locator.aggregate(positions, cusps)

    def planets_in_house(self, house: int, positions: Dict[str, float], cusps: List[float]) -> List[str]:
        return locator.planets_in_house(house, positions, cusps)


_DEFAULT_CALCULATOR: Optional[HouseCalculator] = None


def _default_calculator() -> HouseCalculator:
    global _DEFAULT_CALCULATOR
    if _DEFAULT_CALCULATOR is None:
        _DEFAULT_CALCULATOR = HouseCalculator()
    return _DEFAULT_CALCULATOR


def calculate_houses(
    system: Optional[str],
    lst: float,
    latitude: float,
    obliquity: Optional[float] = None,
    altitude: Optional[float] = None,
) -> HouseResult:
    return _default_calculator().calculate_houses(system, lst, latitude, obliquity, altitude)


# ──────────────────────────────────────────────────────────────────────────────
# Policy façade
# ──────────────────────────────────────────────────────────────────────────────
def compute_houses_with_policy(
    system: Optional[str],
    lst: float,
    latitude: float,
    *,
    obliquity: Optional[float] = None,
    altitude: Optional[float] = None,
    polar_policy: Optional[str] = None,
    calculator: Optional[HouseCalculator] = None,
) -> Dict[str, Any]:
    """
    Compute houses under the polar policy.

    Returns {"requested_system", "system", "fallback_used", "result", "warnings"}.
    Invalid inputs raise immediately; only LatitudeLimitExceeded triggers a fallback.
    """
    calc = calculator or _default_calculator()
    policy = (polar_policy or calc.settings.polar_policy).strip().lower()
    if policy not in POLAR_POLICIES:
        raise InvalidParameterError("polar_policy", polar_policy, f"one of {', '.join(POLAR_POLICIES)}")

    try:
        requested = parse_house_system(system if system is not None else calc.settings.default_system)
    except InvalidSystemError:
        record_rejection("invalid_system")
        raise

    warnings: List[str] = list(_BOOT_WARNINGS)
    last_err: Optional[LatitudeLimitExceeded] = None

    for candidate in calc.fallback_chain(requested):
        try:
            result = calc.calculate_houses(candidate, lst, latitude, obliquity, altitude)
        except LatitudeLimitExceeded as e:
            if policy == "reject":
                raise
            last_err = e
            warnings.append(
                f"'{candidate}' is undefined at latitude {e.latitude:.2f}° (beyond ±{e.limit:g}°). Trying fallbacks."
            )
            continue

        if candidate != requested:
            record_fallback(requested, candidate)
            logger.warning("house system fallback %s → %s at latitude %s", requested, candidate, latitude)
            warnings.append(f"Fell back from '{requested}' to '{candidate}'.")
        return {
            "requested_system": requested,
            "system": candidate,
            "fallback_used": candidate != requested,
            "result": result,
            "warnings": warnings + list(result.warnings),
        }

    # every chain ends in equal/whole_sign, which have no latitude limit
    raise last_err if last_err is not None else HouseCalculationError(requested, "empty fallback chain")


def calculate_houses_at(
    system: Optional[str],
    *,
    latitude: float,
    longitude: float,
    jd_ut1: Optional[float] = None,
    jd_tt: Optional[float] = None,
    moment: Optional[datetime] = None,
    dut1_seconds: float = 0.0,
    altitude: Optional[float] = None,
    obliquity: Optional[float] = None,
    calculator: Optional[HouseCalculator] = None,
) -> HouseResult:
    """
    Houses for a moment and place: LST from apparent sidereal time plus east longitude,
    obliquity from the true obliquity of date unless given.

    Pass either both jd_ut1/jd_tt or an aware `moment` (converted via ERFA).
    """
    if moment is not None:
        jd_ut1, jd_tt = julian_dates_from_utc(moment, dut1_seconds)
    if jd_ut1 is None or jd_tt is None:
        raise InvalidParameterError("jd_tt", jd_tt, "given together with jd_ut1 (or pass moment=)")
    lst = local_sidereal_time_deg(float(jd_ut1), float(jd_tt), longitude)
    obl = obliquity if obliquity is not None else true_obliquity_deg(float(jd_tt))
    calc = calculator or _default_calculator()
    return calc.calculate_houses(system, lst, latitude, obl, altitude)


__all__ = [
    "POLAR_POLICY",
    "HouseCusp",
    "HouseResult",
    "HouseCalculator",
    "format_houses",
    "calculate_houses",
    "calculate_houses_at",
    "compute_houses_with_policy",
    "canonicalize_system",
    "list_supported_house_systems",
]


if __name__ == "__main__":
    import sys

    sys_name = sys.argv[1] if len(sys.argv) > 1 else "placidus"
    lst_arg = float(sys.argv[2]) if len(sys.argv) > 2 else 120.0
    lat_arg = float(sys.argv[3]) if len(sys.argv) > 3 else 40.0
    payload = compute_houses_with_policy(sys_name, lst_arg, lat_arg)
    print(f"astrohouses {VERSION}")
    print(f"=== {payload['system'].upper()} HOUSES (requested {payload['requested_system']}) ===")
    for h in payload["result"].houses:
        print(f"{h.name:>10}: {h.cusp:8.3f}°  {h.degree:6.3f}° {h.sign_name}")
    for w in payload["warnings"]:
        print("warning:", w)
