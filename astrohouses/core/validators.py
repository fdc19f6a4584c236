# astrohouses/core/validators.py
from __future__ import annotations

import difflib
import math
import numbers
from typing import Any, Dict, List, Optional, Sequence, Union

from astrohouses.core.constants import (
    HOUSE_SYSTEM_ALIASES,
    HOUSES_COUNT,
    LATITUDE_LIMITED_SYSTEMS,
    QUADRANT_LATITUDE_LIMIT_DEG,
    SAFE_FALLBACK_SYSTEMS,
    SUPPORTED_HOUSE_SYSTEMS,
)

# ───────────────────────── errors ─────────────────────────

class HouseSystemError(Exception):
    """Base class for every error raised by the house engine."""


class ValidationError(HouseSystemError, ValueError):
    """Structured validator error (has .errors(), a list of {loc, msg, type})."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        else:
            self._details = list(details)
            super().__init__(self._details[0]["msg"] if self._details else "validation_error")

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


class InvalidSystemError(ValidationError):
    """Unrecognized house-system identifier."""
    def __init__(self, system: Any, suggestions: Optional[List[str]] = None):
        self.system = system
        self.suggestions = list(suggestions or [])
        hint = f" Did you mean: {', '.join(self.suggestions)}?" if self.suggestions else ""
        msg = (
            f"unsupported house system: {system!r}. "
            f"Expected one of: {', '.join(SUPPORTED_HOUSE_SYSTEMS)}.{hint}"
        )
        super().__init__(_err("system", msg, "value_error.house_system"))


class InvalidParameterError(ValidationError):
    """A numeric parameter is non-finite or outside its domain."""
    def __init__(self, param: str, value: Any, expected: str):
        self.param = param
        self.value = value
        self.expected = expected
        msg = f"{param} must be {expected} (got {value!r})"
        super().__init__(_err(param, msg, f"value_error.{param}"))


class HouseCalculationError(HouseSystemError, RuntimeError):
    """An engine produced a cusp set that is not 12 finite longitudes."""
    def __init__(self, system: str, reason: str):
        self.system = system
        self.reason = reason
        super().__init__(f"{system} house calculation failed: {reason}")


class LatitudeLimitExceeded(HouseSystemError, ValueError):
    """
    Latitude is outside the domain of a time-division house system.

    Deliberately not an InvalidParameterError: callers catch this one to offer
    `suggested_systems` instead of rejecting the request outright.
    """
    def __init__(self, system: str, latitude: float, limit: float = QUADRANT_LATITUDE_LIMIT_DEG,
                 suggested_systems: Sequence[str] = SAFE_FALLBACK_SYSTEMS):
        self.system = system
        self.latitude = float(latitude)
        self.limit = float(limit)
        self.suggested_systems = list(suggested_systems)
        super().__init__(
            f"{system} houses are undefined beyond ±{self.limit:g}° latitude "
            f"(got {self.latitude:.4f}°); try {', '.join(self.suggested_systems)}"
        )

    def errors(self) -> List[Dict[str, Any]]:
        return [_err("latitude", str(self), "value_error.latitude_limit")]


# ───────────────────────── helpers ─────────────────────────

def _err(loc: List[str] | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _is_real(v: Any) -> bool:
    # bool is an int subclass; strings are never coerced
    return isinstance(v, numbers.Real) and not isinstance(v, bool)

def _finite_real(v: Any) -> Optional[float]:
    if not _is_real(v):
        return None
    x = float(v)
    return x if math.isfinite(x) else None

def _slug(s: str) -> str:
    return "".join(ch for ch in s.lower() if ch.isalnum())


# ───────────────────────── house system labels ─────────────────────────

def suggest_systems(name: str, n: int = 3) -> List[str]:
    """Close matches among canonical labels and aliases, canonical form, best first."""
    best = difflib.get_close_matches(name.lower(), list(SUPPORTED_HOUSE_SYSTEMS), n=n, cutoff=0.6)
    for hit in difflib.get_close_matches(_slug(name), list(HOUSE_SYSTEM_ALIASES), n=n, cutoff=0.6):
        canon = HOUSE_SYSTEM_ALIASES[hit]
        if canon not in best:
            best.append(canon)
    return best[:n]

def parse_house_system(val: Any) -> str:
    """Map a user-facing label ('Whole Sign', 'whole-sign', 'PLACIDUS') to its canonical tag."""
    if not isinstance(val, str) or not val.strip():
        raise InvalidSystemError(val)
    canon = HOUSE_SYSTEM_ALIASES.get(_slug(val))
    if canon is None:
        raise InvalidSystemError(val, suggest_systems(val))
    return canon


# ───────────────────────── numeric parsers ─────────────────────────

def parse_lst(val: Any) -> float:
    x = _finite_real(val)
    if x is None:
        raise InvalidParameterError("lst", val, "a finite real number of degrees")
    return x

def parse_latitude(val: Any) -> float:
    x = _finite_real(val)
    if x is None or not (-90.0 <= x <= 90.0):
        raise InvalidParameterError("latitude", val, "a finite number between -90 and 90")
    return x

def parse_obliquity(val: Any) -> float:
    x = _finite_real(val)
    if x is None or not (0.0 < x < 90.0):
        raise InvalidParameterError("obliquity", val, "a finite number strictly between 0 and 90")
    return x

def validate_altitude(val: Any) -> float:
    x = _finite_real(val)
    if x is None or x < 0.0:
        raise InvalidParameterError("altitude", val, "a finite non-negative number of metres")
    return x

def parse_longitude(val: Any) -> float:
    x = _finite_real(val)
    if x is None or not (-180.0 <= x <= 180.0):
        raise InvalidParameterError("longitude", val, "a finite number between -180 and 180")
    return x

def parse_ecliptic_longitude(val: Any, loc: str = "longitude") -> float:
    x = _finite_real(val)
    if x is None:
        raise InvalidParameterError(loc, val, "a finite ecliptic longitude in degrees")
    return x

def validate_cusps(cusps: Any) -> List[float]:
    if not isinstance(cusps, (list, tuple)) or len(cusps) != HOUSES_COUNT:
        raise InvalidParameterError("cusps", cusps, f"a sequence of {HOUSES_COUNT} longitudes")
    out: List[float] = []
    for c in cusps:
        x = _finite_real(c)
        if x is None:
            raise InvalidParameterError("cusps", cusps, f"a sequence of {HOUSES_COUNT} finite longitudes")
        out.append(x)
    return out

def validate_inputs(system: Any, lst: Any, latitude: Any, obliquity: Any) -> Dict[str, Any]:
    """
    Generic checks run before any engine: system label, then lst, latitude, obliquity.
    Returns the canonical/float-coerced values.
    """
    return {
        "system": parse_house_system(system),
        "lst": parse_lst(lst),
        "latitude": parse_latitude(latitude),
        "obliquity": parse_obliquity(obliquity),
    }

def check_latitude_limit(system: str, latitude: float,
                         limit: float = QUADRANT_LATITUDE_LIMIT_DEG) -> None:
    """System-specific second pass, invoked from inside the time-division engines."""
    if system in LATITUDE_LIMITED_SYSTEMS and abs(latitude) > limit:
        raise LatitudeLimitExceeded(system, latitude, limit)


__all__ = [
    "HouseSystemError", "ValidationError", "InvalidSystemError",
    "InvalidParameterError", "LatitudeLimitExceeded", "HouseCalculationError",
    "suggest_systems", "parse_house_system",
    "parse_lst", "parse_latitude", "parse_obliquity", "parse_longitude", "parse_ecliptic_longitude",
    "validate_altitude", "validate_cusps", "validate_inputs", "check_latitude_limit",
]
