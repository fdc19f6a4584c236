# astrohouses/core/constants.py
# -*- coding: utf-8 -*-
"""
House engine constants

Purpose
-------
Single source of truth for:
- supported house-system labels and their aliases
- the latitude domain of the time-division systems
- default obliquity and Earth model used by topocentric parallax
- zodiac sign and house display names

Design
------
- Pure-Python, no external dependencies.
- Safe to import from any core module.
"""

from __future__ import annotations
from typing import Dict, Final, FrozenSet, Literal, Tuple
import os

__all__ = [
    "HouseSystemName", "SUPPORTED_HOUSE_SYSTEMS", "QUADRANT_SYSTEMS", "LATITUDE_LIMITED_SYSTEMS",
    "HOUSE_SYSTEM_ALIASES",
    "HOUSES_COUNT", "DEGREES_PER_SIGN", "QUADRANT_LATITUDE_LIMIT_DEG",
    "DEFAULT_OBLIQUITY_DEG", "EARTH_RADIUS_M",
    "ZODIAC_SIGNS", "HOUSE_NAMES", "SAFE_FALLBACK_SYSTEMS",
]

# ── house systems ────────────────────────────────────────────────────────────
HouseSystemName = Literal[
    "whole_sign", "equal", "placidus", "koch", "porphyry",
    "regiomontanus", "campanus", "morinus", "topocentric",
]

SUPPORTED_HOUSE_SYSTEMS: Final[Tuple[str, ...]] = (
    "whole_sign", "equal", "placidus", "koch", "porphyry",
    "regiomontanus", "campanus", "morinus", "topocentric",
)

# Systems whose angles come from the ascendant solver and the meridian.
QUADRANT_SYSTEMS: Final[FrozenSet[str]] = frozenset({
    "placidus", "koch", "regiomontanus", "campanus", "morinus", "topocentric",
})

# Time-division systems refused beyond ±QUADRANT_LATITUDE_LIMIT_DEG.
LATITUDE_LIMITED_SYSTEMS: Final[FrozenSet[str]] = frozenset({
    "placidus", "koch", "morinus", "topocentric",
})

# Systems with no latitude dependency, offered when a limited system is refused.
SAFE_FALLBACK_SYSTEMS: Final[Tuple[str, ...]] = ("porphyry", "equal", "whole_sign")

# Slug (lowercase alphanumerics only) → canonical label.
HOUSE_SYSTEM_ALIASES: Final[Dict[str, str]] = {
    "wholesign": "whole_sign",
    "whole": "whole_sign",
    "sign": "whole_sign",
    "equal": "equal",
    "equalhouse": "equal",
    "placidus": "placidus",
    "koch": "koch",
    "porphyry": "porphyry",
    "porphyrius": "porphyry",
    "regiomontanus": "regiomontanus",
    "campanus": "campanus",
    "morinus": "morinus",
    "topocentric": "topocentric",
    "polichpage": "topocentric",
}

# ── geometry ─────────────────────────────────────────────────────────────────
HOUSES_COUNT: Final[int] = 12
DEGREES_PER_SIGN: Final[float] = 30.0
QUADRANT_LATITUDE_LIMIT_DEG: Final[float] = 60.0

# Mean obliquity used when the caller supplies none (overridable for ops).
DEFAULT_OBLIQUITY_DEG: Final[float] = float(os.getenv("ASTRO_DEFAULT_OBLIQUITY", "23.4"))

# Spherical Earth model for horizon-distance parallax (metres).
EARTH_RADIUS_M: Final[float] = 6_371_000.0

# ── display names ────────────────────────────────────────────────────────────
ZODIAC_SIGNS: Final[Tuple[str, ...]] = (
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
)

HOUSE_NAMES: Final[Tuple[str, ...]] = (
    "1st House", "2nd House", "3rd House", "4th House", "5th House", "6th House",
    "7th House", "8th House", "9th House", "10th House", "11th House", "12th House",
)
