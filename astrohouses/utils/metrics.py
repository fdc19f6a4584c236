# astrohouses/utils/metrics.py
from __future__ import annotations

from typing import Final

from prometheus_client import Counter

# Names are part of the scrape contract; keep them stable.
MET_CALCULATIONS: Final = Counter(
    "astrohouses_calculations_total", "House cusp sets computed", ["system"]
)
MET_REJECTIONS: Final = Counter(
    "astrohouses_rejections_total", "House requests refused before computing", ["reason"]
)
MET_FALLBACKS: Final = Counter(
    "astrohouses_fallbacks_total", "House system fallbacks applied by policy", ["requested", "fallback"]
)


def record_calculation(system: str) -> None:
    MET_CALCULATIONS.labels(system=system).inc()


def record_rejection(reason: str) -> None:
    MET_REJECTIONS.labels(reason=reason).inc()


def record_fallback(requested: str, fallback: str) -> None:
    MET_FALLBACKS.labels(requested=requested, fallback=fallback).inc()


__all__ = [
    "MET_CALCULATIONS",
    "MET_REJECTIONS",
    "MET_FALLBACKS",
    "record_calculation",
    "record_rejection",
    "record_fallback",
]
