# astrohouses/core/angles.py
"""
Degree-based angle helpers shared by every house engine.

All public helpers are total over finite reals; NaN/inf are rejected upstream
by astrohouses.core.validators before any engine runs.
"""

from __future__ import annotations

import math

DEG_R = math.pi / 180.0

# --------------------------- circle arithmetic ---------------------------

def normalize(angle: float) -> float:
    """Map any real onto [0, 360) in O(1)."""
    r = math.fmod(angle, 360.0)
    if r < 0.0:
        r += 360.0
    # -1e-17 + 360.0 rounds up to exactly 360.0
    return 0.0 if r >= 360.0 else r


def shortest_distance(a: float, b: float) -> float:
    """Undirected gap between two angles, in [0, 180]."""
    d = normalize(a - b)
    return d if d <= 180.0 else 360.0 - d


def forward_separation(from_: float, to: float) -> float:
    """Directed gap travelling in increasing longitude from `from_` to `to`, in [0, 360)."""
    return normalize(to - from_)


def signed_difference(a: float, b: float) -> float:
    """a - b wrapped into (-180, 180]."""
    d = normalize(a - b)
    return d - 360.0 if d > 180.0 else d


def midpoint(a: float, b: float) -> float:
    """Circular midpoint halfway from a to b moving forward."""
    return normalize(a + 0.5 * forward_separation(a, b))


def clamp_to_arc(angle: float, start: float, end: float) -> float:
    """
    Keep `angle` inside the forward arc start→end.

    Points outside the arc snap to whichever endpoint is nearer on the circle.
    """
    span = forward_separation(start, end)
    if forward_separation(start, angle) <= span:
        return normalize(angle)
    if shortest_distance(angle, start) <= shortest_distance(angle, end):
        return normalize(start)
    return normalize(end)

# --------------------------- trig in degrees ---------------------------

def sind(a: float) -> float: return math.sin(a * DEG_R)
def cosd(a: float) -> float: return math.cos(a * DEG_R)
def tand(a: float) -> float: return math.tan(a * DEG_R)


def atan2d(y: float, x: float) -> float:
    """Quadrant-preserving arctangent, normalized to [0, 360)."""
    return normalize(math.degrees(math.atan2(y, x)))


def asind_clamped(x: float) -> float:
    """
    Arcsine in degrees that never produces NaN.

    Arguments beyond ±1 resolve to a right angle carrying the argument's sign.
    """
    if x >= 1.0:
        return 90.0
    if x <= -1.0:
        return -90.0
    return math.degrees(math.asin(x))


__all__ = [
    "normalize",
    "shortest_distance",
    "forward_separation",
    "signed_difference",
    "midpoint",
    "clamp_to_arc",
    "sind",
    "cosd",
    "tand",
    "atan2d",
    "asind_clamped",
]
