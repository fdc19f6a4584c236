# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the house-engine suite.

- Registers Hypothesis profiles for local dev and CI.
- Sanity-checks ERFA availability for the sidereal-time tests.
- Adds a 'slow' marker (not used by default, but handy for heavier sweeps).
"""

import os
import pytest
from hypothesis import settings, HealthCheck


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,           # Placidus iterates; avoid flaky timeouts on slower runners
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=200,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow")
    config.addinivalue_line("filterwarnings", "ignore::DeprecationWarning")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Global fixtures
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def ensure_erfa():
    """
    Fail early if ERFA/pyERFA isn't importable or missing key functions.
    """
    import erfa  # pyERFA exposes the ERFA namespace as 'erfa'
    for fn in ("gst06a", "obl06", "nut06a", "dtf2d", "utctai", "taitt", "utcut1"):
        assert hasattr(erfa, fn), f"ERFA.{fn} not available"
    return erfa


@pytest.fixture
def cusps_wrapping():
    """Cusp set whose first house straddles 0° Aries."""
    return [330.0] + [30.0 * i for i in range(11)]

