# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the ephemcore suite.

- Registers Hypothesis profiles for local dev and CI.
- Isolates cached settings and in-process metrics between tests.
- Sanity-checks ERFA availability for the reference comparisons.
- Adds a 'slow' marker for the table-building tests.
"""

import os
import pytest
from hypothesis import settings, HealthCheck

from ephemcore.utils.config import get_settings
from ephemcore.utils.metrics import metrics


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,           # lunar theory calls are slow on cold caches
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=120,
        suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
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

_ENV_KEYS = (
    "EPHEMCORE_CONFIG",
    "EPHEMCORE_DELTA_T",
    "EPHEMCORE_HOUSE_SYSTEM",
    "EPHEMCORE_PLACIDUS_MAX_ITERS",
    "EPHEMCORE_PLACIDUS_TOL",
    "EPHEMCORE_CHIRON_START",
    "EPHEMCORE_CHIRON_STEP",
    "EPHEMCORE_CHIRON_COUNT",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """
    Every test starts from DEFAULTS: no EPHEMCORE_* env, an empty settings
    cache and zeroed metrics.
    """
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    metrics.reset()
    try:
        yield
    finally:
        get_settings.cache_clear()
        metrics.reset()


@pytest.fixture(scope="session")
def ensure_erfa():
    """
    Fail early if ERFA/pyERFA isn't importable or missing key functions.
    """
    import erfa  # pyERFA exposes the ERFA namespace as 'erfa'
    for fn in ("cal2jd", "jd2cal", "dat", "gmst82", "nut80", "obl80", "pmat76"):
        assert hasattr(erfa, fn), f"ERFA.{fn} not available"
    return erfa
