# tests/test_deltat.py
from __future__ import annotations

import math
import warnings

import pytest
from hypothesis import given, strategies as st

from ephemcore.core.julian import julian_day
from ephemcore.core.timescales import (
    ERFA_FIRST_YEAR,
    ERFA_LAST_YEAR,
    TT_MINUS_TAI,
    ConstantDeltaT,
    default_delta_t,
    delta_t_seconds_polynomial,
    polynomial_delta_t,
    resolve_delta_t,
)
from ephemcore.utils.config import get_settings

DAY = 86400.0


# ──────────────────────────────────────────────────────────────────────────────
# ERFA window
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "jd, leap_seconds",
    [
        (julian_day(1972, 7, 1, 12.0), 11.0),
        (julian_day(1987, 8, 22, 18.0), 23.0),
        (julian_day(2000, 1, 1, 12.0), 32.0),
        (julian_day(2017, 6, 1), 37.0),
    ],
)
def test_erfa_leap_second_chain(ensure_erfa, jd: float, leap_seconds: float) -> None:
    assert default_delta_t(jd) * DAY == pytest.approx(TT_MINUS_TAI + leap_seconds, abs=1e-6)


def test_future_years_inside_window_are_quiet(ensure_erfa) -> None:
    jd = julian_day(ERFA_LAST_YEAR - 1, 6, 1)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        seconds = default_delta_t(jd) * DAY
    assert seconds >= TT_MINUS_TAI + 37.0


def test_outside_window_uses_polynomial() -> None:
    for year in (ERFA_FIRST_YEAR - 40, ERFA_LAST_YEAR + 20):
        jd = julian_day(year, 3, 1)
        assert default_delta_t(jd) == polynomial_delta_t(jd)


def test_non_finite_rejected() -> None:
    with pytest.raises(ValueError):
        default_delta_t(float("nan"))


# ──────────────────────────────────────────────────────────────────────────────
# Espenak–Meeus polynomials
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "year, seconds, tol",
    [
        (2000.0, 63.86, 1e-9),
        (1900.0, -2.79, 1e-9),
        (1820.0, 12.0, 0.5),
        (1000.0, 1574.2, 1e-9),
    ],
)
def test_polynomial_reference_values(year: float, seconds: float, tol: float) -> None:
    assert delta_t_seconds_polynomial(year) == pytest.approx(seconds, abs=tol)


@pytest.mark.parametrize("boundary", [1900.0, 1920.0, 1941.0, 1961.0, 1986.0, 2005.0, 2050.0])
def test_polynomial_branches_join(boundary: float) -> None:
    before = delta_t_seconds_polynomial(boundary - 1e-6)
    after = delta_t_seconds_polynomial(boundary)
    assert after == pytest.approx(before, abs=1.0)


@given(st.floats(min_value=-2000.0, max_value=3000.0))
def test_polynomial_is_finite(year: float) -> None:
    assert math.isfinite(delta_t_seconds_polynomial(year))


# ──────────────────────────────────────────────────────────────────────────────
# Provider resolution
# ──────────────────────────────────────────────────────────────────────────────

def test_constant_provider() -> None:
    assert ConstantDeltaT(86.4)(2451545.0) == pytest.approx(0.001)


def test_resolve_named_and_numeric() -> None:
    assert resolve_delta_t(None) is default_delta_t
    assert resolve_delta_t("  ERFA ") is default_delta_t
    assert resolve_delta_t("polynomial") is polynomial_delta_t
    assert resolve_delta_t("64.5") == ConstantDeltaT(64.5)
    assert resolve_delta_t(30) == ConstantDeltaT(30.0)

    def custom(jd_ut: float) -> float:
        return 0.0

    assert resolve_delta_t(custom) is custom


def test_resolve_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPHEMCORE_DELTA_T", "polynomial")
    get_settings.cache_clear()
    assert resolve_delta_t() is polynomial_delta_t


@pytest.mark.parametrize("setting", [True, "fast", [1.0], object()])
def test_resolve_rejects_garbage(setting) -> None:
    with pytest.raises(ValueError):
        resolve_delta_t(setting)
