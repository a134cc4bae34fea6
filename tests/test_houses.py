# tests/test_houses.py
from __future__ import annotations

import math

import pytest
from hypothesis import given, strategies as st

from ephemcore.core.coords import diff_deg
from ephemcore.core.houses import (
    HOUSE_SYSTEMS,
    QUADRANT_SYSTEMS,
    HouseCuspSet,
    asc1,
    houses,
    placidus_diagnostics,
    sidereal_time,
)
from ephemcore.core.julian import julian_day
from ephemcore.core.timescales import ConstantDeltaT
from ephemcore.utils.config import get_settings
from ephemcore.utils.metrics import metrics

SEOUL = (37.5665, 126.978)
JD_1993 = julian_day(1993, 3, 12, 0.75)

jd_modern = st.floats(min_value=2415020.5, max_value=2488069.5)
mid_lat = st.floats(min_value=-60.0, max_value=60.0)
low_lat = st.floats(min_value=-50.0, max_value=50.0)
any_lon = st.floats(min_value=-180.0, max_value=180.0)


def _ring(h: HouseCuspSet, order) -> None:
    """Consecutive cusps in ``order`` advance eastward."""
    for a, b in zip(order, order[1:]):
        assert diff_deg(h.cusp(b), h.cusp(a)) > 0.0, (a, b)


# ──────────────────────────────────────────────────────────────────────────────
# Sidereal time and angles
# ──────────────────────────────────────────────────────────────────────────────

@given(jd_modern)
def test_gmst_matches_erfa(ensure_erfa, jd: float) -> None:
    ours = sidereal_time(jd, 23.44, 0.0) * 15.0
    ref = math.degrees(float(ensure_erfa.gmst82(jd, 0.0)))
    # 0.01 s of time
    assert abs(diff_deg(ours, ref)) < 0.01 * 15.0 / 3600.0


def test_asc1_on_the_equator() -> None:
    eps = 23.44
    s, c = math.sin(math.radians(eps)), math.cos(math.radians(eps))
    # at the equator with the vernal point culminating, 90° of the equator rises
    assert asc1(90.0, 0.0, s, c) == pytest.approx(90.0, abs=1e-9)
    assert asc1(270.0, 0.0, s, c) == pytest.approx(270.0, abs=1e-9)


# ──────────────────────────────────────────────────────────────────────────────
# Invariants across systems
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("code", sorted(HOUSE_SYSTEMS))
def test_opposite_cusps(code: str) -> None:
    h = houses(JD_1993, *SEOUL, code)
    assert h.system == code
    assert len(h.cusps) == 12
    for i in range(1, 7):
        assert abs(diff_deg(h.cusp(i + 6), h.cusp(i) + 180.0)) < 1e-9
    for v in h.cusps:
        assert 0.0 <= v < 360.0


@given(jd_modern, mid_lat, any_lon)
def test_quadrant_systems_anchor_on_angles(jd: float, lat: float, lon: float) -> None:
    for code in sorted(QUADRANT_SYSTEMS):
        h = houses(jd, lat, lon, code, delta_t=ConstantDeltaT(64.0))
        assert h.cusp(1) == pytest.approx(h.asc, abs=1e-9)
        assert h.cusp(10) == pytest.approx(h.mc, abs=1e-9)


@given(jd_modern, low_lat, any_lon)
def test_placidus_cusps_advance(jd: float, lat: float, lon: float) -> None:
    h = houses(jd, lat, lon, "P", delta_t=ConstantDeltaT(64.0))
    _ring(h, (10, 11, 12, 1, 2, 3, 4))


def test_whole_sign() -> None:
    h = houses(JD_1993, *SEOUL, "W")
    for v in h.cusps:
        r = math.fmod(v, 30.0)
        assert min(r, 30.0 - r) < 1e-9
    assert -1e-9 < diff_deg(h.asc, h.cusp(1)) < 30.0


def test_equal_houses_start_at_ascendant() -> None:
    h = houses(JD_1993, *SEOUL, "E")
    assert h.cusp(1) == pytest.approx(h.asc)
    assert diff_deg(h.cusp(2), h.cusp(1)) == pytest.approx(30.0)


# ──────────────────────────────────────────────────────────────────────────────
# Placidus solver
# ──────────────────────────────────────────────────────────────────────────────

def test_placidus_converges() -> None:
    diag = placidus_diagnostics(JD_1993, *SEOUL)
    assert sorted(diag) == [2, 3, 11, 12]
    for info in diag.values():
        assert info["converged"] is True
        assert info["residual_deg"] < 1e-10
        assert info["iters"] <= get_settings().placidus_max_iters


@given(jd_modern, st.floats(min_value=-65.0, max_value=65.0), any_lon)
def test_placidus_converges_across_latitudes_and_dates(jd: float, lat: float, lon: float) -> None:
    diag = placidus_diagnostics(jd, lat, lon, delta_t=ConstantDeltaT(64.0))
    assert sorted(diag) == [2, 3, 11, 12]
    for cusp, info in diag.items():
        assert info["converged"] is True, (cusp, info)
        assert info["residual_deg"] < 1e-10


def test_polar_latitude_falls_back_to_porphyry() -> None:
    placidus = houses(JD_1993, 75.0, 20.0, "P")
    porphyry = houses(JD_1993, 75.0, 20.0, "O")
    assert placidus.cusps == porphyry.cusps
    assert placidus_diagnostics(JD_1993, 75.0, 20.0) == {}


def test_iteration_cap_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPHEMCORE_PLACIDUS_MAX_ITERS", "1")
    monkeypatch.setenv("EPHEMCORE_PLACIDUS_TOL", "1e-300")
    get_settings.cache_clear()
    diag = placidus_diagnostics(JD_1993, *SEOUL)
    for info in diag.values():
        assert info["iters"] <= 1
        assert info["converged"] is False


# ──────────────────────────────────────────────────────────────────────────────
# System selection and inputs
# ──────────────────────────────────────────────────────────────────────────────

def test_unknown_system_uses_placidus() -> None:
    unknown = houses(JD_1993, *SEOUL, "X")
    placidus = houses(JD_1993, *SEOUL, "P")
    assert unknown.system == "P"
    assert unknown.cusps == placidus.cusps
    assert metrics.get("ephemcore_house_fallback_total", {"requested": "X", "fallback": "P"}) == 1.0


def test_lowercase_code_accepted() -> None:
    assert houses(JD_1993, *SEOUL, "k").system == "K"


def test_default_system_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    assert houses(JD_1993, *SEOUL).system == "P"
    monkeypatch.setenv("EPHEMCORE_HOUSE_SYSTEM", "W")
    get_settings.cache_clear()
    assert houses(JD_1993, *SEOUL).system == "W"


@pytest.mark.parametrize(
    "jd, lat, lon",
    [
        (float("nan"), 10.0, 10.0),
        (JD_1993, float("inf"), 10.0),
        (JD_1993, 90.5, 10.0),
        (JD_1993, -91.0, 10.0),
    ],
)
def test_invalid_inputs(jd: float, lat: float, lon: float) -> None:
    with pytest.raises(ValueError):
        houses(jd, lat, lon, "P")


def test_cusp_accessor_bounds() -> None:
    h = houses(JD_1993, *SEOUL, "O")
    with pytest.raises(ValueError):
        h.cusp(0)
    with pytest.raises(ValueError):
        h.cusp(13)
    d = h.to_dict()
    assert set(d) == {"cusps", "asc", "mc", "armc", "system"}


def test_houses_call_is_counted() -> None:
    houses(JD_1993, *SEOUL, "O")
    assert metrics.get("ephemcore_calls_total", {"op": "houses"}) == 1.0
