# tests/test_moon.py
from __future__ import annotations

import math

import pytest
from hypothesis import given, strategies as st

from ephemcore.core.coords import RAD_TO_DEG, cart_to_polar, diff_deg, norm
from ephemcore.core.harmonics import AngleTables
from ephemcore.core.moon import (
    AUNIT,
    LAT_LARGE,
    MOON_SPEED_INTERVAL,
    moon_ecliptic_of_date,
    moon_geocentric,
    sum_series,
)

jd_modern = st.floats(min_value=2415020.5, max_value=2488069.5)

_KM = AUNIT / 1000.0


# ──────────────────────────────────────────────────────────────────────────────
# Series summation
# ──────────────────────────────────────────────────────────────────────────────

def test_sum_series_latitude_row() -> None:
    tables = AngleTables([0.3, 0.5, 0.7, 1.1], [2, 2, 2, 2])
    acc = [0.0, 0.0, 0.0]
    # one row: D + F with amplitude 2·10000 + 5000
    sum_series([(1, 0, 0, 1, 2, 5000)], tables, LAT_LARGE, acc)
    assert acc[1] == pytest.approx(25000.0 * math.sin(0.3 + 1.1), rel=1e-12)
    assert acc[0] == 0.0 and acc[2] == 0.0


def test_sum_series_rejects_unknown_kind() -> None:
    tables = AngleTables([0.3, 0.5, 0.7, 1.1], [2, 2, 2, 2])
    with pytest.raises(ValueError):
        sum_series([(1, 0, 0, 0, 1, 0)], tables, 9, [0.0, 0.0, 0.0])


# ──────────────────────────────────────────────────────────────────────────────
# Geometric position of date
# ──────────────────────────────────────────────────────────────────────────────

def test_textbook_position() -> None:
    # Meeus, Astronomical Algorithms, example 47.a: 1992-04-12 0h TD
    lon, lat, r = moon_ecliptic_of_date(2448724.5)
    assert abs(diff_deg(lon * RAD_TO_DEG, 133.162655)) < 0.05
    assert lat * RAD_TO_DEG == pytest.approx(-3.229126, abs=0.05)
    assert r * _KM == pytest.approx(368409.7, abs=200.0)


@given(jd_modern)
def test_distance_and_latitude_bounds(jd: float) -> None:
    lon, lat, r = moon_ecliptic_of_date(jd)
    assert 0.0 <= lon < 2 * math.pi
    assert abs(lat * RAD_TO_DEG) < 5.4
    assert 356000.0 < r * _KM < 407000.0


# ──────────────────────────────────────────────────────────────────────────────
# Equatorial J2000 state vector
# ──────────────────────────────────────────────────────────────────────────────

@given(jd_modern)
def test_daily_motion(jd: float) -> None:
    x = moon_geocentric(jd)
    # right-ascension rate, deg/day
    dlon = cart_to_polar(x)[3] * RAD_TO_DEG
    assert 9.0 < dlon < 20.0


def test_velocity_is_parabola_slope_at_forward_sample() -> None:
    jd = 2451545.0
    h = MOON_SPEED_INTERVAL
    ahead = moon_geocentric(jd + h)
    behind = moon_geocentric(jd - h)
    x = moon_geocentric(jd)
    # (3·x(t+h) + x(t−h) − 4·x(t)) / 2h
    expected = [(3.0 * ahead[k] + behind[k] - 4.0 * x[k]) / (2.0 * h) for k in range(3)]
    assert list(x[3:]) == pytest.approx(expected, rel=1e-9, abs=1e-15)
    # the end slope leads the centred slope by about half a step of curvature
    centred = [(ahead[k] - behind[k]) / (2.0 * h) for k in range(3)]
    assert norm([a - b for a, b in zip(x[3:], centred)]) > 1e-3 * norm(x[3:])


def test_position_radius_matches_ecliptic_radius() -> None:
    jd = 2449058.53
    _, _, r = moon_ecliptic_of_date(jd)
    assert norm(moon_geocentric(jd)[:3]) == pytest.approx(r, rel=1e-12)
