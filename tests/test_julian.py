# tests/test_julian.py
from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from ephemcore.core.julian import J2000, CalendarDate, from_julian_day, julian_day


def test_j2000_epoch() -> None:
    assert julian_day(2000, 1, 1, 12.0) == J2000
    assert from_julian_day(J2000) == CalendarDate(2000, 1, 1, 12.0)


def test_known_instant() -> None:
    # 1987-08-22 18:10 UT
    assert julian_day(1987, 8, 22, 18 + 10 / 60) == pytest.approx(2447030.2569444445, abs=1e-9)


def test_leap_day_and_century_rule() -> None:
    assert julian_day(2000, 3, 1) - julian_day(2000, 2, 28) == 2.0
    assert julian_day(1900, 3, 1) - julian_day(1900, 2, 28) == 1.0


@given(
    st.integers(min_value=1600, max_value=2400),
    st.integers(min_value=1, max_value=12),
    st.integers(min_value=1, max_value=28),
    st.floats(min_value=0.0, max_value=23.99),
)
def test_round_trip(year: int, month: int, day: int, hour: float) -> None:
    cal = from_julian_day(julian_day(year, month, day, hour))
    assert (cal.year, cal.month, cal.day) == (year, month, day)
    assert cal.hour == pytest.approx(hour, abs=1e-6)


@given(
    st.integers(min_value=1600, max_value=2400),
    st.integers(min_value=1, max_value=12),
    st.integers(min_value=1, max_value=28),
)
def test_matches_erfa_cal2jd(ensure_erfa, year: int, month: int, day: int) -> None:
    djm0, djm = ensure_erfa.cal2jd(year, month, day)
    assert julian_day(year, month, day) == pytest.approx(float(djm0) + float(djm), abs=1e-9)
