# ephemcore/core/julian.py
from __future__ import annotations
"""
Calendar ⇄ Julian Day (proleptic Gregorian, astronomical year numbering).

  julian_day(1987, 8, 22, 18 + 10/60)  → 2447030.2569444445
  from_julian_day(2451545.0)           → CalendarDate(2000, 1, 1, 12.0)

Year 0 is 1 BC, year -1 is 2 BC. Hours are decimal (13.5 == 13:30).
"""

import math
from typing import NamedTuple

__all__ = ["CalendarDate", "julian_day", "from_julian_day", "J2000", "J1900"]

J2000 = 2451545.0
J1900 = 2415020.0

_GREGORIAN_REFORM_JD = 1830691.5


class CalendarDate(NamedTuple):
    year: int
    month: int
    day: int
    hour: float


def julian_day(year: int, month: int, day: int, hour: float = 0.0) -> float:
    u = float(year)
    if month < 3:
        u -= 1.0
    u0 = u + 4712.0
    u1 = month + 1.0
    if u1 < 4.0:
        u1 += 12.0
    jd = (
        math.floor(u0 * 365.25)
        + math.floor(30.6 * u1 + 0.000001)
        + day + hour / 24.0 - 63.5
    )
    # Gregorian century rule
    u2 = math.floor(abs(u) / 100.0) - math.floor(abs(u) / 400.0)
    if u < 0.0:
        u2 = -u2
    jd = jd - u2 + 2.0
    if u < 0.0 and u / 100.0 == math.floor(u / 100.0) and u / 400.0 != math.floor(u / 400.0):
        jd -= 1.0
    return jd


def from_julian_day(jd: float) -> CalendarDate:
    u0 = jd + 32082.5
    u1 = u0 + math.floor(u0 / 36525.0) - math.floor(u0 / 146100.0) - 38.0
    if jd >= _GREGORIAN_REFORM_JD:
        u1 += 1.0
    u0 = u0 + math.floor(u1 / 36525.0) - math.floor(u1 / 146100.0) - 38.0
    u2 = math.floor(u0 + 123.0)
    u3 = math.floor((u2 - 122.2) / 365.25)
    u4 = math.floor((u2 - math.floor(365.25 * u3)) / 30.6001)
    month = int(u4 - 1.0)
    if month > 12:
        month -= 12
    day = int(u2 - math.floor(365.25 * u3) - math.floor(30.6001 * u4))
    year = int(u3 + math.floor((u4 - 2.0) / 12.0) - 4800)
    hour = (jd - math.floor(jd + 0.5) + 0.5) * 24.0
    return CalendarDate(year, month, day, hour)
