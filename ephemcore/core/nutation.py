# ephemcore/core/nutation.py
from __future__ import annotations
"""
Nutation in longitude and obliquity: IAU 1980 series plus the Herring (1987)
corrections.

Table rows are 9 integers:

    (MM, MS, FF, DD, OM, LS, LS2, OC, OC2)

  • MM..OM   multipliers of the five fundamental arguments
             (Moon mean anomaly, Sun mean anomaly, Moon argument of latitude,
             elongation, ascending node)
  • LS, OC   longitude / obliquity amplitudes, units of 0.0001″
  • LS2, OC2 secular rates of those amplitudes, 0.00001″ per century

A first field of 101 or 102 marks a Herring row: the flag stands in for the
MM multiplier (which is then 0) and both amplitudes are scaled by 0.1.
Rows flagged 102 take cos for longitude and sin for obliquity.

The leading term (18.6 yr node term) is evaluated separately from the table.
"""

import math
from typing import Tuple

from ephemcore.core.coords import DEG_TO_RAD, normalize_deg
from ephemcore.core.harmonics import AngleTables
from ephemcore.core.julian import J2000

__all__ = ["NUTATION_TABLE", "nutation", "nutation_t"]

_HERRING_COS = 102

# highest multiple of each fundamental argument referenced by the table
_MAX_MULTIPLE = (3, 2, 4, 4, 2)

NUTATION_TABLE: Tuple[Tuple[int, ...], ...] = (
    (0, 0, 0, 0, 2, 2062, 2, -895, 5),
    (-2, 0, 2, 0, 1, 46, 0, -24, 0),
    (2, 0, -2, 0, 0, 11, 0, 0, 0),
    (-2, 0, 2, 0, 2, -3, 0, 1, 0),
    (1, -1, 0, -1, 0, -3, 0, 0, 0),
    (0, -2, 2, -2, 1, -2, 0, 1, 0),
    (2, 0, -2, 0, 1, 1, 0, 0, 0),
    (0, 0, 2, -2, 2, -13187, -16, 5736, -31),
    (0, 1, 0, 0, 0, 1426, -34, 54, -1),
    (0, 1, 2, -2, 2, -517, 12, 224, -6),
    (0, -1, 2, -2, 2, 217, -5, -95, 3),
    (0, 0, 2, -2, 1, 129, 1, -70, 0),
    (2, 0, 0, -2, 0, 48, 0, 1, 0),
    (0, 0, 2, -2, 0, -22, 0, 0, 0),
    (0, 2, 0, 0, 0, 17, -1, 0, 0),
    (0, 1, 0, 0, 1, -15, 0, 9, 0),
    (0, 2, 2, -2, 2, -16, 1, 7, 0),
    (0, -1, 0, 0, 1, -12, 0, 6, 0),
    (-2, 0, 0, 2, 1, -6, 0, 3, 0),
    (0, -1, 2, -2, 1, -5, 0, 3, 0),
    (2, 0, 0, -2, 1, 4, 0, -2, 0),
    (0, 1, 2, -2, 1, 4, 0, -2, 0),
    (1, 0, 0, -1, 0, -4, 0, 0, 0),
    (2, 1, 0, -2, 0, 1, 0, 0, 0),
    (0, 0, -2, 2, 1, 1, 0, 0, 0),
    (0, 1, -2, 2, 0, -1, 0, 0, 0),
    (0, 1, 0, 0, 2, 1, 0, 0, 0),
    (-1, 0, 0, 1, 1, 1, 0, 0, 0),
    (0, 1, 2, -2, 0, -1, 0, 0, 0),
    (0, 0, 2, 0, 2, -2274, -2, 977, -5),
    (1, 0, 0, 0, 0, 712, 1, -7, 0),
    (0, 0, 2, 0, 1, -386, -4, 200, 0),
    (1, 0, 2, 0, 2, -301, 0, 129, -1),
    (1, 0, 0, -2, 0, -158, 0, -1, 0),
    (-1, 0, 2, 0, 2, 123, 0, -53, 0),
    (0, 0, 0, 2, 0, 63, 0, -2, 0),
    (1, 0, 0, 0, 1, 63, 1, -33, 0),
    (-1, 0, 0, 0, 1, -58, -1, 32, 0),
    (-1, 0, 2, 2, 2, -59, 0, 26, 0),
    (1, 0, 2, 0, 1, -51, 0, 27, 0),
    (0, 0, 2, 2, 2, -38, 0, 16, 0),
    (2, 0, 0, 0, 0, 29, 0, -1, 0),
    (1, 0, 2, -2, 2, 29, 0, -12, 0),
    (2, 0, 2, 0, 2, -31, 0, 13, 0),
    (0, 0, 2, 0, 0, 26, 0, -1, 0),
    (-1, 0, 2, 0, 1, 21, 0, -10, 0),
    (-1, 0, 0, 2, 1, 16, 0, -8, 0),
    (1, 0, 0, -2, 1, -13, 0, 7, 0),
    (-1, 0, 2, 2, 1, -10, 0, 5, 0),
    (1, 1, 0, -2, 0, -7, 0, 0, 0),
    (0, 1, 2, 0, 2, 7, 0, -3, 0),
    (0, -1, 2, 0, 2, -7, 0, 3, 0),
    (1, 0, 2, 2, 2, -8, 0, 3, 0),
    (1, 0, 0, 2, 0, 6, 0, 0, 0),
    (2, 0, 2, -2, 2, 6, 0, -3, 0),
    (0, 0, 0, 2, 1, -6, 0, 3, 0),
    (0, 0, 2, 2, 1, -7, 0, 3, 0),
    (1, 0, 2, -2, 1, 6, 0, -3, 0),
    (0, 0, 0, -2, 1, -5, 0, 3, 0),
    (1, -1, 0, 0, 0, 5, 0, 0, 0),
    (2, 0, 2, 0, 1, -5, 0, 3, 0),
    (0, 1, 0, -2, 0, -4, 0, 0, 0),
    (1, 0, -2, 0, 0, 4, 0, 0, 0),
    (0, 0, 0, 1, 0, -4, 0, 0, 0),
    (1, 1, 0, 0, 0, -3, 0, 0, 0),
    (1, 0, 2, 0, 0, 3, 0, 0, 0),
    (1, -1, 2, 0, 2, -3, 0, 1, 0),
    (-1, -1, 2, 2, 2, -3, 0, 1, 0),
    (-2, 0, 0, 0, 1, -2, 0, 1, 0),
    (3, 0, 2, 0, 2, -3, 0, 1, 0),
    (0, -1, 2, 2, 2, -3, 0, 1, 0),
    (1, 1, 2, 0, 2, 2, 0, -1, 0),
    (-1, 0, 2, -2, 1, -2, 0, 1, 0),
    (2, 0, 0, 0, 1, 2, 0, -1, 0),
    (1, 0, 0, 0, 2, -2, 0, 1, 0),
    (3, 0, 0, 0, 0, 2, 0, 0, 0),
    (0, 0, 2, 1, 2, 2, 0, -1, 0),
    (-1, 0, 0, 0, 2, 1, 0, -1, 0),
    (1, 0, 0, -4, 0, -1, 0, 0, 0),
    (-2, 0, 2, 2, 2, 1, 0, -1, 0),
    (-1, 0, 2, 4, 2, -2, 0, 1, 0),
    (2, 0, 0, -4, 0, -1, 0, 0, 0),
    (1, 1, 2, -2, 2, 1, 0, -1, 0),
    (1, 0, 2, 2, 1, -1, 0, 1, 0),
    (-2, 0, 2, 4, 2, -1, 0, 1, 0),
    (-1, 0, 4, 0, 2, 1, 0, 0, 0),
    (1, -1, 0, -2, 0, 1, 0, 0, 0),
    (2, 0, 2, -2, 1, 1, 0, -1, 0),
    (2, 0, 2, 2, 2, -1, 0, 0, 0),
    (1, 0, 0, 2, 1, -1, 0, 0, 0),
    (0, 0, 4, -2, 2, 1, 0, 0, 0),
    (3, 0, 2, -2, 2, 1, 0, 0, 0),
    (1, 0, 2, -2, 0, -1, 0, 0, 0),
    (0, 1, 2, 0, 1, 1, 0, 0, 0),
    (-1, -1, 0, 2, 1, 1, 0, 0, 0),
    (0, 0, -2, 0, 1, -1, 0, 0, 0),
    (0, 0, 2, -1, 2, -1, 0, 0, 0),
    (0, 1, 0, 2, 0, -1, 0, 0, 0),
    (1, 0, -2, -2, 0, -1, 0, 0, 0),
    (0, -1, 2, 0, 1, -1, 0, 0, 0),
    (1, 1, 0, -2, 1, -1, 0, 0, 0),
    (1, 0, -2, 2, 0, -1, 0, 0, 0),
    (2, 0, 0, 2, 0, 1, 0, 0, 0),
    (0, 0, 2, 4, 2, -1, 0, 0, 0),
    (0, 1, 0, 1, 0, 1, 0, 0, 0),
    (101, 0, 0, 0, 1, -725, 0, 213, 0),
    (101, 1, 0, 0, 0, 523, 0, 208, 0),
    (101, 0, 2, -2, 2, 102, 0, -41, 0),
    (101, 0, 2, 0, 2, -81, 0, 32, 0),
    (102, 0, 0, 0, 1, 417, 0, 224, 0),
    (102, 1, 0, 0, 0, 61, 0, -24, 0),
    (102, 0, 2, -2, 2, -118, 0, -47, 0),
)


def _fundamental_arguments(t: float) -> Tuple[float, float, float, float, float]:
    """(MM, MS, FF, DD, OM) in radians; FK5 polynomials in arcseconds."""
    t2 = t * t
    om = normalize_deg((-6962890.539 * t + 450160.280 + (0.008 * t + 7.455) * t2) / 3600.0)
    ms = normalize_deg((129596581.224 * t + 1287099.804 - (0.012 * t + 0.577) * t2) / 3600.0)
    mm = normalize_deg((1717915922.633 * t + 485866.733 + (0.064 * t + 31.310) * t2) / 3600.0)
    ff = normalize_deg((1739527263.137 * t + 335778.877 + (0.011 * t - 13.257) * t2) / 3600.0)
    dd = normalize_deg((1602961601.328 * t + 1072261.307 + (0.019 * t - 6.891) * t2) / 3600.0)
    return (
        mm * DEG_TO_RAD,
        ms * DEG_TO_RAD,
        ff * DEG_TO_RAD,
        dd * DEG_TO_RAD,
        om * DEG_TO_RAD,
    )


def nutation_t(t: float) -> Tuple[float, float]:
    """(Δψ, Δε) in radians for T Julian centuries of TT from J2000."""
    tables = AngleTables(_fundamental_arguments(t), _MAX_MULTIPLE)
    node = tables[4]

    dpsi = (-0.01742 * t - 17.1996) * node.sin[0]
    deps = (0.00089 * t + 9.2025) * node.cos[0]

    for row in NUTATION_TABLE:
        flag = row[0]
        multiples = (0 if flag > 100 else flag,) + row[1:5]
        sv, cv = tables.combine_row(multiples)

        f = row[5] * 0.0001
        if row[6]:
            f += 0.00001 * t * row[6]
        g = row[7] * 0.0001
        if row[8]:
            g += 0.00001 * t * row[8]
        if flag >= 100:
            f *= 0.1
            g *= 0.1

        if flag == _HERRING_COS:
            dpsi += f * cv
            deps += g * sv
        else:
            dpsi += f * sv
            deps += g * cv

    return DEG_TO_RAD * dpsi / 3600.0, DEG_TO_RAD * deps / 3600.0


def nutation(jd_tt: float) -> Tuple[float, float]:
    return nutation_t((jd_tt - J2000) / 36525.0)
