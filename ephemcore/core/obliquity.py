# ephemcore/core/obliquity.py
from __future__ import annotations
"""
Mean obliquity of the ecliptic, IAU 1976 (Lieske et al. 1977).

  ε0 = 84381.448″ − 46.8150″ T − 0.00059″ T² + 0.001813″ T³

T is Julian centuries of TT from J2000.0. Results are radians.
"""

from ephemcore.core.coords import ARCSEC_TO_RAD
from ephemcore.core.julian import J2000

__all__ = ["mean_obliquity", "mean_obliquity_t"]


def mean_obliquity_t(t: float) -> float:
    return (((1.813e-3 * t - 5.9e-4) * t - 46.8150) * t + 84381.448) * ARCSEC_TO_RAD


def mean_obliquity(jd_tt: float) -> float:
    return mean_obliquity_t((jd_tt - J2000) / 36525.0)
