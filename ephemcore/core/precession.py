# ephemcore/core/precession.py
from __future__ import annotations
"""
IAU 1976 precession (Lieske 1979) of equatorial rectangular vectors.

    precess(v, jd_tt, J2000_TO_DATE)  mean equator/equinox J2000 → of date
    precess(v, jd_tt, DATE_TO_J2000)  the inverse (transposed matrix)

Angles ζ, z, θ are the quintic polynomials of the reference expansion.
Velocity vectors are rotated with a second, separate call.
"""

import math
from typing import Sequence, Tuple

from ephemcore.core.coords import ARCSEC_TO_RAD
from ephemcore.core.julian import J2000

__all__ = ["J2000_TO_DATE", "DATE_TO_J2000", "precess", "precession_angles"]

J2000_TO_DATE = -1
DATE_TO_J2000 = 1


def precession_angles(t: float) -> Tuple[float, float, float]:
    """(ζ, z, θ) in radians for T Julian centuries of TT from J2000."""
    zeta = (((((-0.0000002 * t - 0.0000327) * t + 0.0179663) * t
              + 0.3019015) * t + 2306.2181) * t) * ARCSEC_TO_RAD
    z = (((((-0.0000003 * t - 0.000047) * t + 0.0182237) * t
           + 1.0947790) * t + 2306.2181) * t) * ARCSEC_TO_RAD
    theta = ((((-0.0000001 * t - 0.0000601) * t - 0.0418251) * t
              - 0.4269353) * t + 2004.3109) * t * ARCSEC_TO_RAD
    return zeta, z, theta


def precess(r: Sequence[float], jd_tt: float, direction: int) -> Tuple[float, float, float]:
    if direction not in (J2000_TO_DATE, DATE_TO_J2000):
        raise ValueError(f"precession direction must be -1 or +1, got {direction!r}")

    zeta, z, theta = precession_angles((jd_tt - J2000) / 36525.0)
    sin_th, cos_th = math.sin(theta), math.cos(theta)
    sin_zeta, cos_zeta = math.sin(zeta), math.cos(zeta)
    sin_z, cos_z = math.sin(z), math.cos(z)
    a = cos_zeta * cos_th
    b = sin_zeta * cos_th

    # rows of the J2000 → date matrix
    m00 = a * cos_z - sin_zeta * sin_z
    m01 = -(b * cos_z + cos_zeta * sin_z)
    m02 = -sin_th * cos_z
    m10 = a * sin_z + sin_zeta * cos_z
    m11 = -(b * sin_z - cos_zeta * cos_z)
    m12 = -sin_th * sin_z
    m20 = cos_zeta * sin_th
    m21 = -sin_zeta * sin_th
    m22 = cos_th

    x, y, w = r[0], r[1], r[2]
    if direction == J2000_TO_DATE:
        return (
            m00 * x + m01 * y + m02 * w,
            m10 * x + m11 * y + m12 * w,
            m20 * x + m21 * y + m22 * w,
        )
    return (
        m00 * x + m10 * y + m20 * w,
        m01 * x + m11 * y + m21 * w,
        m02 * x + m12 * y + m22 * w,
    )
