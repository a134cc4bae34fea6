# ephemcore/core/pipeline.py
from __future__ import annotations
"""
Apparent-place pipeline shared by the Sun, Moon and planets.

  geocentric equatorial J2000 (x, y, z, vx, vy, vz)
    1. precess position, then velocity, J2000 → mean equator of date
    2. nutate: first-order rotation with Δψ, Δε and the mean obliquity
    3. rotate_x(+ε_true): equatorial → ecliptic of date
    4. cartesian → polar, radians → degrees
"""

import math
from typing import Sequence, Tuple

from ephemcore.core.coords import RAD_TO_DEG, cart_to_polar, normalize_deg, rotate_x
from ephemcore.core.nutation import nutation
from ephemcore.core.obliquity import mean_obliquity
from ephemcore.core.precession import J2000_TO_DATE, precess

__all__ = ["nutate", "equ2000_to_ecliptic_of_date"]

Vector6 = Tuple[float, float, float, float, float, float]


def nutate(x: Sequence[float], dpsi: float, deps: float, eps_mean: float) -> Tuple[float, ...]:
    """
    Mean equator of date → true equator of date, linearised in Δψ and Δε.

    Works on 3 or 6 components; velocity gets the same rotation.
    """
    a = dpsi * math.cos(eps_mean)
    b = dpsi * math.sin(eps_mean)

    def turn(p0: float, p1: float, p2: float) -> Tuple[float, float, float]:
        return (
            p0 - a * p1 - b * p2,
            a * p0 + p1 - deps * p2,
            b * p0 + deps * p1 + p2,
        )

    out = turn(x[0], x[1], x[2])
    if len(x) < 6:
        return out
    return out + turn(x[3], x[4], x[5])


def equ2000_to_ecliptic_of_date(x: Sequence[float], jd_tt: float) -> Vector6:
    """
    Geocentric equatorial J2000 6-vector → apparent ecliptic of date:
    (lon deg [0, 360), lat deg, r AU, dlon deg/day, dlat deg/day, dr AU/day).
    """
    eps_mean = mean_obliquity(jd_tt)
    dpsi, deps = nutation(jd_tt)

    pos = precess(x[0:3], jd_tt, J2000_TO_DATE)
    vel = precess(x[3:6], jd_tt, J2000_TO_DATE)
    eq = nutate(pos + vel, dpsi, deps, eps_mean)
    ecl = rotate_x(eq, eps_mean + deps)
    lon, lat, r, dlon, dlat, dr = cart_to_polar(ecl)
    return (
        normalize_deg(lon * RAD_TO_DEG),
        lat * RAD_TO_DEG,
        r,
        dlon * RAD_TO_DEG,
        dlat * RAD_TO_DEG,
        dr,
    )
