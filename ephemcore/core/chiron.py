# ephemcore/core/chiron.py
from __future__ import annotations
"""
Chiron: sampled longitude/speed table + cubic Hermite interpolation.

The table holds geocentric apparent longitudes (degrees) and speeds
(degrees/day) on a fixed UT grid and is looked up by UT. It is built once
from osculating elements of (2060) Chiron, propagated as a two-body orbit
and viewed from the Earth of ephemcore.core.planets through the shared
apparent-place pipeline. Queries outside the sampled span raise OutOfRange;
there is no extrapolation.
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from ephemcore.core.coords import DEG_TO_RAD, normalize_deg, normalize_rad, rotate_x
from ephemcore.core.errors import OutOfRange
from ephemcore.core.julian import J2000
from ephemcore.core.obliquity import mean_obliquity
from ephemcore.core.pipeline import equ2000_to_ecliptic_of_date
from ephemcore.core.planet_tables import eccentric_anomaly
from ephemcore.core.planets import earth_heliocentric
from ephemcore.core.timescales import DeltaT, resolve_delta_t
from ephemcore.utils.config import get_settings

__all__ = [
    "ChironTable",
    "OutOfRange",
    "chiron_heliocentric",
    "build_chiron_table",
    "default_table",
    "chiron",
]

log = logging.getLogger(__name__)

Vector6 = Tuple[float, float, float, float, float, float]

# osculating elements, ecliptic and equinox J2000
CHIRON_A = 13.70                    # AU
CHIRON_E = 0.379
CHIRON_INCL = 6.93                  # deg
CHIRON_NODE = 209.35                # deg
CHIRON_PERI_ARG = 339.4             # deg
CHIRON_PERIHELION_JD = 2450128.5    # TT
GAUSS_DAILY_MOTION = 0.9856076686   # deg/day at a = 1 AU

_EPS_J2000 = mean_obliquity(J2000)


@dataclass(frozen=True)
class ChironTable:
    jd_start: float
    step: float
    count: int
    longitudes: Tuple[float, ...]
    speeds: Tuple[float, ...]

    @property
    def jd_end(self) -> float:
        return self.jd_start + (self.count - 1) * self.step


# ───────────────────────────── two-body orbit ─────────────────────────────

def chiron_heliocentric(jd_tt: float) -> Vector6:
    """Heliocentric equatorial J2000 position (AU) and velocity (AU/day)."""
    a, e = CHIRON_A, CHIRON_E
    n = GAUSS_DAILY_MOTION / a ** 1.5 * DEG_TO_RAD
    m = normalize_rad(n * (jd_tt - CHIRON_PERIHELION_JD))
    ea = eccentric_anomaly(m, e)
    cos_e, sin_e = math.cos(ea), math.sin(ea)
    b = a * math.sqrt(1.0 - e * e)
    e_dot = n / (1.0 - e * cos_e)

    xp, yp = a * (cos_e - e), b * sin_e
    vxp, vyp = -a * sin_e * e_dot, b * cos_e * e_dot

    w = CHIRON_PERI_ARG * DEG_TO_RAD
    node = CHIRON_NODE * DEG_TO_RAD
    incl = CHIRON_INCL * DEG_TO_RAD
    cw, sw = math.cos(w), math.sin(w)
    cn, sn = math.cos(node), math.sin(node)
    ci, si = math.cos(incl), math.sin(incl)
    p = (cw * cn - sw * sn * ci, cw * sn + sw * cn * ci, sw * si)
    q = (-sw * cn - cw * sn * ci, -sw * sn + cw * cn * ci, cw * si)

    ecl = tuple(xp * p[k] + yp * q[k] for k in range(3)) + tuple(
        vxp * p[k] + vyp * q[k] for k in range(3)
    )
    return rotate_x(ecl, -_EPS_J2000)  # type: ignore[return-value]


def _sample(jd_ut: float, delta_t: DeltaT) -> Tuple[float, float]:
    jd_tt = jd_ut + delta_t(jd_ut)
    body = chiron_heliocentric(jd_tt)
    earth = earth_heliocentric(jd_tt)
    geo = tuple(c - e for c, e in zip(body, earth))
    lon, _, _, speed, _, _ = equ2000_to_ecliptic_of_date(geo, jd_tt)
    return lon, speed


def build_chiron_table(
    jd_start: float, step: float, count: int, delta_t: Optional[DeltaT] = None
) -> ChironTable:
    """Sample UT grid jd_start + i·step; each sample is evaluated at TT = UT + ΔT."""
    if count < 2:
        raise ValueError(f"Chiron table needs at least 2 samples, got {count}")
    if not step > 0.0:
        raise ValueError(f"Chiron table step must be positive, got {step}")
    to_tt = resolve_delta_t(delta_t)
    lons = []
    speeds = []
    for i in range(count):
        lon, speed = _sample(jd_start + i * step, to_tt)
        lons.append(lon)
        speeds.append(speed)
    return ChironTable(jd_start, step, count, tuple(lons), tuple(speeds))


@lru_cache(maxsize=1)
def default_table() -> ChironTable:
    s = get_settings()
    log.info(
        "building Chiron table: start=%s step=%s count=%s",
        s.chiron_start, s.chiron_step, s.chiron_count,
    )
    return build_chiron_table(s.chiron_start, s.chiron_step, s.chiron_count)


# ───────────────────────────── interpolation ─────────────────────────────

def chiron(jd: float, table: Optional[ChironTable] = None) -> Tuple[float, float]:
    """
    (longitude deg [0, 360), speed deg/day) at ``jd`` (UT) by cubic Hermite
    interpolation. The ΔT of the caller does not reach the lookup; the table
    was sampled with the configured one.
    """
    tbl = table if table is not None else default_table()
    if not (tbl.jd_start <= jd <= tbl.jd_end):
        raise OutOfRange(jd, tbl.jd_start, tbl.jd_end)

    pos = (jd - tbl.jd_start) / tbl.step
    i = int(math.floor(pos))
    t = pos - i
    i0 = min(i, tbl.count - 2)
    if i0 != i:
        t = pos - i0

    p0 = tbl.longitudes[i0]
    dp = tbl.longitudes[i0 + 1] - p0
    if dp > 180.0:
        dp -= 360.0
    elif dp < -180.0:
        dp += 360.0
    p1 = p0 + dp

    m0 = tbl.speeds[i0] * tbl.step
    m1 = tbl.speeds[i0 + 1] * tbl.step

    t2 = t * t
    t3 = t2 * t
    h00 = 2 * t3 - 3 * t2 + 1
    h10 = t3 - 2 * t2 + t
    h01 = -2 * t3 + 3 * t2
    h11 = t3 - t2
    lon = h00 * p0 + h10 * m0 + h01 * p1 + h11 * m1

    dh00 = 6 * t2 - 6 * t
    dh10 = 3 * t2 - 4 * t + 1
    dh01 = -6 * t2 + 6 * t
    dh11 = 3 * t2 - 2 * t
    speed = (dh00 * p0 + dh10 * m0 + dh01 * p1 + dh11 * m1) / tbl.step

    return normalize_deg(lon), speed
