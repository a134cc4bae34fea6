# ephemcore/core/planets.py
from __future__ import annotations
"""
Moshier-style planetary theory: heliocentric positions of Mercury … Pluto and
of the Earth, as J2000 equatorial rectangular vectors with velocity.

Flow for a planet P at JD(TT) t:

  evaluate_table(t, table[P])         ecliptic J2000 (lon, lat, r)
    → polar_to_cart → rotate_x(−ε2000) equatorial J2000
  earth = same for the EMB table, then emb_correction (short lunar series)
  velocities: (x(t) − x(t − 0.1 d)) / 0.1 d for both bodies
  geocentric(P) = P − Earth;  geocentric(Sun) = −Earth
"""

import logging
import math
from typing import List, Sequence, Tuple

from ephemcore.core.coords import (
    ARCSEC_TO_RAD,
    DEG_TO_RAD,
    normalize_deg,
    polar_to_cart,
    rotate_x,
)
from ephemcore.core.harmonics import AngleTables
from ephemcore.core.julian import J1900, J2000
from ephemcore.core.obliquity import mean_obliquity
from ephemcore.core.planet_tables import (
    PLANET_TABLES,
    TABLE_INDEX,
    PlanetTable,
    mods3600,
    simon_longitude,
)
from ephemcore.core.precession import DATE_TO_J2000, precess

__all__ = [
    "PLANET_NAMES",
    "PLANET_SPEED_INTERVAL",
    "EARTH_MOON_MASS_RATIO",
    "evaluate_table",
    "emb_correction",
    "earth_heliocentric",
    "planet_heliocentric",
    "geocentric",
]

log = logging.getLogger(__name__)

Vector6 = Tuple[float, float, float, float, float, float]

TIMESCALE = 3652500.0
PLANET_SPEED_INTERVAL = 0.1     # days
EARTH_MOON_MASS_RATIO = 81.30056

_EPS_J2000 = mean_obliquity(J2000)

# bodies with their own series; the EMB table only feeds the Earth
PLANET_NAMES = tuple(name for name in TABLE_INDEX if name != "emb")

# ───────────────────────────── series evaluator ─────────────────────────────

def evaluate_table(jd_tt: float, table: PlanetTable) -> Tuple[float, float, float]:
    """
    Heliocentric ecliptic J2000 (lon rad, lat rad, r AU) from one table.

    Multiple-angle tables are built for exactly the frequencies the table
    uses, up to the harmonic it needs.
    """
    t = (jd_tt - J2000) / TIMESCALE
    angles = [
        simon_longitude(i, t) * ARCSEC_TO_RAD if n > 0 else 0.0
        for i, n in enumerate(table.max_harmonic)
    ]
    tables = AngleTables(angles, table.max_harmonic)

    args = table.arg_tbl
    lons, lats, rads = table.lon_tbl, table.lat_tbl, table.rad_tbl
    p = pl = pb = pr = 0
    sl = sb = sr = 0.0

    while True:
        np_ = args[p]
        p += 1
        if np_ < 0:
            break

        if np_ == 0:
            nt = args[p]
            p += 1
            cu = lons[pl]
            pl += 1
            for _ in range(nt):
                cu = cu * t + lons[pl]
                pl += 1
            sl += mods3600(cu)

            cu = lats[pb]
            pb += 1
            for _ in range(nt):
                cu = cu * t + lats[pb]
                pb += 1
            sb += cu

            cu = rads[pr]
            pr += 1
            for _ in range(nt):
                cu = cu * t + rads[pr]
                pr += 1
            sr += cu
            continue

        pairs: List[Tuple[int, int]] = []
        for _ in range(np_):
            pairs.append((args[p], args[p + 1] - 1))
            p += 2
        sv, cv = tables.combine(pairs)

        nt = args[p]
        p += 1
        sl += _periodic(lons, pl, nt, t, cv, sv)
        sb += _periodic(lats, pb, nt, t, cv, sv)
        sr += _periodic(rads, pr, nt, t, cv, sv)
        step = 2 * (nt + 1)
        pl += step
        pb += step
        pr += step

    return (
        ARCSEC_TO_RAD * sl,
        ARCSEC_TO_RAD * sb,
        ARCSEC_TO_RAD * table.distance * sr + table.distance,
    )


def _periodic(tbl: Sequence[float], i: int, nt: int, t: float, cv: float, sv: float) -> float:
    cu = tbl[i]
    su = tbl[i + 1]
    i += 2
    for _ in range(nt):
        cu = cu * t + tbl[i]
        su = su * t + tbl[i + 1]
        i += 2
    return cu * cv + su * sv


# ───────────────────────────── Earth-Moon barycentre → Earth ─────────────────────────────

def emb_correction(jd_tt: float, xemb: Sequence[float]) -> Tuple[float, float, float]:
    """
    Shift an EMB equatorial J2000 position to the Earth's centre.

    The Moon comes from a short closed-form series (J1900 mean elements,
    principal terms only) rather than the full lunar theory.
    """
    t = (jd_tt - J1900) / 36525.0

    # Moon mean anomaly
    a = normalize_deg(((1.44e-5 * t + 0.009192) * t + 477198.8491) * t + 296.104608) * DEG_TO_RAD
    smp, cmp_ = math.sin(a), math.cos(a)
    s2mp = 2.0 * smp * cmp_
    c2mp = cmp_ * cmp_ - smp * smp
    # twice the mean elongation
    a = 2.0 * DEG_TO_RAD * normalize_deg(((1.9e-6 * t - 0.001436) * t + 445267.1142) * t + 350.737486)
    s2d, c2d = math.sin(a), math.cos(a)
    # argument of latitude
    a = normalize_deg(((-3e-7 * t - 0.003211) * t + 483202.0251) * t + 11.250889) * DEG_TO_RAD
    sf, cf = math.sin(a), math.cos(a)
    s2f = 2.0 * sf * cf
    sx = s2d * cmp_ - c2d * smp  # sin(2D − l)

    lon = ((1.9e-6 * t - 0.001133) * t + 481267.8831) * t + 270.434164
    sun_m = normalize_deg(((-3.3e-6 * t - 1.50e-4) * t + 35999.0498) * t + 358.475833)
    lon += (
        6.288750 * smp
        + 1.274018 * sx
        + 0.658309 * s2d
        + 0.213616 * s2mp
        - 0.185596 * math.sin(DEG_TO_RAD * sun_m)
        - 0.114336 * s2f
    )

    smp_cf = smp * cf
    cmp_sf = cmp_ * sf
    lat = (
        5.128189 * sf
        + 0.280606 * (smp_cf + cmp_sf)
        + 0.277693 * (smp_cf - cmp_sf)
        + 0.173238 * (s2d * cf - c2d * sf)
    ) * DEG_TO_RAD

    parallax = (
        0.950724
        + 0.051818 * cmp_
        + 0.009531 * (c2d * cmp_ + s2d * smp)
        + 0.007843 * c2d
        + 0.002824 * c2mp
    ) * DEG_TO_RAD
    dist = 4.263523e-5 / math.sin(parallax)

    moon = polar_to_cart((normalize_deg(lon) * DEG_TO_RAD, lat, dist))
    moon = rotate_x(moon, -mean_obliquity(jd_tt))
    moon = precess(moon, jd_tt, DATE_TO_J2000)

    k = 1.0 / (EARTH_MOON_MASS_RATIO + 1.0)
    return (xemb[0] - moon[0] * k, xemb[1] - moon[1] * k, xemb[2] - moon[2] * k)


# ───────────────────────────── heliocentric vectors ─────────────────────────────

def _equatorial_j2000(jd_tt: float, table: PlanetTable) -> Tuple[float, float, float]:
    return rotate_x(polar_to_cart(evaluate_table(jd_tt, table)), -_EPS_J2000)  # type: ignore[return-value]


def _with_backward_speed(
    now: Sequence[float], before: Sequence[float]
) -> Vector6:
    dt = PLANET_SPEED_INTERVAL
    return (
        now[0], now[1], now[2],
        (now[0] - before[0]) / dt,
        (now[1] - before[1]) / dt,
        (now[2] - before[2]) / dt,
    )


def earth_heliocentric(jd_tt: float) -> Vector6:
    """Heliocentric equatorial J2000 position and velocity of the Earth."""
    emb = PLANET_TABLES[TABLE_INDEX["emb"]]
    t0 = jd_tt - PLANET_SPEED_INTERVAL
    now = emb_correction(jd_tt, _equatorial_j2000(jd_tt, emb))
    before = emb_correction(t0, _equatorial_j2000(t0, emb))
    return _with_backward_speed(now, before)


def planet_heliocentric(jd_tt: float, body: str) -> Vector6:
    """Heliocentric equatorial J2000 position and velocity of ``body``."""
    if body not in PLANET_NAMES:
        raise ValueError(f"no planetary series for body '{body}'")
    table = PLANET_TABLES[TABLE_INDEX[body]]
    now = _equatorial_j2000(jd_tt, table)
    before = _equatorial_j2000(jd_tt - PLANET_SPEED_INTERVAL, table)
    return _with_backward_speed(now, before)


def geocentric(jd_tt: float, body: str) -> Vector6:
    """Geocentric equatorial J2000 6-vector; ``body == "sun"`` gives −Earth."""
    earth = earth_heliocentric(jd_tt)
    if body == "sun":
        return tuple(-c for c in earth)  # type: ignore[return-value]
    planet = planet_heliocentric(jd_tt, body)
    log.debug("geocentric %s at JD(TT) %.6f", body, jd_tt)
    return tuple(p - e for p, e in zip(planet, earth))  # type: ignore[return-value]
