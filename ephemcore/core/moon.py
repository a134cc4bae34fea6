# ephemcore/core/moon.py
from __future__ import annotations
"""
Lunar theory (Moshier, DE404 fit): geocentric position of the Moon.

One evaluation runs six passes over a call-scoped state object:

  1. mean elements        M, NF, MP, D, L   (arcsec, DE404 secular terms)
  2. planet longitudes    Ve, Ea, Ma, Ju, Sa
  3. big terms            T² and T¹ tables plus literal planetary terms
  4. small terms          T⁰ literal longitude and latitude corrections
  5. main series          T⁰ longitude/radius and latitude tables
  6. assembly             1e-4″ and km → radians and AU

moon_geocentric() runs the passes at t and t ± 0.1 d and takes the velocity
from the parabola through the three samples.
"""

import logging
import math
from typing import List, Sequence, Tuple

from ephemcore.core.coords import ARCSEC_TO_RAD, polar_to_cart, rotate_x
from ephemcore.core.harmonics import AngleTables
from ephemcore.core.julian import J2000
from ephemcore.core.moon_tables import (
    BT,
    BT2,
    LR,
    LRT,
    LRT2,
    MB,
    MOON_MEAN_DIST_KM,
    SECULAR_Z as Z,
)
from ephemcore.core.obliquity import mean_obliquity
from ephemcore.core.planet_tables import mods3600
from ephemcore.core.precession import DATE_TO_J2000, precess

__all__ = [
    "MOON_SPEED_INTERVAL",
    "LON_RAD_LARGE",
    "LON_RAD",
    "LAT_LARGE",
    "LAT",
    "sum_series",
    "moon_ecliptic_of_date",
    "moon_geocentric",
]

log = logging.getLogger(__name__)

Vector6 = Tuple[float, float, float, float, float, float]

STR = ARCSEC_TO_RAD
AUNIT = 1.49597870700e11        # metres
MOON_SPEED_INTERVAL = 0.1       # days

# row kinds
LON_RAD_LARGE = 1
LON_RAD = 2
LAT_LARGE = 3
LAT = 4


def sum_series(rows: Sequence[Sequence[float]], tables: AngleTables, kind: int, acc: List[float]) -> None:
    """
    Accumulate one lunar table into ``acc`` = [lon, lat, rad].

    The first four entries of every row are the multiples of D, M, MP, NF;
    the amplitudes that follow are read according to ``kind``.
    """
    for row in rows:
        sv, cv = tables.combine_row(row[:4])
        if kind == LON_RAD_LARGE:
            j1, k1, j2, k2 = row[4], row[5], row[6], row[7]
            acc[0] += (10000.0 * j1 + k1) * sv
            if j2 or k2:
                acc[2] += (10000.0 * j2 + k2) * cv
        elif kind == LON_RAD:
            acc[0] += row[4] * sv
            acc[2] += row[5] * cv
        elif kind == LAT_LARGE:
            acc[1] += (10000.0 * row[4] + row[5]) * sv
        elif kind == LAT:
            acc[1] += row[4] * sv
        else:
            raise ValueError(f"unknown lunar row kind {kind!r}")


class _LunarState:
    """Scratch for one evaluation of the lunar series."""

    def __init__(self, jd_tt: float) -> None:
        self.T = (jd_tt - J2000) / 36525.0
        self.T2 = self.T * self.T
        # mean elements (arcsec)
        self.M = self.NF = self.MP = self.D = self.L = 0.0
        # mean planetary longitudes (arcsec)
        self.Ve = self.Ea = self.Ma = self.Ju = self.Sa = 0.0
        # longitude corrections by power of T, latitude correction
        self.l = self.l1 = self.l2 = self.l3 = self.l4 = 0.0
        self.B = 0.0
        self.pol: List[float] = [0.0, 0.0, 0.0]
        self.tables: AngleTables

    # ───────────── pass 1 ─────────────

    def mean_elements(self) -> None:
        T, T2 = self.T, self.T2
        frac_t = T - math.trunc(T)

        # Sun's mean anomaly l' (Laskar)
        M = mods3600(129600000.0 * frac_t - 3418.961646 * T + 1287104.76154)
        M += ((((((((
            1.62e-20 * T
            - 1.0390e-17) * T
            - 3.83508e-15) * T
            + 4.237343e-13) * T
            + 8.8555011e-11) * T
            - 4.77258489e-8) * T
            - 1.1297037031e-5) * T
            + 1.4732069041e-4) * T
            - 0.552891801772) * T2

        # argument of latitude F, mean anomaly l, elongation D, mean longitude L
        NF = mods3600(1739232000.0 * frac_t + 295263.0983 * T - 2.079419901760e-01 * T + 335779.55755)
        MP = mods3600(1717200000.0 * frac_t + 715923.4728 * T - 2.035946368532e-01 * T + 485868.28096)
        D = mods3600(1601856000.0 * frac_t + 1105601.4603 * T + 3.962893294503e-01 * T + 1072260.73512)
        L = mods3600(1731456000.0 * frac_t + 1108372.83264 * T - 6.784914260953e-01 * T + 785939.95571)

        NF += ((Z[2] * T + Z[1]) * T + Z[0]) * T2
        MP += ((Z[5] * T + Z[4]) * T + Z[3]) * T2
        D += ((Z[8] * T + Z[7]) * T + Z[6]) * T2
        L += ((Z[11] * T + Z[10]) * T + Z[9]) * T2

        self.M, self.NF, self.MP, self.D, self.L = M, NF, MP, D, L

    # ───────────── pass 2 ─────────────

    def planet_longitudes(self) -> None:
        T, T2 = self.T, self.T2

        Ve = mods3600(210664136.4335482 * T + 655127.283046)
        Ve += ((((((((
            -9.36e-23 * T
            - 1.95e-20) * T
            + 6.097e-18) * T
            + 4.43201e-15) * T
            + 2.509418e-13) * T
            - 3.0622898e-10) * T
            - 2.26602516e-9) * T
            - 1.4244812531e-5) * T
            + 0.005871373088) * T2

        Ea = mods3600(129597742.26669231 * T + 361679.214649)
        Ea += ((((((((
            -1.16e-22 * T
            + 2.976e-19) * T
            + 2.8460e-17) * T
            - 1.08402e-14) * T
            - 1.226182e-12) * T
            + 1.7228268e-10) * T
            + 1.515912254e-7) * T
            + 8.863982531e-6) * T
            - 2.0199859001e-2) * T2

        Ma = mods3600(68905077.59284 * T + 1279559.78866)
        Ma += (-1.043e-5 * T + 9.38012e-3) * T2

        Ju = mods3600(10925660.428608 * T + 123665.342120)
        Ju += (1.543273e-5 * T - 3.06037836351e-1) * T2

        Sa = mods3600(4399609.65932 * T + 180278.89694)
        Sa += ((4.475946e-8 * T - 6.874806e-5) * T + 7.56161437443e-1) * T2

        self.Ve, self.Ea, self.Ma, self.Ju, self.Sa = Ve, Ea, Ma, Ju, Sa

    # ───────────── pass 3 ─────────────

    def big_terms(self) -> None:
        T = self.T
        D, M, MP, NF, L = self.D, self.M, self.MP, self.NF, self.L
        Ve, Ea, Ma, Ju, Sa = self.Ve, self.Ea, self.Ma, self.Ju, self.Sa
        pol = self.pol

        self.tables = AngleTables(
            [STR * D, STR * M, STR * MP, STR * NF],
            [6, 4, 4, 4],
        )
        pol[0] = pol[1] = pol[2] = 0.0

        # terms in T², scale 1e-5″
        sum_series(LRT2, self.tables, LON_RAD, pol)
        sum_series(BT2, self.tables, LAT, pol)

        f = 18 * Ve - 16 * Ea

        # 18V - 16E - l
        g = STR * (f - MP)
        cg, sg = math.cos(g), math.sin(g)
        l = 6.367278 * cg + 12.747036 * sg
        l1 = 23123.70 * cg - 10570.02 * sg
        l2 = Z[12] * cg + Z[13] * sg
        pol[2] += 5.01 * cg + 2.72 * sg

        # 10V - 3E - l
        g = STR * (10.0 * Ve - 3.0 * Ea - MP)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.253102 * cg + 0.503359 * sg
        l1 += 1258.46 * cg + 707.29 * sg
        l2 += Z[14] * cg + Z[15] * sg

        # 8V - 13E
        g = STR * (8.0 * Ve - 13.0 * Ea)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.187231 * cg - 0.127481 * sg
        l1 += -319.87 * cg - 18.34 * sg
        l2 += Z[16] * cg + Z[17] * sg

        # 4E - 8M + 3J
        a = 4.0 * Ea - 8.0 * Ma + 3.0 * Ju
        g = STR * a
        cg, sg = math.cos(g), math.sin(g)
        l += -0.866287 * cg + 0.248192 * sg
        l1 += 41.87 * cg + 1053.97 * sg
        l2 += Z[18] * cg + Z[19] * sg

        # 4E - 8M + 3J - l
        g = STR * (a - MP)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.165009 * cg + 0.044176 * sg
        l1 += 4.67 * cg + 201.55 * sg

        # 18V - 16E
        g = STR * f
        cg, sg = math.cos(g), math.sin(g)
        l += 0.330401 * cg + 0.661362 * sg
        l1 += 1202.67 * cg - 555.59 * sg
        l2 += Z[20] * cg + Z[21] * sg

        # 18V - 16E - 2l
        g = STR * (f - 2.0 * MP)
        cg, sg = math.cos(g), math.sin(g)
        l += 0.352185 * cg + 0.705041 * sg
        l1 += 1283.59 * cg - 586.43 * sg

        # 2J - 5S
        g = STR * (2.0 * Ju - 5.0 * Sa)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.034700 * cg + 0.160041 * sg
        l2 += Z[22] * cg + Z[23] * sg

        # L - F
        g = STR * (L - NF)
        cg, sg = math.cos(g), math.sin(g)
        l += 0.000116 * cg + 7.063040 * sg
        l1 += 298.8 * sg

        # T³
        l3 = Z[24] * math.sin(STR * M)
        l4 = 0.0

        # radius terms in T²
        pol[2] += -0.2655 * math.cos(STR * (2.0 * D - M)) * T
        pol[2] += -0.1568 * math.cos(STR * (M - MP)) * T
        pol[2] += 0.1309 * math.cos(STR * (M + MP)) * T
        pol[2] += 0.5568 * math.cos(STR * (2.0 * (D + M) - MP)) * T

        l2 += pol[0]

        pol[2] += -0.1910 * math.cos(STR * (2.0 * D - M - MP)) * T

        pol[1] *= T
        pol[2] *= T

        # terms in T¹
        pol[0] = 0.0
        sum_series(BT, self.tables, LAT, pol)
        sum_series(LRT, self.tables, LON_RAD_LARGE, pol)

        # 18V - 16E - l - F
        pol[1] += -1127.0 * math.sin(STR * (f - MP - NF - 2355767.6))
        # 18V - 16E - l + F
        pol[1] += -1123.0 * math.sin(STR * (f - MP + NF - 235353.6))
        # E + D
        pol[1] += 1303.0 * math.sin(STR * (Ea + D + 51987.6))
        # L
        pol[1] += 342.0 * math.sin(STR * L)

        # 2V - 3E
        g = STR * (2.0 * Ve - 3.0 * Ea)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.343550 * cg - 0.000276 * sg
        l1 += 105.90 * cg + 336.53 * sg

        # 18V - 16E - 2D
        g = STR * (f - 2.0 * D)
        cg, sg = math.cos(g), math.sin(g)
        l += 0.074668 * cg + 0.149501 * sg
        l1 += 271.77 * cg - 124.20 * sg

        # 18V - 16E - 2D - l
        g = STR * (f - 2.0 * D - MP)
        cg, sg = math.cos(g), math.sin(g)
        l += 0.073444 * cg + 0.147094 * sg
        l1 += 265.24 * cg - 121.16 * sg

        # 18V - 16E + 2D - l
        g = STR * (f + 2.0 * D - MP)
        cg, sg = math.cos(g), math.sin(g)
        l += 0.072844 * cg + 0.145829 * sg
        l1 += 265.18 * cg - 121.29 * sg

        # 18V - 16E + 2D - 2l
        g = STR * (f + 2.0 * (D - MP))
        cg, sg = math.cos(g), math.sin(g)
        l += 0.070201 * cg + 0.140542 * sg
        l1 += 255.36 * cg - 116.79 * sg

        # E + D - F
        g = STR * (Ea + D - NF)
        cg, sg = math.cos(g), math.sin(g)
        l += 0.288209 * cg - 0.025901 * sg
        l1 += -63.51 * cg - 240.14 * sg

        # 2E - 3J + 2D - l
        g = STR * (2.0 * Ea - 3.0 * Ju + 2.0 * D - MP)
        cg, sg = math.cos(g), math.sin(g)
        l += 0.077865 * cg + 0.438460 * sg
        l1 += 210.57 * cg + 124.84 * sg

        # E - 2M
        g = STR * (Ea - 2.0 * Ma)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.216579 * cg + 0.241702 * sg
        l1 += 197.67 * cg + 125.23 * sg

        # 4E - 8M + 3J + l
        g = STR * (a + MP)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.165009 * cg + 0.044176 * sg
        l1 += 4.67 * cg + 201.55 * sg

        # 4E - 8M + 3J + 2D - l
        g = STR * (a + 2.0 * D - MP)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.133533 * cg + 0.041116 * sg
        l1 += 6.95 * cg + 187.07 * sg

        # 4E - 8M + 3J - 2D + l
        g = STR * (a - 2.0 * D + MP)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.133430 * cg + 0.041079 * sg
        l1 += 6.28 * cg + 169.08 * sg

        # 3V - 4E
        g = STR * (3.0 * Ve - 4.0 * Ea)
        cg, sg = math.cos(g), math.sin(g)
        l += -0.175074 * cg + 0.003035 * sg
        l1 += 49.17 * cg + 150.57 * sg

        # 2(E + D - l) - 3J
        l1 += 158.4 * math.sin(STR * (2.0 * (Ea + D - MP) - 3.0 * Ju + 213534.0))

        l1 += pol[0]

        # rescale latitude and radius to 1e-4
        a = 0.1 * T
        pol[1] *= a
        pol[2] *= a

        self.l, self.l1, self.l2, self.l3, self.l4 = l, l1, l2, l3, l4

    # ───────────── pass 4 ─────────────

    def small_terms(self) -> None:
        D, MP, NF, L = self.D, self.MP, self.NF, self.L
        Ve, Ea, Ma, Ju = self.Ve, self.Ea, self.Ma, self.Ju
        f = 18 * Ve - 16 * Ea
        sin = math.sin

        l = self.l
        l += 1.14307 * sin(STR * (2 * (Ea - Ju + D) - MP + 648431.172))
        l += 0.82155 * sin(STR * (Ve - Ea + 648035.568))
        l += 0.64371 * sin(STR * (3 * (Ve - Ea) + 2 * D - MP + 647933.184))
        l += 0.63880 * sin(STR * (Ea - Ju + 4424.04))
        l += 0.49331 * sin(STR * (L + MP - NF + 4.68))
        l += 0.4914 * sin(STR * (L - MP - NF + 4.68))
        l += 0.36061 * sin(STR * (L + NF + 2.52))
        l += 0.30154 * sin(STR * (2.0 * Ve - 2.0 * Ea + 736.2))
        l += 0.28282 * sin(STR * (2.0 * Ea - 3.0 * Ju + 2.0 * D - 2.0 * MP + 36138.2))
        l += 0.24516 * sin(STR * (2.0 * Ea - 2.0 * Ju + 2.0 * D - 2.0 * MP + 311.0))
        l += 0.21117 * sin(STR * (Ea - Ju - 2.0 * D + MP + 6275.88))
        l += 0.19444 * sin(STR * (2.0 * (Ea - Ma) - 846.36))
        l -= 0.18457 * sin(STR * (2.0 * (Ea - Ju) + 1569.96))
        l += 0.18256 * sin(STR * (2.0 * (Ea - Ju) - MP - 55.8))
        l += 0.16499 * sin(STR * (Ea - Ju - 2.0 * D + 6490.08))
        l += 0.16427 * sin(STR * (Ea - 2.0 * Ju - 212378.4))
        l += 0.16088 * sin(STR * (2.0 * (Ve - Ea - D) + MP + 1122.48))
        l -= 0.15350 * sin(STR * (Ve - Ea - MP + 32.04))
        l += 0.14346 * sin(STR * (Ea - Ju - MP + 4488.88))
        l += 0.13594 * sin(STR * (2.0 * (Ve - Ea + D) - MP - 8.64))
        l += 0.13432 * sin(STR * (2.0 * (Ve - Ea - D) + 1319.76))
        l -= 0.13122 * sin(STR * (Ve - Ea - 2.0 * D + MP - 56.16))
        l -= 0.12722 * sin(STR * (Ve - Ea + MP + 54.36))
        l += 0.12539 * sin(STR * (3.0 * (Ve - Ea) - MP + 433.8))
        l += 0.10994 * sin(STR * (Ea - Ju + MP + 4002.12))
        l += 0.10652 * sin(STR * (20.0 * Ve - 21.0 * Ea - 2.0 * D + MP - 317511.72))
        l += 0.10490 * sin(STR * (26.0 * Ve - 29.0 * Ea - MP + 270002.52))
        l += 0.10386 * sin(STR * (3.0 * Ve - 4.0 * Ea + D - MP - 322765.56))
        self.l = l

        B = 8.04508 * sin(STR * (L + 648002.556))
        B += 1.51021 * sin(STR * (Ea + D + 996048.252))
        B += 0.63037 * sin(STR * (f - MP + NF + 95554.332))
        B += 0.63014 * sin(STR * (f - MP - NF + 95553.792))
        B += 0.45587 * sin(STR * (L - MP + 2.9))
        B += -0.41573 * sin(STR * (L + MP + 2.5))
        B += 0.32623 * sin(STR * (L - 2.0 * NF + 3.2))
        B += 0.29855 * sin(STR * (L - 2.0 * D + 2.5))
        self.B = B

    # ───────────── passes 5 and 6 ─────────────

    def main_series(self) -> None:
        T = self.T
        pol = self.pol
        pol[0] = 0.0
        sum_series(LR, self.tables, LON_RAD_LARGE, pol)
        sum_series(MB, self.tables, LAT_LARGE, pol)

        self.l += (((self.l4 * T + self.l3) * T + self.l2) * T + self.l1) * T * 1.0e-5

        pol[0] = self.L + self.l + 1.0e-4 * pol[0]
        pol[1] = 1.0e-4 * pol[1] + self.B
        pol[2] = 1.0e-4 * pol[2] + MOON_MEAN_DIST_KM

    def assemble(self) -> Tuple[float, float, float]:
        pol = self.pol
        return (
            STR * mods3600(pol[0]),
            STR * pol[1],
            pol[2] / (AUNIT / 1000.0),
        )


def moon_ecliptic_of_date(jd_tt: float) -> Tuple[float, float, float]:
    """Geometric (lon rad, lat rad, r AU) on the mean ecliptic and equinox of date."""
    state = _LunarState(jd_tt)
    state.mean_elements()
    state.planet_longitudes()
    state.big_terms()
    state.small_terms()
    state.main_series()
    return state.assemble()


def _equatorial_j2000(jd_tt: float) -> Tuple[float, float, float]:
    x = polar_to_cart(moon_ecliptic_of_date(jd_tt))
    x = rotate_x(x, -mean_obliquity(jd_tt))
    return precess(x, jd_tt, DATE_TO_J2000)


def moon_geocentric(jd_tt: float) -> Vector6:
    """
    Geocentric equatorial J2000 position (AU) and velocity (AU/day).

    The parabola through the samples at t − h, t and t + h is
    x(t + s·h) = x(t) + b·s + a·s²; the velocity is (2a + b) / h, its slope
    at s = 1. The reference charts were produced with this slope.
    """
    h = MOON_SPEED_INTERVAL
    x0 = _equatorial_j2000(jd_tt)
    x1 = _equatorial_j2000(jd_tt + h)
    x2 = _equatorial_j2000(jd_tt - h)
    speed = []
    for k in range(3):
        b = (x1[k] - x2[k]) / 2.0
        a = (x1[k] + x2[k]) / 2.0 - x0[k]
        speed.append((2.0 * a + b) / h)
    return (x0[0], x0[1], x0[2], speed[0], speed[1], speed[2])
