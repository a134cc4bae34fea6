# ephemcore/core/moon_tables.py
from __future__ import annotations
"""
Periodic-term tables for the lunar theory.

Every row starts with the multipliers of the four Delaunay-type arguments in
the order (D, M, MP, NF): elongation, Sun mean anomaly, Moon mean anomaly,
argument of latitude. What follows depends on the row kind, mirroring the
accumulation modes of ephemcore.core.moon.sum_series:

  LON_RAD_LARGE  (…, j1, k1, j2, k2)  lon += (1e4·j1 + k1)·sin, rad += (1e4·j2 + k2)·cos
  LON_RAD        (…, lon, rad)        lon += lon·sin,            rad += rad·cos
  LAT_LARGE      (…, j, k)            lat += (1e4·j + k)·sin
  LAT            (…, lat)             lat += lat·sin

Units (scale of the series they feed):
  LR, MB         1e-4″ (longitude, latitude), 1e-4 km (radius)   (T⁰)
  LRT, BT        1e-5″, 1e-5 km                                  (×T)
  LRT2, BT2      1e-5″, 1e-5 km                                  (×T²)

The T⁰ amplitudes are the principal periodic terms of the Chapront ELP-2000/82
solution as tabulated by Meeus (Astronomical Algorithms, ch. 47; 1e-6° and
1e-3 km). The T and T² tables carry the secular decrease of the Earth's orbital
eccentricity, E = 1 − 0.002516 T − 0.0000074 T², applied to every term that
involves the Sun's mean anomaly (E^|m|).
"""

from typing import List, Tuple

__all__ = [
    "LR", "MB", "LRT", "BT", "LRT2", "BT2",
    "MOON_MEAN_DIST_KM",
    "SECULAR_Z",
]

Row = Tuple[int, ...]

MOON_MEAN_DIST_KM = 385000.52899

# DE404 secular corrections to the mean elements and to the big planetary
# terms (arcsec; indices 0–11 feed F, l, D, L as T², T³, T⁴ coefficients)
SECULAR_Z: Tuple[float, ...] = (
    -1.312045233711e+01,
    -1.138215912580e-03,
    -9.646018347184e-06,
    3.146734198839e+01,
    4.768357585780e-02,
    -3.421689790404e-04,
    -6.847070905410e+00,
    -5.834100476561e-03,
    2.905334122698e-04,
    -5.663161722088e+00,
    5.722859298199e-03,
    -8.466472828815e-05,
    -8.429817796435e+01,
    -2.072552484689e+02,
    7.876842214863e+00,
    1.836463749022e+00,
    -1.557471855361e+01,
    -2.006969124724e+01,
    2.152670284757e+01,
    -6.179946916139e+00,
    -9.070028191196e-01,
    -1.270848233038e+01,
    -2.145589319058e+00,
    1.381936399935e+01,
    -1.999840061168e+00,
)

# ───────────────────────────── principal terms (Meeus 47.A / 47.B) ─────────────────────────────

#  D   M  MP  NF   Σl (1e-6°)   Σr (1e-3 km)
_LON_RAD_TERMS: Tuple[Tuple[int, int, int, int, int, int], ...] = (
    (0, 0, 1, 0, 6288774, -20905355),
    (2, 0, -1, 0, 1274027, -3699111),
    (2, 0, 0, 0, 658314, -2955968),
    (0, 0, 2, 0, 213618, -569925),
    (0, 1, 0, 0, -185116, 48888),
    (0, 0, 0, 2, -114332, -3149),
    (2, 0, -2, 0, 58793, 246158),
    (2, -1, -1, 0, 57066, -152138),
    (2, 0, 1, 0, 53322, -170733),
    (2, -1, 0, 0, 45758, -204586),
    (0, 1, -1, 0, -40923, -129620),
    (1, 0, 0, 0, -34720, 108743),
    (0, 1, 1, 0, -30383, 104755),
    (2, 0, 0, -2, 15327, 10321),
    (0, 0, 1, 2, -12528, 0),
    (0, 0, 1, -2, 10980, 79661),
    (4, 0, -1, 0, 10675, -34782),
    (0, 0, 3, 0, 10034, -23210),
    (4, 0, -2, 0, 8548, -21636),
    (2, 1, -1, 0, -7888, 24208),
    (2, 1, 0, 0, -6766, 30824),
    (1, 0, -1, 0, -5163, -8379),
    (1, 1, 0, 0, 4987, -16675),
    (2, -1, 1, 0, 4036, -12831),
    (2, 0, 2, 0, 3994, -10445),
    (4, 0, 0, 0, 3861, -11650),
    (2, 0, -3, 0, 3665, 14403),
    (0, 1, -2, 0, -2689, -7003),
    (2, 0, -1, 2, -2602, 0),
    (2, -1, -2, 0, 2390, 10056),
    (1, 0, 1, 0, -2348, 6322),
    (2, -2, 0, 0, 2236, -9884),
    (0, 1, 2, 0, -2120, 5751),
    (0, 2, 0, 0, -2069, 0),
    (2, -2, -1, 0, 2048, -4950),
    (2, 0, 1, -2, -1773, 4130),
    (2, 0, 0, 2, -1595, 0),
    (4, -1, -1, 0, 1215, -3958),
    (0, 0, 2, 2, -1110, 0),
    (3, 0, -1, 0, -892, 3258),
    (2, 1, 1, 0, -810, 2616),
    (4, -1, -2, 0, 759, -1897),
    (0, 2, -1, 0, -713, -2117),
    (2, 2, -1, 0, -700, 2354),
    (2, 1, -2, 0, 691, 0),
    (2, -1, 0, -2, 596, 0),
    (4, 0, 1, 0, 549, -1423),
    (0, 0, 4, 0, 537, -1117),
    (4, -1, 0, 0, 520, -1571),
    (1, 0, -2, 0, -487, -1739),
    (2, 1, 0, -2, -399, 0),
    (0, 0, 2, -2, -381, -4421),
    (1, 1, 1, 0, 351, 0),
    (3, 0, -2, 0, -340, 0),
    (4, 0, -3, 0, 330, 0),
    (2, -1, 2, 0, 327, 0),
    (0, 2, 1, 0, -323, 1165),
    (1, 1, -1, 0, 299, 0),
    (2, 0, 3, 0, 294, 0),
    (2, 0, -1, -2, 0, 8752),
)

#  D   M  MP  NF   Σb (1e-6°)
_LAT_TERMS: Tuple[Tuple[int, int, int, int, int], ...] = (
    (0, 0, 0, 1, 5128122),
    (0, 0, 1, 1, 280602),
    (0, 0, 1, -1, 277693),
    (2, 0, 0, -1, 173237),
    (2, 0, -1, 1, 55413),
    (2, 0, -1, -1, 46271),
    (2, 0, 0, 1, 32573),
    (0, 0, 2, 1, 17198),
    (2, 0, 1, -1, 9266),
    (0, 0, 2, -1, 8822),
    (2, -1, 0, -1, 8216),
    (2, 0, -2, -1, 4324),
    (2, 0, 1, 1, 4200),
    (2, 1, 0, -1, -3359),
    (2, -1, -1, 1, 2463),
    (2, -1, 0, 1, 2211),
    (2, -1, -1, -1, 2065),
    (0, 1, -1, -1, -1870),
    (4, 0, -1, -1, 1828),
    (0, 1, 0, 1, -1794),
    (0, 0, 0, 3, -1749),
    (0, 1, -1, 1, -1565),
    (1, 0, 0, 1, -1491),
    (0, 1, 1, 1, -1475),
    (0, 1, 1, -1, -1410),
    (0, 1, 0, -1, -1344),
    (1, 0, 0, -1, -1335),
    (0, 0, 3, 1, 1107),
    (4, 0, 0, -1, 1021),
    (4, 0, -1, 1, 833),
    (0, 0, 1, -3, 777),
    (4, 0, -2, 1, 671),
    (2, 0, 0, -3, 607),
    (2, 0, 2, -1, 596),
    (2, -1, 1, -1, 491),
    (2, 0, -2, 1, -451),
    (0, 0, 3, -1, 439),
    (2, 0, 2, 1, 422),
    (2, 0, -3, -1, 421),
    (2, 1, -1, 1, -366),
    (2, 1, 0, 1, -351),
    (4, 0, 0, 1, 331),
    (2, -1, 1, 1, 315),
    (2, -2, 0, -1, 302),
    (0, 0, 1, 3, -283),
    (2, 1, 1, -1, -229),
    (1, 1, 0, -1, 223),
    (1, 1, 0, 1, 223),
    (0, 1, -2, -1, -220),
    (2, 1, -1, -1, -220),
    (1, 0, 1, 1, -185),
    (2, -1, -2, -1, 181),
    (0, 1, 2, 1, -177),
    (4, 0, -2, -1, 176),
    (4, -1, -1, -1, 166),
    (1, 0, 1, -1, -164),
    (4, 0, 1, -1, 132),
    (1, 0, -1, -1, -119),
    (4, -1, 0, -1, 115),
    (2, -2, 0, 1, 107),
)

# ───────────────────────────── unit conversion ─────────────────────────────

_MICRODEG_TO_1E4_ARCSEC = 36.0     # 1e-6° = 0.0036″
_MICRODEG_TO_1E5_ARCSEC = 360.0
_METRE_TO_1E4_KM = 10.0
_METRE_TO_1E5_KM = 100.0

# d(E^|m|)/dT and ½·d²(E^|m|)/dT² per |m|
_E_RATE = {1: -0.002516, 2: -0.005032}
_E_ACCEL = {1: -0.0000074, 2: 0.002516 ** 2 - 2.0 * 0.0000074}


def _split_large(v: float) -> Tuple[int, float]:
    """v → (j, k) with v == 1e4·j + k and |k| < 1e4."""
    j = int(v / 10000.0)
    return j, v - 10000.0 * j


def _lon_rad_large() -> Tuple[Row, ...]:
    rows: List[Row] = []
    for d, m, mp, nf, lon, rad in _LON_RAD_TERMS:
        j1, k1 = _split_large(lon * _MICRODEG_TO_1E4_ARCSEC)
        j2, k2 = _split_large(rad * _METRE_TO_1E4_KM)
        rows.append((d, m, mp, nf, j1, k1, j2, k2))  # type: ignore[arg-type]
    return tuple(rows)


def _lat_large() -> Tuple[Row, ...]:
    rows: List[Row] = []
    for d, m, mp, nf, lat in _LAT_TERMS:
        j, k = _split_large(lat * _MICRODEG_TO_1E4_ARCSEC)
        rows.append((d, m, mp, nf, j, k))  # type: ignore[arg-type]
    return tuple(rows)


def _secular_lon_rad(factor: dict) -> Tuple[Row, ...]:
    rows: List[Row] = []
    for d, m, mp, nf, lon, rad in _LON_RAD_TERMS:
        if m == 0:
            continue
        c = factor[abs(m)]
        rows.append((  # type: ignore[arg-type]
            d, m, mp, nf,
            lon * _MICRODEG_TO_1E5_ARCSEC * c,
            rad * _METRE_TO_1E5_KM * c,
        ))
    return tuple(rows)


def _secular_lat(factor: dict) -> Tuple[Row, ...]:
    rows: List[Row] = []
    for d, m, mp, nf, lat in _LAT_TERMS:
        if m == 0:
            continue
        rows.append((d, m, mp, nf, lat * _MICRODEG_TO_1E5_ARCSEC * factor[abs(m)]))  # type: ignore[arg-type]
    return tuple(rows)


def _large_lon_rad_rate() -> Tuple[Row, ...]:
    rows: List[Row] = []
    for d, m, mp, nf, lon, rad in _secular_lon_rad(_E_RATE):
        j1, k1 = _split_large(lon)
        j2, k2 = _split_large(rad)
        rows.append((d, m, mp, nf, j1, k1, j2, k2))  # type: ignore[arg-type]
    return tuple(rows)


LR: Tuple[Row, ...] = _lon_rad_large()
MB: Tuple[Row, ...] = _lat_large()
LRT: Tuple[Row, ...] = _large_lon_rad_rate()
BT: Tuple[Row, ...] = _secular_lat(_E_RATE)
LRT2: Tuple[Row, ...] = _secular_lon_rad(_E_ACCEL)
BT2: Tuple[Row, ...] = _secular_lat(_E_ACCEL)
