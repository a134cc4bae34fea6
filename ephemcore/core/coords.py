# ephemcore/core/coords.py
from __future__ import annotations
"""
Coordinate math shared by every engine in ephemcore.

All vectors are plain tuples:
  • 3 components  → position only
  • 6 components  → position + velocity (per day)

Polar vectors are (lon, lat, r[, dlon, dlat, dr]) with angles in radians.
Nothing here keeps state; every helper returns a fresh tuple.
"""

import math
from typing import Sequence, Tuple

__all__ = [
    "TWO_PI",
    "DEG_TO_RAD",
    "RAD_TO_DEG",
    "ARCSEC_TO_RAD",
    "normalize_deg",
    "normalize_rad",
    "diff_deg",
    "cart_to_polar",
    "polar_to_cart",
    "rotate_x",
    "cross",
    "dot",
    "norm",
]

Vector = Tuple[float, ...]

TWO_PI = 2.0 * math.pi
DEG_TO_RAD = math.pi / 180.0
RAD_TO_DEG = 180.0 / math.pi
ARCSEC_TO_RAD = 4.8481368110953599359e-6

_SNAP_ZERO = 1e-13

# ───────────────────────────── angles ─────────────────────────────

def normalize_deg(x: float) -> float:
    """Reduce to [0, 360). Residues closer to 0 than 1e-13 snap to 0."""
    y = math.fmod(x, 360.0)
    if abs(y) < _SNAP_ZERO:
        y = 0.0
    if y < 0.0:
        y += 360.0
    # fmod of a tiny negative value can round up to exactly 360
    return 0.0 if y >= 360.0 else y

def normalize_rad(x: float) -> float:
    y = math.fmod(x, TWO_PI)
    if abs(y) < _SNAP_ZERO:
        y = 0.0
    if y < 0.0:
        y += TWO_PI
    return 0.0 if y >= TWO_PI else y

def diff_deg(a: float, b: float) -> float:
    """Signed difference a - b in (-180, 180]."""
    d = normalize_deg(a - b)
    if d > 180.0:
        d -= 360.0
    return d

# ───────────────────────────── cartesian ⇄ polar ─────────────────────────────

def cart_to_polar(x: Sequence[float]) -> Vector:
    """
    (x, y, z[, vx, vy, vz]) → (lon, lat, r[, dlon, dlat, dr]).

    Velocity uses the analytic derivatives of atan2/asin. On the polar axis or
    at the origin the undefined rates are returned as 0.0, never NaN.
    """
    r2 = x[0] * x[0] + x[1] * x[1]
    rr = r2 + x[2] * x[2]

    if r2 == 0.0 and x[2] == 0.0:
        lon = 0.0
    else:
        lon = math.atan2(x[1], x[0])
        if lon < 0.0:
            lon += TWO_PI

    if x[2] == 0.0:
        lat = 0.0
    else:
        lat = math.atan2(x[2], math.sqrt(r2))

    r = math.sqrt(rr)
    if len(x) < 6:
        return (lon, lat, r)

    sqr2 = math.sqrt(r2)
    if sqr2 > 0.0:
        dlon = (x[0] * x[4] - x[1] * x[3]) / r2
        dlat = -(x[2] * (x[0] * x[3] + x[1] * x[4]) - r2 * x[5]) / (rr * sqr2)
    else:
        dlon = 0.0
        dlat = 0.0
    dr = (x[0] * x[3] + x[1] * x[4] + x[2] * x[5]) / r if rr > 0.0 else 0.0
    return (lon, lat, r, dlon, dlat, dr)

def polar_to_cart(p: Sequence[float]) -> Vector:
    """(lon, lat, r[, dlon, dlat, dr]) → (x, y, z[, vx, vy, vz])."""
    cos_b = math.cos(p[1])
    sin_b = math.sin(p[1])
    cos_l = math.cos(p[0])
    sin_l = math.sin(p[0])
    r = p[2]

    pos = (r * cos_b * cos_l, r * cos_b * sin_l, r * sin_b)
    if len(p) < 6:
        return pos

    dl, db, dr = p[3], p[4], p[5]
    vx = dr * cos_b * cos_l - r * sin_b * cos_l * db - r * cos_b * sin_l * dl
    vy = dr * cos_b * sin_l - r * sin_b * sin_l * db + r * cos_b * cos_l * dl
    vz = dr * sin_b + r * cos_b * db
    return pos + (vx, vy, vz)

# ───────────────────────────── rotations & vector ops ─────────────────────────────

def rotate_x(x: Sequence[float], eps: float) -> Vector:
    """
    Rotate about the x axis.

    Positive ``eps`` takes equatorial → ecliptic, negative takes
    ecliptic → equatorial. Velocity components (if present) get the same turn.
    """
    c = math.cos(eps)
    s = math.sin(eps)
    out = (x[0], x[1] * c + x[2] * s, -x[1] * s + x[2] * c)
    if len(x) < 6:
        return out
    return out + (x[3], x[4] * c + x[5] * s, -x[4] * s + x[5] * c)

def cross(a: Sequence[float], b: Sequence[float]) -> Vector:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )

def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]

def norm(a: Sequence[float]) -> float:
    return math.sqrt(dot(a, a))
