# ephemcore/core/node.py
from __future__ import annotations
"""Mean ascending node of the lunar orbit (Chapront et al. quartic)."""

from typing import Tuple

from ephemcore.core.coords import normalize_deg
from ephemcore.core.julian import J2000

__all__ = ["MEAN_NODE_DISTANCE", "NODE_SPEED_INTERVAL", "mean_node", "mean_node_with_speed"]

MEAN_NODE_DISTANCE = 0.002569   # AU, fixed nominal value
NODE_SPEED_INTERVAL = 0.1       # days


def mean_node(jd_tt: float) -> float:
    """Mean longitude of the ascending node in degrees [0, 360)."""
    t = (jd_tt - J2000) / 36525.0
    t2 = t * t
    t3 = t2 * t
    t4 = t3 * t
    omega = (
        125.0445479
        - 1934.1362891 * t
        + 0.0020754 * t2
        + t3 / 467441.0
        - t4 / 60616000.0
    )
    return normalize_deg(omega)


def mean_node_with_speed(jd_tt: float) -> Tuple[float, float]:
    """(longitude, speed) in degrees and degrees/day; centred difference over ±0.1 d."""
    h = NODE_SPEED_INTERVAL
    lon = mean_node(jd_tt)
    d = mean_node(jd_tt + h) - mean_node(jd_tt - h)
    if d > 180.0:
        d -= 360.0
    elif d < -180.0:
        d += 360.0
    return lon, d / (2.0 * h)
