# ephemcore/core/ephemeris.py
# -----------------------------------------------------------------------------
# Public position API
#
#   position(body, jd_ut, *, delta_t=None) -> PlanetPosition
#
# Dispatch (jd_tt = jd_ut + ΔT(jd_ut), computed once):
#   MEAN_NODE   closed-form polynomial, fixed distance, zero latitude
#   CHIRON      sampled table + cubic Hermite, zero latitude and distance
#   MOON        lunar theory → apparent-place pipeline
#   SUN..PLUTO  planetary theory (geocentric) → apparent-place pipeline
#
# Errors: UnsupportedBody for ids outside the table below, OutOfRange for
# Chiron outside its sampled span, ValueError for non-finite Julian days.
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Union
import logging
import math

from ephemcore.core.chiron import chiron
from ephemcore.core.errors import EphemerisError, OutOfRange, UnsupportedBody
from ephemcore.core.houses import HouseCuspSet, houses
from ephemcore.core.julian import CalendarDate, from_julian_day, julian_day
from ephemcore.core.moon import moon_geocentric
from ephemcore.core.node import MEAN_NODE_DISTANCE, mean_node_with_speed
from ephemcore.core.pipeline import equ2000_to_ecliptic_of_date
from ephemcore.core.planets import geocentric
from ephemcore.core.timescales import DeltaT, resolve_delta_t
from ephemcore.utils.metrics import metrics

__all__ = [
    "BodyId",
    "PlanetPosition",
    "EphemerisError",
    "UnsupportedBody",
    "OutOfRange",
    "CalendarDate",
    "position",
    "houses",
    "HouseCuspSet",
    "julian_day",
    "from_julian_day",
]

log = logging.getLogger(__name__)


class BodyId(IntEnum):
    SUN = 0
    MOON = 1
    MERCURY = 2
    VENUS = 3
    MARS = 4
    JUPITER = 5
    SATURN = 6
    URANUS = 7
    NEPTUNE = 8
    PLUTO = 9
    MEAN_NODE = 10
    CHIRON = 15


# bodies served by the planetary theory, keyed to their series names
_PLANET_SERIES = {
    BodyId.SUN: "sun",
    BodyId.MERCURY: "mercury",
    BodyId.VENUS: "venus",
    BodyId.MARS: "mars",
    BodyId.JUPITER: "jupiter",
    BodyId.SATURN: "saturn",
    BodyId.URANUS: "uranus",
    BodyId.NEPTUNE: "neptune",
    BodyId.PLUTO: "pluto",
}


@dataclass(frozen=True)
class PlanetPosition:
    longitude: float          # deg [0, 360), apparent ecliptic of date
    latitude: float           # deg
    distance: float           # AU
    longitude_speed: float    # deg/day
    latitude_speed: float     # deg/day
    distance_speed: float     # AU/day

    @property
    def is_retrograde(self) -> bool:
        return self.longitude_speed < 0.0

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["is_retrograde"] = self.is_retrograde
        return d


def _as_body(body: Union[BodyId, int]) -> BodyId:
    if isinstance(body, bool):
        raise UnsupportedBody(body)
    try:
        return BodyId(body)
    except (ValueError, TypeError) as e:
        raise UnsupportedBody(body) from e


@metrics.timed("position")
def position(
    body: Union[BodyId, int],
    julian_day_ut: float,
    *,
    delta_t: Optional[DeltaT] = None,
) -> PlanetPosition:
    """Apparent geocentric position of ``body`` at ``julian_day_ut``."""
    bid = _as_body(body)
    if not math.isfinite(julian_day_ut):
        raise ValueError(f"julian_day_ut must be finite, got {julian_day_ut!r}")

    jd_tt = julian_day_ut + resolve_delta_t(delta_t)(julian_day_ut)
    log.debug("position %s at JD(UT) %.6f (TT %.6f)", bid.name, julian_day_ut, jd_tt)

    if bid is BodyId.MEAN_NODE:
        lon, speed = mean_node_with_speed(jd_tt)
        return PlanetPosition(lon, 0.0, MEAN_NODE_DISTANCE, speed, 0.0, 0.0)

    if bid is BodyId.CHIRON:
        lon, speed = chiron(julian_day_ut)
        return PlanetPosition(lon, 0.0, 0.0, speed, 0.0, 0.0)

    if bid is BodyId.MOON:
        xgeo = moon_geocentric(jd_tt)
    else:
        xgeo = geocentric(jd_tt, _PLANET_SERIES[bid])

    return PlanetPosition(*equ2000_to_ecliptic_of_date(xgeo, jd_tt))
