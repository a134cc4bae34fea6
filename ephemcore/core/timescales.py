# ephemcore/core/timescales.py
# -----------------------------------------------------------------------------
# Delta-T providers (TT − UT, returned in days)
#
# Public API:
#   default_delta_t(jd_ut)      ERFA leap-second chain inside its window,
#                               Espenak–Meeus polynomials outside it
#   polynomial_delta_t(jd_ut)   Espenak–Meeus (NASA 2006) everywhere
#   ConstantDeltaT(seconds)     fixed offset, callable
#   resolve_delta_t(setting)       "erfa" | "polynomial" | seconds | callable | None
#
# Inside the ERFA window UT1 is taken equal to UTC, so
#   ΔT = 32.184 s + ΔAT(UTC)        (TT − TAI = 32.184 s; ΔAT via erfa.dat)
# which stays within the ±0.9 s DUT1 band.
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
import logging
import math
import warnings

import erfa  # pyERFA

from ephemcore.core.julian import from_julian_day
from ephemcore.utils.config import get_settings

__all__ = [
    "DeltaT",
    "TT_MINUS_TAI",
    "ERFA_FIRST_YEAR",
    "ERFA_LAST_YEAR",
    "ConstantDeltaT",
    "default_delta_t",
    "polynomial_delta_t",
    "delta_t_seconds_polynomial",
    "resolve_delta_t",
]

log = logging.getLogger(__name__)

DeltaT = Callable[[float], float]

TT_MINUS_TAI = 32.184         # seconds
ERFA_FIRST_YEAR = 1960
ERFA_LAST_YEAR = 2035         # exclusive
SECONDS_PER_DAY = 86400.0

# ───────────────────────────── providers ─────────────────────────────

@dataclass(frozen=True)
class ConstantDeltaT:
    seconds: float

    def __call__(self, jd_ut: float) -> float:
        return self.seconds / SECONDS_PER_DAY


def _decimal_year(jd_ut: float) -> float:
    cal = from_julian_day(jd_ut)
    return cal.year + (cal.month - 0.5) / 12.0


def delta_t_seconds_polynomial(year: float) -> float:
    """Espenak & Meeus (2006) ΔT in seconds for a decimal year."""
    y = year
    if y < -500.0:
        u = (y - 1820.0) / 100.0
        return -20.0 + 32.0 * u * u
    if y < 500.0:
        u = y / 100.0
        return (10583.6 - 1014.41 * u + 33.78311 * u**2 - 5.952053 * u**3
                - 0.1798452 * u**4 + 0.022174192 * u**5 + 0.0090316521 * u**6)
    if y < 1600.0:
        u = (y - 1000.0) / 100.0
        return (1574.2 - 556.01 * u + 71.23472 * u**2 + 0.319781 * u**3
                - 0.8503463 * u**4 - 0.005050998 * u**5 + 0.0083572073 * u**6)
    if y < 1700.0:
        t = y - 1600.0
        return 120.0 - 0.9808 * t - 0.01532 * t**2 + t**3 / 7129.0
    if y < 1800.0:
        t = y - 1700.0
        return 8.83 + 0.1603 * t - 0.0059285 * t**2 + 0.00013336 * t**3 - t**4 / 1174000.0
    if y < 1860.0:
        t = y - 1800.0
        return (13.72 - 0.332447 * t + 0.0068612 * t**2 + 0.0041116 * t**3
                - 0.00037436 * t**4 + 0.0000121272 * t**5 - 0.0000001699 * t**6
                + 0.000000000875 * t**7)
    if y < 1900.0:
        t = y - 1860.0
        return (7.62 + 0.5737 * t - 0.251754 * t**2 + 0.01680668 * t**3
                - 0.0004473624 * t**4 + t**5 / 233174.0)
    if y < 1920.0:
        t = y - 1900.0
        return -2.79 + 1.494119 * t - 0.0598939 * t**2 + 0.0061966 * t**3 - 0.000197 * t**4
    if y < 1941.0:
        t = y - 1920.0
        return 21.20 + 0.84493 * t - 0.076100 * t**2 + 0.0020936 * t**3
    if y < 1961.0:
        t = y - 1950.0
        return 29.07 + 0.407 * t - t**2 / 233.0 + t**3 / 2547.0
    if y < 1986.0:
        t = y - 1975.0
        return 45.45 + 1.067 * t - t**2 / 260.0 - t**3 / 718.0
    if y < 2005.0:
        t = y - 2000.0
        return (63.86 + 0.3345 * t - 0.060374 * t**2 + 0.0017275 * t**3
                + 0.000651814 * t**4 + 0.00002373599 * t**5)
    if y < 2050.0:
        t = y - 2000.0
        return 62.92 + 0.32217 * t + 0.005589 * t**2
    u = (y - 1820.0) / 100.0
    if y < 2150.0:
        return -20.0 + 32.0 * u * u - 0.5628 * (2150.0 - y)
    return -20.0 + 32.0 * u * u


def polynomial_delta_t(jd_ut: float) -> float:
    return delta_t_seconds_polynomial(_decimal_year(jd_ut)) / SECONDS_PER_DAY


def _erfa_delta_t_seconds(jd_ut: float) -> float:
    jd1 = math.floor(jd_ut)
    iy, im, iday, fd = erfa.jd2cal(jd1, jd_ut - jd1)
    with warnings.catch_warnings():
        # "dubious year" past the last published leap second is expected here
        warnings.simplefilter("ignore", erfa.ErfaWarning)
        dat = erfa.dat(iy, im, iday, fd)
    return TT_MINUS_TAI + float(dat)


def default_delta_t(jd_ut: float) -> float:
    """ΔT in days: ERFA ΔAT + 32.184 s for 1960 ≤ year < 2035, polynomial otherwise."""
    if not math.isfinite(jd_ut):
        raise ValueError(f"jd_ut must be finite, got {jd_ut!r}")
    year = from_julian_day(jd_ut).year
    if ERFA_FIRST_YEAR <= year < ERFA_LAST_YEAR:
        return _erfa_delta_t_seconds(jd_ut) / SECONDS_PER_DAY
    log.debug("ΔT for year %d from polynomial (outside ERFA window)", year)
    return polynomial_delta_t(jd_ut)

# ───────────────────────────── config glue ─────────────────────────────

_NAMED = {
    "erfa": default_delta_t,
    "default": default_delta_t,
    "polynomial": polynomial_delta_t,
}


def resolve_delta_t(setting: Any = None) -> DeltaT:
    """
    Map a configuration value to a ΔT provider.

    None uses the configured ``delta_t`` setting; callables pass through;
    "erfa" / "polynomial" select the built-ins; numbers (or numeric strings)
    are constant seconds.
    """
    if setting is None:
        setting = get_settings().delta_t
    if callable(setting):
        return setting
    if isinstance(setting, bool):
        raise ValueError(f"invalid delta_t setting {setting!r}")
    if isinstance(setting, (int, float)):
        return ConstantDeltaT(float(setting))
    if isinstance(setting, str):
        key = setting.strip().lower()
        if key in _NAMED:
            return _NAMED[key]
        try:
            return ConstantDeltaT(float(key))
        except ValueError as e:
            raise ValueError(
                f"invalid delta_t setting {setting!r}: expected 'erfa', 'polynomial' or seconds"
            ) from e
    raise ValueError(f"invalid delta_t setting {setting!r}: expected 'erfa', 'polynomial' or seconds")
