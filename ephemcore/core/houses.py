# ephemcore/core/houses.py
"""
House cusps, Ascendant, MC and ARMC for ten house systems.

  P Placidus      K Koch          O Porphyry      R Regiomontanus
  C Campanus      E Equal         W Whole sign    B Alcabitus
  M Morinus       T Topocentric (Polich-Page)

Pipeline for houses(jd_ut, lat, lon, system):
  • jd_tt = jd_ut + ΔT(jd_ut); ε_true = ε_mean + Δε
  • ARMC = GMST(jd_ut, ε_true, Δψ)·15 + lon   (IAU 1976 + equation of equinoxes)
  • MC from ARMC, ASC from the rising-point solver asc1(ARMC + 90, lat)
  • system-specific cusps 11, 12, 2, 3; cusps 4–9 are the antipodes of
    10, 11, 12, 1, 2, 3 for the quadrant systems

Unknown system codes resolve to Placidus (logged, counted). Placidus, Koch and
Alcabitus fall back to Porphyry inside the polar circles (|lat| ≥ 90° − ε);
Regiomontanus, Campanus and Topocentric flip the eastern half instead when the
ASC lands west of the MC there.

Placidus cusps solve, for each (offset, fraction) pair,

    RA(λ) − ARMC = offset + fraction · AD(δ(λ)),   AD = asin(tan δ tan φ)

with the adaptive secant iteration used throughout these engines; the number
of iterations is capped (EPHEMCORE_PLACIDUS_MAX_ITERS, default 100) and the
residual tolerance is EPHEMCORE_PLACIDUS_TOL (default 1e-10 degrees).
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from ephemcore.core.coords import DEG_TO_RAD, RAD_TO_DEG, diff_deg, normalize_deg
from ephemcore.core.nutation import nutation
from ephemcore.core.obliquity import mean_obliquity
from ephemcore.core.timescales import DeltaT, resolve_delta_t
from ephemcore.utils.config import get_settings
from ephemcore.utils.metrics import HOUSE_FALLBACK_TOTAL, metrics

__all__ = [
    "HOUSE_SYSTEMS",
    "QUADRANT_SYSTEMS",
    "HouseCuspSet",
    "houses",
    "placidus_diagnostics",
    "sidereal_time",
    "asc1",
    "asc2",
]

log = logging.getLogger(__name__)

VERY_SMALL = 1e-10

HOUSE_SYSTEMS: Dict[str, str] = {
    "P": "placidus",
    "K": "koch",
    "O": "porphyry",
    "R": "regiomontanus",
    "C": "campanus",
    "E": "equal",
    "W": "whole_sign",
    "B": "alcabitus",
    "M": "morinus",
    "T": "topocentric",
}
QUADRANT_SYSTEMS = frozenset("PKORCBT")
FALLBACK_SYSTEM = "P"

# Placidus targets: cusp → (ARMC offset, fraction of the ascensional difference)
_PLACIDUS_TARGETS: Tuple[Tuple[int, float, float], ...] = (
    (11, 30.0, 1.0 / 3.0),
    (12, 60.0, 2.0 / 3.0),
    (2, 120.0, 2.0 / 3.0),
    (3, 150.0, 1.0 / 3.0),
)

# ───────────────────────────── result ─────────────────────────────

@dataclass(frozen=True)
class HouseCuspSet:
    cusps: Tuple[float, ...]       # house 1 first
    asc: float
    mc: float
    armc: float
    system: str

    def cusp(self, n: int) -> float:
        """1-based access: cusp(1) is the first house."""
        if not 1 <= n <= 12:
            raise ValueError(f"house number must be 1..12, got {n}")
        return self.cusps[n - 1]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

# ───────────────────────────── degree helpers ─────────────────────────────

def _sind(a: float) -> float: return math.sin(a * DEG_TO_RAD)
def _cosd(a: float) -> float: return math.cos(a * DEG_TO_RAD)
def _tand(a: float) -> float: return math.tan(a * DEG_TO_RAD)
def _asind(x: float) -> float: return math.asin(_clamp1(x)) * RAD_TO_DEG
def _acosd(x: float) -> float: return math.acos(_clamp1(x)) * RAD_TO_DEG
def _atand(x: float) -> float: return math.atan(x) * RAD_TO_DEG

def _clamp1(x: float) -> float:
    return 1.0 if x > 1.0 else (-1.0 if x < -1.0 else x)

# ───────────────────────────── sidereal time ─────────────────────────────

def sidereal_time(jd_ut: float, eps_deg: float, dpsi_deg: float) -> float:
    """
    Greenwich sidereal time in hours [0, 24): IAU 1976 GMST plus the
    equation of the equinoxes 240·Δψ·cos ε (Δψ and ε in degrees).
    """
    jd0 = math.floor(jd_ut)
    secs = jd_ut - jd0
    if secs < 0.5:
        jd0 -= 0.5
        secs += 0.5
    else:
        jd0 += 0.5
        secs -= 0.5
    secs *= 86400.0
    tu = (jd0 - 2451545.0) / 36525.0
    gmst = ((-6.2e-6 * tu + 9.3104e-2) * tu + 8640184.812866) * tu + 24110.54841
    msday = 1.0 + ((-1.86e-5 * tu + 0.186208) * tu + 8640184.812866) / (86400.0 * 36525.0)
    gmst += msday * secs
    gmst += 240.0 * dpsi_deg * _cosd(eps_deg)
    gmst -= 86400.0 * math.floor(gmst / 86400.0)
    return gmst / 3600.0

# ───────────────────────────── rising point ─────────────────────────────

def asc2(x: float, f: float, sine: float, cose: float) -> float:
    """Rising-point base case for x in the first quadrant."""
    ass = -_tand(f) * sine + cose * _cosd(x)
    if abs(ass) < VERY_SMALL:
        ass = 0.0
    sinx = _sind(x)
    if abs(sinx) < VERY_SMALL:
        sinx = 0.0
    if sinx == 0.0:
        ass = -VERY_SMALL if ass < 0.0 else VERY_SMALL
    elif ass == 0.0:
        ass = -90.0 if sinx < 0.0 else 90.0
    else:
        ass = _atand(sinx / ass)
    if ass < 0.0:
        ass += 180.0
    return ass

def asc1(x1: float, f: float, sine: float, cose: float) -> float:
    """Ecliptic longitude on the horizon of latitude ``f`` when the equator point ``x1`` rises."""
    x1 = normalize_deg(x1)
    if abs(90.0 - f) < VERY_SMALL:
        return 180.0
    if abs(90.0 + f) < VERY_SMALL:
        return 0.0
    n = int(x1 // 90.0) + 1
    if n == 1:
        ass = asc2(x1, f, sine, cose)
    elif n == 2:
        ass = 180.0 - asc2(180.0 - x1, -f, sine, cose)
    elif n == 3:
        ass = 180.0 + asc2(x1 - 180.0, -f, sine, cose)
    else:
        ass = 360.0 - asc2(360.0 - x1, f, sine, cose)
    ass = normalize_deg(ass)
    for snap in (90.0, 180.0, 270.0):
        if abs(ass - snap) < VERY_SMALL:
            return snap
    if abs(ass - 360.0) < VERY_SMALL:
        return 0.0
    return ass

def _mc_from_armc(th: float, cose: float) -> float:
    if abs(th - 90.0) > VERY_SMALL and abs(th - 270.0) > VERY_SMALL:
        mc = math.atan(_tand(th) / cose) * RAD_TO_DEG
        if 90.0 < th <= 270.0:
            mc += 180.0
    else:
        mc = 90.0 if abs(th - 90.0) <= VERY_SMALL else 270.0
    return normalize_deg(mc)

# ───────────────────────────── shared cusp helpers ─────────────────────────────

def _blank() -> List[float]:
    return [0.0] * 12

def _fill_opposites(c: List[float]) -> List[float]:
    c[3] = normalize_deg(c[9] + 180.0)
    c[4] = normalize_deg(c[10] + 180.0)
    c[5] = normalize_deg(c[11] + 180.0)
    c[6] = normalize_deg(c[0] + 180.0)
    c[7] = normalize_deg(c[1] + 180.0)
    c[8] = normalize_deg(c[2] + 180.0)
    return c

def _polar_fix(c: List[float]) -> None:
    """ASC west of MC: turn the eastern half (1, 2, 3, 10, 11, 12) by 180°."""
    if diff_deg(c[0], c[9]) < 0.0:
        for i in (0, 1, 2, 9, 10, 11):
            c[i] = normalize_deg(c[i] + 180.0)

# ───────────────────────────── systems ─────────────────────────────

def _porphyry(asc: float, mc: float) -> List[float]:
    c = _blank()
    c[0], c[9] = asc, mc
    acmc = diff_deg(asc, mc)
    asc_used = asc
    if acmc < 0.0:
        asc_used = normalize_deg(asc + 180.0)
        acmc = diff_deg(asc_used, mc)
    c[10] = normalize_deg(mc + acmc / 3.0)
    c[11] = normalize_deg(mc + acmc / 3.0 * 2.0)
    c[1] = normalize_deg(asc_used + (180.0 - acmc) / 3.0)
    c[2] = normalize_deg(asc_used + (180.0 - acmc) / 3.0 * 2.0)
    return _fill_opposites(c)

def _equal(asc: float) -> List[float]:
    return [normalize_deg(asc + 30.0 * i) for i in range(12)]

def _whole(asc: float) -> List[float]:
    start = asc - math.fmod(asc, 30.0)
    return [normalize_deg(start + 30.0 * i) for i in range(12)]

def _koch(th: float, fi: float, sine: float, cose: float, asc: float, mc: float) -> List[float]:
    c = _blank()
    c[0], c[9] = asc, mc
    sina = _clamp1(_sind(mc) * sine / _cosd(fi))
    cosa = math.sqrt(1.0 - sina * sina)
    k = _atand(_tand(fi) / cosa)
    ad3 = _asind(_sind(k) * sina) / 3.0
    c[10] = asc1(th + 30.0 - 2.0 * ad3, fi, sine, cose)
    c[11] = asc1(th + 60.0 - ad3, fi, sine, cose)
    c[1] = asc1(th + 120.0 + ad3, fi, sine, cose)
    c[2] = asc1(th + 150.0 + 2.0 * ad3, fi, sine, cose)
    return _fill_opposites(c)

def _regiomontanus(th: float, fi: float, sine: float, cose: float, asc: float, mc: float, polar: bool) -> List[float]:
    c = _blank()
    c[0], c[9] = asc, mc
    tanfi = _tand(fi)
    fh1 = _atand(tanfi * 0.5)
    fh2 = _atand(tanfi * _cosd(30.0))
    c[10] = asc1(30.0 + th, fh1, sine, cose)
    c[11] = asc1(60.0 + th, fh2, sine, cose)
    c[1] = asc1(120.0 + th, fh2, sine, cose)
    c[2] = asc1(150.0 + th, fh1, sine, cose)
    if polar:
        _polar_fix(c)
    return _fill_opposites(c)

def _campanus(th: float, fi: float, sine: float, cose: float, asc: float, mc: float, polar: bool) -> List[float]:
    c = _blank()
    c[0], c[9] = asc, mc
    fh1 = _asind(_sind(fi) / 2.0)
    fh2 = _asind(math.sqrt(3.0) / 2.0 * _sind(fi))
    cosfi = _cosd(fi)
    if abs(cosfi) < VERY_SMALL:
        xh1 = 90.0 if fi > 0.0 else 270.0
        xh2 = xh1
    else:
        xh1 = _atand(math.sqrt(3.0) / cosfi)
        xh2 = _atand(1.0 / (math.sqrt(3.0) * cosfi))
    c[10] = asc1(th + 90.0 - xh1, fh1, sine, cose)
    c[11] = asc1(th + 90.0 - xh2, fh2, sine, cose)
    c[1] = asc1(th + 90.0 + xh2, fh2, sine, cose)
    c[2] = asc1(th + 90.0 + xh1, fh1, sine, cose)
    if polar:
        _polar_fix(c)
    return _fill_opposites(c)

def _topocentric(th: float, fi: float, sine: float, cose: float, asc: float, mc: float, polar: bool) -> List[float]:
    c = _blank()
    c[0], c[9] = asc, mc
    tanfi = _tand(fi)
    fh1 = _atand(tanfi / 3.0)
    fh2 = _atand(tanfi * 2.0 / 3.0)
    c[10] = asc1(30.0 + th, fh1, sine, cose)
    c[11] = asc1(60.0 + th, fh2, sine, cose)
    c[1] = asc1(120.0 + th, fh2, sine, cose)
    c[2] = asc1(150.0 + th, fh1, sine, cose)
    if polar:
        _polar_fix(c)
    return _fill_opposites(c)

def _alcabitus(th: float, fi: float, sine: float, cose: float, asc: float, mc: float) -> List[float]:
    c = _blank()
    c[0], c[9] = asc, mc
    dek = _asind(_sind(asc) * sine)
    sda = _acosd(-_tand(fi) * _tand(dek))
    sna = 180.0 - sda
    sd3 = sda / 3.0
    sn3 = sna / 3.0
    c[10] = asc1(normalize_deg(th + sd3), 0.0, sine, cose)
    c[11] = asc1(normalize_deg(th + 2.0 * sd3), 0.0, sine, cose)
    c[1] = asc1(normalize_deg(th + 180.0 - 2.0 * sn3), 0.0, sine, cose)
    c[2] = asc1(normalize_deg(th + 180.0 - sn3), 0.0, sine, cose)
    return _fill_opposites(c)

def _morinus(th: float, ekl: float) -> List[float]:
    c = _blank()
    a = th
    for i in range(1, 13):
        j = i + 10
        if j > 12:
            j -= 12
        a = normalize_deg(a + 30.0)
        c[j - 1] = normalize_deg(math.atan2(_sind(a) * _cosd(ekl), _cosd(a)) * RAD_TO_DEG)
    return c

# ───────────────────────────── Placidus ─────────────────────────────

def _placidus_residual(lam: float, target: float, frac: float, fi: float, sine: float, cose: float) -> float:
    """RA(λ) − (target + frac·AD(λ)), wrapped to (−180, 180]."""
    ra = math.atan2(_sind(lam) * cose, _cosd(lam)) * RAD_TO_DEG
    dec = _asind(_sind(lam) * sine)
    ad = _asind(_tand(dec) * _tand(fi))
    return diff_deg(ra, target + frac * ad)

def _longitude_of_ra(ra: float, cose: float) -> float:
    return normalize_deg(math.atan2(_sind(ra), _cosd(ra) * cose) * RAD_TO_DEG)

def _placidus_cusp(
    th: float, fi: float, sine: float, cose: float,
    offset: float, frac: float,
    max_iters: int, tol: float,
) -> Tuple[float, Dict[str, Any]]:
    """Adaptive secant on the semi-arc equation, seeded at the AD = 0 solution."""
    target = th + offset

    def g(lam: float) -> float:
        return _placidus_residual(lam, target, frac, fi, sine, cose)

    x0 = _longitude_of_ra(target, cose)
    f0 = g(x0)
    x1 = normalize_deg(x0 + 1.0)
    f1 = g(x1)
    it = 0
    step = 0.0
    converged = abs(f0) < tol
    best, best_f = (x0, f0) if abs(f0) <= abs(f1) else (x1, f1)
    while not converged and it < max_iters:
        it += 1
        denom = f1 - f0
        if abs(denom) < 1e-15:
            # fixed-point step: land on the current RA target directly
            ad = _asind(_tand(_asind(_sind(x1) * sine)) * _tand(fi))
            x2 = _longitude_of_ra(target + frac * ad, cose)
        else:
            x2 = normalize_deg(x1 - f1 * diff_deg(x1, x0) / denom)
        f2 = g(x2)
        step = diff_deg(x2, x1)
        if abs(f2) < abs(best_f):
            best, best_f = x2, f2
        if abs(f2) < tol:
            converged = True
            break
        x0, f0, x1, f1 = x1, f1, x2, f2

    if not converged:
        log.warning(
            "Placidus iteration hit cap %d (offset=%s, lat=%s, residual=%.3e)",
            max_iters, offset, fi, abs(best_f),
        )
    return best, {
        "iters": it,
        "residual_deg": abs(best_f),
        "last_step_deg": abs(step),
        "converged": converged,
    }

def _placidus(
    th: float, fi: float, sine: float, cose: float, asc: float, mc: float,
    *, _diag: Optional[dict] = None,
) -> List[float]:
    s = get_settings()
    max_iters = int(s.placidus_max_iters)
    tol = float(s.placidus_tol)
    c = _blank()
    c[0], c[9] = asc, mc
    for cusp, offset, frac in _PLACIDUS_TARGETS:
        value, info = _placidus_cusp(th, fi, sine, cose, offset, frac, max_iters, tol)
        c[cusp - 1] = value
        if _diag is not None:
            _diag[cusp] = info
    return _fill_opposites(c)

# ───────────────────────────── entry points ─────────────────────────────

def _resolve_system(system: Optional[str]) -> str:
    requested = get_settings().house_system if system is None else system
    code = str(requested).strip().upper()
    if code in HOUSE_SYSTEMS:
        return code
    log.debug("unknown house system %r, using %s", requested, FALLBACK_SYSTEM)
    metrics.inc(
        HOUSE_FALLBACK_TOTAL, 1.0,
        {"requested": str(requested), "fallback": FALLBACK_SYSTEM},
    )
    return FALLBACK_SYSTEM

def _check_inputs(jd_ut: float, lat: float, lon: float) -> None:
    for name, value in (("julian_day_ut", jd_ut), ("latitude", lat), ("longitude", lon)):
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value!r}")
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"latitude must be within [-90, 90], got {lat}")

class _Frame:
    """Angles shared by every system for one (jd, lat, lon)."""

    def __init__(self, jd_ut: float, lat: float, lon: float, delta_t: Optional[DeltaT]) -> None:
        jd_tt = jd_ut + resolve_delta_t(delta_t)(jd_ut)
        eps_mean = mean_obliquity(jd_tt) * RAD_TO_DEG
        dpsi, deps = nutation(jd_tt)
        self.ekl = eps_mean + deps * RAD_TO_DEG
        self.armc = normalize_deg(sidereal_time(jd_ut, self.ekl, dpsi * RAD_TO_DEG) * 15.0 + lon)
        self.sine = _sind(self.ekl)
        self.cose = _cosd(self.ekl)
        self.fi = lat
        self.mc = _mc_from_armc(self.armc, self.cose)
        self.asc = asc1(self.armc + 90.0, lat, self.sine, self.cose)
        self.polar = abs(lat) >= 90.0 - self.ekl

def _cusps_for(code: str, fr: _Frame, _diag: Optional[dict] = None) -> List[float]:
    th, fi, sine, cose, asc, mc = fr.armc, fr.fi, fr.sine, fr.cose, fr.asc, fr.mc
    if code in ("P", "K", "B") and fr.polar:
        log.debug("latitude %.4f inside polar circle: %s falls back to Porphyry", fi, code)
        return _porphyry(asc, mc)
    if code == "P":
        return _placidus(th, fi, sine, cose, asc, mc, _diag=_diag)
    if code == "K":
        return _koch(th, fi, sine, cose, asc, mc)
    if code == "O":
        return _porphyry(asc, mc)
    if code == "R":
        return _regiomontanus(th, fi, sine, cose, asc, mc, fr.polar)
    if code == "C":
        return _campanus(th, fi, sine, cose, asc, mc, fr.polar)
    if code == "E":
        return _equal(asc)
    if code == "W":
        return _whole(asc)
    if code == "B":
        return _alcabitus(th, fi, sine, cose, asc, mc)
    if code == "M":
        return _morinus(th, fr.ekl)
    if code == "T":
        return _topocentric(th, fi, sine, cose, asc, mc, fr.polar)
    raise ValueError(f"unhandled house system {code!r}")

@metrics.timed("houses")
def houses(
    julian_day_ut: float,
    latitude: float,
    longitude: float,
    system: Optional[str] = None,
    *,
    delta_t: Optional[DeltaT] = None,
) -> HouseCuspSet:
    """
    Twelve cusps plus ASC/MC/ARMC (degrees) for ``system``.

    ``system`` defaults to the configured house system (Placidus out of the
    box); ``delta_t`` is a jd_ut → days callable, defaulting to the configured
    provider.
    """
    _check_inputs(julian_day_ut, latitude, longitude)
    code = _resolve_system(system)
    fr = _Frame(julian_day_ut, latitude, longitude, delta_t)
    cusps = _cusps_for(code, fr)
    return HouseCuspSet(
        cusps=tuple(cusps),
        asc=fr.asc,
        mc=fr.mc,
        armc=fr.armc,
        system=code,
    )

def placidus_diagnostics(
    julian_day_ut: float,
    latitude: float,
    longitude: float,
    *,
    delta_t: Optional[DeltaT] = None,
) -> Dict[int, Dict[str, Any]]:
    """
    Per-cusp solver report {11, 12, 2, 3: {iters, residual_deg, last_step_deg,
    converged}}. Empty inside the polar circles, where Porphyry is used.
    """
    _check_inputs(julian_day_ut, latitude, longitude)
    fr = _Frame(julian_day_ut, latitude, longitude, delta_t)
    diag: Dict[int, Dict[str, Any]] = {}
    if fr.polar:
        return diag
    _placidus(fr.armc, fr.fi, fr.sine, fr.cose, fr.asc, fr.mc, _diag=diag)
    return diag
