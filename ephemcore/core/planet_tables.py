# ephemcore/core/planet_tables.py
from __future__ import annotations
"""
Heliocentric planetary coefficient tables (ecliptic and equinox J2000).

Each body gets one PlanetTable in the harmonic-series layout consumed by
ephemcore.core.planets.evaluate_table:

  arg_tbl   records, each starting with np:
              np <  0   end of table
              np == 0   polynomial record, followed by nt (degree)
              np >  0   periodic record, followed by np pairs
                        (harmonic j, frequency index m, 1-based) and then nt
  lon_tbl   per polynomial record nt+1 values, highest power of T first;
  lat_tbl   per periodic record 2(nt+1) values, (cos, sin) interleaved,
  rad_tbl   highest power first

Units: arcseconds for longitude/latitude; radius is (r/distance − 1) in
arcsecond-radians, so r = distance·(1 + STR·Σ). T counts 10 000 Julian years
from J2000: T = (JD − 2451545) / 3652500.

The frequencies are the Simon et al. (1994) mean motions of the nine bodies.
Series amplitudes are compiled once, at import, from the Standish & Williams
mean Keplerian elements (JPL "approximate positions" Table 1, 1800–2050):
the two-body orbit is sampled in the body's Simon mean longitude, expanded
in a Fourier series up to harmonic 16, and every amplitude is fitted by a
quadratic in T through T = −0.1, 0, +0.1. Jupiter, Saturn and Uranus use the
VSOP87 mean elements instead (Meeus, Table 31.B) and carry their principal
mutual perturbations as multi-frequency records. The frozen tuples are the
only thing the evaluator ever sees.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ephemcore.core.coords import ARCSEC_TO_RAD, DEG_TO_RAD, RAD_TO_DEG, diff_deg

__all__ = [
    "PlanetTable",
    "MeanElements",
    "Perturbation",
    "PERTURBATIONS",
    "FREQUENCIES",
    "PHASES",
    "MEAN_ELEMENTS",
    "PLANET_TABLES",
    "TABLE_INDEX",
    "mods3600",
    "compile_table",
    "eccentric_anomaly",
]

log = logging.getLogger(__name__)

# ───────────────────────────── fundamental arguments ─────────────────────────────

# mean motions, arcsec per 10 000 Julian years (Simon et al. 1994)
FREQUENCIES: Tuple[float, ...] = (
    53810162868.8982,   # Mercury
    21066413643.3548,   # Venus
    12959774228.3429,   # Earth-Moon barycentre
    6890507749.3988,    # Mars
    1092566037.7991,    # Jupiter
    439960985.5372,     # Saturn
    154248119.3933,     # Uranus
    78655032.0744,      # Neptune
    52272245.1795,      # Pluto
)

# mean longitudes at J2000, arcsec
PHASES: Tuple[float, ...] = (
    252.25090552 * 3600.0,
    181.97980085 * 3600.0,
    100.46645683 * 3600.0,
    355.43299958 * 3600.0,
    34.35151874 * 3600.0,
    50.07744430 * 3600.0,
    314.05500511 * 3600.0,
    304.34866548 * 3600.0,
    860492.1546,
)


def mods3600(x: float) -> float:
    """Reduce arcseconds to [0, 1296000)."""
    return x - 1.296e6 * math.floor(x / 1.296e6)


def simon_longitude(index: int, t: float) -> float:
    """Simon mean longitude of body ``index`` in arcsec, T in units of 10 000 years."""
    return mods3600(FREQUENCIES[index] * t) + PHASES[index]


# ───────────────────────────── data model ─────────────────────────────

@dataclass(frozen=True)
class PlanetTable:
    name: str
    max_harmonic: Tuple[int, ...]
    max_power_of_t: int
    arg_tbl: Tuple[int, ...]
    lon_tbl: Tuple[float, ...]
    lat_tbl: Tuple[float, ...]
    rad_tbl: Tuple[float, ...]
    distance: float

    def __post_init__(self) -> None:
        _check_layout(self)


@dataclass(frozen=True)
class MeanElements:
    """(value at J2000, rate per Julian century) for each element; angles in degrees."""
    a: Tuple[float, float]
    e: Tuple[float, float]
    incl: Tuple[float, float]
    mean_longitude: Tuple[float, float]
    perihelion: Tuple[float, float]
    node: Tuple[float, float]

    def at(self, tc: float) -> Tuple[float, float, float, float, float, float]:
        return tuple(v + r * tc for v, r in (  # type: ignore[return-value]
            self.a, self.e, self.incl, self.mean_longitude, self.perihelion, self.node,
        ))


# Standish & Williams, Table 1 (valid 1800–2050); Pluto row from the same table.
# EMB: the J2000 ecliptic tilts against the ecliptic of date about the node of
# the IAU 1976 ecliptic precession (Lieske pi_A, Pi_A).
# Jupiter, Saturn, Uranus: VSOP87 mean elements on the J2000 ecliptic.
MEAN_ELEMENTS: Dict[str, MeanElements] = {
    "mercury": MeanElements(
        (0.38709927, 0.00000037), (0.20563593, 0.00001906), (7.00497902, -0.00594749),
        (252.25032350, 149472.67411175), (77.45779628, 0.16047689), (48.33076593, -0.12534081),
    ),
    "venus": MeanElements(
        (0.72333566, 0.00000390), (0.00677672, -0.00004107), (3.39467605, -0.00078890),
        (181.97909950, 58517.81538729), (131.60246718, 0.00268329), (76.67984255, -0.27769418),
    ),
    "emb": MeanElements(
        (1.00000261, 0.00000562), (0.01671123, -0.00004392), (0.0, 47.0029 / 3600.0),
        (100.46457166, 35999.37244981), (102.93768193, 0.32327364), (174.876384, -869.8089 / 3600.0),
    ),
    "mars": MeanElements(
        (1.52371034, 0.00001847), (0.09339410, 0.00007882), (1.84969142, -0.00813131),
        (-4.55343205, 19140.30268499), (-23.94362959, 0.44441088), (49.55953891, -0.29257343),
    ),
    "jupiter": MeanElements(
        (5.202603191, 0.0000001913), (0.04849485, 0.000163244), (1.303270, -0.0019872),
        (34.351484, 3034.9056746), (14.331309, 0.2155525), (100.464441, 0.1766828),
    ),
    "saturn": MeanElements(
        (9.554909096, -0.0000021389), (0.05550862, -0.000346818), (2.488878, -0.0037363),
        (50.077471, 1222.1137943), (93.056787, 0.5665496), (113.665524, -0.2566649),
    ),
    "uranus": MeanElements(
        (19.218446062, -0.0000000372), (0.04629590, -0.000027337), (0.773196, -0.0016869),
        (314.055005, 428.4669983), (173.005159, 0.0893206), (74.005947, 0.0741461),
    ),
    "neptune": MeanElements(
        (30.06992276, 0.00026291), (0.00859048, 0.00005105), (1.77004347, 0.00035372),
        (-55.12002969, 218.45945325), (44.96476227, -0.32241464), (131.78422574, -0.00508664),
    ),
    "pluto": MeanElements(
        (39.48211675, -0.00031596), (0.24882730, 0.00005170), (17.14001206, 0.00004818),
        (238.92903833, 145.20780515), (224.06891629, -0.04062942), (110.30393684, -0.01183482),
    ),
}

TABLE_ORDER: Tuple[str, ...] = (
    "mercury", "venus", "emb", "mars", "jupiter", "saturn", "uranus", "neptune", "pluto",
)
TABLE_INDEX: Dict[str, int] = {name: i for i, name in enumerate(TABLE_ORDER)}


@dataclass(frozen=True)
class Perturbation:
    """
    One periodic term A·sin(Σ k·M + phase), or A·cos(…) when ``cosine`` is set.

    M are the mean anomalies (L − ϖ) of the bodies named in ``multiples``;
    amplitude and phase are in degrees. ``coord`` is 0 for longitude and 1 for
    latitude.
    """
    coord: int
    amplitude: float
    multiples: Tuple[Tuple[str, int], ...]
    phase: float
    cosine: bool = False


def _jsu(coord: int, amplitude: float, mj: int, ms: int, phase: float, cosine: bool = False) -> Perturbation:
    multiples = tuple((n, k) for n, k in (("jupiter", mj), ("saturn", ms)) if k)
    return Perturbation(coord, amplitude, multiples, phase, cosine)


# Principal Jupiter/Saturn/Uranus inequalities on the VSOP87 mean elements
# (Schlyter, "How to compute planetary positions"), arguments in mean anomalies
PERTURBATIONS: Dict[str, Tuple[Perturbation, ...]] = {
    "jupiter": (
        _jsu(0, -0.332, 2, -5, -67.6),
        _jsu(0, -0.056, 2, -2, 21.0),
        _jsu(0, 0.042, 3, -5, 21.0),
        _jsu(0, -0.036, 1, -2, 0.0),
        _jsu(0, 0.022, 1, -1, 0.0, cosine=True),
        _jsu(0, 0.023, 2, -3, 52.0),
        _jsu(0, -0.016, 1, -5, -69.0),
    ),
    "saturn": (
        _jsu(0, 0.812, 2, -5, -67.6),
        _jsu(0, -0.229, 2, -4, -2.0, cosine=True),
        _jsu(0, 0.119, 1, -2, -3.0),
        _jsu(0, 0.046, 2, -6, -69.0),
        _jsu(0, 0.014, 1, -3, 32.0),
        _jsu(1, -0.020, 2, -4, -2.0, cosine=True),
        _jsu(1, 0.018, 2, -6, -49.0),
    ),
    "uranus": (
        Perturbation(0, 0.040, (("saturn", 1), ("uranus", -2)), 6.0),
        Perturbation(0, 0.035, (("saturn", 1), ("uranus", -3)), 33.0),
        Perturbation(0, -0.015, (("jupiter", 1), ("uranus", -1)), 20.0),
    ),
}

# ───────────────────────────── compilation ─────────────────────────────

_SAMPLES = 64
_HARMONICS = 16
_FIT_STEP = 0.1          # T units (1000 years)
_NEGLIGIBLE = 1e-6       # arcsec; harmonics below this in every coefficient are dropped
_KEPLER_TOL = 1e-15
_KEPLER_MAX_ITERS = 50


def _check_layout(table: PlanetTable) -> None:
    """Walk arg_tbl once and check it against the coefficient arrays."""
    args = table.arg_tbl
    p = used = 0
    while True:
        np_ = args[p]
        p += 1
        if np_ < 0:
            break
        if np_ > 0:
            for _ in range(np_):
                j, m = args[p], args[p + 1]
                p += 2
                if abs(j) > table.max_harmonic[m - 1]:
                    raise ValueError(
                        f"{table.name}: harmonic {j} of frequency {m} exceeds the prepared {table.max_harmonic[m - 1]}"
                    )
        nt = args[p]
        p += 1
        if nt > table.max_power_of_t:
            raise ValueError(f"{table.name}: record of degree {nt} above max_power_of_t {table.max_power_of_t}")
        used += (nt + 1) if np_ == 0 else 2 * (nt + 1)
    if p != len(args):
        raise ValueError(f"{table.name}: {len(args) - p} entries after the end marker")
    for label, tbl in (("lon", table.lon_tbl), ("lat", table.lat_tbl), ("rad", table.rad_tbl)):
        if len(tbl) != used:
            raise ValueError(f"{table.name}: {label}_tbl holds {len(tbl)} values, records need {used}")


def eccentric_anomaly(m: float, e: float) -> float:
    """Newton iteration on E − e sin E = M (radians)."""
    ea = m + e * math.sin(m) if e < 0.8 else math.pi
    for _ in range(_KEPLER_MAX_ITERS):
        step = (ea - e * math.sin(ea) - m) / (1.0 - e * math.cos(ea))
        ea -= step
        if abs(step) < _KEPLER_TOL:
            break
    return ea


def _residual_series(
    index: int, elements: MeanElements, t: float
) -> Tuple[List[float], List[float], List[float]]:
    """
    Fourier coefficients of the two-body orbit about the body's Simon mean
    longitude at time T: [A0, A1, B1, A2, B2, …] for lon, lat and radius.
    """
    a, e, incl, mean_lon, peri, node = elements.at(100.0 * t)
    a0 = elements.a[0]
    offset = mean_lon - simon_longitude(index, t) / 3600.0
    omega = (peri - node) * DEG_TO_RAD
    sin_i = math.sin(incl * DEG_TO_RAD)
    cos_i = math.cos(incl * DEG_TO_RAD)
    half = math.sqrt((1.0 + e) / (1.0 - e))

    f_lon: List[float] = []
    f_lat: List[float] = []
    f_rad: List[float] = []
    for k in range(_SAMPLES):
        x = 360.0 * k / _SAMPLES
        lam = x + offset
        ea = eccentric_anomaly((lam - peri) * DEG_TO_RAD, e)
        nu = 2.0 * math.atan(half * math.tan(0.5 * ea))
        r = a * (1.0 - e * math.cos(ea))
        u = nu + omega
        lon = node + RAD_TO_DEG * math.atan2(cos_i * math.sin(u), math.cos(u))
        lat = RAD_TO_DEG * math.asin(sin_i * math.sin(u))
        f_lon.append(diff_deg(lon, lam) * 3600.0)
        f_lat.append(lat * 3600.0)
        f_rad.append((r / a0 - 1.0) / ARCSEC_TO_RAD)

    def dft(samples: Sequence[float]) -> List[float]:
        out = [sum(samples) / _SAMPLES]
        for n in range(1, _HARMONICS + 1):
            cs = sn = 0.0
            for k, v in enumerate(samples):
                arg = 2.0 * math.pi * n * k / _SAMPLES
                cs += v * math.cos(arg)
                sn += v * math.sin(arg)
            out.append(2.0 * cs / _SAMPLES)
            out.append(2.0 * sn / _SAMPLES)
        return out

    return dft(f_lon), dft(f_lat), dft(f_rad)


def _quadratic(fm: float, f0: float, fp: float) -> Tuple[float, float, float]:
    """Coefficients (T², T, 1) through samples at T = −h, 0, +h."""
    h = _FIT_STEP
    return (fp - 2.0 * f0 + fm) / (2.0 * h * h), (fp - fm) / (2.0 * h), f0


def _perturbation_phase(term: Perturbation, t: float) -> float:
    """
    Phase (radians) of ``term`` once its argument is rewritten on the Simon
    mean longitudes: Σ k·M + phase = Σ k·λ_simon + ψ(T).
    """
    psi = term.phase
    for name, k in term.multiples:
        _, _, _, mean_lon, peri, _ = MEAN_ELEMENTS[name].at(100.0 * t)
        psi += k * (mean_lon - simon_longitude(TABLE_INDEX[name], t) / 3600.0 - peri)
    return psi * DEG_TO_RAD


def _perturbation_coefficients(term: Perturbation) -> Tuple[Tuple[float, float, float], Tuple[float, float, float]]:
    """(cos, sin) coefficient fits, arcsec, of ``term`` about the Simon argument."""
    amp = term.amplitude * 3600.0
    cos_s: List[float] = []
    sin_s: List[float] = []
    for t in (-_FIT_STEP, 0.0, _FIT_STEP):
        psi = _perturbation_phase(term, t)
        if term.cosine:
            # A cos(θ + ψ) = A cos ψ · cos θ − A sin ψ · sin θ
            cos_s.append(amp * math.cos(psi))
            sin_s.append(-amp * math.sin(psi))
        else:
            # A sin(θ + ψ) = A sin ψ · cos θ + A cos ψ · sin θ
            cos_s.append(amp * math.sin(psi))
            sin_s.append(amp * math.cos(psi))
    return _quadratic(*cos_s), _quadratic(*sin_s)


def compile_table(name: str) -> PlanetTable:
    index = TABLE_INDEX[name]
    elements = MEAN_ELEMENTS[name]
    series = [_residual_series(index, elements, t) for t in (-_FIT_STEP, 0.0, _FIT_STEP)]

    def fit(coord: int, slot: int) -> Tuple[float, float, float]:
        return _quadratic(*(s[coord][slot] for s in series))

    arg_tbl: List[int] = []
    lon_tbl: List[float] = []
    lat_tbl: List[float] = []
    rad_tbl: List[float] = []

    # polynomial record: mean longitude plus the constant part of each residual
    l2, l1, l0 = fit(0, 0)
    arg_tbl += [0, 2]
    lon_tbl += [l2, l1 + elements.mean_longitude[1] * 360000.0, l0 + elements.mean_longitude[0] * 3600.0]
    lat_tbl += list(fit(1, 0))
    rad_tbl += list(fit(2, 0))

    top = 0
    for n in range(1, _HARMONICS + 1):
        coeffs = [(fit(c, 2 * n - 1), fit(c, 2 * n)) for c in range(3)]
        if max(abs(v) for pair in coeffs for q in pair for v in q) < _NEGLIGIBLE:
            continue
        top = n
        arg_tbl += [1, n, index + 1, 2]
        for target, (cos_fit, sin_fit) in zip((lon_tbl, lat_tbl, rad_tbl), coeffs):
            for p in range(3):
                target += [cos_fit[p], sin_fit[p]]

    harmonics = [0] * len(FREQUENCIES)
    harmonics[index] = top

    zero = [0.0] * 6
    terms = PERTURBATIONS.get(name, ())
    for term in terms:
        arg_tbl.append(len(term.multiples))
        for body, k in term.multiples:
            slot = TABLE_INDEX[body]
            harmonics[slot] = max(harmonics[slot], abs(k))
            arg_tbl += [k, slot + 1]
        arg_tbl.append(2)
        cos_fit, sin_fit = _perturbation_coefficients(term)
        coeffs = [c for p in range(3) for c in (cos_fit[p], sin_fit[p])]
        for coord, target in enumerate((lon_tbl, lat_tbl, rad_tbl)):
            target += coeffs if coord == term.coord else zero

    arg_tbl.append(-1)
    log.debug("compiled %s series: %d harmonics, %d perturbations", name, top, len(terms))
    return PlanetTable(
        name=name,
        max_harmonic=tuple(harmonics),
        max_power_of_t=2,
        arg_tbl=tuple(arg_tbl),
        lon_tbl=tuple(lon_tbl),
        lat_tbl=tuple(lat_tbl),
        rad_tbl=tuple(rad_tbl),
        distance=elements.a[0],
    )


PLANET_TABLES: Tuple[PlanetTable, ...] = tuple(compile_table(n) for n in TABLE_ORDER)
