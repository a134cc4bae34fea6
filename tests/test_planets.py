# tests/test_planets.py
from __future__ import annotations

import math

import pytest
from hypothesis import given, strategies as st

from ephemcore.core.coords import ARCSEC_TO_RAD, norm
from ephemcore.core.planet_tables import (
    PERTURBATIONS,
    PLANET_TABLES,
    TABLE_INDEX,
    PlanetTable,
    compile_table,
    eccentric_anomaly,
    simon_longitude,
)
from ephemcore.core.planets import (
    PLANET_NAMES,
    PLANET_SPEED_INTERVAL,
    earth_heliocentric,
    evaluate_table,
    geocentric,
    planet_heliocentric,
)

jd_modern = st.floats(min_value=2415020.5, max_value=2488069.5)

# (perihelion, aphelion) in AU with a little slack
_RADIUS_BOUNDS = {
    "mercury": (0.30, 0.47),
    "venus": (0.71, 0.73),
    "mars": (1.37, 1.68),
    "jupiter": (4.93, 5.47),
    "saturn": (8.9, 10.2),
    "uranus": (18.2, 20.2),
    "neptune": (29.7, 30.5),
    "pluto": (29.5, 49.5),
}


# ──────────────────────────────────────────────────────────────────────────────
# Tables
# ──────────────────────────────────────────────────────────────────────────────

def test_every_series_has_a_table() -> None:
    assert set(PLANET_NAMES) == set(_RADIUS_BOUNDS)
    assert "emb" in TABLE_INDEX
    for table in PLANET_TABLES:
        assert table.arg_tbl[-1] == -1
        assert table.distance > 0.0


@given(
    st.floats(min_value=0.0, max_value=2 * math.pi),
    st.floats(min_value=0.0, max_value=0.9),
)
def test_eccentric_anomaly_solves_kepler(m: float, e: float) -> None:
    ea = eccentric_anomaly(m, e)
    assert ea - e * math.sin(ea) == pytest.approx(m, abs=1e-12)


def test_evaluate_table_radius_of_emb() -> None:
    _, lat, r = evaluate_table(2451545.0, PLANET_TABLES[TABLE_INDEX["emb"]])
    assert 0.983 < r < 1.017
    assert abs(lat) < 1e-4


def _two_frequency_table(**overrides) -> PlanetTable:
    fields = dict(
        name="test",
        max_harmonic=(0, 0, 0, 0, 2, 5, 0, 0, 0),
        max_power_of_t=1,
        # one record: 2·λ(Jupiter) − 5·λ(Saturn), linear in T
        arg_tbl=(2, 2, 5, -5, 6, 1, -1),
        lon_tbl=(100.0, -40.0, 1200.0, 300.0),
        lat_tbl=(0.0, 0.0, 50.0, -20.0),
        rad_tbl=(0.0, 0.0, 10.0, 5.0),
        distance=5.0,
    )
    fields.update(overrides)
    return PlanetTable(**fields)


@pytest.mark.parametrize("jd", [2415020.5, 2451545.0, 2460000.5])
def test_multi_frequency_record_by_hand(jd: float) -> None:
    t = (jd - 2451545.0) / 3652500.0
    theta = (2.0 * simon_longitude(4, t) - 5.0 * simon_longitude(5, t)) * ARCSEC_TO_RAD
    c, s = math.cos(theta), math.sin(theta)

    lon, lat, r = evaluate_table(jd, _two_frequency_table())

    assert lon == pytest.approx(ARCSEC_TO_RAD * ((100.0 * t + 1200.0) * c + (-40.0 * t + 300.0) * s), abs=1e-12)
    assert lat == pytest.approx(ARCSEC_TO_RAD * (50.0 * c - 20.0 * s), abs=1e-12)
    assert r == pytest.approx(5.0 + 5.0 * ARCSEC_TO_RAD * (10.0 * c + 5.0 * s), abs=1e-12)


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_harmonic": (0, 0, 0, 0, 2, 4, 0, 0, 0)},
        {"max_power_of_t": 0},
        {"lat_tbl": (0.0, 0.0, 50.0)},
        {"arg_tbl": (2, 2, 5, -5, 6, 1, -1, 0)},
    ],
)
def test_malformed_table_rejected(overrides) -> None:
    with pytest.raises(ValueError):
        _two_frequency_table(**overrides)


@pytest.mark.parametrize("name", ["jupiter", "saturn", "uranus"])
def test_outer_planets_carry_mutual_perturbations(name: str) -> None:
    table = PLANET_TABLES[TABLE_INDEX[name]]
    own = TABLE_INDEX[name]
    assert any(n > 0 for i, n in enumerate(table.max_harmonic) if i != own)
    records = []
    p = 0
    while table.arg_tbl[p] >= 0:
        np_ = table.arg_tbl[p]
        pairs = table.arg_tbl[p + 1:p + 1 + 2 * np_]
        records.append(pairs)
        p += 1 + 2 * np_ + 1
    assert sum(1 for r in records if len(r) >= 4) == len(PERTURBATIONS[name])


def test_great_inequality_amplitudes() -> None:
    # 2·M(Jupiter) − 5·M(Saturn): 0.332° on Jupiter, 0.812° on Saturn
    for name, amplitude in (("jupiter", 0.332), ("saturn", 0.812)):
        table = PLANET_TABLES[TABLE_INDEX[name]]
        args = table.arg_tbl
        p = pl = 0
        found = None
        while args[p] >= 0:
            np_ = args[p]
            pairs = tuple(args[p + 1:p + 1 + 2 * np_])
            nt = args[p + 1 + 2 * np_]
            if pairs == (2, 5, -5, 6):
                found = table.lon_tbl[pl + 2 * nt], table.lon_tbl[pl + 2 * nt + 1]
            pl += (nt + 1) if np_ == 0 else 2 * (nt + 1)
            p += 2 + 2 * np_
        assert found is not None, name
        assert math.hypot(*found) == pytest.approx(amplitude * 3600.0, rel=1e-3)


def test_perturbations_move_saturn(monkeypatch: pytest.MonkeyPatch) -> None:
    # 1900–2000: the 2J − 5S term sits near its crest around 1900
    with_terms = PLANET_TABLES[TABLE_INDEX["saturn"]]
    monkeypatch.setitem(PERTURBATIONS, "saturn", ())
    bare = compile_table("saturn")
    worst = max(
        abs(evaluate_table(jd, with_terms)[0] - evaluate_table(jd, bare)[0])
        for jd in range(2415020, 2451545, 1000)
    )
    assert 0.2 * math.pi / 180.0 < worst < 1.3 * math.pi / 180.0


# ──────────────────────────────────────────────────────────────────────────────
# Heliocentric and geocentric vectors
# ──────────────────────────────────────────────────────────────────────────────

@given(jd_modern)
def test_heliocentric_radius_within_orbit(jd: float) -> None:
    for name, (lo, hi) in _RADIUS_BOUNDS.items():
        r = norm(planet_heliocentric(jd, name)[:3])
        assert lo < r < hi, name


@given(jd_modern)
def test_earth_distance(jd: float) -> None:
    assert 0.982 < norm(earth_heliocentric(jd)[:3]) < 1.018


def test_sun_is_negated_earth() -> None:
    jd = 2448000.5
    earth = earth_heliocentric(jd)
    sun = geocentric(jd, "sun")
    assert sun == tuple(-c for c in earth)


def test_velocity_is_backward_difference() -> None:
    jd = 2449000.5
    now = planet_heliocentric(jd, "mars")
    before = planet_heliocentric(jd - PLANET_SPEED_INTERVAL, "mars")
    for k in range(3):
        assert now[3 + k] == pytest.approx((now[k] - before[k]) / PLANET_SPEED_INTERVAL, rel=1e-12)


def test_earth_orbital_speed() -> None:
    # about 0.0172 AU/day (29.8 km/s)
    v = norm(earth_heliocentric(2451545.0)[3:])
    assert v == pytest.approx(0.0172, rel=0.03)


def test_unknown_body_rejected() -> None:
    with pytest.raises(ValueError):
        planet_heliocentric(2451545.0, "vulcan")
    with pytest.raises(ValueError):
        geocentric(2451545.0, "emb")
