# tests/test_config.py
from __future__ import annotations

import pytest

from ephemcore.utils.config import DEFAULTS, AttrDict, get_settings, load_config


def test_defaults() -> None:
    cfg = load_config()
    assert cfg == DEFAULTS
    assert cfg.delta_t == "erfa"
    assert cfg["house_system"] == "P"
    assert cfg.placidus_max_iters == 100


def test_yaml_file_overrides_defaults(tmp_path) -> None:
    path = tmp_path / "ephemcore.yaml"
    path.write_text(
        "house_system: K\n"
        "placidus_tol: 1.0e-12\n"
        "extra:\n"
        "  nested: [1, {deep: true}]\n",
        encoding="utf-8",
    )
    cfg = load_config(str(path))
    assert cfg.house_system == "K"
    assert cfg.placidus_tol == 1e-12
    assert cfg.delta_t == "erfa"
    assert cfg.extra.nested[1].deep is True


def test_empty_yaml_file(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == DEFAULTS


def test_yaml_must_be_a_mapping(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_env_beats_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "ephemcore.yaml"
    path.write_text("chiron_count: 10\n", encoding="utf-8")
    monkeypatch.setenv("EPHEMCORE_CHIRON_COUNT", " 42 ")
    monkeypatch.setenv("EPHEMCORE_DELTA_T", "69.2")
    cfg = load_config(str(path))
    assert cfg.chiron_count == 42
    assert cfg.delta_t == "69.2"


def test_blank_env_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPHEMCORE_HOUSE_SYSTEM", "   ")
    assert load_config().house_system == "P"


def test_bad_env_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPHEMCORE_PLACIDUS_MAX_ITERS", "many")
    with pytest.raises(ValueError) as info:
        load_config()
    assert "EPHEMCORE_PLACIDUS_MAX_ITERS" in str(info.value)


def test_attrdict_access() -> None:
    d = AttrDict(a=1)
    d.b = 2
    assert d["b"] == 2 and d.a == 1
    with pytest.raises(AttributeError):
        _ = d.missing


def test_get_settings_is_cached(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "ephemcore.yaml"
    path.write_text("house_system: R\n", encoding="utf-8")
    monkeypatch.setenv("EPHEMCORE_CONFIG", str(path))
    get_settings.cache_clear()
    first = get_settings()
    assert first.house_system == "R"
    monkeypatch.setenv("EPHEMCORE_HOUSE_SYSTEM", "C")
    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().house_system == "C"
