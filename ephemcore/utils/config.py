# ephemcore/utils/config.py
import os
from functools import lru_cache

import yaml

DEFAULTS = {
    "delta_t": "erfa",
    "house_system": "P",
    "placidus_max_iters": 100,
    "placidus_tol": 1e-10,
    "chiron_start": 2415020.5,
    "chiron_step": 10.0,
    "chiron_count": 7305,
}

# env var -> (key, converter)
_ENV_OVERRIDES = {
    "EPHEMCORE_DELTA_T": ("delta_t", str),
    "EPHEMCORE_HOUSE_SYSTEM": ("house_system", str),
    "EPHEMCORE_PLACIDUS_MAX_ITERS": ("placidus_max_iters", int),
    "EPHEMCORE_PLACIDUS_TOL": ("placidus_tol", float),
    "EPHEMCORE_CHIRON_START": ("chiron_start", float),
    "EPHEMCORE_CHIRON_STEP": ("chiron_step", float),
    "EPHEMCORE_CHIRON_COUNT": ("chiron_count", int),
}


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.delta_t and cfg['delta_t'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def load_config(path: str = None):
    """
    Load settings: DEFAULTS, then the YAML file at `path` (if given), then env:
      - EPHEMCORE_DELTA_T            erfa | polynomial | seconds
      - EPHEMCORE_HOUSE_SYSTEM       default house code
      - EPHEMCORE_PLACIDUS_MAX_ITERS / EPHEMCORE_PLACIDUS_TOL
      - EPHEMCORE_CHIRON_START / _STEP / _COUNT
    Returns an AttrDict for convenient access.
    """
    data = dict(DEFAULTS)
    if path:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"config file {path} must hold a mapping, got {type(loaded).__name__}")
        data.update(loaded)

    for env, (key, conv) in _ENV_OVERRIDES.items():
        raw = os.getenv(env)
        if raw is None or raw.strip() == "":
            continue
        try:
            data[key] = conv(raw.strip())
        except ValueError as e:
            raise ValueError(f"{env}={raw!r} is not a valid {conv.__name__}") from e

    return _to_attr(data)

@lru_cache(maxsize=1)
def get_settings():
    """Settings from EPHEMCORE_CONFIG (optional YAML) plus env overrides; cached."""
    return load_config(os.getenv("EPHEMCORE_CONFIG") or None)
