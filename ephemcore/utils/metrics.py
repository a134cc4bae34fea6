# ephemcore/utils/metrics.py
from __future__ import annotations
import time
from typing import Dict, Callable, List
from functools import wraps

from ephemcore.version import VERSION

CALLS_TOTAL = "ephemcore_calls_total"
CALL_LATENCY_MS = "ephemcore_call_latency_ms"
HOUSE_FALLBACK_TOTAL = "ephemcore_house_fallback_total"

_MAX_SAMPLES = 1000

class Metrics:
    """In-process counters and latency samples for the library entry points."""

    def __init__(self):
        self.counters: Dict[str, float] = {}
        self.latency: Dict[str, List[float]] = {}

    def inc(self, name: str, amt: float = 1.0, labels: Dict[str,str] | None = None):
        key = self._key(name, labels)
        self.counters[key] = self.counters.get(key, 0.0) + amt

    def observe(self, name: str, value_ms: float, labels: Dict[str,str] | None = None):
        key = self._key(name, labels)
        samples = self.latency.setdefault(key, [])
        samples.append(value_ms)
        if len(samples) > _MAX_SAMPLES:
            del samples[:-_MAX_SAMPLES]

    def get(self, name: str, labels: Dict[str,str] | None = None) -> float:
        return self.counters.get(self._key(name, labels), 0.0)

    def reset(self):
        self.counters.clear()
        self.latency.clear()

    def _key(self, name: str, labels: Dict[str,str] | None):
        if not labels:
            return name
        parts = [f'{k}="{v}"' for k,v in sorted(labels.items())]
        return f"{name}{{{','.join(parts)}}}"

    def timed(self, op: str) -> Callable:
        """Count calls and record latency of the wrapped entry point under ``op``."""
        def deco(fn):
            @wraps(fn)
            def wrapper(*args, **kwargs):
                t0 = time.perf_counter()
                try:
                    return fn(*args, **kwargs)
                finally:
                    dt = (time.perf_counter() - t0) * 1000.0
                    self.inc(CALLS_TOTAL, 1.0, {"op": op})
                    self.observe(CALL_LATENCY_MS, dt, {"op": op})
            return wrapper
        return deco

    def export_prometheus(self) -> str:
        lines = [
            "# TYPE ephemcore_build_info gauge",
            f'ephemcore_build_info{{version="{VERSION}"}} 1',
        ]
        for k, v in self.counters.items():
            lines.append(f"# TYPE {k.split('{')[0]} counter")
            lines.append(f"{k} {v:.0f}")
        for k, samples in self.latency.items():
            if not samples: continue
            name, _, labels = k.partition("{")
            labels = "{" + labels if labels else ""
            avg = sum(samples)/len(samples)
            p95 = sorted(samples)[int(0.95*len(samples))-1] if len(samples) >= 20 else max(samples)
            lines.append(f"# TYPE {name} gauge")
            lines.append(f"{name}_avg{labels} {avg:.2f}")
            lines.append(f"{name}_p95{labels} {p95:.2f}")
        return "\n".join(lines) + "\n"

metrics = Metrics()
