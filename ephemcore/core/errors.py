# ephemcore/core/errors.py
from __future__ import annotations

from typing import Any

__all__ = ["EphemerisError", "UnsupportedBody", "OutOfRange"]


class EphemerisError(ValueError):
    """Categorized error for ephemeris callers."""
    def __init__(self, stage: str, message: str, **context: Any):
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.message = message
        self.context = context


class UnsupportedBody(EphemerisError):
    def __init__(self, body: Any):
        super().__init__("dispatch", f"unsupported body {body!r}", body=body)


class OutOfRange(EphemerisError):
    def __init__(self, jd: float, jd_start: float, jd_end: float):
        super().__init__(
            "chiron",
            f"JD {jd} outside table range {jd_start}..{jd_end}",
            jd=jd, jd_start=jd_start, jd_end=jd_end,
        )
