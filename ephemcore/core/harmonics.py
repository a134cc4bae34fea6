# ephemcore/core/harmonics.py
from __future__ import annotations
"""
Multiple-angle tables and angle-addition composition.

The nutation, planetary and lunar series all need sin(k·a) and cos(k·a) for
small integer k over a handful of base angles a, then the sine and cosine of
linear combinations Σ jᵢ·aᵢ. Only sin(a) and cos(a) are evaluated with the
math library; higher multiples come from the recurrence

    sin 2a = 2 sin a cos a,   cos 2a = cos²a − sin²a
    sin (k+1)a = sin a cos ka + cos a sin ka
    cos (k+1)a = cos a cos ka − sin a sin ka

and combinations from the same addition formulas. The order of operations is
fixed; changing it changes the rounding of every downstream series.

Tables are ordinary objects owned by the caller, so concurrent evaluations
never share scratch space.
"""

import math
from typing import Iterable, List, Optional, Sequence, Tuple

__all__ = ["MultipleAngles", "AngleTables"]


class MultipleAngles:
    """sin/cos of 1·a … n·a for one base angle (index 0 holds 1·a)."""

    __slots__ = ("sin", "cos")

    def __init__(self, angle: float, count: int) -> None:
        su = math.sin(angle)
        cu = math.cos(angle)
        self.sin: List[float] = [su]
        self.cos: List[float] = [cu]
        if count < 2:
            return
        sv = 2.0 * su * cu
        cv = cu * cu - su * su
        self.sin.append(sv)
        self.cos.append(cv)
        for _ in range(2, count):
            s = su * cv + cu * sv
            cv = cu * cv - su * sv
            sv = s
            self.sin.append(sv)
            self.cos.append(cv)

    def __len__(self) -> int:
        return len(self.sin)

    def term(self, multiple: int) -> Tuple[float, float]:
        """(sin, cos) of ``multiple``·a; negative multiples flip the sine."""
        k = abs(multiple) - 1
        s = self.sin[k]
        return (-s if multiple < 0 else s), self.cos[k]


class AngleTables:
    """
    A set of MultipleAngles indexed by argument slot.

    Slots whose required count is 0 stay empty; asking for them raises
    IndexError, which points at a malformed coefficient table.
    """

    __slots__ = ("_tables",)

    def __init__(self, angles: Sequence[float], counts: Sequence[int]) -> None:
        self._tables: List[Optional[MultipleAngles]] = [
            MultipleAngles(a, n) if n > 0 else None for a, n in zip(angles, counts)
        ]

    def __getitem__(self, slot: int) -> MultipleAngles:
        table = self._tables[slot]
        if table is None:
            raise IndexError(f"no multiple-angle table prepared for slot {slot}")
        return table

    def combine(self, pairs: Iterable[Tuple[int, int]]) -> Tuple[float, float]:
        """
        (sin, cos) of Σ multiple·angle[slot] over (multiple, slot) pairs.

        Zero multiples are skipped. The first non-zero term seeds the sum and
        each further one is folded in by angle addition.
        """
        started = False
        sv = 0.0
        cv = 0.0
        for multiple, slot in pairs:
            if multiple == 0:
                continue
            su, cu = self[slot].term(multiple)
            if not started:
                sv, cv = su, cu
                started = True
            else:
                s = su * cv + cu * sv
                cv = cu * cv - su * sv
                sv = s
        return sv, cv

    def combine_row(self, multiples: Sequence[int]) -> Tuple[float, float]:
        """combine() for a row whose i-th multiple applies to slot i."""
        return self.combine(zip(multiples, range(len(multiples))))
