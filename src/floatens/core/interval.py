# src/floatens/core/interval.py
"""
Module: interval
Purpose: Immutable real interval with strictly ordered bounds

Validity (lower < upper) is checked once in the constructor; downstream code
trusts the type. Equality and hashing look at the bound values only, so an
interval built by `add` equals one built directly from the same numbers.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple

from floatens.core.errors import InvalidIntervalError
from floatens.core.exact import RealLike, as_float, to_exact

__all__ = ["Interval", "add", "reflect"]


@dataclass(frozen=True, slots=True)
class Interval:
    """Closed interval [lower, upper] with exact rational bounds and lower < upper."""

    lower: Fraction
    upper: Fraction

    def __post_init__(self) -> None:
        lo = to_exact(self.lower)
        hi = to_exact(self.upper)
        if not lo < hi:
            raise InvalidIntervalError(lo, hi)
        object.__setattr__(self, "lower", lo)
        object.__setattr__(self, "upper", hi)

    # ---- Constructors ------------------------------------------------------

    @classmethod
    def make(cls, lower: RealLike, upper: RealLike) -> Interval:
        return cls(lower, upper)  # type: ignore[arg-type]

    @classmethod
    def from_center(cls, center: RealLike, radius: RealLike) -> Interval:
        """[center - radius, center + radius]; radius must be > 0."""
        c = to_exact(center)
        r = to_exact(radius)
        return cls(c - r, c + r)

    # ---- Derived quantities ------------------------------------------------

    @property
    def width(self) -> Fraction:
        return self.upper - self.lower

    @property
    def midpoint(self) -> Fraction:
        return (self.lower + self.upper) / 2

    @property
    def radius(self) -> Fraction:
        return self.width / 2

    def contains(self, value: RealLike, strict: bool = False) -> bool:
        """Check if value lies within the interval."""
        x = to_exact(value)
        if strict:
            return self.lower < x < self.upper
        return self.lower <= x <= self.upper

    def as_floats(self) -> Tuple[float, float]:
        return as_float(self.lower), as_float(self.upper)

    # ---- Arithmetic --------------------------------------------------------

    def __add__(self, other: object) -> Interval:
        if not isinstance(other, Interval):
            return NotImplemented
        return add(self, other)

    def __neg__(self) -> Interval:
        return reflect(self)

    def __repr__(self) -> str:
        return f"Interval({self.lower}, {self.upper})"

    def __str__(self) -> str:
        lo, hi = self.as_floats()
        return f"[{lo:g}, {hi:g}]"


def add(a: Interval, b: Interval) -> Interval:
    """Minkowski sum. The sum of two strict inequalities is strict, so this never fails."""
    return Interval(a.lower + b.lower, a.upper + b.upper)


def reflect(a: Interval) -> Interval:
    """Image of the interval under x -> -x."""
    return Interval(-a.upper, -a.lower)
