# src/floatens/core/exact.py
"""
Module: exact
Purpose: Exact rational coercion for ensemble bounds and radii

Interval bounds are stored as Fractions so that two algebraically equal
expressions for the same interval compare equal bit for bit, e.g.

    (mx + my) - (dx + dy)  ==  (mx - dx) + (my - dy)

Floats are read through their shortest round-trip decimal form (the same
`Decimal(str(value))` convention used by decimal cross-check tooling), so the
literal 0.1 means 1/10 rather than the nearest binary64 value.
"""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from numbers import Rational
from typing import Union

import numpy as np

from floatens.core.errors import NonFiniteValueError

__all__ = ["RealLike", "to_exact", "as_float", "interval_identity"]

RealLike = Union[int, float, str, Decimal, Fraction, np.integer, np.floating]


def to_exact(value: RealLike) -> Fraction:
    """
    Coerce a real-like value to an exact Fraction.

    Raises:
        NonFiniteValueError: for bool, NaN, +/-inf, or unparseable input.
    """
    if isinstance(value, (bool, np.bool_)):
        raise NonFiniteValueError(f"Expected a real number, got bool {value!r}.")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, (int, np.integer)):
        return Fraction(int(value))
    if isinstance(value, Rational):
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, (float, np.floating)):
        f = float(value)
        if not math.isfinite(f):
            raise NonFiniteValueError(f"Expected a finite value, got {f}.")
        return Fraction(repr(f))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise NonFiniteValueError(f"Expected a finite value, got {value}.")
        return Fraction(value)
    if isinstance(value, str):
        # accepts "0.1", "1e-3" and the "3/10" form written by to_dict()
        try:
            return Fraction(value.strip())
        except (ValueError, ZeroDivisionError):
            raise NonFiniteValueError(f"Cannot parse {value!r} as a real number.") from None
    raise NonFiniteValueError(f"Unsupported numeric type {type(value).__name__}.")


def as_float(value: Fraction) -> float:
    """Nearest binary64 value, for reporting and for numeric kernels."""
    return float(value)


def interval_identity(mx: RealLike, dx: RealLike, my: RealLike, dy: RealLike) -> bool:
    """
    True when the combined-radius interval equals the sum of the two intervals.

    This is the identity exact_add relies on; over Fractions it holds for every
    input, which the test suite checks once instead of re-deriving per call.
    """
    mx_, dx_, my_, dy_ = (to_exact(v) for v in (mx, dx, my, dy))
    lower_ok = (mx_ + my_) - (dx_ + dy_) == (mx_ - dx_) + (my_ - dy_)
    upper_ok = (mx_ + my_) + (dx_ + dy_) == (mx_ + dx_) + (my_ + dy_)
    return lower_ok and upper_ok
