# src/floatens/core/ensemble.py
"""
Module: ensemble
Purpose: FloatEnsemble, a floating value as (nominal value, error radius, density)

Invariant
---------
    delta > 0  and  density.support == Interval(mu - delta, mu + delta)

Checked in `__post_init__` for every instance, including those assembled by
the operations module. The radius check runs first so a nonpositive delta is
reported as InvalidErrorRadiusError rather than as a malformed interval.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Optional

from floatens.core import entropy as _entropy
from floatens.core.density import Density, UniformPDF, is_supported_on, is_uniform_on
from floatens.core.errors import InvalidErrorRadiusError, SupportMismatchError
from floatens.core.exact import RealLike, as_float, to_exact
from floatens.core.interval import Interval

__all__ = ["FloatEnsemble", "get_interval"]


@dataclass(frozen=True, slots=True)
class FloatEnsemble:
    """Immutable ensemble; see module docstring for the invariant."""

    mu: Fraction
    delta: Fraction
    density: Density

    def __post_init__(self) -> None:
        mu = to_exact(self.mu)
        delta = to_exact(self.delta)
        if delta <= 0:
            raise InvalidErrorRadiusError(delta)
        expected = Interval.from_center(mu, delta)
        if not isinstance(self.density, Density):
            raise TypeError(f"density must be a Density, got {type(self.density).__name__}")
        if not is_supported_on(self.density, expected):
            raise SupportMismatchError(self.density.support, expected)
        object.__setattr__(self, "mu", mu)
        object.__setattr__(self, "delta", delta)

    # ---- Constructors ------------------------------------------------------

    @classmethod
    def make(
        cls,
        mu: RealLike,
        delta: RealLike,
        density: Optional[Density] = None,
    ) -> FloatEnsemble:
        """
        Build an ensemble. `density=None` means the canonical uniform on the
        ensemble's interval (the convention for raw inputs).
        """
        if density is None:
            d = to_exact(delta)
            if d <= 0:
                raise InvalidErrorRadiusError(d)
            density = UniformPDF(Interval.from_center(mu, d))
        return cls(mu, delta, density)  # type: ignore[arg-type]

    @classmethod
    def from_interval(cls, interval: Interval, density: Optional[Density] = None) -> FloatEnsemble:
        if density is None:
            density = UniformPDF(interval)
        return cls(interval.midpoint, interval.radius, density)

    # ---- Queries -----------------------------------------------------------

    @property
    def interval(self) -> Interval:
        return Interval.from_center(self.mu, self.delta)

    @property
    def is_canonical(self) -> bool:
        """True when the density is the uniform on this ensemble's interval."""
        return is_uniform_on(self.density, self.interval)

    def entropy(self, entropy: Optional[_entropy.EntropyFunctional] = None) -> float:
        return _entropy.evaluate(self.density, entropy)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view: floats for reading, exact strings for round-tripping."""
        lo, hi = self.interval.as_floats()
        return {
            "mu": as_float(self.mu),
            "delta": as_float(self.delta),
            "interval": [lo, hi],
            "exact": {"mu": str(self.mu), "delta": str(self.delta)},
            "density": type(self.density).__name__,
            "canonical": self.is_canonical,
        }

    def __repr__(self) -> str:
        return (
            f"FloatEnsemble(mu={as_float(self.mu):g}, delta={as_float(self.delta):g}, "
            f"density={type(self.density).__name__})"
        )


def get_interval(f: FloatEnsemble) -> Interval:
    """Interval(mu - delta, mu + delta)."""
    return f.interval
