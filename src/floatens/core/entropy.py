# src/floatens/core/entropy.py
"""
Module: entropy
Purpose: Injectable differential-entropy functionals over declared densities

Mathematical notes
------------------
Differential entropy h(f) = -∫ f(x) ln f(x) dx (nats).

  Uniform on width w:                 h = ln w
  Uniform(a) * Uniform(b), a <= b:    h = ln b + a / (2b)   (trapezoid)
  Reflection x -> -x:                 h unchanged

For widths a <= b and x = a / b in (0, 1], x/2 < ln(1 + x), so the trapezoid
always sits strictly below ln(a + b), the entropy of the uniform spanning the
combined width. That is the convolution axiom checked in `floatens.core.axioms`.

The two absolute entropies round to the same double once x drops below about
1e-16, so orderings are decided on the gap H(U(support)) - H(d) instead
(`entropy_gap`). A functional may supply its own `gap(density)`; the closed
form computes log1p(x) - x/2 from the exact width ratio, which stays positive
for every representable x > 0.

The core never depends on a particular formula: every public operation that
needs entropy accepts `entropy=None` and falls back to the process default
(`get_entropy()`), which a harness may swap for a test double.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from fractions import Fraction
from typing import TYPE_CHECKING, Iterator, List, Optional, Protocol, Union, runtime_checkable

import numpy as np
from scipy import integrate

from floatens.core.density import ConvolutionPDF, Density, ReflectedPDF, UniformPDF
from floatens.core.errors import NonFiniteValueError

if TYPE_CHECKING:  # pragma: no cover
    from floatens.config import EntropySettings

__all__ = [
    "EntropyFunctional",
    "ClosedFormEntropy",
    "QuadratureEntropy",
    "uniform_entropy",
    "trapezoid_entropy",
    "trapezoid_gap",
    "get_entropy",
    "set_entropy",
    "use_entropy",
    "build_entropy",
    "evaluate",
    "entropy_gap",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class EntropyFunctional(Protocol):
    """Anything mapping a density to a real entropy value."""

    def __call__(self, density: Density) -> float: ...


def uniform_entropy(width: float) -> float:
    return math.log(width)


def trapezoid_entropy(w1: float, w2: float) -> float:
    """Entropy of the convolution of uniforms with widths w1 and w2."""
    a, b = sorted((w1, w2))
    return math.log(b) + a / (2.0 * b)


def trapezoid_gap(w1: Union[Fraction, float], w2: Union[Fraction, float]) -> float:
    """
    ln(w1 + w2) - trapezoid_entropy(w1, w2), without cancellation.

    With x = min / max of the widths: log1p(x) - x/2. The ratio is formed from
    exact Fractions, so a radius 1e-18 times the other still yields x > 0.
    """
    a, b = sorted((Fraction(w1), Fraction(w2)))
    x = float(a / b)
    return math.log1p(x) - x / 2.0


def _breakpoints(d: Density) -> Optional[List[float]]:
    """Interior kinks of a uniform * uniform trapezoid, to help quad converge."""
    if isinstance(d, ConvolutionPDF) and d.left.is_uniform and d.right.is_uniform:
        lo, hi = d.support.as_floats()
        a, b = sorted((float(d.left.support.width), float(d.right.support.width)))
        pts = [p for p in (lo + a, lo + b) if lo < p < hi]
        return pts or None
    return None


class QuadratureEntropy:
    """-∫ f ln f over the declared support via scipy.integrate.quad."""

    def __init__(
        self,
        *,
        limit: int = 200,
        epsabs: float = 1.49e-8,
        epsrel: float = 1.49e-8,
    ) -> None:
        self.limit = limit
        self.epsabs = epsabs
        self.epsrel = epsrel

    def __call__(self, density: Density) -> float:
        lo, hi = density.support.as_floats()

        def integrand(x: float) -> float:
            f = float(density.pdf(x))
            return -f * math.log(f) if f > 0.0 else 0.0

        val, err = integrate.quad(
            integrand,
            lo,
            hi,
            points=_breakpoints(density),
            limit=self.limit,
            epsabs=self.epsabs,
            epsrel=self.epsrel,
        )
        logger.debug("quadrature entropy on %s: %.12g (abs err %.2e)", density.support, val, err)
        return float(val)

    def gap(self, density: Density) -> float:
        """KL(density || uniform on its support) = ∫ f ln(f w), one integral."""
        if density.is_uniform:
            return 0.0
        lo, hi = density.support.as_floats()
        w = float(density.support.width)

        def integrand(x: float) -> float:
            f = float(density.pdf(x))
            return f * math.log(f * w) if f > 0.0 else 0.0

        val, _ = integrate.quad(
            integrand,
            lo,
            hi,
            points=_breakpoints(density),
            limit=self.limit,
            epsabs=self.epsabs,
            epsrel=self.epsrel,
        )
        return float(val)

    def __repr__(self) -> str:
        return f"QuadratureEntropy(limit={self.limit}, epsabs={self.epsabs}, epsrel={self.epsrel})"


class ClosedFormEntropy:
    """
    Closed forms for every shape the core manufactures from canonical inputs.

    Shapes without a closed form (nested convolutions, custom densities) are
    handed to `fallback`, quadrature by default.
    """

    def __init__(self, fallback: Optional[EntropyFunctional] = None) -> None:
        self.fallback: EntropyFunctional = fallback if fallback is not None else QuadratureEntropy()

    def __call__(self, density: Density) -> float:
        if density.is_uniform:
            return uniform_entropy(float(density.support.width))
        if isinstance(density, ReflectedPDF):
            return self(density.inner)
        if isinstance(density, ConvolutionPDF) and density.left.is_uniform and density.right.is_uniform:
            return trapezoid_entropy(
                float(density.left.support.width), float(density.right.support.width)
            )
        return float(self.fallback(density))

    def gap(self, density: Density) -> float:
        """H(UniformPDF(density.support)) - H(density)."""
        if density.is_uniform:
            return 0.0
        if isinstance(density, ReflectedPDF):
            return self.gap(density.inner)
        if isinstance(density, ConvolutionPDF) and density.left.is_uniform and density.right.is_uniform:
            return trapezoid_gap(density.left.support.width, density.right.support.width)
        return uniform_entropy(float(density.support.width)) - float(self.fallback(density))

    def __repr__(self) -> str:
        return f"ClosedFormEntropy(fallback={self.fallback!r})"


_default: EntropyFunctional = ClosedFormEntropy()


def get_entropy() -> EntropyFunctional:
    return _default


def set_entropy(fn: EntropyFunctional) -> EntropyFunctional:
    """Install a new process-wide default; returns the previous one."""
    global _default
    if not callable(fn):
        raise TypeError("entropy functional must be callable")
    prev = _default
    _default = fn
    logger.debug("default entropy functional set to %r", fn)
    return prev


@contextmanager
def use_entropy(fn: EntropyFunctional) -> Iterator[EntropyFunctional]:
    """Temporarily swap the default entropy functional."""
    prev = set_entropy(fn)
    try:
        yield fn
    finally:
        set_entropy(prev)


def build_entropy(settings: "EntropySettings") -> EntropyFunctional:
    """Build the functional described by an EntropySettings instance."""
    quad = QuadratureEntropy(
        limit=settings.quad_limit,
        epsabs=settings.quad_epsabs,
        epsrel=settings.quad_epsrel,
    )
    if settings.backend == "quadrature":
        return quad
    return ClosedFormEntropy(fallback=quad)


def _resolve(entropy: Optional[EntropyFunctional]) -> EntropyFunctional:
    return entropy if entropy is not None else _default


def evaluate(density: Density, entropy: Optional[EntropyFunctional] = None) -> float:
    """Entropy of `density` under `entropy`, or the process default."""
    val = float(_resolve(entropy)(density))
    if not np.isfinite(val):
        raise NonFiniteValueError(f"entropy functional returned non-finite value {val}")
    return val


def entropy_gap(density: Density, entropy: Optional[EntropyFunctional] = None) -> float:
    """
    H(UniformPDF(density.support)) - H(density) under `entropy`.

    Uses the functional's own `gap` when it has one; otherwise the difference
    of two `evaluate` calls.
    """
    fn = _resolve(entropy)
    gap_fn = getattr(fn, "gap", None)
    if callable(gap_fn):
        val = float(gap_fn(density))
    else:
        val = evaluate(UniformPDF(density.support), fn) - evaluate(density, fn)
    if not np.isfinite(val):
        raise NonFiniteValueError(f"entropy gap is non-finite: {val}")
    return val
