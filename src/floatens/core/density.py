# src/floatens/core/density.py
"""
Module: density
Purpose: Probability densities tagged with a declared support interval

Overview
--------
A density is an opaque function real -> real plus the interval it is declared
to be supported on. "d is supported on I" is an asserted relation: it is read
off `d.support`, never computed by inspecting `d.pdf`. Every density this
package manufactures declares its support exactly:

  UniformPDF(I)          support I, value 1/width(I)
  ConvolutionPDF(d1, d2) support d1.support + d2.support (whatever the shape)
  ReflectedPDF(d)        support -d.support, value d.pdf(-x)
  CustomPDF(fn, I)       support I as declared by the caller

Design notes
------------
- Frozen dataclasses; equality is structural, so two convolutions of equal
  inputs are equal densities.
- `pdf` accepts scalars or numpy arrays and returns 0 outside the support.
- Uniform * uniform uses the closed-form trapezoid (overlap length over
  w1 * w2). Other convolutions integrate with scipy.integrate.quad.
- Moments are exact Fractions wherever a closed form exists.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Callable, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import integrate

from floatens.core.interval import Interval, reflect
from floatens.core.interval import add as add_intervals

__all__ = [
    "Density",
    "UniformPDF",
    "ConvolutionPDF",
    "ReflectedPDF",
    "CustomPDF",
    "uniform",
    "convolve",
    "is_supported_on",
    "is_uniform_on",
]

Moment = Union[Fraction, float]

# quad subdivision cap for pointwise convolution integrals
_QUAD_LIMIT = 200


class Density(ABC):
    """Abstract density with a declared support interval."""

    support: Interval

    @abstractmethod
    def _pdf_array(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        """Evaluate on a 1-D float array; may assume nothing about support."""

    @abstractmethod
    def mean(self) -> Moment: ...

    @abstractmethod
    def variance(self) -> Moment: ...

    @property
    def is_uniform(self) -> bool:
        return False

    def pdf(self, x: ArrayLike) -> Union[float, NDArray[np.float64]]:
        """Density value(s) at x; 0 outside the declared support."""
        arr = np.asarray(x, dtype=float)
        flat = np.atleast_1d(arr).ravel()
        lo, hi = self.support.as_floats()
        inside = (flat >= lo) & (flat <= hi)
        out = np.zeros_like(flat)
        if inside.any():
            out[inside] = self._pdf_array(flat[inside])
        if arr.ndim == 0:
            return float(out[0])
        return out.reshape(arr.shape)

    def __call__(self, x: ArrayLike) -> Union[float, NDArray[np.float64]]:
        return self.pdf(x)


@dataclass(frozen=True, slots=True)
class UniformPDF(Density):
    """Canonical maximum-entropy density on an interval."""

    support: Interval

    def _pdf_array(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.full_like(x, 1.0 / float(self.support.width))

    @property
    def is_uniform(self) -> bool:
        return True

    def mean(self) -> Fraction:
        return self.support.midpoint

    def variance(self) -> Fraction:
        return self.support.width**2 / 12


@dataclass(frozen=True, slots=True)
class ConvolutionPDF(Density):
    """
    Density of X + Y for independent X ~ left, Y ~ right.

    The declared support is the interval sum of the input supports. This is set
    here, once, and holds for any pair of inputs regardless of the result's shape.
    """

    left: Density
    right: Density
    support: Interval = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "support", add_intervals(self.left.support, self.right.support))

    def _pdf_array(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        if self.left.is_uniform and self.right.is_uniform:
            return self._trapezoid(x)
        return np.array([self._quad_point(float(xi)) for xi in x], dtype=float)

    def _trapezoid(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        a1, b1 = self.left.support.as_floats()
        a2, b2 = self.right.support.as_floats()
        # |[a1, b1] ∩ [x - b2, x - a2]| / (w1 * w2)
        overlap = np.minimum(b1, x - a2) - np.maximum(a1, x - b2)
        return np.clip(overlap, 0.0, None) / ((b1 - a1) * (b2 - a2))

    def _quad_point(self, x: float) -> float:
        a1, b1 = self.left.support.as_floats()
        a2, b2 = self.right.support.as_floats()
        lo = max(a1, x - b2)
        hi = min(b1, x - a2)
        if hi <= lo:
            return 0.0
        val, _ = integrate.quad(
            lambda t: float(self.left.pdf(t)) * float(self.right.pdf(x - t)),
            lo,
            hi,
            limit=_QUAD_LIMIT,
        )
        return max(val, 0.0)

    def mean(self) -> Moment:
        return self.left.mean() + self.right.mean()

    def variance(self) -> Moment:
        return self.left.variance() + self.right.variance()


@dataclass(frozen=True, slots=True)
class ReflectedPDF(Density):
    """Density of -X for X ~ inner."""

    inner: Density
    support: Interval = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "support", reflect(self.inner.support))

    @property
    def is_uniform(self) -> bool:
        return self.inner.is_uniform

    def _pdf_array(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.asarray(self.inner.pdf(-x), dtype=float)

    def mean(self) -> Moment:
        return -self.inner.mean()

    def variance(self) -> Moment:
        return self.inner.variance()


@dataclass(frozen=True, slots=True)
class CustomPDF(Density):
    """
    Caller-supplied density with an asserted support.

    The support is trusted as declared; callers must not declare a support that
    does not reflect the function's shape. `fn` takes and returns a float.
    """

    fn: Callable[[float], float]
    support: Interval

    def _pdf_array(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array([float(self.fn(float(xi))) for xi in x], dtype=float)

    def _moment(self, k: int) -> float:
        lo, hi = self.support.as_floats()
        val, _ = integrate.quad(lambda t: t**k * float(self.fn(t)), lo, hi, limit=_QUAD_LIMIT)
        return float(val)

    def mean(self) -> float:
        return self._moment(1)

    def variance(self) -> float:
        m = self._moment(1)
        return self._moment(2) - m * m


def uniform(support: Interval) -> UniformPDF:
    return UniformPDF(support)


def convolve(d1: Density, d2: Density) -> ConvolutionPDF:
    return ConvolutionPDF(d1, d2)


def is_supported_on(d: Density, support: Interval) -> bool:
    """Asserted-support relation: compares the declared interval by value."""
    return d.support == support


def is_uniform_on(d: Density, support: Interval) -> bool:
    """True when d is the canonical uniform density for `support`."""
    return d.is_uniform and is_supported_on(d, support)
