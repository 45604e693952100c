# src/floatens/core/operations.py
"""
Module: operations
Purpose: Exact (convolution) and stored (coarse-grained) ensemble arithmetic

  exact_add(X, Y)   mu = X.mu + Y.mu, delta = X.delta + Y.delta,
                    density = X.density * Y.density (convolution)
  coarse_grain(F)   same mu/delta, density = UniformPDF([mu - delta, mu + delta])
  float_add(X, Y)   coarse_grain(exact_add(X, Y))

Support bookkeeping
-------------------
The convolution declares its support as interval(X) + interval(Y); the new
ensemble expects Interval(mu - delta, mu + delta). Over exact rationals

  (mx + my) - (dx + dy) == (mx - dx) + (my - dy)

so the two agree exactly. `_assemble` still re-checks through FloatEnsemble's
constructor; a SupportMismatchError there is an arithmetic bug, not bad input.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Iterable

from floatens.core.density import ReflectedPDF, UniformPDF, convolve
from floatens.core.ensemble import FloatEnsemble, get_interval
from floatens.core.errors import SupportMismatchError

__all__ = [
    "exact_add",
    "coarse_grain",
    "float_add",
    "negate",
    "exact_sub",
    "float_sub",
    "exact_sum",
    "float_sum",
]

logger = logging.getLogger(__name__)


def _assemble(op: str, mu, delta, density) -> FloatEnsemble:
    try:
        return FloatEnsemble(mu, delta, density)
    except SupportMismatchError:
        logger.error("%s produced inconsistent support (mu=%s, delta=%s)", op, mu, delta)
        raise


def exact_add(x: FloatEnsemble, y: FloatEnsemble) -> FloatEnsemble:
    """Information-preserving sum: radii add, densities convolve."""
    out = _assemble("exact_add", x.mu + y.mu, x.delta + y.delta, convolve(x.density, y.density))
    logger.debug("exact_add %r + %r -> %s", x, y, out.interval)
    return out


def coarse_grain(f: FloatEnsemble) -> FloatEnsemble:
    """Project onto the uniform density over the ensemble's own interval."""
    if isinstance(f.density, UniformPDF):
        return f
    out = _assemble("coarse_grain", f.mu, f.delta, UniformPDF(get_interval(f)))
    logger.debug("coarse_grain dropped %s on %s", type(f.density).__name__, out.interval)
    return out


def float_add(x: FloatEnsemble, y: FloatEnsemble) -> FloatEnsemble:
    """Add exactly, then coarse-grain for storage."""
    return coarse_grain(exact_add(x, y))


def negate(f: FloatEnsemble) -> FloatEnsemble:
    """Ensemble of -X; uniform densities stay canonical uniforms."""
    if isinstance(f.density, UniformPDF):
        density = UniformPDF(-f.density.support)
    elif isinstance(f.density, ReflectedPDF):
        density = f.density.inner
    else:
        density = ReflectedPDF(f.density)
    return _assemble("negate", -f.mu, f.delta, density)


def exact_sub(x: FloatEnsemble, y: FloatEnsemble) -> FloatEnsemble:
    return exact_add(x, negate(y))


def float_sub(x: FloatEnsemble, y: FloatEnsemble) -> FloatEnsemble:
    return coarse_grain(exact_sub(x, y))


def exact_sum(values: Iterable[FloatEnsemble]) -> FloatEnsemble:
    """Left fold of exact_add; keeps the full nested convolution."""
    items = list(values)
    if not items:
        raise ValueError("exact_sum needs at least one ensemble")
    return reduce(exact_add, items)


def float_sum(values: Iterable[FloatEnsemble]) -> FloatEnsemble:
    """Left fold of float_add; coarse-grains after every step, like a register."""
    items = list(values)
    if not items:
        raise ValueError("float_sum needs at least one ensemble")
    return reduce(float_add, items[1:], coarse_grain(items[0]))
