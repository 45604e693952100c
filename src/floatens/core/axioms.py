# src/floatens/core/axioms.py
"""
Module: axioms
Purpose: The entropy contracts the core relies on, as checkable functions

Any entropy functional plugged into floatens must satisfy:

  (A1) max-entropy bound
       For d supported on I:  H(d) <= H(UniformPDF(I)),
       with equality iff d is uniform on I.

  (A2) convolution strictly loses entropy
       H(UniformPDF(I1) * UniformPDF(I2)) < H(UniformPDF(I1 + I2)).

  (S)  support conservation
       support(d1 * d2) == support(d1) + support(d2), whatever the shape.

Each check returns the compared values and raises AxiomViolationError on
failure. `tolerance` only loosens the non-strict half of (A1), where numeric
quadrature can land a hair above the bound; strict comparisons stay strict.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from floatens.core import entropy as _entropy
from floatens.core.density import Density, UniformPDF, convolve
from floatens.core.errors import AxiomViolationError
from floatens.core.interval import Interval
from floatens.core.interval import add as add_intervals

__all__ = [
    "MATHEMATICAL_TOLERANCE",
    "check_max_entropy_bound",
    "check_convolution_loses_entropy",
    "check_support_conservation",
]

logger = logging.getLogger(__name__)

MATHEMATICAL_TOLERANCE = 1e-10


def check_max_entropy_bound(
    density: Density,
    entropy: Optional[_entropy.EntropyFunctional] = None,
    *,
    tolerance: float = MATHEMATICAL_TOLERANCE,
) -> Tuple[float, float]:
    """
    Check (A1) for one density.

    Returns:
        (H(density), H(UniformPDF(support))). For a non-uniform density the
        strict half is decided on `entropy_gap`.
    """
    h = _entropy.evaluate(density, entropy)
    h_max = _entropy.evaluate(UniformPDF(density.support), entropy)
    if density.is_uniform:
        if abs(h - h_max) > tolerance:
            logger.warning("uniform density entropy %.12g differs from bound %.12g", h, h_max)
            raise AxiomViolationError(
                f"Uniform density on {density.support} has entropy {h!r}, expected {h_max!r}."
            )
    elif not _entropy.entropy_gap(density, entropy) > 0.0:
        logger.warning("max-entropy bound violated on %s: %.12g >= %.12g", density.support, h, h_max)
        raise AxiomViolationError(
            f"Non-uniform density on {density.support} has entropy {h!r} >= uniform bound {h_max!r}."
        )
    return h, h_max


def check_convolution_loses_entropy(
    a: Interval,
    b: Interval,
    entropy: Optional[_entropy.EntropyFunctional] = None,
) -> Tuple[float, float]:
    """
    Check (A2) for one pair of intervals.

    Returns:
        (H(U(a) * U(b)), H(U(a + b))). The strict ordering is decided on
        `entropy_gap`, so the pair may round to equal floats when one width is
        negligible next to the other.
    """
    conv = convolve(UniformPDF(a), UniformPDF(b))
    h_conv = _entropy.evaluate(conv, entropy)
    h_cover = _entropy.evaluate(UniformPDF(add_intervals(a, b)), entropy)
    if not _entropy.entropy_gap(conv, entropy) > 0.0:
        logger.warning("convolution axiom violated for %s, %s: %.12g >= %.12g", a, b, h_conv, h_cover)
        raise AxiomViolationError(
            f"Convolution of uniforms on {a} and {b} has entropy {h_conv!r}, "
            f"not below uniform cover {h_cover!r}."
        )
    return h_conv, h_cover


def check_support_conservation(d1: Density, d2: Density) -> Interval:
    """Check (S); returns the declared support of the convolution."""
    out = convolve(d1, d2).support
    expected = add_intervals(d1.support, d2.support)
    if out != expected:
        raise AxiomViolationError(f"Convolution declared support {out}, expected {expected}.")
    return out
