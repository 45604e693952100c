# src/floatens/core/theorem.py
"""
Module: theorem
Purpose: Entropy increase of stored floating addition, as a checkable property

Statement
---------
For canonical X, Y (density = UniformPDF(interval)):

    H(exact_add(X, Y).density)  <  H(float_add(X, Y).density)

Derivation:
  LHS = H(U(Ix) * U(Iy))
  RHS = H(U(interval(exact_add(X, Y)))) = H(U(Ix + Iy))   (support conservation)
  and LHS < RHS is axiom (A2).

`entropy_increase` evaluates both sides for a concrete pair under the active
entropy functional and returns an immutable report. It raises when the inputs
are not canonical or when the strict ordering fails. The ordering is decided on
the entropy gap (`entropy.entropy_gap`), not on the difference of the two
reported entropies, which coincide in floating point once one radius is
negligible next to the other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from floatens.core import entropy as _entropy
from floatens.core.axioms import MATHEMATICAL_TOLERANCE, check_max_entropy_bound
from floatens.core.ensemble import FloatEnsemble, get_interval
from floatens.core.errors import AxiomViolationError, NonCanonicalInputError
from floatens.core.interval import Interval
from floatens.core.interval import add as add_intervals
from floatens.core.operations import coarse_grain, exact_add

__all__ = [
    "EntropyIncrease",
    "entropy_increase",
    "coarse_grain_gain",
    "support_conservation",
    "accumulated_entropy",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntropyIncrease:
    """Outcome of one entropy-increase check."""

    x: FloatEnsemble
    y: FloatEnsemble
    exact: FloatEnsemble
    stored: FloatEnsemble
    exact_entropy: float
    stored_entropy: float
    gap: float

    @property
    def interval(self) -> Interval:
        return get_interval(self.stored)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x.to_dict(),
            "y": self.y.to_dict(),
            "interval": list(self.interval.as_floats()),
            "exact_entropy": self.exact_entropy,
            "stored_entropy": self.stored_entropy,
            "gap": self.gap,
        }


def _require_canonical(name: str, f: FloatEnsemble) -> None:
    if not f.is_canonical:
        raise NonCanonicalInputError(
            f"{name} must carry the uniform density on {f.interval}; "
            f"got {type(f.density).__name__}. Apply coarse_grain first."
        )


def entropy_increase(
    x: FloatEnsemble,
    y: FloatEnsemble,
    entropy: Optional[_entropy.EntropyFunctional] = None,
    *,
    tolerance: float = MATHEMATICAL_TOLERANCE,
) -> EntropyIncrease:
    """
    Evaluate and check H(exact_add(x, y)) < H(float_add(x, y)) for canonical x, y.

    The stored density must also attain the max-entropy bound for its interval,
    within `tolerance`.
    """
    _require_canonical("x", x)
    _require_canonical("y", y)
    exact = exact_add(x, y)
    stored = coarse_grain(exact)
    h_exact = _entropy.evaluate(exact.density, entropy)
    h_stored, _ = check_max_entropy_bound(stored.density, entropy, tolerance=tolerance)
    gap = _entropy.entropy_gap(exact.density, entropy)
    if not gap > 0.0:
        logger.warning("entropy did not increase on store: gap %.6g", gap)
        raise AxiomViolationError(
            f"Stored entropy {h_stored!r} does not exceed exact entropy {h_exact!r} "
            f"(gap {gap!r}) for {x!r} + {y!r}."
        )
    logger.debug("entropy increase on %s: %.6g -> %.6g", stored.interval, h_exact, h_stored)
    return EntropyIncrease(x, y, exact, stored, h_exact, h_stored, gap)


def coarse_grain_gain(
    f: FloatEnsemble,
    entropy: Optional[_entropy.EntropyFunctional] = None,
) -> float:
    """H(coarse_grain(f)) - H(f); >= 0, and > 0 unless f is already canonical."""
    return _entropy.entropy_gap(f.density, entropy)


def support_conservation(x: FloatEnsemble, y: FloatEnsemble) -> bool:
    """get_interval(exact_add(x, y)) == get_interval(x) + get_interval(y), by value."""
    return get_interval(exact_add(x, y)) == add_intervals(get_interval(x), get_interval(y))


def accumulated_entropy(
    values: Iterable[FloatEnsemble],
    entropy: Optional[_entropy.EntropyFunctional] = None,
) -> List[Tuple[float, float]]:
    """
    Running (exact, stored) entropy pairs for a register-style summation.

    Each step adds the next canonical value to the running stored total with
    exact_add, records the entropy of that exact result and of its coarse-grained
    store, and continues from the store.
    """
    items = list(values)
    if not items:
        raise ValueError("accumulated_entropy needs at least one ensemble")
    acc = coarse_grain(items[0])
    out: List[Tuple[float, float]] = []
    for nxt in items[1:]:
        report = entropy_increase(acc, coarse_grain(nxt), entropy)
        out.append((report.exact_entropy, report.stored_entropy))
        acc = report.stored
    return out
