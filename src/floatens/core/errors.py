# src/floatens/core/errors.py
"""
Module: errors
Purpose: Exception taxonomy for ensemble construction and entropy checks

All errors are precondition violations detected at construction or check
time. None of them are transient, so nothing in the package retries.
"""

from __future__ import annotations

__all__ = [
    "EnsembleError",
    "InvalidIntervalError",
    "InvalidErrorRadiusError",
    "SupportMismatchError",
    "NonFiniteValueError",
    "NonCanonicalInputError",
    "AxiomViolationError",
    "ConfigError",
]


class EnsembleError(ValueError):
    """Base class for every error raised by floatens."""


class InvalidIntervalError(EnsembleError):
    """Raised when interval bounds are not strictly ordered."""

    def __init__(self, lower: object, upper: object) -> None:
        self.lower = lower
        self.upper = upper
        super().__init__(f"Invalid interval: need lower < upper, got [{lower}, {upper}].")


class InvalidErrorRadiusError(EnsembleError):
    """Raised when an ensemble is built with a nonpositive error radius."""

    def __init__(self, delta: object) -> None:
        self.delta = delta
        super().__init__(f"Error radius must be > 0. Got {delta}.")


class SupportMismatchError(EnsembleError):
    """
    Raised when a density's declared support differs from [mu - delta, mu + delta].

    From user input this is a bad argument. From inside exact_add/coarse_grain
    it means the arithmetic or the convolution is broken.
    """

    def __init__(self, declared: object, expected: object) -> None:
        self.declared = declared
        self.expected = expected
        super().__init__(f"Density declared on {declared} but ensemble spans {expected}.")


class NonFiniteValueError(EnsembleError):
    """Raised when a value is NaN, infinite, or not a real number."""


class NonCanonicalInputError(EnsembleError):
    """Raised when a theorem needs uniform densities and got something else."""


class AxiomViolationError(EnsembleError):
    """Raised when an entropy functional breaks a required ordering."""


class ConfigError(EnsembleError):
    """Raised when settings cannot be loaded or validated."""
