# src/floatens/core/__init__.py
"""Ensemble data model, exact/stored arithmetic, and entropy contracts."""

from .density import (
    ConvolutionPDF,
    CustomPDF,
    Density,
    ReflectedPDF,
    UniformPDF,
    convolve,
    is_supported_on,
    is_uniform_on,
    uniform,
)
from .ensemble import FloatEnsemble, get_interval
from .entropy import (
    ClosedFormEntropy,
    EntropyFunctional,
    QuadratureEntropy,
    entropy_gap,
    get_entropy,
    set_entropy,
    use_entropy,
)
from .errors import (
    AxiomViolationError,
    ConfigError,
    EnsembleError,
    InvalidErrorRadiusError,
    InvalidIntervalError,
    NonCanonicalInputError,
    NonFiniteValueError,
    SupportMismatchError,
)
from .interval import Interval
from .operations import (
    coarse_grain,
    exact_add,
    exact_sub,
    exact_sum,
    float_add,
    float_sub,
    float_sum,
    negate,
)
from .theorem import EntropyIncrease, entropy_increase

__all__ = [
    "Interval",
    "Density",
    "UniformPDF",
    "ConvolutionPDF",
    "ReflectedPDF",
    "CustomPDF",
    "uniform",
    "convolve",
    "is_supported_on",
    "is_uniform_on",
    "EntropyFunctional",
    "ClosedFormEntropy",
    "QuadratureEntropy",
    "entropy_gap",
    "get_entropy",
    "set_entropy",
    "use_entropy",
    "FloatEnsemble",
    "get_interval",
    "exact_add",
    "coarse_grain",
    "float_add",
    "negate",
    "exact_sub",
    "float_sub",
    "exact_sum",
    "float_sum",
    "EntropyIncrease",
    "entropy_increase",
    "EnsembleError",
    "InvalidIntervalError",
    "InvalidErrorRadiusError",
    "SupportMismatchError",
    "NonFiniteValueError",
    "NonCanonicalInputError",
    "AxiomViolationError",
    "ConfigError",
]
