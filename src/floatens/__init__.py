"""Top-level package for floatens: floating values as entropy-carrying ensembles."""

from importlib import metadata as _metadata

from . import core
from .core import (
    FloatEnsemble,
    Interval,
    UniformPDF,
    coarse_grain,
    entropy_increase,
    exact_add,
    float_add,
    get_interval,
)

try:
    __version__ = _metadata.version("floatens")
except _metadata.PackageNotFoundError:  # pragma: no cover - during local usage
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "core",
    "FloatEnsemble",
    "Interval",
    "UniformPDF",
    "coarse_grain",
    "entropy_increase",
    "exact_add",
    "float_add",
    "get_interval",
]
