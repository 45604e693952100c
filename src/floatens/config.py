# src/floatens/config.py
"""
Module: config
Purpose: Typed settings for the entropy backend, YAML loading, env overrides
Dependencies: pydantic (v2), PyYAML, blake3

Settings file (YAML mapping, every key optional):

    backend: closed_form      # or: quadrature
    quad_limit: 200
    quad_epsabs: 1.49e-8
    quad_epsrel: 1.49e-8
    tolerance: 1.0e-10

Environment overrides (applied after the file):
    FLOATENS_ENTROPY_BACKEND, FLOATENS_TOLERANCE

Pairs file for `floatens check` (YAML list or {pairs: [...]}):

    - x: {mu: 1.0, delta: 0.1}
      y: {mu: 2.0, delta: 0.2}
"""

from __future__ import annotations

import json
import math
import os
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, cast

import blake3
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field, field_validator

from floatens.core.ensemble import FloatEnsemble
from floatens.core.errors import ConfigError

__all__ = [
    "EntropySettings",
    "load_config",
    "load_settings",
    "load_pairs",
    "canonical_digest",
    "ENV_BACKEND",
    "ENV_TOLERANCE",
]

ENV_BACKEND = "FLOATENS_ENTROPY_BACKEND"
ENV_TOLERANCE = "FLOATENS_TOLERANCE"


def canonical_digest(obj: Any) -> str:
    """Canonical JSON -> BLAKE3 hex digest."""
    data = json.dumps(obj, sort_keys=True, separators=(",", ":"))
    return blake3.blake3(data.encode("utf-8")).hexdigest()


class EntropySettings(BaseModel):
    """Which entropy functional to use and how hard quadrature may work."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    backend: Literal["closed_form", "quadrature"] = "closed_form"
    quad_limit: int = Field(default=200, ge=1, description="Max quad subintervals.")
    quad_epsabs: float = Field(default=1.49e-8, gt=0.0)
    quad_epsrel: float = Field(default=1.49e-8, gt=0.0)
    tolerance: float = Field(
        default=1e-10,
        ge=0.0,
        description="Slack for non-strict entropy comparisons only.",
    )

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, v: Any) -> str:
        if v is None:
            return "closed_form"
        s = str(v).strip().lower().replace("-", "_")
        return "closed_form" if s in ("closed", "closedform") else s

    @field_validator("quad_epsabs", "quad_epsrel", "tolerance", mode="after")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("must be finite")
        return v

    @computed_field
    @property
    def config_hash(self) -> str:
        """Stable fingerprint recorded alongside audit entries."""
        payload = {
            "backend": self.backend,
            "quad_limit": self.quad_limit,
            "quad_epsabs": self.quad_epsabs,
            "quad_epsrel": self.quad_epsrel,
            "tolerance": self.tolerance,
        }
        return canonical_digest(payload)


def load_config(path: str) -> Mapping[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config at {path} is not a mapping")
    return cast(Mapping[str, Any], data)


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if env.get(ENV_BACKEND):
        out["backend"] = env[ENV_BACKEND]
    if env.get(ENV_TOLERANCE):
        out["tolerance"] = env[ENV_TOLERANCE]
    return out


def load_settings(
    path: Optional[str] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> EntropySettings:
    """Settings from an optional YAML file, then environment overrides."""
    raw: Dict[str, Any] = dict(load_config(path)) if path else {}
    raw.update(_env_overrides(os.environ if env is None else env))
    try:
        return EntropySettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid entropy settings: {e}") from e


def _ensemble_from(obj: Any, where: str) -> FloatEnsemble:
    if not isinstance(obj, Mapping) or "mu" not in obj or "delta" not in obj:
        raise ConfigError(f"{where} must be a mapping with 'mu' and 'delta'")
    return FloatEnsemble.make(obj["mu"], obj["delta"])


def load_pairs(path: str) -> List[Tuple[FloatEnsemble, FloatEnsemble]]:
    """Read canonical ensemble pairs for batch theorem checks."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict):
        data = data.get("pairs")
    if not isinstance(data, list):
        raise ConfigError(f"Pairs file {path} must hold a list of {{x, y}} mappings")
    pairs: List[Tuple[FloatEnsemble, FloatEnsemble]] = []
    for i, item in enumerate(data):
        if not isinstance(item, Mapping):
            raise ConfigError(f"pairs[{i}] is not a mapping")
        pairs.append((_ensemble_from(item.get("x"), f"pairs[{i}].x"), _ensemble_from(item.get("y"), f"pairs[{i}].y")))
    return pairs
