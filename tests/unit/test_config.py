# tests/unit/test_config.py
"""EntropySettings validation, YAML loading, env overrides, pairs files."""

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError

from floatens.config import (
    ENV_BACKEND,
    ENV_TOLERANCE,
    EntropySettings,
    load_config,
    load_pairs,
    load_settings,
)
from floatens.core.errors import ConfigError, InvalidErrorRadiusError
from floatens.core.interval import Interval


def test_defaults():
    s = EntropySettings()
    assert s.backend == "closed_form"
    assert s.quad_limit == 200
    assert s.tolerance == 1e-10
    assert isinstance(s.config_hash, str) and len(s.config_hash) == 64


@pytest.mark.parametrize("raw, expected", [("Quadrature", "quadrature"), ("closed-form", "closed_form"), ("closed", "closed_form"), (None, "closed_form")])
def test_backend_is_normalized(raw, expected):
    assert EntropySettings(backend=raw).backend == expected


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        EntropySettings(backend="monte_carlo")
    with pytest.raises(ValidationError):
        EntropySettings(quad_limit=0)
    with pytest.raises(ValidationError):
        EntropySettings(tolerance=-1.0)
    with pytest.raises(ValidationError):
        EntropySettings(quad_epsabs=float("inf"))


def test_settings_are_frozen():
    s = EntropySettings()
    with pytest.raises((AttributeError, ValidationError, TypeError)):
        s.backend = "quadrature"  # type: ignore[misc]


@given(limit=st.integers(min_value=1, max_value=10_000))
def test_config_hash_tracks_semantic_fields(limit):
    a = EntropySettings(quad_limit=limit)
    b = EntropySettings(quad_limit=limit)
    c = EntropySettings(quad_limit=limit, backend="quadrature")
    assert a.config_hash == b.config_hash
    assert a.config_hash != c.config_hash


def test_load_settings_from_yaml_with_env_override(tmp_path):
    p = tmp_path / "entropy.yaml"
    p.write_text("backend: quadrature\nquad_limit: 64\ntolerance: 1.0e-8\n", encoding="utf-8")

    s = load_settings(str(p), env={})
    assert s.backend == "quadrature"
    assert s.quad_limit == 64
    assert s.tolerance == 1e-8

    s2 = load_settings(str(p), env={ENV_BACKEND: "closed_form", ENV_TOLERANCE: "0.001"})
    assert s2.backend == "closed_form"
    assert s2.tolerance == 0.001
    assert s2.quad_limit == 64


def test_load_settings_without_file_uses_env(monkeypatch):
    monkeypatch.setenv(ENV_BACKEND, "quadrature")
    assert load_settings().backend == "quadrature"


def test_load_config_rejects_non_mapping(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_config(str(empty)) == {}


def test_load_settings_wraps_validation_errors(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("quad_limit: -3\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(str(p), env={})


def test_load_pairs_list_and_mapping_forms(tmp_path):
    body = (
        "- x: {mu: 1.0, delta: 0.1}\n"
        "  y: {mu: 2.0, delta: 0.2}\n"
        "- x: {mu: '1/3', delta: '1/30'}\n"
        "  y: {mu: -4, delta: 2}\n"
    )
    p = tmp_path / "pairs.yaml"
    p.write_text(body, encoding="utf-8")
    pairs = load_pairs(str(p))
    assert len(pairs) == 2
    assert pairs[0][0].interval == Interval.make(0.9, 1.1)
    assert pairs[1][1].interval == Interval(-6, -2)

    wrapped = tmp_path / "wrapped.yaml"
    wrapped.write_text("pairs:\n" + "".join("  " + line + "\n" for line in body.splitlines()), encoding="utf-8")
    assert load_pairs(str(wrapped)) == pairs


@pytest.mark.parametrize(
    "body",
    ["x: 1\n", "- 3\n", "- x: {mu: 1.0}\n  y: {mu: 2.0, delta: 0.2}\n", "- y: {mu: 2.0, delta: 0.2}\n"],
)
def test_load_pairs_rejects_malformed_files(tmp_path, body):
    p = tmp_path / "pairs.yaml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_pairs(str(p))


def test_load_pairs_surfaces_invariant_errors(tmp_path):
    p = tmp_path / "pairs.yaml"
    p.write_text("- x: {mu: 1.0, delta: -0.1}\n  y: {mu: 2.0, delta: 0.2}\n", encoding="utf-8")
    with pytest.raises(InvalidErrorRadiusError):
        load_pairs(str(p))
