# tests/unit/cli/test_cli.py
import json
import os
import subprocess
import sys

import pytest

from floatens import cli
from floatens.audit import AuditEntry, AuditTrail
from floatens.config import EntropySettings
from floatens.core.errors import AxiomViolationError
from tests._factories import mk_ensemble

PAIRS = """\
- x: {mu: 1.0, delta: 0.1}
  y: {mu: 2.0, delta: 0.2}
- x: {mu: -5, delta: 3}
  y: {mu: 0.25, delta: 0.001}
"""


def test_add_prints_exact_and_stored_entropies(capsys):
    cli.main(["add", "--x", "1.0", "0.1", "--y", "2.0", "0.2"])
    out = json.loads(capsys.readouterr().out)
    assert out["exact"]["interval"] == [2.7, 3.3]
    assert out["stored"]["delta"] == 0.3
    assert out["stored"]["canonical"] is True
    assert out["exact"]["canonical"] is False
    assert out["exact"]["entropy"] < out["stored"]["entropy"]


def test_add_with_quadrature_backend(capsys):
    cli.main(["add", "--x", "0", "1", "--y", "0", "1", "--backend", "quadrature"])
    out = json.loads(capsys.readouterr().out)
    assert out["exact"]["entropy"] == pytest.approx(0.5 + 0.6931471805599453, abs=1e-6)


def test_add_rejects_negative_radius(capsys):
    with pytest.raises(SystemExit) as ei:
        cli.main(["add", "--x", "1.0", "-0.1", "--y", "2.0", "0.2"])
    assert ei.value.code == 1
    assert "Error radius must be > 0" in capsys.readouterr().err


def test_check_writes_audit_chain(tmp_path, capsys):
    pairs = tmp_path / "pairs.yaml"
    pairs.write_text(PAIRS, encoding="utf-8")
    log = tmp_path / "audit.jsonl"
    cli.main(["check", "--pairs", str(pairs), "--audit", str(log)])
    out = capsys.readouterr().out
    assert "2 pair(s) OK" in out
    assert "audit=" in out
    assert AuditTrail(str(log)).verify() == 2

    cli.main(["verify-audit", "--audit", str(log)])
    assert "audit trail OK (2 entries)" in capsys.readouterr().out


def test_check_reads_settings_file(tmp_path, capsys):
    pairs = tmp_path / "pairs.yaml"
    pairs.write_text(PAIRS, encoding="utf-8")
    cfg = tmp_path / "entropy.yaml"
    cfg.write_text("backend: quadrature\n", encoding="utf-8")
    log = tmp_path / "audit.jsonl"
    cli.main(["check", "--pairs", str(pairs), "--config", str(cfg), "--audit", str(log)])
    assert "2 pair(s) OK" in capsys.readouterr().out
    first = json.loads(log.read_text(encoding="utf-8").splitlines()[0])
    assert first["backend"] == "quadrature"


def test_verify_audit_reports_tamper(tmp_path, capsys):
    log = tmp_path / "audit.jsonl"
    entry = AuditEntry.violation(mk_ensemble(0, 1), mk_ensemble(0, 2), EntropySettings(), AxiomViolationError("x"))
    AuditTrail(str(log)).append(entry)
    log.write_text(log.read_text(encoding="utf-8").replace('"delta":"2"', '"delta":"3"'), encoding="utf-8")
    with pytest.raises(SystemExit) as ei:
        cli.main(["verify-audit", "--audit", str(log)])
    assert ei.value.code == 1
    assert "digest mismatch" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [[], ["frobnicate"]])
def test_usage_errors_exit_2(argv, capsys):
    with pytest.raises(SystemExit) as ei:
        cli.main(argv)
    assert ei.value.code == 2


def test_module_entrypoint_smoke(src_path):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join([str(src_path), env.get("PYTHONPATH", "")])
    cmd = [sys.executable, "-m", "floatens", "add", "--x", "1.0", "0.1", "--y", "2.0", "0.2"]
    res = subprocess.run(cmd, capture_output=True, text=True, env=env)
    assert res.returncode == 0, res.stderr
    payload = json.loads(res.stdout)
    assert payload["stored"]["mu"] == 3.0


def test_check_passes_when_one_operand_is_absorbed(tmp_path, capsys):
    pairs = tmp_path / "pairs.yaml"
    pairs.write_text(
        "- x: {mu: 1.0e6, delta: 1.0e6}\n"
        "  y: {mu: 1.0, delta: 1.0e-10}\n"
        "- x: {mu: 0, delta: 1}\n"
        "  y: {mu: 0, delta: '1/100000000000000000'}\n",
        encoding="utf-8",
    )
    cli.main(["check", "--pairs", str(pairs)])
    assert "2 pair(s) OK" in capsys.readouterr().out


def test_check_records_violations_and_exits_1(tmp_path, capsys, monkeypatch):
    def refuse(x, y, entropy=None, *, tolerance):
        raise AxiomViolationError("gap 0.0")

    monkeypatch.setattr(cli, "entropy_increase", refuse)
    pairs = tmp_path / "pairs.yaml"
    pairs.write_text(PAIRS, encoding="utf-8")
    log = tmp_path / "audit.jsonl"
    with pytest.raises(SystemExit) as ei:
        cli.main(["check", "--pairs", str(pairs), "--audit", str(log)])
    assert ei.value.code == 1
    captured = capsys.readouterr()
    assert "pair 0: VIOLATION gap 0.0" in captured.out
    assert "2 of 2 pair(s) violated" in captured.err

    entries = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert [e["outcome"] for e in entries] == ["violation", "violation"]
    assert AuditTrail(str(log)).verify() == 2


def test_check_threads_settings_tolerance(tmp_path, capsys, monkeypatch):
    seen = []
    real = cli.entropy_increase

    def spy(x, y, entropy=None, *, tolerance):
        seen.append(tolerance)
        return real(x, y, entropy, tolerance=tolerance)

    monkeypatch.setattr(cli, "entropy_increase", spy)
    monkeypatch.setenv("FLOATENS_TOLERANCE", "1e-6")
    pairs = tmp_path / "pairs.yaml"
    pairs.write_text(PAIRS, encoding="utf-8")
    cli.main(["check", "--pairs", str(pairs)])
    assert seen == [1e-6, 1e-6]


@pytest.mark.parametrize(
    "content",
    [None, "- x: {mu: 1.0, delta: [unclosed\n"],
)
def test_unreadable_pairs_file_is_a_usage_error(tmp_path, capsys, content):
    pairs = tmp_path / "pairs.yaml"
    if content is not None:
        pairs.write_text(content, encoding="utf-8")
    with pytest.raises(SystemExit) as ei:
        cli.main(["check", "--pairs", str(pairs)])
    assert ei.value.code == 2
    assert "usage error" in capsys.readouterr().err


def test_verify_audit_on_missing_file_is_a_usage_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as ei:
        cli.main(["verify-audit", "--audit", str(tmp_path / "nope.jsonl")])
    assert ei.value.code == 2
