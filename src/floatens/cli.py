# src/floatens/cli.py
"""
floatens CLI

Subcommands:
  - add            Exact and stored sum of two canonical ensembles, as JSON
  - check          Entropy-increase theorem over a YAML file of pairs (+ audit append)
  - verify-audit   Verify the hash-linked JSONL audit trail

Examples:
  python -m floatens.cli add --x 1.0 0.1 --y 2.0 0.2
  python -m floatens.cli check --pairs pairs.yaml --config entropy.yaml --audit runs/audit.jsonl
  python -m floatens.cli verify-audit --audit runs/audit.jsonl

Exit status: 0 ok, 1 invariant/axiom failure or broken audit trail,
2 usage error (bad arguments, unreadable or unparseable input file).
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

import yaml

from floatens.audit import AuditChainError, AuditEntry, AuditTrail
from floatens.config import EntropySettings, load_pairs, load_settings
from floatens.core.ensemble import FloatEnsemble
from floatens.core.entropy import build_entropy
from floatens.core.errors import AxiomViolationError, EnsembleError
from floatens.core.operations import exact_add, float_add
from floatens.core.theorem import entropy_increase

logger = logging.getLogger("floatens.cli")

ENV_LOG_LEVEL = "FLOATENS_LOG_LEVEL"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _setup_logging(level: Optional[str]) -> None:
    name = (level or os.environ.get(ENV_LOG_LEVEL) or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=None, help="YAML entropy settings")
    p.add_argument(
        "--backend",
        default=None,
        choices=["closed_form", "quadrature"],
        help="Override the entropy backend from --config",
    )
    p.add_argument("--log-level", default=None, help=f"Logging level (default ${ENV_LOG_LEVEL} or WARNING)")


def _settings(args: argparse.Namespace) -> EntropySettings:
    settings = load_settings(args.config)
    if args.backend:
        settings = settings.model_copy(update={"backend": args.backend})
    return settings


# -----------------------------------------------------------------------------
# Subcommands
# -----------------------------------------------------------------------------

def _cmd_add(argv: List[str]) -> None:
    p = argparse.ArgumentParser(
        prog="floatens add",
        description="Add two canonical ensembles exactly and as a stored float; print entropies.",
    )
    p.add_argument("--x", nargs=2, required=True, metavar=("MU", "DELTA"))
    p.add_argument("--y", nargs=2, required=True, metavar=("MU", "DELTA"))
    _common(p)
    args = p.parse_args(argv)
    _setup_logging(args.log_level)

    fn = build_entropy(_settings(args))
    x = FloatEnsemble.make(args.x[0], args.x[1])
    y = FloatEnsemble.make(args.y[0], args.y[1])
    exact = exact_add(x, y)
    stored = float_add(x, y)
    out = {
        "exact": exact.to_dict() | {"entropy": exact.entropy(fn)},
        "stored": stored.to_dict() | {"entropy": stored.entropy(fn)},
    }
    print(json.dumps(out, indent=2))


def _cmd_check(argv: List[str]) -> None:
    p = argparse.ArgumentParser(
        prog="floatens check",
        description="Check H(exact_add) < H(float_add) for every pair in a YAML file.",
    )
    p.add_argument("--pairs", required=True, help="YAML list of {x: {mu, delta}, y: {mu, delta}}")
    p.add_argument("--audit", default=None, help="Append one record per pair to this JSONL chain")
    _common(p)
    args = p.parse_args(argv)
    _setup_logging(args.log_level)

    settings = _settings(args)
    fn = build_entropy(settings)
    pairs = load_pairs(args.pairs)
    trail = AuditTrail(args.audit) if args.audit else None
    failed = 0
    for i, (x, y) in enumerate(pairs):
        label = f"pair-{i}"
        try:
            report = entropy_increase(x, y, fn, tolerance=settings.tolerance)
        except AxiomViolationError as e:
            failed += 1
            entry = AuditEntry.violation(x, y, settings, e, label=label)
            line = f"pair {i}: VIOLATION {e}"
        else:
            entry = AuditEntry.increase(report, settings, label=label)
            line = (
                f"pair {i}: {report.interval}  H_exact={report.exact_entropy:.6f}  "
                f"H_stored={report.stored_entropy:.6f}  gap={report.gap:.6g}"
            )
        if trail is not None:
            line += f"  audit={trail.append(entry)[:12]}"
        print(line)
    if failed:
        raise AxiomViolationError(f"{failed} of {len(pairs)} pair(s) violated entropy increase")
    print(f"{len(pairs)} pair(s) OK")


def _cmd_verify_audit(argv: List[str]) -> None:
    p = argparse.ArgumentParser(
        prog="floatens verify-audit",
        description="Verify digests and links of the JSONL audit trail.",
    )
    p.add_argument("--audit", required=True, help="Path to JSONL audit trail")
    args = p.parse_args(argv)
    n = AuditTrail(args.audit).verify()
    print(f"audit trail OK ({n} entries)")


# -----------------------------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------------------------

_COMMANDS = {
    "add": _cmd_add,
    "check": _cmd_check,
    "verify-audit": _cmd_verify_audit,
}


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Usage: floatens {add|check|verify-audit} ...", file=sys.stderr)
        sys.exit(2)

    cmd, rest = args[0], args[1:]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"unknown subcommand: {cmd}", file=sys.stderr)
        sys.exit(2)
    try:
        handler(rest)
    except (EnsembleError, AuditChainError) as e:
        logger.debug("command %s failed", cmd, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    except (OSError, yaml.YAMLError) as e:
        print(f"usage error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
