# src/floatens/audit.py
"""
Module: audit
Purpose: Hash-linked JSONL trail of entropy-increase checks
Dependencies: blake3 (through floatens.config.canonical_digest), json

One line per checked pair. Each line is an `AuditEntry` body plus its digest:

  parent   digest of the previous entry (None for the first)
  digest   BLAKE3 of the entry body in canonical JSON (sorted keys, compact)

Digests follow the same rule as `EntropySettings.config_hash`, so an entry and
the settings it was produced under are fingerprinted the same way. Rewriting,
dropping or reordering a line breaks either its digest or the next parent link.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Literal, Optional, Tuple

from floatens.config import EntropySettings, canonical_digest
from floatens.core.ensemble import FloatEnsemble
from floatens.core.errors import AxiomViolationError
from floatens.core.theorem import EntropyIncrease

__all__ = [
    "SCHEMA_ID",
    "AuditChainError",
    "AuditEntry",
    "AuditTrail",
]

logger = logging.getLogger(__name__)

SCHEMA_ID = "floatens/audit.v2"

Outcome = Literal["entropy_increased", "violation"]


class AuditChainError(RuntimeError):
    """A trail line is malformed, altered, or out of order."""


def _utc_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _operand(f: FloatEnsemble) -> Dict[str, str]:
    return dict(f.to_dict()["exact"])


@dataclass(frozen=True)
class AuditEntry:
    """One checked pair, as written to the trail."""

    outcome: Outcome
    x: Dict[str, str]
    y: Dict[str, str]
    backend: str
    config_hash: str
    result: Dict[str, Any]
    label: Optional[str] = None
    ts: str = ""
    parent: Optional[str] = None
    schema: str = SCHEMA_ID

    @classmethod
    def increase(
        cls,
        report: EntropyIncrease,
        settings: EntropySettings,
        *,
        label: Optional[str] = None,
    ) -> "AuditEntry":
        return cls(
            outcome="entropy_increased",
            x=_operand(report.x),
            y=_operand(report.y),
            backend=settings.backend,
            config_hash=settings.config_hash,
            result={
                "interval": list(report.interval.as_floats()),
                "exact_entropy": report.exact_entropy,
                "stored_entropy": report.stored_entropy,
                "gap": report.gap,
            },
            label=label,
            ts=_utc_now(),
        )

    @classmethod
    def violation(
        cls,
        x: FloatEnsemble,
        y: FloatEnsemble,
        settings: EntropySettings,
        error: AxiomViolationError,
        *,
        label: Optional[str] = None,
    ) -> "AuditEntry":
        return cls(
            outcome="violation",
            x=_operand(x),
            y=_operand(y),
            backend=settings.backend,
            config_hash=settings.config_hash,
            result={"error": str(error)},
            label=label,
            ts=_utc_now(),
        )

    def body(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def digest(self) -> str:
        return canonical_digest(self.body())


class AuditTrail:
    """Append-only JSONL file of linked `AuditEntry` lines."""

    def __init__(self, path: str) -> None:
        self.path = path

    def _lines(self) -> Iterator[Tuple[int, Dict[str, Any]]]:
        with open(self.path, "r", encoding="utf-8") as f:
            for i, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    obj = json.loads(line)
                except json.JSONDecodeError as e:
                    raise AuditChainError(f"Line {i}: not JSON ({e.msg})") from e
                if not isinstance(obj, dict):
                    raise AuditChainError(f"Line {i}: not a JSON object")
                yield i, obj

    def head(self) -> Optional[str]:
        """Digest of the last entry; None when the trail is missing or empty."""
        if not os.path.exists(self.path):
            return None
        last: Optional[str] = None
        for _, obj in self._lines():
            last = obj.get("digest")
        return last

    def append(self, entry: AuditEntry) -> str:
        """Link `entry` to the current head, write it, and return its digest."""
        linked = replace(entry, parent=self.head())
        digest = linked.digest
        parent_dir = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(parent_dir, exist_ok=True)
        line = json.dumps({**linked.body(), "digest": digest}, sort_keys=True, separators=(",", ":"))
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
        logger.debug("audit %s -> %s (%s)", linked.label, digest[:12], linked.outcome)
        return digest

    def verify(self) -> int:
        """
        Recompute every digest and parent link.

        Returns:
            Number of entries verified.

        Raises:
            FileNotFoundError: if the trail does not exist.
            AuditChainError: at the first bad line.
        """
        if not os.path.exists(self.path):
            raise FileNotFoundError(self.path)
        parent: Optional[str] = None
        n = 0
        for i, obj in self._lines():
            claimed = obj.pop("digest", None)
            if not isinstance(claimed, str):
                raise AuditChainError(f"Line {i}: missing digest")
            if canonical_digest(obj) != claimed:
                raise AuditChainError(f"Line {i}: digest mismatch")
            if obj.get("parent") != parent:
                raise AuditChainError(f"Line {i}: broken link to previous entry")
            parent = claimed
            n += 1
        return n
