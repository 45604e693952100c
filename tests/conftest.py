"""
Pytest bootstrap for src/ layout.

Why:
- Repo uses ./src for packages.
- Some tests spawn the CLI in a subprocess without an installed package.

This ensures ./src is always on sys.path for any pytest invocation, and
restores the process-wide default entropy functional after every test.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

repo_root = Path(__file__).resolve().parents[1]
src = repo_root / "src"
if src.is_dir():
    src_str = str(src)
    if src_str not in sys.path:
        # Put first so local src wins over any installed package named `floatens`.
        sys.path.insert(0, src_str)


@pytest.fixture(autouse=True)
def _restore_default_entropy():
    from floatens.core import entropy

    prev = entropy.get_entropy()
    yield
    entropy.set_entropy(prev)


@pytest.fixture
def src_path() -> Path:
    return src
