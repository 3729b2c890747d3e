"""Pytest configuration for test isolation.

The local store defaults to a SQLite file in the working directory. Tests
must never share it, so an autouse fixture points ``EXPENSE_ANALYSIS_DB_URL``
at a per-test database under ``tmp_path`` and disposes cached engines
afterwards. The OpenAI key is removed so nothing can reach the network by
accident; analysis tests stub the client explicitly.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `expense_analysis`
# is importable without installing, and the repo root for `tests.helpers`.
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

from expense_analysis.db import dispose_engines  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Force a per-test store database and yield its URL."""

    url = f"sqlite:///{tmp_path / 'store.db'}"
    monkeypatch.setenv("EXPENSE_ANALYSIS_DB_URL", url)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("EXPENSE_ANALYSIS_MODEL", raising=False)
    yield url
    dispose_engines()
