"""Ordered registry of bank formats and first-match selection.

Selection is greedy: the first format whose detector accepts the sample lines
is used for the whole file, and nothing re-evaluates other formats later,
even when the chosen one yields no valid rows.
"""

from __future__ import annotations

from collections.abc import Sequence

from .adapters import CSOB, FIO, GENERIC, KB, MONETA
from .base import BankFormat

# Bank-specific formats first, generic last. Fio precedes KB because a Fio
# header also satisfies the KB detector.
BANK_FORMATS: tuple[BankFormat, ...] = (CSOB, MONETA, FIO, KB, GENERIC)

# Number of leading lines handed to detectors.
DETECT_SAMPLE_LINES = 10


def select_format(
    lines: Sequence[str],
    formats: Sequence[BankFormat] = BANK_FORMATS,
) -> BankFormat:
    """Return the first format whose detector accepts the leading lines.

    Falls back to the generic format when ``formats`` has no match (the
    default registry always matches, since its last entry is generic).
    """

    sample = list(lines[:DETECT_SAMPLE_LINES])
    for fmt in formats:
        if fmt.detect(sample):
            return fmt
    return GENERIC


def get_format(key: str) -> BankFormat:
    """Look up a registered format by key (``"csob"``, ``"kb"``, ...)."""

    k = key.strip().lower()
    for fmt in BANK_FORMATS:
        if fmt.key == k:
            return fmt
    raise ValueError(f"unknown bank format: {key!r}")


__all__ = ["BANK_FORMATS", "DETECT_SAMPLE_LINES", "get_format", "select_format"]
