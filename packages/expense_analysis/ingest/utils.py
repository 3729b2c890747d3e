"""Column lookup helpers shared by the bank adapters.

Header spelling differs between export versions ("Datum", "Datum provedení",
"Datum zaúčtování"), so most adapters resolve columns by substring match
against a short, bank-specific list of fragments instead of exact names.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .base import RawRow


def find_key(
    keys: Iterable[str],
    *fragments: str,
    exclude: Iterable[str] = (),
) -> str | None:
    """Return the first key containing any of ``fragments``.

    Keys are checked in column order; a key containing any ``exclude``
    fragment is skipped. Matching is case-sensitive.
    """

    excluded = tuple(exclude)
    for key in keys:
        if any(x in key for x in excluded):
            continue
        if any(f in key for f in fragments):
            return key
    return None


def find_key_matching(keys: Iterable[str], pattern: re.Pattern[str]) -> str | None:
    """Return the first key where ``pattern.search`` succeeds."""

    for key in keys:
        if pattern.search(key):
            return key
    return None


def cell(row: RawRow, key: str | None) -> str:
    """Trimmed value of ``row[key]``; empty string for a missing key or value."""

    if key is None:
        return ""
    value = row.get(key)
    return value.strip() if value else ""


def first_cell(row: RawRow, *keys: str) -> str:
    """Value of the first listed key holding a non-empty value."""

    for key in keys:
        value = cell(row, key)
        if value:
            return value
    return ""


__all__ = ["find_key", "find_key_matching", "cell", "first_cell"]
