"""Bank format descriptor type.

A descriptor is a plain value, not a subclass: it bundles a detector, a
header-row locator and a row mapper together with the display name and CSV
delimiter of one export layout. The registry in
:mod:`expense_analysis.ingest.registry` is an ordered tuple of these values.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from ..models import MappedRow

type RawRow = Mapping[str, str | None]
"""One parsed CSV record keyed by trimmed column header.

Values are ``None`` when the record had fewer fields than the header.
"""

HEADER_NOT_FOUND = -1


@dataclass(frozen=True, slots=True)
class BankFormat:
    """A named bank export layout.

    Attributes
    ----------
    key:
        Stable identifier (``"csob"``, ``"generic"``, ...).
    name:
        Human-readable bank name reported in ``ParsedData.bank_name``.
    delimiter:
        Single-character field delimiter of the export.
    detect:
        Receives the first (trimmed) lines of the file and reports whether
        they carry this bank's markers.
    header_row:
        Receives all trimmed lines and returns the zero-based index of the
        column header line, or ``HEADER_NOT_FOUND``.
    map_row:
        Resolves one raw record into a :class:`MappedRow`. May raise on
        malformed input; the pipeline drops such records.
    """

    key: str
    name: str
    delimiter: str
    detect: Callable[[Sequence[str]], bool]
    header_row: Callable[[Sequence[str]], int]
    map_row: Callable[[RawRow], MappedRow]


def first_line_index(lines: Sequence[str], predicate: Callable[[str], bool]) -> int:
    """Index of the first line satisfying ``predicate``, or ``HEADER_NOT_FOUND``."""

    for idx, line in enumerate(lines):
        if predicate(line):
            return idx
    return HEADER_NOT_FOUND


__all__ = ["BankFormat", "RawRow", "HEADER_NOT_FOUND", "first_line_index"]
