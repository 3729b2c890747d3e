"""Adapter for ČSOB "Pohyby na účtu" CSV exports.

The export opens with a preamble naming the account (``.../0300``, ČSOB's
bank code) followed by a semicolon-delimited header with lower-case column
names:

``číslo účtu;datum zaúčtování;částka;měna;zůstatek;...;jméno protistrany;``
``...;variabilní symbol;...;zpráva;vlastní poznámka;označení operace;kategorie``

Column names are stable across ČSOB export versions, so this adapter uses
exact keys.
"""

from __future__ import annotations

from collections.abc import Sequence

from ...locale_parsers import parse_amount, parse_date
from ...models import DEFAULT_CURRENCY, UNCATEGORIZED, MappedRow
from ..base import BankFormat, RawRow, first_line_index
from ..utils import cell, first_cell

HEADER_PREFIX = "číslo účtu;"


def detect(first_lines: Sequence[str]) -> bool:
    return any("Pohyby na účtu" in line and "/0300" in line for line in first_lines)


def header_row(lines: Sequence[str]) -> int:
    return first_line_index(lines, lambda line: line.startswith(HEADER_PREFIX))


def map_row(row: RawRow) -> MappedRow:
    return MappedRow(
        date=parse_date(cell(row, "datum zaúčtování")),
        amount=parse_amount(cell(row, "částka")),
        currency=cell(row, "měna") or DEFAULT_CURRENCY,
        counterparty=cell(row, "jméno protistrany"),
        description=first_cell(row, "zpráva", "označení operace"),
        # ČSOB always exports its own categorization; no inference here.
        category=cell(row, "kategorie") or UNCATEGORIZED,
        variable_symbol=cell(row, "variabilní symbol"),
        note=cell(row, "vlastní poznámka"),
        operation_type=cell(row, "označení operace"),
    )


CSOB = BankFormat(
    key="csob",
    name="ČSOB",
    delimiter=";",
    detect=detect,
    header_row=header_row,
    map_row=map_row,
)

__all__ = ["CSOB", "detect", "header_row", "map_row"]
