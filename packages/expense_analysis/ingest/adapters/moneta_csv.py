"""Adapter for Moneta Money Bank CSV exports.

Moneta has shipped several header spellings over time (quoted and unquoted,
"Datum provedení" vs. "Datum zaúčtování", "Popis transakce" vs. "Zpráva pro
příjemce"), so columns are located by substring.
"""

from __future__ import annotations

from collections.abc import Sequence

from ...categories import infer_category
from ...locale_parsers import parse_amount, parse_date
from ...models import DEFAULT_CURRENCY, MappedRow
from ..base import BankFormat, RawRow, first_line_index
from ..utils import cell, find_key


def _is_header(line: str) -> bool:
    return "Číslo účtu" in line and "Částka" in line


def detect(first_lines: Sequence[str]) -> bool:
    for line in first_lines:
        if "Moneta" in line:
            return True
        if '"Číslo účtu"' in line and '"Datum"' in line:
            return True
        if _is_header(line) and "Popis transakce" in line:
            return True
    return False


def header_row(lines: Sequence[str]) -> int:
    return first_line_index(lines, _is_header)


def map_row(row: RawRow) -> MappedRow:
    keys = list(row)
    date_key = find_key(keys, "Datum")
    amount_key = find_key(keys, "Částka")
    desc_key = find_key(keys, "Popis", "zpráva", "Zpráva")
    counter_key = find_key(keys, "protistrany", "Příjemce", "Plátce")
    cat_key = find_key(keys, "Kategorie", "kategorie")

    description = cell(row, desc_key)
    return MappedRow(
        date=parse_date(cell(row, date_key)),
        amount=parse_amount(cell(row, amount_key)),
        currency=cell(row, "Měna") or DEFAULT_CURRENCY,
        counterparty=cell(row, counter_key),
        description=description,
        category=cell(row, cat_key) or infer_category(description),
        variable_symbol=cell(row, "Variabilní symbol"),
    )


MONETA = BankFormat(
    key="moneta",
    name="Moneta",
    delimiter=";",
    detect=detect,
    header_row=header_row,
    map_row=map_row,
)

__all__ = ["MONETA", "detect", "header_row", "map_row"]
