"""Adapter for Komerční banka CSV exports.

KB exports name the amount column either "Objem" or "Částka" and carry both
a booking date and a due date ("Datum splatnosti"); the booking date is
preferred.
"""

from __future__ import annotations

from collections.abc import Sequence

from ...categories import infer_category
from ...locale_parsers import parse_amount, parse_date
from ...models import DEFAULT_CURRENCY, MappedRow
from ..base import BankFormat, RawRow, first_line_index
from ..utils import cell, find_key, first_cell


def detect(first_lines: Sequence[str]) -> bool:
    return any(
        "Datum splatnosti" in line or ("Datum" in line and "Objem" in line and "Měna" in line)
        for line in first_lines
    )


def _is_header(line: str) -> bool:
    return "Datum" in line and ("Objem" in line or "Částka" in line)


def header_row(lines: Sequence[str]) -> int:
    return first_line_index(lines, _is_header)


def map_row(row: RawRow) -> MappedRow:
    keys = list(row)
    date_key = find_key(keys, "Datum", exclude=("splatnosti",)) or find_key(keys, "Datum")
    amount_key = find_key(keys, "Částka", "Objem")
    desc_key = find_key(keys, "Popis", "Poznámka", "AV pole")
    counter_key = find_key(keys, "Název protiúčtu", "Protiúčet")
    cat_key = find_key(keys, "Kategorie", "kategorie")

    description = cell(row, desc_key)
    return MappedRow(
        date=parse_date(cell(row, date_key)),
        amount=parse_amount(cell(row, amount_key)),
        currency=cell(row, "Měna") or DEFAULT_CURRENCY,
        counterparty=cell(row, counter_key),
        description=description,
        category=cell(row, cat_key) or infer_category(description),
        variable_symbol=first_cell(row, "Variabilní symbol", "VS"),
    )


KB = BankFormat(
    key="kb",
    name="Komerční banka",
    delimiter=";",
    detect=detect,
    header_row=header_row,
    map_row=map_row,
)

__all__ = ["KB", "detect", "header_row", "map_row"]
