"""Adapter for Fio banka CSV exports (internet banking "Export do CSV").

Layout: a quoted key/value preamble (``"accountId";"..."``,
``"bankId";"2010"``, ``"dateStart";"..."``, ...) followed by the column
header:

``"ID pohybu";"Datum";"Objem";"Měna";"Protiúčet";"Název protiúčtu";``
``"Kód banky";"Název banky";"KS";"VS";"SS";"Poznámka";``
``"Zpráva pro příjemce";"Typ";"Provedl";"Upřesnění";"Komentář";"BIC";``
``"ID pokynu"``

Older exports label the first column "ID operace". The Fio header also
carries the keywords the Komerční banka detector looks for, so this format is
registered ahead of it.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from ...categories import infer_category
from ...locale_parsers import parse_amount, parse_date
from ...models import DEFAULT_CURRENCY, MappedRow
from ..base import BankFormat, RawRow, first_line_index
from ..utils import cell, find_key, first_cell

FIO_BANK_CODE = "2010"
# Czech account number (optional prefix) with the Fio bank code: "2000123456/2010"
_ACCOUNT_RE = re.compile(rf"\b(?:\d{{1,6}}-)?\d{{2,10}}/{FIO_BANK_CODE}\b")


def _is_header(line: str) -> bool:
    return ("ID pohybu" in line or "ID operace" in line) and "Objem" in line


def detect(first_lines: Sequence[str]) -> bool:
    for line in first_lines:
        if "Fio banka" in line or _is_header(line):
            return True
        # Preamble line: "bankId";"2010"
        if "bankId" in line and FIO_BANK_CODE in line:
            return True
        if _ACCOUNT_RE.search(line):
            return True
    return False


def header_row(lines: Sequence[str]) -> int:
    return first_line_index(lines, _is_header)


def map_row(row: RawRow) -> MappedRow:
    keys = list(row)
    description = first_cell(row, "Zpráva pro příjemce", "Poznámka", "Upřesnění")
    cat_key = find_key(keys, "Kategorie", "kategorie")
    return MappedRow(
        date=parse_date(cell(row, "Datum")),
        amount=parse_amount(cell(row, "Objem")),
        currency=cell(row, "Měna") or DEFAULT_CURRENCY,
        counterparty=first_cell(row, "Název protiúčtu", "Protiúčet"),
        description=description,
        category=cell(row, cat_key) or infer_category(description),
        variable_symbol=cell(row, "VS"),
        note=cell(row, "Komentář"),
        operation_type=cell(row, "Typ"),
    )


FIO = BankFormat(
    key="fio",
    name="Fio banka",
    delimiter=";",
    detect=detect,
    header_row=header_row,
    map_row=map_row,
)

__all__ = ["FIO", "detect", "header_row", "map_row"]
