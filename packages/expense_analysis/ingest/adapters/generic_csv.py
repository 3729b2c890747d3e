"""Catch-all adapter for CSV exports without recognizable bank markers.

Detection always succeeds; the registry tries this format last. The header is
the first line mentioning both a date and an amount column (Czech or English
spelling). Columns are located by case-insensitive pattern with a positional
fallback (date, amount, description as the first three columns).
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from ...categories import infer_category
from ...locale_parsers import parse_amount, parse_date
from ...models import DEFAULT_CURRENCY, MappedRow
from ..base import BankFormat, RawRow, first_line_index
from ..utils import cell, find_key_matching

_DATE_RE = re.compile(r"datum|date", re.IGNORECASE)
_AMOUNT_RE = re.compile(r"částka|castka|amount|suma|objem", re.IGNORECASE)
_DESC_RE = re.compile(r"popis|desc|zpráva|message|pozn", re.IGNORECASE)
_CATEGORY_RE = re.compile(r"kategorie|category", re.IGNORECASE)


def detect(first_lines: Sequence[str]) -> bool:
    return True


def _is_header(line: str) -> bool:
    lowered = line.lower()
    has_date = "date" in lowered or "datum" in lowered
    has_amount = "amount" in lowered or "částka" in lowered or "castka" in lowered
    return has_date and has_amount


def header_row(lines: Sequence[str]) -> int:
    return first_line_index(lines, _is_header)


def _positional(keys: Sequence[str], idx: int) -> str | None:
    return keys[idx] if idx < len(keys) else None


def map_row(row: RawRow) -> MappedRow:
    keys = list(row)
    date_key = find_key_matching(keys, _DATE_RE) or _positional(keys, 0)
    amount_key = find_key_matching(keys, _AMOUNT_RE) or _positional(keys, 1)
    desc_key = find_key_matching(keys, _DESC_RE) or _positional(keys, 2)
    cat_key = find_key_matching(keys, _CATEGORY_RE)

    description = cell(row, desc_key)
    return MappedRow(
        date=parse_date(cell(row, date_key)),
        amount=parse_amount(cell(row, amount_key)),
        currency=DEFAULT_CURRENCY,
        description=description,
        category=cell(row, cat_key) or infer_category(description),
    )


GENERIC = BankFormat(
    key="generic",
    name="Generic CSV",
    delimiter=";",
    detect=detect,
    header_row=header_row,
    map_row=map_row,
)

__all__ = ["GENERIC", "detect", "header_row", "map_row"]
