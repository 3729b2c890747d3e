"""Data models for ``expense_analysis``.

The pipeline produces :class:`ParsedData` once per uploaded statement. The
transaction list inside it is already sorted (newest first) and numbered;
downstream code may flip ``category`` and ``internal`` on individual
transactions but must not renumber or resort the list.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

# Fallbacks applied by format descriptors when the source lacks a value.
DEFAULT_CURRENCY = "CZK"
UNCATEGORIZED = "Ostatní"


@dataclass(frozen=True, slots=True)
class MappedRow:
    """Canonical field set resolved from one raw CSV record.

    ``date`` is ``None`` and ``amount`` is ``0.0`` when the source value is
    missing or unparseable; the pipeline drops such rows.
    """

    date: date | None
    amount: float
    currency: str = DEFAULT_CURRENCY
    counterparty: str = ""
    description: str = ""
    category: str = UNCATEGORIZED
    variable_symbol: str = ""
    note: str = ""
    operation_type: str = ""


@dataclass(slots=True)
class Transaction:
    """A single normalized bank ledger entry."""

    id: int
    date: date
    amount: float
    currency: str = DEFAULT_CURRENCY
    counterparty: str = ""
    description: str = ""
    category: str = UNCATEGORIZED
    variable_symbol: str = ""
    note: str = ""
    operation_type: str = ""
    # Set by the user to exclude a transfer between own accounts from totals.
    internal: bool = False

    @classmethod
    def from_mapped(cls, idx: int, row: MappedRow) -> Transaction:
        if row.date is None:
            raise ValueError("cannot build a Transaction without a date")
        return cls(
            id=idx,
            date=row.date,
            amount=row.amount,
            currency=row.currency,
            counterparty=row.counterparty,
            description=row.description,
            category=row.category,
            variable_symbol=row.variable_symbol,
            note=row.note,
            operation_type=row.operation_type,
        )


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive calendar range. ``start`` is the earliest day, ``end`` the latest.

    Serialized forms use the keys ``from``/``to``.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days

    @classmethod
    def spanning(cls, transactions: Sequence[Transaction]) -> DateRange:
        if not transactions:
            raise ValueError("cannot derive a date range from an empty transaction list")
        days = [t.date for t in transactions]
        return cls(start=min(days), end=max(days))


@dataclass(frozen=True, slots=True)
class ParsedData:
    """Pipeline output for one statement file."""

    bank_name: str
    transactions: list[Transaction]
    date_range: DateRange


@dataclass(frozen=True, slots=True)
class StoredRestore:
    """Data restored from the local store plus the range the user last viewed."""

    data: ParsedData
    selected_range: DateRange


__all__ = [
    "DEFAULT_CURRENCY",
    "UNCATEGORIZED",
    "MappedRow",
    "Transaction",
    "DateRange",
    "ParsedData",
    "StoredRestore",
]
